"""
Per-frame hand pose classification.

Every threshold is a multiple of the hand's own scale (wrist to middle MCP),
so results do not depend on camera resolution or distance from the camera.
"""
from enum import Enum, auto

from .config import GestureConfig
from .hand_pose import HandPose, distance_2d


class ClassifiedPose(Enum):
    """Pose of a single hand in a single frame."""
    NEUTRAL = auto()
    PINCHING = auto()
    FIST = auto()
    OPEN_PALM = auto()


class HandPoseClassifier:
    """
    Stateless pose classifier.

    Pinch and fist are evaluated independently; a hand can satisfy both.
    classify() resolves that overlap as pinch first, the composite resolver
    uses the individual predicates.
    """

    def __init__(self, config: GestureConfig = None):
        self._config = config or GestureConfig()

    def is_pinching(self, hand: HandPose) -> bool:
        """Thumb tip close to index tip."""
        return distance_2d(hand.thumb_tip, hand.index_tip) < self._config.pinch_ratio * hand.scale

    def is_fist(self, hand: HandPose) -> bool:
        """Most fingertips folded back near the wrist."""
        limit = self._config.fist_ratio * hand.scale
        wrist = hand.wrist
        folded = sum(1 for i in HandPose.FINGER_TIPS if distance_2d(hand.get(i), wrist) < limit)
        return folded >= self._config.min_finger_count

    def is_open_palm(self, hand: HandPose) -> bool:
        """Most fingertips extended away from the wrist, and not pinching."""
        if self.is_pinching(hand):
            return False
        limit = self._config.palm_ratio * hand.scale
        wrist = hand.wrist
        extended = sum(1 for i in HandPose.FINGER_TIPS if distance_2d(hand.get(i), wrist) > limit)
        return extended >= self._config.min_finger_count

    def classify(self, hand: HandPose) -> ClassifiedPose:
        if self.is_pinching(hand):
            return ClassifiedPose.PINCHING
        if self.is_fist(hand):
            return ClassifiedPose.FIST
        if self.is_open_palm(hand):
            return ClassifiedPose.OPEN_PALM
        return ClassifiedPose.NEUTRAL
