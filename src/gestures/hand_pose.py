"""
Per-hand landmark record and the helpers shared by the gesture pipeline.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, List, Optional, Sequence, Tuple
import logging
import math

logger = logging.getLogger(__name__)

Landmark = Tuple[float, float, float]
Point = Tuple[float, float]

LANDMARK_COUNT = 21


class MalformedHandPose(ValueError):
    """Raised when a hand does not carry 21 landmarks of at least (x, y)."""


class Role(Enum):
    """Which of the user's hands a pose belongs to."""
    PRIMARY = auto()     # User's right hand
    SECONDARY = auto()   # User's left hand


def role_from_label(label: Optional[str], invert: bool = True) -> Optional[Role]:
    """
    Map a detector handedness label onto a hand role.

    The detector assumes a mirrored selfie image. Frames are analyzed
    unmirrored, so its "Left" is the user's right hand and the mapping is
    inverted.
    Returns None for missing or unrecognized labels.
    """
    if label == "Left":
        return Role.PRIMARY if invert else Role.SECONDARY
    if label == "Right":
        return Role.SECONDARY if invert else Role.PRIMARY
    return None


def distance_2d(p1: Sequence[float], p2: Sequence[float]) -> float:
    """Calculate 2D distance between two points (ignoring z)."""
    dx = p1[0] - p2[0]
    dy = p1[1] - p2[1]
    return math.sqrt(dx*dx + dy*dy)


@dataclass(frozen=True)
class HandPose:
    """
    Normalized hand landmarks for one detected hand.

    Attributes:
        landmarks: 21 (x, y, z) tuples, x/y normalized 0-1
        role: PRIMARY/SECONDARY, or None if the detector gave no usable label
    """
    landmarks: Tuple[Landmark, ...]
    role: Optional[Role] = None

    # MediaPipe landmark indices
    WRIST = 0
    THUMB_TIP = 4
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_TIP = 12
    RING_TIP = 16
    PINKY_TIP = 20
    FINGER_TIPS = (8, 12, 16, 20)

    def __post_init__(self):
        if len(self.landmarks) != LANDMARK_COUNT:
            raise MalformedHandPose(
                f"expected {LANDMARK_COUNT} landmarks, got {len(self.landmarks)}"
            )
        for i, p in enumerate(self.landmarks):
            if len(p) < 2:
                raise MalformedHandPose(f"landmark {i} has {len(p)} coordinates")
        # Normalize to tuples so poses are hashable and immutable
        object.__setattr__(
            self, "landmarks",
            tuple((float(p[0]), float(p[1]), float(p[2]) if len(p) > 2 else 0.0)
                  for p in self.landmarks),
        )

    def get(self, index: int) -> Landmark:
        """Get landmark by index."""
        return self.landmarks[index]

    @property
    def wrist(self) -> Landmark:
        return self.landmarks[self.WRIST]

    @property
    def thumb_tip(self) -> Landmark:
        return self.landmarks[self.THUMB_TIP]

    @property
    def index_tip(self) -> Landmark:
        return self.landmarks[self.INDEX_TIP]

    @property
    def middle_mcp(self) -> Landmark:
        return self.landmarks[self.MIDDLE_MCP]

    @property
    def scale(self) -> float:
        """Wrist to middle-finger base distance; all thresholds are multiples of it."""
        return distance_2d(self.wrist, self.middle_mcp)

    @property
    def orientation(self) -> float:
        """Angle of the wrist -> middle MCP vector in image coordinates (radians)."""
        wrist = self.wrist
        mcp = self.middle_mcp
        return math.atan2(mcp[1] - wrist[1], mcp[0] - wrist[0])


def hands_from_detections(
    detections: Iterable[Tuple[Sequence[Sequence[float]], Optional[str]]],
    invert_handedness: bool = True,
) -> List[HandPose]:
    """
    Build hand poses from raw (landmarks, handedness label) detections.

    Malformed hands are dropped so the frame carries on as if that hand
    were absent.
    """
    hands = []
    for landmarks, label in detections:
        try:
            hands.append(HandPose(tuple(landmarks), role_from_label(label, invert_handedness)))
        except MalformedHandPose as e:
            logger.debug("Dropping hand (%s): %s", label, e)
    return hands
