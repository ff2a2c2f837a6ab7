"""
Run-length hysteresis over the resolved gesture stream.
"""
from typing import FrozenSet

from .resolver import Gesture

# Motion and zoom gestures react on the first frame
IMMEDIATE_GESTURES: FrozenSet[Gesture] = frozenset({
    Gesture.PINCH_PRIMARY,
    Gesture.PINCH_SECONDARY,
    Gesture.PALM_BOTH,
    Gesture.OPEN_PALM_PRIMARY,
})


class GestureStabilizer:
    """
    Debounces discrete gestures.

    The run length counts repeats of the raw gesture after its first frame,
    so a gesture with threshold N becomes the stabilized gesture on its
    (N + 1)th consecutive frame. Immediate gestures have threshold 0.
    """

    def __init__(self, stability_frames: int = 4):
        self._stability_frames = stability_frames
        self._last_gesture = Gesture.NONE
        self._run_length = 0
        self._stable = Gesture.NONE

    def threshold(self, gesture: Gesture) -> int:
        return 0 if gesture in IMMEDIATE_GESTURES else self._stability_frames

    def update(self, gesture: Gesture, hands_present: bool = True) -> Gesture:
        """Feed one raw gesture; returns the stabilized gesture."""
        if not hands_present:
            # Tracking loss is never debounced
            self.reset()
            return self._stable

        if gesture == self._last_gesture:
            self._run_length += 1
        else:
            self._run_length = 0
            self._last_gesture = gesture

        if self._run_length >= self.threshold(gesture):
            self._stable = gesture
        return self._stable

    @property
    def stable(self) -> Gesture:
        return self._stable

    @property
    def run_length(self) -> int:
        return self._run_length

    def reset(self) -> None:
        """Reset to NONE."""
        self._last_gesture = Gesture.NONE
        self._run_length = 0
        self._stable = Gesture.NONE
