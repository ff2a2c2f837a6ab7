"""
Frame-to-frame motion integration.

Turns consecutive composite gestures into rotation impulses, zoom deltas
and rate-limited navigation steps. The integrator only computes deltas;
the transform state machine applies them.
"""
from dataclasses import dataclass
from typing import Optional
import logging
import math

from .config import MotionConfig
from .resolver import CompositeGesture, Gesture
from .transform import Mode

logger = logging.getLogger(__name__)


def wrap_angle(delta: float) -> float:
    """Wrap an angle difference into (-pi, pi] with a single 2pi correction."""
    if delta > math.pi:
        delta -= 2 * math.pi
    elif delta <= -math.pi:
        delta += 2 * math.pi
    return delta


@dataclass(frozen=True)
class MotionDeltas:
    """Deltas derived for one tick. None means nothing to apply."""
    rotation_impulse: Optional[float] = None
    zoom_delta: Optional[float] = None
    focus_step: int = 0


class MotionIntegrator:
    """
    Derives motion from the previous and current tick.

    Rotation needs a primary-hand angle on both ticks. Zoom needs two
    consecutive PALM_BOTH ticks. Navigation is gallery-only and gated by a
    cooldown between accepted steps.
    """

    def __init__(self, config: MotionConfig = None):
        self._config = config or MotionConfig()
        self._previous: Optional[CompositeGesture] = None
        self._last_nav_ms: Optional[float] = None

    @property
    def previous(self) -> Optional[CompositeGesture]:
        return self._previous

    def rotation_impulse(self, current: CompositeGesture) -> Optional[float]:
        prev = self._previous
        if prev is None or prev.angle is None or current.angle is None:
            return None
        delta = wrap_angle(current.angle - prev.angle)
        if abs(delta) <= self._config.rotation_noise_floor:
            return None
        return -delta * self._config.rotation_gain

    def zoom_delta(self, current: CompositeGesture) -> Optional[float]:
        prev = self._previous
        if current.gesture is not Gesture.PALM_BOTH:
            return None
        if prev is None or prev.gesture is not Gesture.PALM_BOTH:
            return None
        # Hands moving apart shrink the scene
        delta = current.distance - prev.distance
        return -delta * self._config.zoom_speed * self._config.zoom_gain

    def focus_step(self, stabilized: Gesture, mode: Mode, now_ms: float) -> int:
        if mode is not Mode.GALLERY:
            return 0
        if stabilized is Gesture.PINCH_SECONDARY:
            step = -1
        elif stabilized is Gesture.PINCH_PRIMARY:
            step = 1
        else:
            return 0
        if self._last_nav_ms is not None and now_ms - self._last_nav_ms < self._config.nav_cooldown_ms:
            logger.debug("Navigation step %+d suppressed by cooldown", step)
            return 0
        self._last_nav_ms = now_ms
        return step

    def update(
        self,
        current: CompositeGesture,
        stabilized: Gesture,
        mode: Mode,
        now_ms: float,
    ) -> MotionDeltas:
        """
        Compute this tick's deltas and remember the current gesture.

        Args:
            current: Raw composite gesture for this tick
            stabilized: Stabilized gesture for this tick
            mode: Transform mode at the start of the tick
            now_ms: Monotonic timestamp in milliseconds
        """
        deltas = MotionDeltas(
            rotation_impulse=self.rotation_impulse(current),
            zoom_delta=self.zoom_delta(current),
            focus_step=self.focus_step(stabilized, mode, now_ms),
        )
        self._previous = current
        return deltas

    def reset(self) -> None:
        self._previous = None
        self._last_nav_ms = None
