"""
Transform state machine.

Owns the single TransformState record read by the renderer. All mutation
goes through TransformStateMachine, which applies the clamping rules for
the current mode.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple
import logging

from .config import TransformConfig
from .resolver import Gesture

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]


class Mode(Enum):
    FORMED = auto()    # Composed layout, auto-rotating
    GALLERY = auto()   # Scattered layout with a focused photo


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


@dataclass
class TransformState:
    rotation_angle: float = 0.0
    auto_rotation_speed: float = 0.0
    position: Vec3 = (0.0, -0.5, 0.0)
    scale: float = 1.0
    mode: Mode = Mode.FORMED
    chaos_factor: float = 0.0          # 0 = formed, 1 = fully scattered
    focused_index: Optional[int] = None
    gallery_offset: float = 0.0


@dataclass(frozen=True)
class TransformSnapshot:
    """Read-only copy of TransformState handed to consumers once per tick."""
    rotation_angle: float
    auto_rotation_speed: float
    position: Vec3
    scale: float
    mode: Mode
    chaos_factor: float
    focused_index: Optional[int]
    gallery_offset: float


class TransformStateMachine:
    """
    Applies motion deltas and mode transitions to the transform state.

    Args:
        config: Transform limits and step sizes
        item_count: Number of navigable gallery items (at least one)
        max_auto_rotation_speed: Bound for the persistent drift speed
    """

    def __init__(
        self,
        config: TransformConfig = None,
        item_count: int = 6,
        max_auto_rotation_speed: float = 0.007,
    ):
        self._config = config or TransformConfig()
        self._item_count = max(1, item_count)
        self._max_speed = max_auto_rotation_speed
        self._state = TransformState(
            position=tuple(self._config.formed_position),
            scale=self._config.initial_scale,
        )

    @property
    def state(self) -> TransformState:
        return self._state

    @property
    def mode(self) -> Mode:
        return self._state.mode

    @property
    def item_count(self) -> int:
        return self._item_count

    def snapshot(self) -> TransformSnapshot:
        s = self._state
        return TransformSnapshot(
            rotation_angle=s.rotation_angle,
            auto_rotation_speed=s.auto_rotation_speed,
            position=s.position,
            scale=s.scale,
            mode=s.mode,
            chaos_factor=s.chaos_factor,
            focused_index=s.focused_index,
            gallery_offset=s.gallery_offset,
        )

    def scale_bounds(self, mode: Mode = None) -> Tuple[float, float]:
        c = self._config
        if (mode or self._state.mode) is Mode.GALLERY:
            return c.gallery_scale_min, c.gallery_scale_max
        return c.formed_scale_min, c.formed_scale_max

    # Ambient

    def apply_drift(self) -> None:
        """Persistent rotation; suppressed in gallery mode."""
        if self._state.mode is Mode.FORMED:
            self._state.rotation_angle += self._state.auto_rotation_speed

    # Continuous deltas

    def apply_rotation_impulse(self, impulse: float) -> None:
        s = self._state
        if s.mode is Mode.GALLERY:
            s.rotation_angle += impulse
        else:
            s.auto_rotation_speed = clamp(
                s.auto_rotation_speed + impulse, -self._max_speed, self._max_speed
            )

    def apply_zoom(self, delta: float) -> None:
        lo, hi = self.scale_bounds()
        self._state.scale = clamp(self._state.scale + delta, lo, hi)

    def step_focus(self, step: int) -> Optional[int]:
        """
        Move the focused item by step, clamped to the item range.

        Returns the new index, or None outside gallery mode.
        """
        s = self._state
        if s.mode is not Mode.GALLERY:
            return None
        last = self._item_count - 1
        s.focused_index = int(clamp((s.focused_index or 0) + step, 0, last))
        s.gallery_offset = float(s.focused_index)
        return s.focused_index

    def set_item_count(self, item_count: int) -> None:
        """Change the number of gallery items, re-clamping the focus."""
        self._item_count = max(1, item_count)
        s = self._state
        if s.focused_index is not None:
            s.focused_index = int(clamp(s.focused_index, 0, self._item_count - 1))
            s.gallery_offset = float(s.focused_index)

    # Mode transitions

    def apply_gesture(self, gesture: Gesture) -> None:
        """Apply the stabilized gesture for this tick."""
        if gesture is Gesture.OPEN_PALM_PRIMARY:
            if self._state.mode is not Mode.GALLERY:
                self._enter_gallery()
            self._step_chaos(self._config.chaos_step)
        elif gesture is Gesture.FIST_PRIMARY:
            if self._state.mode is not Mode.FORMED:
                self._enter_formed()
            self._step_chaos(-self._config.chaos_step)

    def _step_chaos(self, step: float) -> None:
        self._state.chaos_factor = clamp(self._state.chaos_factor + step, 0.0, 1.0)

    def _enter_gallery(self) -> None:
        s = self._state
        s.mode = Mode.GALLERY
        s.rotation_angle = 0.0
        s.auto_rotation_speed = 0.0
        s.position = (0.0, 0.0, 0.0)
        s.focused_index = 0
        s.gallery_offset = 0.0
        if s.scale > self._config.gallery_scale_max:
            s.scale = self._config.gallery_reset_scale
        elif s.scale < self._config.gallery_scale_min:
            s.scale = self._config.gallery_scale_min
        logger.info("Entered gallery mode (%d items)", self._item_count)

    def _enter_formed(self) -> None:
        s = self._state
        s.mode = Mode.FORMED
        s.focused_index = None
        s.position = tuple(self._config.formed_position)
        logger.info("Entered formed mode")
