"""
Per-tick driver for the gesture pipeline.
"""
from dataclasses import dataclass
from typing import Optional, Sequence
import logging
import time

from .config import Config
from .hand_pose import HandPose
from .motion import MotionDeltas, MotionIntegrator
from .resolver import CompositeGesture, Gesture, GestureResolver, gesture_label
from .stabilizer import GestureStabilizer
from .transform import TransformSnapshot, TransformStateMachine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameResult:
    """Everything a consumer needs after one tick."""
    stabilized: Gesture
    composite: CompositeGesture
    deltas: MotionDeltas
    transform: TransformSnapshot
    hands_present: bool

    @property
    def label(self) -> str:
        return gesture_label(self.stabilized)


class FrameOrchestrator:
    """
    Runs resolve -> stabilize -> integrate -> apply once per tick.

    Not thread-safe: a single tick loop owns it. Consumers read the frozen
    snapshots returned by tick().
    """

    def __init__(self, config: Optional[Config] = None, item_count: Optional[int] = None):
        config = config or Config()
        if item_count is None:
            item_count = config.gallery.item_count
        self._resolver = GestureResolver(config.gestures)
        self._stabilizer = GestureStabilizer(config.gestures.stability_frames)
        self._integrator = MotionIntegrator(config.motion)
        self._machine = TransformStateMachine(
            config.transform,
            item_count=item_count,
            max_auto_rotation_speed=config.motion.max_auto_rotation_speed,
        )
        self._last: Optional[FrameResult] = None

    @property
    def machine(self) -> TransformStateMachine:
        return self._machine

    @property
    def last_result(self) -> Optional[FrameResult]:
        return self._last

    def set_item_count(self, item_count: int) -> None:
        self._machine.set_item_count(item_count)

    def tick(self, hands: Optional[Sequence[HandPose]] = None, now_ms: Optional[float] = None) -> FrameResult:
        """
        Advance one tick.

        Args:
            hands: Hands detected this tick. None (no detector result) is
                   treated as no hands.
            now_ms: Monotonic timestamp in milliseconds; defaults to
                    time.perf_counter().

        Returns:
            FrameResult with the stabilized gesture and a transform snapshot.
        """
        if now_ms is None:
            now_ms = time.perf_counter() * 1000.0
        hands = list(hands or ())
        machine = self._machine

        # 1. Ambient drift
        machine.apply_drift()

        # 2. Resolve and stabilize
        composite = self._resolver.resolve(hands)
        stabilized = self._stabilizer.update(composite.gesture, hands_present=bool(hands))

        # 3. Continuous motion
        deltas = self._integrator.update(composite, stabilized, machine.mode, now_ms)
        if deltas.rotation_impulse is not None:
            machine.apply_rotation_impulse(deltas.rotation_impulse)
        if deltas.zoom_delta is not None:
            machine.apply_zoom(deltas.zoom_delta)
        if deltas.focus_step:
            index = machine.step_focus(deltas.focus_step)
            logger.info("Focused item %s of %d", index, machine.item_count)

        # 4. Mode transitions
        machine.apply_gesture(stabilized)

        if self._last is not None and self._last.stabilized is not stabilized:
            logger.debug("Gesture %s -> %s", self._last.stabilized.name, stabilized.name)

        self._last = FrameResult(
            stabilized=stabilized,
            composite=composite,
            deltas=deltas,
            transform=machine.snapshot(),
            hands_present=bool(hands),
        )
        return self._last
