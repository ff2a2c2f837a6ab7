"""
Background worker for hand tracking and the gesture tick loop.
Runs in a separate QThread to avoid blocking the UI.
"""
import logging
import time
from typing import Optional
from PyQt5.QtCore import QObject, pyqtSignal

from gestures.orchestrator import FrameOrchestrator
from .hand_tracker import HandTracker, DetectorError, DetectorErrorKind

logger = logging.getLogger(__name__)


class TrackingWorker(QObject):
    """
    Worker class that owns the FrameOrchestrator and runs one tick per
    loop iteration. Emits signals for UI updates.

    The detector is polled synchronously once per tick. Without a detector
    the loop keeps ticking with zero hands, so the scene stays stable while
    the user is offered a retry.
    """
    # Signals
    frame_processed = pyqtSignal(object)  # Emits FrameResult
    hand_lost = pyqtSignal()
    frame_ready = pyqtSignal(object)  # Emits numpy array (BGR frame with landmarks)
    error = pyqtSignal(object)  # Emits DetectorError

    def __init__(self, config, item_count: Optional[int] = None, parent=None):
        super().__init__(parent)
        self._config = config
        self._orchestrator = FrameOrchestrator(config, item_count=item_count)
        self._tracker: Optional[HandTracker] = None
        self._is_running = False
        self._retry_requested = True  # First start counts as a retry

    @property
    def orchestrator(self) -> FrameOrchestrator:
        return self._orchestrator

    def _start_tracker(self) -> None:
        self._retry_requested = False
        self._stop_tracker()
        tracker = HandTracker(self._config)
        try:
            tracker.start()
        except DetectorError as e:
            logger.error("Hand detector unavailable (%s): %s", e.kind.name, e)
            self.error.emit(e)
            return
        self._tracker = tracker

    def _stop_tracker(self) -> None:
        if self._tracker:
            self._tracker.stop()
            self._tracker = None

    def _poll_hands(self):
        """Read hands from the detector; on failure drop it and report an error."""
        if self._tracker is None:
            return None
        try:
            return self._tracker.get_hands()
        except Exception as e:
            logger.exception("Hand detector failed, continuing without hands")
            self._stop_tracker()
            if isinstance(e, DetectorError):
                error = e
            else:
                error = DetectorError(DetectorErrorKind.OTHER, f"Hand detector failed: {e}")
            self.error.emit(error)
            return None

    def start_process(self):
        """Main tick loop. Runs in worker thread."""
        self._is_running = True

        last_frame_time = 0.0
        min_interval = 1.0 / max(1, self._config.ui.tick_rate)
        frame_interval = 1.0 / 15  # Landmark preview rate
        had_hands = False

        try:
            while self._is_running:
                loop_start = time.perf_counter()

                if self._retry_requested:
                    self._start_tracker()

                # 1. Poll the detector (camera read paces the loop)
                hands = self._poll_hands()

                # 2. One pipeline tick
                result = self._orchestrator.tick(hands, now_ms=time.perf_counter() * 1000.0)
                self.frame_processed.emit(result)

                if had_hands and not result.hands_present:
                    self.hand_lost.emit()
                had_hands = result.hands_present

                # 3. Preview frame only if enabled
                if self._config.ui.show_preview and self._tracker is not None:
                    if loop_start - last_frame_time >= frame_interval:
                        frame = self._tracker.get_frame_with_landmarks(hands, black_background=True)
                        if frame is not None:
                            self.frame_ready.emit(frame)
                        last_frame_time = loop_start

                # 4. Cap the tick rate
                elapsed = time.perf_counter() - loop_start
                sleep_time = min_interval - elapsed
                if sleep_time > 0:
                    time.sleep(sleep_time)
        finally:
            self._is_running = False
            self._stop_tracker()

    def request_retry(self):
        """Ask the loop to restart the detector on its next tick."""
        self._retry_requested = True

    def stop_process(self):
        """Signal the loop to stop; resources are released in the worker thread."""
        self._is_running = False
