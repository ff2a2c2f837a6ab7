"""
Status window - gesture label, transform readout and landmark preview.
"""
from typing import Optional, Sequence
from PyQt5.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QLabel, QPushButton
from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QImage, QPixmap
import numpy as np

from gallery.catalogue import PhotoSlot, focused_slot
from gestures.orchestrator import FrameResult
from gestures.transform import Mode
from webcam.hand_tracker import DetectorError, DetectorErrorKind


STYLE = """
#CentralWidget { background: rgba(5, 0, 1, 220); border-radius: 16px; }
QLabel { color: #ffe9a8; font-size: 11px; }
#GestureLabel { color: #facc15; font-size: 14px; font-weight: bold; letter-spacing: 2px; }
#ErrorPanel { color: #fecaca; }
QPushButton { background: #eab308; color: black; padding: 8px; border-radius: 8px; font-weight: bold; }
"""


class StatusWindow(QMainWindow):
    """
    Small always-on-top panel for the tick worker's output.

    Shows the stabilized gesture label, the transform state and the
    landmark preview. When the detector fails, an "Enable sensor" button
    asks the worker to retry.
    """
    retry_requested = pyqtSignal()

    def __init__(self, slots: Sequence[PhotoSlot] = (), parent=None):
        super().__init__(parent)
        self._slots = list(slots)
        self.setWindowFlags(Qt.WindowStaysOnTopHint | Qt.Tool)
        self.setWindowTitle("PalmOrbit")
        self._setup_ui()
        self.setStyleSheet(STYLE)

    def _setup_ui(self):
        """Build the UI."""
        central = QWidget()
        central.setObjectName("CentralWidget")
        layout = QVBoxLayout(central)
        layout.setContentsMargins(12, 12, 12, 12)
        self.setCentralWidget(central)

        self.webcam_preview = QLabel()
        self.webcam_preview.setFixedSize(320, 240)
        self.webcam_preview.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.webcam_preview)

        self.gesture_label = QLabel("SCANNING...")
        self.gesture_label.setObjectName("GestureLabel")
        layout.addWidget(self.gesture_label)

        self.transform_label = QLabel()
        layout.addWidget(self.transform_label)

        self.error_panel = QLabel()
        self.error_panel.setObjectName("ErrorPanel")
        self.error_panel.setWordWrap(True)
        self.error_panel.hide()
        layout.addWidget(self.error_panel)

        self.retry_button = QPushButton("ENABLE SENSOR")
        self.retry_button.clicked.connect(self._handle_retry)
        self.retry_button.hide()
        layout.addWidget(self.retry_button)

    def update_frame(self, result: FrameResult):
        """Refresh the readout from one tick."""
        self.gesture_label.setText(result.label)
        t = result.transform
        lines = [
            f"Mode: {t.mode.name}",
            f"Chaos: {t.chaos_factor:.2f}",
            f"Rotation: {t.rotation_angle:+.3f} rad ({t.auto_rotation_speed:+.4f}/tick)",
            f"Scale: {t.scale:.2f}",
        ]
        if t.mode is Mode.GALLERY:
            slot = focused_slot(self._slots, t.focused_index)
            if slot is None:
                lines.append(f"Photo: {t.focused_index}")
            else:
                lines.append(
                    f"Photo: {slot.path.name} (y {slot.y:+.2f}, angle {slot.angle:.2f})"
                )
        self.transform_label.setText("\n".join(lines))

    def set_webcam_frame(self, frame: Optional[np.ndarray]):
        """
        Update the landmark preview.

        Args:
            frame: BGR numpy array from HandTracker
        """
        if frame is None:
            self.webcam_preview.clear()
            return

        rgb = frame[:, :, ::-1].copy()
        h, w, ch = rgb.shape
        qimg = QImage(rgb.data, w, h, ch * w, QImage.Format_RGB888)
        pixmap = QPixmap.fromImage(qimg).scaled(
            self.webcam_preview.size(), Qt.KeepAspectRatio
        )
        self.webcam_preview.setPixmap(pixmap)

    def show_error(self, error: DetectorError):
        """Show a detector error with a retry button."""
        if error.kind is DetectorErrorKind.PERMISSION_DENIED:
            text = "Please enable the camera to enter the experience."
        else:
            text = f"Hand tracking unavailable: {error}"
        self.error_panel.setText(text)
        self.error_panel.show()
        self.retry_button.show()

    def _handle_retry(self):
        self.error_panel.hide()
        self.retry_button.hide()
        self.retry_requested.emit()
