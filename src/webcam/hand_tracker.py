"""
MediaPipe Hand Tracker wrapper using the Tasks API.
Handles camera capture and two-hand landmark detection.
"""
from enum import Enum, auto
from pathlib import Path
from typing import Optional, List
import logging
import os
import time
import cv2
import numpy as np
import mediapipe as mp

from gestures.config import Config, CameraConfig, MediaPipeConfig, GestureConfig
from gestures.hand_pose import HandPose, hands_from_detections

logger = logging.getLogger(__name__)

# MediaPipe Tasks API imports
BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

MODEL_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"


class DetectorErrorKind(Enum):
    PERMISSION_DENIED = auto()
    OTHER = auto()


class DetectorError(RuntimeError):
    """Hand detector could not be started."""

    def __init__(self, kind: DetectorErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


# Hand connections for drawing (same as MediaPipe's HAND_CONNECTIONS)
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),      # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),      # Index
    (0, 9), (9, 10), (10, 11), (11, 12), # Middle
    (0, 13), (13, 14), (14, 15), (15, 16), # Ring
    (0, 17), (17, 18), (18, 19), (19, 20), # Pinky
    (5, 9), (9, 13), (13, 17),           # Palm
]


def _camera_error(device_id: int) -> DetectorError:
    """Classify a camera open failure."""
    device = Path(f"/dev/video{device_id}")
    if device.exists() and not os.access(device, os.R_OK):
        return DetectorError(
            DetectorErrorKind.PERMISSION_DENIED,
            f"Permission denied for camera {device}",
        )
    return DetectorError(DetectorErrorKind.OTHER, f"Could not open camera {device_id}")


class HandTracker:
    """
    MediaPipe hand tracking wrapper with camera management.
    Uses the MediaPipe Tasks API (0.10+) in VIDEO mode.

    Detection sees the raw camera frame while MediaPipe's handedness labels
    assume a mirrored one, so the labels are inverted into hand roles (see
    gestures.hand_pose.role_from_label). Only the preview is mirrored.
    """

    # Default model path relative to project root
    DEFAULT_MODEL_PATH = Path(__file__).parent.parent.parent / "models" / "hand_landmarker.task"

    def __init__(self, config: Config, model_path: Optional[Path] = None):
        """
        Initialize hand tracker.

        Args:
            config: PalmOrbit configuration
            model_path: Path to hand_landmarker.task model file
        """
        self._camera_config: CameraConfig = config.camera
        self._mp_config: MediaPipeConfig = config.mediapipe
        self._gesture_config: GestureConfig = config.gestures
        configured = self._mp_config.model_path
        self._model_path = Path(model_path or configured or self.DEFAULT_MODEL_PATH)

        # Lazy initialization
        self._cap: Optional[cv2.VideoCapture] = None
        self._landmarker: Optional[HandLandmarker] = None

        # State
        self._is_running = False
        self._last_frame: Optional[np.ndarray] = None
        self._frame_count = 0
        self._start_perf: float = 0
        self._last_timestamp_ms: int = -1

    def start(self) -> None:
        """
        Start camera capture and MediaPipe.

        Raises:
            DetectorError: camera or model unavailable.
        """
        if self._is_running:
            return

        if not self._model_path.exists():
            raise DetectorError(
                DetectorErrorKind.OTHER,
                f"Model file not found: {self._model_path} (download from {MODEL_URL})",
            )

        self._cap = cv2.VideoCapture(self._camera_config.device_id)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise _camera_error(self._camera_config.device_id)

        # Configure camera
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._camera_config.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._camera_config.height)
        self._cap.set(cv2.CAP_PROP_FPS, self._camera_config.fps)

        try:
            self._landmarker = HandLandmarker.create_from_options(self._options())
        except (RuntimeError, ValueError) as e:
            self._cap.release()
            self._cap = None
            raise DetectorError(DetectorErrorKind.OTHER, f"HandLandmarker init failed: {e}") from e

        self._start_perf = time.perf_counter()
        self._last_timestamp_ms = -1
        self._is_running = True
        logger.info("Hand tracker started (camera %d)", self._camera_config.device_id)

    def _options(self) -> HandLandmarkerOptions:
        base_opts = BaseOptions(model_asset_path=str(self._model_path))
        if self._mp_config.use_gpu:
            # GPU with CPU fallback
            try:
                base_opts = BaseOptions(
                    model_asset_path=str(self._model_path),
                    delegate=BaseOptions.Delegate.GPU,
                )
            except AttributeError:
                logger.info("GPU delegate not available, using CPU")

        return HandLandmarkerOptions(
            base_options=base_opts,
            running_mode=VisionRunningMode.VIDEO,
            num_hands=self._mp_config.max_num_hands,
            min_hand_detection_confidence=self._mp_config.min_detection_confidence,
            min_hand_presence_confidence=self._mp_config.min_presence_confidence,
            min_tracking_confidence=self._mp_config.min_tracking_confidence,
        )

    def stop(self) -> None:
        """Stop camera capture and release resources."""
        self._is_running = False

        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None

        if self._cap:
            self._cap.release()
            self._cap = None

        self._last_frame = None

    def get_hands(self) -> Optional[List[HandPose]]:
        """
        Capture a frame and detect hands.

        Detection runs on the raw, unmirrored frame so landmark x and the
        hand orientation keep the camera's sense.

        Returns:
            Detected hands (possibly empty), or None when no frame was read.

        Raises:
            DetectorError: capture or detection failed mid-run.
        """
        if not self._is_running or self._cap is None or self._landmarker is None:
            return None

        try:
            ret, frame = self._cap.read()
            if not ret:
                return None

            self._frame_count += 1
            self._last_frame = frame

            # Convert BGR to RGB for MediaPipe
            rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            rgb_frame.flags.writeable = False
            mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

            # Strictly monotonic timestamp
            timestamp_ms = int((time.perf_counter() - self._start_perf) * 1000)
            if timestamp_ms <= self._last_timestamp_ms:
                timestamp_ms = self._last_timestamp_ms + 1
            self._last_timestamp_ms = timestamp_ms

            result = self._landmarker.detect_for_video(mp_image, timestamp_ms)
        except (RuntimeError, ValueError, cv2.error) as e:
            raise DetectorError(DetectorErrorKind.OTHER, f"Hand detection failed: {e}") from e

        if not result.hand_landmarks:
            return []

        detections = []
        for i, hand_landmarks in enumerate(result.hand_landmarks):
            label = None
            if i < len(result.handedness) and result.handedness[i]:
                label = result.handedness[i][0].category_name
            detections.append(([(lm.x, lm.y, lm.z) for lm in hand_landmarks], label))

        return hands_from_detections(detections, self._gesture_config.invert_handedness)

    def get_frame_with_landmarks(
        self,
        hands: Optional[List[HandPose]] = None,
        black_background: bool = False
    ) -> Optional[np.ndarray]:
        """
        Get last frame, mirrored for display, with optional landmark overlay.

        Args:
            hands: If provided, draw their landmarks on the frame.
            black_background: If True, draw on black instead of camera image.

        Returns:
            Frame with landmarks drawn, or None if no frame available.
        """
        if self._last_frame is None:
            return None

        if black_background:
            frame = np.zeros_like(self._last_frame)
        else:
            frame = cv2.flip(self._last_frame, 1)

        h, w = frame.shape[:2]

        def to_px(point):
            # Landmarks are in unmirrored coordinates
            return int((1.0 - point[0]) * w), int(point[1] * h)

        for hand in hands or ():
            for point in hand.landmarks:
                cv2.circle(frame, to_px(point), 4, (204, 255, 0), -1)

            for start_idx, end_idx in HAND_CONNECTIONS:
                start_pos = to_px(hand.landmarks[start_idx])
                end_pos = to_px(hand.landmarks[end_idx])
                cv2.line(frame, start_pos, end_pos, (204, 255, 0), 2)

        return frame

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def frame_count(self) -> int:
        return self._frame_count
