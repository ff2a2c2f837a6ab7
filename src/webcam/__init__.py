"""
PalmOrbit Webcam Module

Hand tracking using MediaPipe and the background tick worker.
"""
from .hand_tracker import HandTracker, DetectorError, DetectorErrorKind
from .worker import TrackingWorker

__all__ = [
    'HandTracker',
    'DetectorError',
    'DetectorErrorKind',
    'TrackingWorker',
]
