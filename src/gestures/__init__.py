"""
PalmOrbit Gesture Core

Hand pose classification, gesture stabilization and transform state.
"""
from .config import Config, load_config
from .hand_pose import HandPose, MalformedHandPose, Role, hands_from_detections
from .classifier import ClassifiedPose, HandPoseClassifier
from .resolver import CompositeGesture, Gesture, GestureResolver, PRECEDENCE, gesture_label
from .stabilizer import GestureStabilizer
from .motion import MotionDeltas, MotionIntegrator
from .transform import Mode, TransformSnapshot, TransformState, TransformStateMachine
from .orchestrator import FrameOrchestrator, FrameResult

__all__ = [
    'Config',
    'load_config',
    'HandPose',
    'MalformedHandPose',
    'Role',
    'hands_from_detections',
    'ClassifiedPose',
    'HandPoseClassifier',
    'CompositeGesture',
    'Gesture',
    'GestureResolver',
    'PRECEDENCE',
    'gesture_label',
    'GestureStabilizer',
    'MotionDeltas',
    'MotionIntegrator',
    'Mode',
    'TransformSnapshot',
    'TransformState',
    'TransformStateMachine',
    'FrameOrchestrator',
    'FrameResult',
]
