import math

import pytest

from gestures.config import Config
from gestures.hand_pose import HandPose, Role

# Landmark offsets from the wrist in units of hand scale, for an upright hand
# (image y grows downwards). Unlisted landmarks sit halfway up the palm.
POSES = {
    "open": {4: (-1.0, -0.8), 8: (-0.3, -2.0), 12: (-0.1, -2.0), 16: (0.1, -2.0), 20: (0.3, -2.0)},
    "fist": {4: (-0.6, -0.5), 8: (-0.3, -0.8), 12: (-0.1, -0.8), 16: (0.1, -0.8), 20: (0.3, -0.8)},
    "pinch": {4: (-0.25, -2.0), 8: (-0.3, -2.0), 12: (-0.1, -2.0), 16: (0.1, -2.0), 20: (0.3, -2.0)},
    "neutral": {4: (-1.0, -0.8), 8: (-0.3, -1.5), 12: (-0.1, -1.5), 16: (0.1, -1.5), 20: (0.3, -1.5)},
    # Folded fingers with the thumb resting on the index tip
    "pinch_fist": {4: (-0.28, -0.8), 8: (-0.3, -0.8), 12: (-0.1, -0.8), 16: (0.1, -0.8), 20: (0.3, -0.8)},
}


def make_landmarks(pose="open", center=(0.5, 0.6), scale=0.1, rotation=0.0):
    offsets = {0: (0.0, 0.0), 9: (0.0, -1.0)}
    offsets.update(POSES[pose])
    cos_r, sin_r = math.cos(rotation), math.sin(rotation)
    landmarks = []
    for i in range(21):
        ox, oy = offsets.get(i, (0.0, -0.5))
        rx = ox * cos_r - oy * sin_r
        ry = ox * sin_r + oy * cos_r
        landmarks.append((center[0] + rx * scale, center[1] + ry * scale, 0.0))
    return landmarks


def make_hand(pose="open", role=Role.PRIMARY, center=None, scale=0.1, rotation=0.0):
    if center is None:
        center = (0.35, 0.6) if role is Role.PRIMARY else (0.75, 0.6)
    return HandPose(tuple(make_landmarks(pose, center, scale, rotation)), role)


@pytest.fixture
def config():
    return Config()
