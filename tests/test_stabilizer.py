import pytest

from gestures.resolver import Gesture
from gestures.stabilizer import GestureStabilizer


@pytest.fixture
def stabilizer():
    return GestureStabilizer(stability_frames=4)


def test_fist_needs_four_repeats(stabilizer):
    outputs = [stabilizer.update(Gesture.FIST_PRIMARY) for _ in range(5)]
    assert outputs[:4] == [Gesture.NONE] * 4
    assert outputs[4] is Gesture.FIST_PRIMARY


def test_interrupted_run_starts_over(stabilizer):
    for _ in range(3):
        stabilizer.update(Gesture.FIST_PRIMARY)
    stabilizer.update(Gesture.PINCH_BOTH)
    outputs = [stabilizer.update(Gesture.FIST_PRIMARY) for _ in range(4)]
    assert Gesture.FIST_PRIMARY not in outputs
    assert stabilizer.update(Gesture.FIST_PRIMARY) is Gesture.FIST_PRIMARY


@pytest.mark.parametrize("gesture", [
    Gesture.PINCH_PRIMARY,
    Gesture.PINCH_SECONDARY,
    Gesture.PALM_BOTH,
    Gesture.OPEN_PALM_PRIMARY,
])
def test_motion_gestures_are_immediate(stabilizer, gesture):
    assert stabilizer.update(gesture) is gesture


def test_discrete_gesture_holds_previous_until_stable(stabilizer):
    stabilizer.update(Gesture.OPEN_PALM_PRIMARY)
    for _ in range(4):
        assert stabilizer.update(Gesture.FIST_PRIMARY) is Gesture.OPEN_PALM_PRIMARY
    assert stabilizer.update(Gesture.FIST_PRIMARY) is Gesture.FIST_PRIMARY


def test_tracking_loss_is_not_debounced(stabilizer):
    for _ in range(10):
        stabilizer.update(Gesture.PINCH_PRIMARY)
    assert stabilizer.update(Gesture.NONE, hands_present=False) is Gesture.NONE
    assert stabilizer.run_length == 0
    # And a 0-threshold gesture returns on the very next frame
    assert stabilizer.update(Gesture.PINCH_PRIMARY) is Gesture.PINCH_PRIMARY


def test_tracking_loss_resets_fist_run(stabilizer):
    for _ in range(4):
        stabilizer.update(Gesture.FIST_PRIMARY)
    stabilizer.update(Gesture.NONE, hands_present=False)
    assert stabilizer.update(Gesture.FIST_PRIMARY) is Gesture.NONE


def test_threshold_is_configurable():
    stabilizer = GestureStabilizer(stability_frames=1)
    assert stabilizer.update(Gesture.FIST_PRIMARY) is Gesture.NONE
    assert stabilizer.update(Gesture.FIST_PRIMARY) is Gesture.FIST_PRIMARY
