import pytest

from gestures.resolver import Gesture
from gestures.transform import Mode, TransformStateMachine


@pytest.fixture
def machine():
    return TransformStateMachine(item_count=6)


def enter_gallery(machine):
    machine.apply_gesture(Gesture.OPEN_PALM_PRIMARY)
    assert machine.mode is Mode.GALLERY


def test_initial_state(machine):
    s = machine.state
    assert s.mode is Mode.FORMED
    assert s.chaos_factor == 0.0
    assert s.focused_index is None
    assert s.position == (0.0, -0.5, 0.0)
    assert s.scale == 1.0


def test_entering_gallery_resets_navigation_and_rotation(machine):
    s = machine.state
    s.rotation_angle = 12.3
    s.auto_rotation_speed = 0.005
    s.gallery_offset = 4.0
    s.scale = 1.8
    enter_gallery(machine)
    assert s.rotation_angle == 0.0
    assert s.auto_rotation_speed == 0.0
    assert s.position == (0.0, 0.0, 0.0)
    assert s.focused_index == 0
    assert s.gallery_offset == 0.0
    assert s.scale == 1.0
    assert s.chaos_factor == pytest.approx(0.05)


@pytest.mark.parametrize("before, after", [(1.3, 1.3), (0.7, 0.7), (0.6, 0.7), (1.8, 1.0)])
def test_gallery_entry_keeps_scale_within_bounds(machine, before, after):
    machine.state.scale = before
    enter_gallery(machine)
    assert machine.state.scale == after


def test_zoomed_out_formed_scene_enters_gallery_in_bounds(machine):
    machine.apply_zoom(-5.0)
    assert machine.state.scale == 0.6
    enter_gallery(machine)
    assert 0.7 <= machine.state.scale <= 1.4


def test_chaos_is_clamped(machine):
    for _ in range(40):
        machine.apply_gesture(Gesture.OPEN_PALM_PRIMARY)
    assert machine.state.chaos_factor == 1.0
    for _ in range(40):
        machine.apply_gesture(Gesture.FIST_PRIMARY)
    assert machine.state.chaos_factor == 0.0


def test_fist_returns_to_formed(machine):
    enter_gallery(machine)
    machine.step_focus(2)
    machine.apply_gesture(Gesture.FIST_PRIMARY)
    s = machine.state
    assert s.mode is Mode.FORMED
    assert s.focused_index is None
    assert s.position == (0.0, -0.5, 0.0)
    assert s.chaos_factor == pytest.approx(0.0)


def test_other_gestures_hold_mode_and_chaos(machine):
    enter_gallery(machine)
    chaos = machine.state.chaos_factor
    for gesture in (Gesture.NONE, Gesture.PINCH_PRIMARY, Gesture.PALM_BOTH, Gesture.PINCH_BOTH):
        machine.apply_gesture(gesture)
    assert machine.mode is Mode.GALLERY
    assert machine.state.chaos_factor == chaos


def test_drift_only_in_formed_mode(machine):
    machine.state.auto_rotation_speed = 0.005
    machine.apply_drift()
    machine.apply_drift()
    assert machine.state.rotation_angle == pytest.approx(0.01)
    enter_gallery(machine)
    machine.state.auto_rotation_speed = 0.005
    machine.apply_drift()
    assert machine.state.rotation_angle == 0.0


def test_rotation_impulse_accumulates_into_clamped_speed(machine):
    machine.apply_rotation_impulse(0.004)
    assert machine.state.auto_rotation_speed == pytest.approx(0.004)
    machine.apply_rotation_impulse(0.004)
    assert machine.state.auto_rotation_speed == pytest.approx(0.007)
    machine.apply_rotation_impulse(-0.1)
    assert machine.state.auto_rotation_speed == pytest.approx(-0.007)
    assert machine.state.rotation_angle == 0.0


def test_rotation_impulse_is_direct_in_gallery(machine):
    enter_gallery(machine)
    machine.apply_rotation_impulse(-0.3)
    assert machine.state.rotation_angle == pytest.approx(-0.3)
    assert machine.state.auto_rotation_speed == 0.0


@pytest.mark.parametrize("delta", [5.0, -5.0])
def test_zoom_clamped_in_formed(machine, delta):
    for _ in range(20):
        machine.apply_zoom(delta)
        assert 0.6 <= machine.state.scale <= 2.0
    assert machine.state.scale == (2.0 if delta > 0 else 0.6)


@pytest.mark.parametrize("delta", [5.0, -5.0])
def test_zoom_clamped_in_gallery(machine, delta):
    enter_gallery(machine)
    for _ in range(20):
        machine.apply_zoom(delta)
        assert 0.7 <= machine.state.scale <= 1.4
    assert machine.state.scale == (1.4 if delta > 0 else 0.7)


def test_focus_is_clamped_without_wraparound(machine):
    enter_gallery(machine)
    assert machine.step_focus(-1) == 0
    for _ in range(10):
        machine.step_focus(1)
    assert machine.state.focused_index == 5
    assert machine.state.gallery_offset == 5.0


def test_focus_ignored_outside_gallery(machine):
    assert machine.step_focus(1) is None
    assert machine.state.focused_index is None


def test_set_item_count_reclamps_focus(machine):
    enter_gallery(machine)
    for _ in range(5):
        machine.step_focus(1)
    machine.set_item_count(3)
    assert machine.state.focused_index == 2
    assert machine.state.gallery_offset == 2.0


def test_empty_gallery_keeps_one_slot():
    machine = TransformStateMachine(item_count=0)
    assert machine.item_count == 1
    enter_gallery(machine)
    assert machine.step_focus(1) == 0
    assert 0 <= machine.state.focused_index <= machine.item_count - 1


def test_set_item_count_never_drops_below_one(machine):
    enter_gallery(machine)
    machine.step_focus(3)
    machine.set_item_count(0)
    assert machine.item_count == 1
    assert machine.state.focused_index == 0


def test_snapshot_is_read_only(machine):
    snap = machine.snapshot()
    with pytest.raises(AttributeError):
        snap.scale = 3.0
    machine.apply_zoom(0.5)
    assert snap.scale == 1.0
