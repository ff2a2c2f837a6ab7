import pytest

from gestures.classifier import ClassifiedPose, HandPoseClassifier
from gestures.hand_pose import HandPose, MalformedHandPose
from conftest import make_hand


@pytest.fixture
def classifier():
    return HandPoseClassifier()


@pytest.mark.parametrize("pose,expected", [
    ("open", ClassifiedPose.OPEN_PALM),
    ("fist", ClassifiedPose.FIST),
    ("pinch", ClassifiedPose.PINCHING),
    ("neutral", ClassifiedPose.NEUTRAL),
])
def test_classify_poses(classifier, pose, expected):
    assert classifier.classify(make_hand(pose)) == expected


def test_classification_is_repeatable(classifier):
    hand = make_hand("fist")
    results = {classifier.classify(hand) for _ in range(10)}
    assert results == {ClassifiedPose.FIST}


@pytest.mark.parametrize("k", [0.25, 0.5, 2.0, 3.7])
@pytest.mark.parametrize("pose", ["open", "fist", "pinch", "neutral"])
def test_uniform_scaling_keeps_classification(classifier, pose, k):
    hand = make_hand(pose)
    scaled = HandPose(tuple((x * k, y * k, z * k) for x, y, z in hand.landmarks), hand.role)
    assert classifier.classify(scaled) == classifier.classify(hand)


def test_rotation_keeps_classification(classifier):
    for pose, expected in [("open", ClassifiedPose.OPEN_PALM), ("fist", ClassifiedPose.FIST)]:
        assert classifier.classify(make_hand(pose, rotation=1.1)) == expected


def test_pinch_and_fist_are_independent(classifier):
    hand = make_hand("pinch_fist")
    assert classifier.is_pinching(hand)
    assert classifier.is_fist(hand)
    assert not classifier.is_open_palm(hand)
    # Single-hand precedence favours the pinch
    assert classifier.classify(hand) == ClassifiedPose.PINCHING


def test_pinching_hand_is_never_open_palm(classifier):
    hand = make_hand("pinch")
    assert not classifier.is_open_palm(hand)


def test_malformed_hand_is_rejected():
    with pytest.raises(MalformedHandPose):
        HandPose(tuple((0.5, 0.5, 0.0) for _ in range(20)))
