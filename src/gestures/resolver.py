"""
Composite gesture resolution.

Combines up to two hands into a single gesture. Precedence is the order of
the PRECEDENCE table: the first rule whose predicate holds builds the
result.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, ClassVar, NamedTuple, Optional, Sequence, Tuple

from .classifier import HandPoseClassifier
from .config import GestureConfig
from .hand_pose import HandPose, Point, Role, distance_2d


class Gesture(Enum):
    """Composite gesture kinds."""
    NONE = auto()
    PINCH_PRIMARY = auto()       # Next photo
    PINCH_SECONDARY = auto()     # Previous photo
    PINCH_BOTH = auto()
    PALM_BOTH = auto()           # Zoom: hand distance controls scale
    FIST_PRIMARY = auto()        # Form
    OPEN_PALM_PRIMARY = auto()   # Gallery / scatter


def gesture_label(gesture: Gesture) -> str:
    """Short on-screen label for a gesture."""
    if gesture is Gesture.NONE:
        return "SCANNING..."
    return gesture.name.replace("_PRIMARY", "")


class CompositeGesture:
    """
    Base of the composite gesture variants.

    Each variant is a frozen dataclass carrying only the fields that are
    meaningful for it. Fields a variant does not carry read as None.
    """
    gesture: ClassVar[Gesture] = Gesture.NONE
    position: Optional[Point] = None
    angle: Optional[float] = None
    distance: Optional[float] = None


@dataclass(frozen=True)
class Idle(CompositeGesture):
    """No trigger. Carries the primary hand angle when a primary hand is visible."""
    gesture: ClassVar[Gesture] = Gesture.NONE
    angle: Optional[float] = None


@dataclass(frozen=True)
class PrimaryPinch(CompositeGesture):
    gesture: ClassVar[Gesture] = Gesture.PINCH_PRIMARY
    position: Point
    angle: float


@dataclass(frozen=True)
class SecondaryPinch(CompositeGesture):
    gesture: ClassVar[Gesture] = Gesture.PINCH_SECONDARY
    position: Point


@dataclass(frozen=True)
class BothPinch(CompositeGesture):
    gesture: ClassVar[Gesture] = Gesture.PINCH_BOTH
    distance: float


@dataclass(frozen=True)
class BothPalms(CompositeGesture):
    gesture: ClassVar[Gesture] = Gesture.PALM_BOTH
    distance: float


@dataclass(frozen=True)
class PrimaryFist(CompositeGesture):
    gesture: ClassVar[Gesture] = Gesture.FIST_PRIMARY
    position: Point
    angle: float


@dataclass(frozen=True)
class PrimaryOpenPalm(CompositeGesture):
    gesture: ClassVar[Gesture] = Gesture.OPEN_PALM_PRIMARY
    position: Point
    angle: float


@dataclass(frozen=True)
class HandReading:
    """A hand together with its per-frame predicates."""
    hand: HandPose
    pinching: bool
    fist: bool
    open_palm: bool

    @property
    def angle(self) -> float:
        return self.hand.orientation

    def point(self, index: int) -> Point:
        x, y, _ = self.hand.get(index)
        return (x, y)


@dataclass(frozen=True)
class HandPair:
    primary: Optional[HandReading] = None
    secondary: Optional[HandReading] = None

    @property
    def both(self) -> bool:
        return self.primary is not None and self.secondary is not None


class GestureRule(NamedTuple):
    name: str
    predicate: Callable[[HandPair], bool]
    build: Callable[[HandPair], CompositeGesture]


def _between(p: HandPair, index: int) -> float:
    return distance_2d(p.primary.point(index), p.secondary.point(index))


PRECEDENCE: Tuple[GestureRule, ...] = (
    GestureRule(
        "palm_both",
        lambda p: p.both and p.primary.open_palm and p.secondary.open_palm,
        lambda p: BothPalms(distance=_between(p, HandPose.MIDDLE_MCP)),
    ),
    GestureRule(
        "pinch_both",
        lambda p: p.both and p.primary.pinching and p.secondary.pinching,
        lambda p: BothPinch(distance=_between(p, HandPose.THUMB_TIP)),
    ),
    GestureRule(
        "pinch_secondary",
        lambda p: p.secondary is not None and p.secondary.pinching,
        lambda p: SecondaryPinch(position=p.secondary.point(HandPose.THUMB_TIP)),
    ),
    GestureRule(
        "pinch_primary",
        lambda p: p.primary is not None and p.primary.pinching,
        lambda p: PrimaryPinch(position=p.primary.point(HandPose.THUMB_TIP), angle=p.primary.angle),
    ),
    GestureRule(
        "fist_primary",
        lambda p: p.primary is not None and p.primary.fist,
        lambda p: PrimaryFist(position=p.primary.point(HandPose.MIDDLE_MCP), angle=p.primary.angle),
    ),
    GestureRule(
        "open_palm_primary",
        lambda p: p.primary is not None and p.primary.open_palm,
        lambda p: PrimaryOpenPalm(position=p.primary.point(HandPose.MIDDLE_MCP), angle=p.primary.angle),
    ),
    # Orientation is tracked even without a trigger
    GestureRule(
        "primary_idle",
        lambda p: p.primary is not None,
        lambda p: Idle(angle=p.primary.angle),
    ),
)


def assign_roles(hands: Sequence[HandPose]) -> Tuple[Optional[HandPose], Optional[HandPose]]:
    """
    Pick the primary and secondary hand from a frame.

    A lone hand without a usable label is treated as primary. When two
    hands claim the same role the later one wins.
    """
    primary = secondary = None
    for hand in hands:
        if hand.role is Role.PRIMARY:
            primary = hand
        elif hand.role is Role.SECONDARY:
            secondary = hand
    if len(hands) == 1 and hands[0].role is None:
        primary = hands[0]
    return primary, secondary


class GestureResolver:
    """Stateless resolver from a frame's hands to one composite gesture."""

    def __init__(self, config: GestureConfig = None, rules: Sequence[GestureRule] = PRECEDENCE):
        self._classifier = HandPoseClassifier(config)
        self._rules = tuple(rules)

    @property
    def rules(self) -> Tuple[GestureRule, ...]:
        return self._rules

    def read(self, hand: Optional[HandPose]) -> Optional[HandReading]:
        if hand is None:
            return None
        c = self._classifier
        return HandReading(
            hand=hand,
            pinching=c.is_pinching(hand),
            fist=c.is_fist(hand),
            open_palm=c.is_open_palm(hand),
        )

    def pair(self, hands: Sequence[HandPose]) -> HandPair:
        primary, secondary = assign_roles(hands)
        return HandPair(primary=self.read(primary), secondary=self.read(secondary))

    def resolve(self, hands: Optional[Sequence[HandPose]]) -> CompositeGesture:
        if not hands:
            return Idle()
        pair = self.pair(hands)
        for rule in self._rules:
            if rule.predicate(pair):
                return rule.build(pair)
        return Idle()
