"""Shared types and enums for the debate engine."""

from enum import Enum
from typing import TypeVar

from .exceptions import UnrecognizedValueError


class StanceValue(Enum):
    """A user's declared position on a topic."""

    FAVOR = "FAVOR"
    AGAINST = "AGAINST"
    NEUTRAL = "NEUTRAL"


class Position(Enum):
    """Debate positions."""

    FAVOR = "FAVOR"
    AGAINST = "AGAINST"

    @property
    def opposite(self) -> "Position":
        return Position.AGAINST if self is Position.FAVOR else Position.FAVOR


class DebateStage(Enum):
    """Stages of a structured debate, in speaking order."""

    INTRO = "INTRO"
    REBUTTAL_1 = "REBUTTAL_1"
    REBUTTAL_2 = "REBUTTAL_2"
    CONCLUSION = "CONCLUSION"


class DebateStatus(Enum):
    """Lifecycle status stored on a debate record."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    REBUTTAL_1 = "REBUTTAL_1"
    REBUTTAL_2 = "REBUTTAL_2"
    CONCLUSION = "CONCLUSION"
    FINISHED = "FINISHED"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = list(DebateStatus)

STAGE_ORDER: list[DebateStage] = list(DebateStage)

# Status written when a stage completes
STATUS_AFTER_STAGE: dict[DebateStage, DebateStatus] = {
    DebateStage.INTRO: DebateStatus.REBUTTAL_1,
    DebateStage.REBUTTAL_1: DebateStatus.REBUTTAL_2,
    DebateStage.REBUTTAL_2: DebateStatus.CONCLUSION,
    DebateStage.CONCLUSION: DebateStatus.FINISHED,
}

E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], raw: str) -> E:
    """Map a stored string onto a closed enum, refusing unknown values."""
    try:
        return enum_cls(raw)
    except ValueError as e:
        raise UnrecognizedValueError(enum_cls.__name__, raw) from e


def position_for_stance(stance: StanceValue) -> Position:
    """Translate a non-neutral stance into the debate position it argues."""
    if stance is StanceValue.FAVOR:
        return Position.FAVOR
    if stance is StanceValue.AGAINST:
        return Position.AGAINST
    raise ValueError("Neutral stances have no debate position")


def opposite_stance(stance: StanceValue) -> StanceValue:
    if stance is StanceValue.FAVOR:
        return StanceValue.AGAINST
    if stance is StanceValue.AGAINST:
        return StanceValue.FAVOR
    raise ValueError("Neutral stances have no opposite")
