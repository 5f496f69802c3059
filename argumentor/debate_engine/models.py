"""Data models for the debate core."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .types import DebateStage, DebateStatus, Position, StanceValue


class Topic(BaseModel):
    """Reference topic users declare stances on."""

    topic_name: str
    description: str = ""


class Stance(BaseModel):
    """A user's declared position on one topic."""

    user_id: str
    topic_name: str
    stance: StanceValue
    updated_at: datetime = Field(default_factory=datetime.now)


class Debate(BaseModel):
    """A debate between a favor and a contra participant."""

    debate_id: str
    title: str
    description: str = ""
    author_user_id: str | None = None
    participant_favor_user_id: str
    participant_contra_user_id: str
    status: DebateStatus = DebateStatus.PENDING
    category: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    pair_key: str | None = None  # set for matchmade debates only

    def position_of(self, user_id: str) -> Position | None:
        """Position argued by user_id, or None when not a participant."""
        if user_id == self.participant_favor_user_id:
            return Position.FAVOR
        if user_id == self.participant_contra_user_id:
            return Position.AGAINST
        return None

    @property
    def is_finished(self) -> bool:
        return self.status is DebateStatus.FINISHED


class Argument(BaseModel):
    """One participant's submission for one stage."""

    argument_id: int | None = None
    debate_id: str
    user_id: str
    stage: DebateStage
    position: Position
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)


class DebateState(BaseModel):
    """Snapshot of a debate as computed from its stored arguments."""

    debate: Debate
    entries: dict[DebateStage, dict[Position, Argument]]
    current_stage: DebateStage | None  # None once every stage is complete
    user_position: Position | None = None
    is_user_turn: bool = False

    @property
    def is_finished(self) -> bool:
        return self.current_stage is None


class SubmissionRejection(Enum):
    """Why a submission was refused."""

    EMPTY_CONTENT = "empty_content"
    INVALID_TURN = "invalid_turn"
    DEBATE_FINISHED = "debate_finished"
    NOT_A_PARTICIPANT = "not_a_participant"


class SubmissionResult(BaseModel):
    """Outcome of submit_entry. Truthy when the entry was accepted."""

    accepted: bool
    reason: SubmissionRejection | None = None
    argument: Argument | None = None
    stage_advanced: bool = False

    def __bool__(self) -> bool:
        return self.accepted

    @classmethod
    def rejected(cls, reason: SubmissionRejection) -> "SubmissionResult":
        return cls(accepted=False, reason=reason)
