"""Request and response models for the HTTP API."""

from pydantic import BaseModel, Field

from argumentor.debate_engine.models import Argument, Debate, DebateState
from argumentor.debate_engine.stages import STAGES
from argumentor.debate_engine.types import DebateStage, Position, StanceValue
from argumentor.matchmaking.models import MatchOutcome
from argumentor.matchmaking.session import MatchmakingSession


class StanceRequest(BaseModel):
    """Body for declaring or changing a stance."""

    stance: StanceValue


class EntryRequest(BaseModel):
    """Body for submitting an argument to the current stage."""

    user_id: str
    content: str = Field(default="")


class DebateStateResponse(BaseModel):
    """Debate snapshot as seen by one user (or an observer)."""

    debate: Debate
    current_stage: DebateStage | None
    stage_name: str | None = None
    instruction: str | None = None
    user_position: Position | None = None
    is_user_turn: bool = False
    is_finished: bool
    entries: list[Argument]

    @classmethod
    def from_state(cls, state: DebateState) -> "DebateStateResponse":
        info = STAGES[state.current_stage] if state.current_stage else None
        entries = [
            state.entries[stage][position]
            for stage in state.entries
            for position in (Position.FAVOR, Position.AGAINST)
            if position in state.entries[stage]
        ]
        return cls(
            debate=state.debate,
            current_stage=state.current_stage,
            stage_name=info.name if info else None,
            instruction=info.instruction if info else None,
            user_position=state.user_position,
            is_user_turn=state.is_user_turn,
            is_finished=state.is_finished,
            entries=entries,
        )


class UserDebatesResponse(BaseModel):
    """A user's debates split into ongoing and completed."""

    ongoing: list[Debate]
    completed: list[Debate]


class MatchmakingStatusResponse(BaseModel):
    """State of a user's background search."""

    user_id: str
    is_searching: bool
    attempts: int = 0
    last_outcome: MatchOutcome | None = None

    @classmethod
    def from_session(
        cls, user_id: str, session: MatchmakingSession | None
    ) -> "MatchmakingStatusResponse":
        if session is None:
            return cls(user_id=user_id, is_searching=False)
        return cls(
            user_id=user_id,
            is_searching=session.is_searching,
            attempts=session.attempts,
            last_outcome=session.last_outcome,
        )
