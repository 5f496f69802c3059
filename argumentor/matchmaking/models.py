"""Matchmaking result models."""

from enum import Enum

from pydantic import BaseModel


class MatchStatus(Enum):
    MATCHED = "MATCHED"
    NO_MATCH_FOUND = "NO_MATCH_FOUND"  # transient, retry on next tick
    NO_STANCES_AVAILABLE = "NO_STANCES_AVAILABLE"  # nothing to match on, stop


class MatchOutcome(BaseModel):
    """Result of a single bounded search attempt."""

    status: MatchStatus
    debate_id: str | None = None
    opponent_user_id: str | None = None
    topic_name: str | None = None
    created: bool = False  # False when the pair's open debate already existed
