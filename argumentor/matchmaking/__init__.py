"""Opponent matching over declared stances."""

from .matchmaker import Matchmaker, make_pair_key
from .models import MatchOutcome, MatchStatus
from .session import MatchmakingService, MatchmakingSession

__all__ = [
    "MatchOutcome",
    "MatchStatus",
    "Matchmaker",
    "MatchmakingService",
    "MatchmakingSession",
    "make_pair_key",
]
