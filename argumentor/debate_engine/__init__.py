"""Debate stage state machine and shared domain types."""

from .engine import DebateEngine, compute_current_stage, organize_entries
from .exceptions import (
    ArgumentorError,
    DebateNotFoundError,
    NotificationFailedError,
    SlotAlreadyFilledError,
    StoreUnavailableError,
    UnknownTopicError,
    UnrecognizedValueError,
)
from .models import (
    Argument,
    Debate,
    DebateState,
    Stance,
    SubmissionRejection,
    SubmissionResult,
    Topic,
)
from .ports import DebateStore, StanceStore
from .stages import STAGES, StageInfo, get_instruction_for_stage, get_stage_to_refute
from .transcript import build_transcript
from .types import (
    STAGE_ORDER,
    DebateStage,
    DebateStatus,
    Position,
    StanceValue,
    parse_enum,
)

__all__ = [
    "DebateEngine",
    "compute_current_stage",
    "organize_entries",
    "ArgumentorError",
    "DebateNotFoundError",
    "NotificationFailedError",
    "SlotAlreadyFilledError",
    "StoreUnavailableError",
    "UnknownTopicError",
    "UnrecognizedValueError",
    "Argument",
    "Debate",
    "DebateState",
    "Stance",
    "SubmissionRejection",
    "SubmissionResult",
    "Topic",
    "DebateStore",
    "StanceStore",
    "STAGES",
    "StageInfo",
    "get_instruction_for_stage",
    "get_stage_to_refute",
    "build_transcript",
    "STAGE_ORDER",
    "DebateStage",
    "DebateStatus",
    "Position",
    "StanceValue",
    "parse_enum",
]
