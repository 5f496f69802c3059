"""SQLite persistence for stances, topics, debates and arguments."""

from .database import DEFAULT_TOPICS, DatabaseManager
from .debate_store import SQLiteDebateStore
from .stance_store import SQLiteStanceStore

__all__ = [
    "DEFAULT_TOPICS",
    "DatabaseManager",
    "SQLiteDebateStore",
    "SQLiteStanceStore",
]
