"""SQLite connection handling and schema setup shared by the stores."""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from argumentor.debate_engine.exceptions import StoreUnavailableError
from argumentor.debate_engine.models import Topic

logger = logging.getLogger(__name__)

SQL_DIR = Path(__file__).parent / "sql"

# Parents before children, indexes last
SCHEMA_FILES = [
    "topics.sql",
    "user_stances.sql",
    "debates.sql",
    "arguments.sql",
    "indexes.sql",
]

# Reference topics seeded into a fresh database
DEFAULT_TOPICS = [
    Topic(topic_name="climate_change", description="This topic addresses the existence and reality of climate change"),
    Topic(topic_name="nuclear_energy", description="This topic focuses on the use of nuclear energy as a source of electricity"),
    Topic(topic_name="social_media", description="This topic explores the impact of daily use of social media on people's lives"),
    Topic(topic_name="online_education", description="This topic focuses on distance education through digital platforms"),
    Topic(topic_name="artificial_intelligence", description="This topic explores the ethical considerations of AI"),
    Topic(topic_name="abortion", description="This topic discusses the ethical, legal and social aspects of abortion"),
    Topic(topic_name="bullfighting", description="This topic debates the tradition versus animal rights aspects of bullfighting"),
    Topic(topic_name="film_subsidies", description="This topic examines whether government should subsidize film industry"),
    Topic(topic_name="open_borders", description="This topic discusses immigration policies and open borders"),
    Topic(topic_name="freedom_of_speech", description="This topic explores the limits and importance of free speech"),
    Topic(topic_name="marijuana", description="This topic debates the legalization of marijuana"),
]


class DatabaseManager:
    """Owns the SQLite file: schema creation, topic seeding and connections."""

    def __init__(self, db_path: str | Path = "argumentor.db", seed_topics: bool = True):
        self.db_path = Path(db_path)
        self._init_database(seed_topics)

    def _init_database(self, seed_topics: bool) -> None:
        """Create tables and indexes from the SQL files, then seed topics."""
        missing = [name for name in SCHEMA_FILES if not (SQL_DIR / name).exists()]
        if missing:
            raise RuntimeError(f"Missing schema files in {SQL_DIR}: {missing}")

        with self.get_connection("initialize schema") as conn:
            cursor = conn.cursor()
            for name in SCHEMA_FILES:
                cursor.executescript((SQL_DIR / name).read_text(encoding="utf-8"))
                logger.debug(f"Executed schema file: {name}")

            if seed_topics:
                cursor.executemany(
                    "INSERT OR IGNORE INTO topics (topic_name, description) VALUES (?, ?)",
                    [(topic.topic_name, topic.description) for topic in DEFAULT_TOPICS],
                )

            conn.commit()
            logger.info(f"Database initialized at {self.db_path}")

    @contextmanager
    def get_connection(self, operation: str = "query") -> Iterator[sqlite3.Connection]:
        """Get a database connection, translating driver errors to StoreUnavailableError.

        Changes are only persisted when the caller commits; anything left
        uncommitted is rolled back when the connection closes.
        """
        conn = None
        try:
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            logger.error(f"Database error during {operation}: {e}")
            raise StoreUnavailableError(operation, str(e)) from e
        finally:
            if conn:
                conn.close()
