"""SQLite-backed store for topics and user stances."""

import logging
import sqlite3
from datetime import datetime

from argumentor.debate_engine.exceptions import UnknownTopicError
from argumentor.debate_engine.models import Stance, Topic
from argumentor.debate_engine.types import StanceValue, parse_enum
from .database import DatabaseManager

logger = logging.getLogger(__name__)


class SQLiteStanceStore:
    """Stance Store backed by the shared SQLite database."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def add_topic(self, topic: Topic) -> None:
        """Insert a topic, ignoring names that already exist."""
        with self.db.get_connection("add_topic") as conn:
            conn.execute(
                "INSERT OR IGNORE INTO topics (topic_name, description) VALUES (?, ?)",
                (topic.topic_name, topic.description),
            )
            conn.commit()

    def get_topic(self, topic_name: str) -> Topic | None:
        with self.db.get_connection("get_topic") as conn:
            row = conn.execute(
                "SELECT * FROM topics WHERE topic_name = ?", (topic_name,)
            ).fetchone()
            if not row:
                return None
            return Topic(topic_name=row["topic_name"], description=row["description"])

    def list_topics(self) -> list[Topic]:
        with self.db.get_connection("list_topics") as conn:
            rows = conn.execute("SELECT * FROM topics ORDER BY topic_name").fetchall()
            return [
                Topic(topic_name=row["topic_name"], description=row["description"])
                for row in rows
            ]

    def get_stance(self, user_id: str, topic_name: str) -> Stance | None:
        with self.db.get_connection("get_stance") as conn:
            row = conn.execute(
                "SELECT * FROM user_stances WHERE user_id = ? AND topic_name = ?",
                (user_id, topic_name),
            ).fetchone()
            return self._row_to_stance(row) if row else None

    def list_stances(self, user_id: str) -> list[Stance]:
        """All stances of a user, in the order they were first declared."""
        with self.db.get_connection("list_stances") as conn:
            rows = conn.execute(
                "SELECT * FROM user_stances WHERE user_id = ? ORDER BY rowid",
                (user_id,),
            ).fetchall()
            return [self._row_to_stance(row) for row in rows]

    def list_stances_on_topic(self, topic_name: str) -> list[Stance]:
        """All stances on a topic, oldest declaration first."""
        with self.db.get_connection("list_stances_on_topic") as conn:
            rows = conn.execute(
                """
                SELECT * FROM user_stances
                WHERE topic_name = ?
                ORDER BY updated_at, user_id
                """,
                (topic_name,),
            ).fetchall()
            return [self._row_to_stance(row) for row in rows]

    def upsert_stance(self, stance: Stance) -> None:
        """Insert or replace the stance for (user_id, topic_name)."""
        with self.db.get_connection("upsert_stance") as conn:
            try:
                conn.execute(
                    """
                    INSERT INTO user_stances (user_id, topic_name, stance, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(user_id, topic_name) DO UPDATE SET
                        stance = excluded.stance,
                        updated_at = excluded.updated_at
                    """,
                    (
                        stance.user_id,
                        stance.topic_name,
                        stance.stance.value,
                        stance.updated_at.isoformat(),
                    ),
                )
            except sqlite3.IntegrityError as e:
                raise UnknownTopicError(stance.topic_name) from e
            conn.commit()
            logger.debug(
                f"Stored stance {stance.stance.value} for {stance.user_id} on {stance.topic_name}"
            )

    def _row_to_stance(self, row: sqlite3.Row) -> Stance:
        return Stance(
            user_id=row["user_id"],
            topic_name=row["topic_name"],
            stance=parse_enum(StanceValue, row["stance"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
