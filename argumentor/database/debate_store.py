"""SQLite-backed store for debates and their arguments."""

import logging
import sqlite3
import uuid
from datetime import datetime
from typing import Any

from argumentor.debate_engine.exceptions import (
    DebateNotFoundError,
    SlotAlreadyFilledError,
    StoreUnavailableError,
)
from argumentor.debate_engine.models import Argument, Debate
from argumentor.debate_engine.types import (
    DebateStage,
    DebateStatus,
    Position,
    parse_enum,
)
from .database import DatabaseManager

logger = logging.getLogger(__name__)


def generate_debate_id() -> str:
    return f"debate_{uuid.uuid4().hex[:8]}"


def _statuses_below(status: DebateStatus, inclusive: bool = False) -> list[str]:
    limit = status.rank + (1 if inclusive else 0)
    return [s.value for s in DebateStatus if s.rank < limit]


class SQLiteDebateStore:
    """Debate Store backed by the shared SQLite database."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def create_debate(
        self,
        title: str,
        participant_favor_user_id: str,
        participant_contra_user_id: str,
        description: str = "",
        author_user_id: str | None = None,
        category: str | None = None,
        pair_key: str | None = None,
    ) -> str:
        """Create a PENDING debate and return its id."""
        debate = Debate(
            debate_id=generate_debate_id(),
            title=title,
            description=description,
            author_user_id=author_user_id,
            participant_favor_user_id=participant_favor_user_id,
            participant_contra_user_id=participant_contra_user_id,
            status=DebateStatus.PENDING,
            category=category,
            pair_key=pair_key,
        )
        with self.db.get_connection("create_debate") as conn:
            self._insert_debate(conn, debate)
            conn.commit()
        logger.info(f"Created debate {debate.debate_id}: {title}")
        return debate.debate_id

    def create_debate_for_pair(
        self,
        pair_key: str,
        title: str,
        participant_favor_user_id: str,
        participant_contra_user_id: str,
        description: str = "",
        author_user_id: str | None = None,
        category: str | None = None,
    ) -> tuple[Debate, bool]:
        """Create a debate unless the pair already has an open one.

        Returns the debate and whether it was created by this call. The
        partial unique index on pair_key makes the check-and-insert atomic.
        """
        for _ in range(2):
            debate = Debate(
                debate_id=generate_debate_id(),
                title=title,
                description=description,
                author_user_id=author_user_id,
                participant_favor_user_id=participant_favor_user_id,
                participant_contra_user_id=participant_contra_user_id,
                status=DebateStatus.PENDING,
                category=category,
                pair_key=pair_key,
            )
            with self.db.get_connection("create_debate_for_pair") as conn:
                try:
                    self._insert_debate(conn, debate)
                    conn.commit()
                    logger.info(f"Created debate {debate.debate_id} for pair {pair_key}")
                    return debate, True
                except sqlite3.IntegrityError:
                    row = conn.execute(
                        """
                        SELECT * FROM debates
                        WHERE pair_key = ? AND status != ?
                        """,
                        (pair_key, DebateStatus.FINISHED.value),
                    ).fetchone()
                    if row:
                        existing = self._row_to_debate(row)
                        logger.info(
                            f"Pair {pair_key} already has open debate {existing.debate_id}"
                        )
                        return existing, False
            # The conflicting debate finished in between; try once more

        raise StoreUnavailableError("create_debate_for_pair", f"conflict on {pair_key}")

    def get_debate(self, debate_id: str) -> Debate | None:
        with self.db.get_connection("get_debate") as conn:
            row = conn.execute(
                "SELECT * FROM debates WHERE debate_id = ?", (debate_id,)
            ).fetchone()
            return self._row_to_debate(row) if row else None

    def update_debate(self, debate: Debate) -> bool:
        """Write a debate's mutable fields. Refuses to move status backwards."""
        allowed = _statuses_below(debate.status, inclusive=True)
        placeholders = ", ".join("?" for _ in allowed)
        with self.db.get_connection("update_debate") as conn:
            cursor = conn.execute(
                f"""
                UPDATE debates
                SET title = ?, description = ?, author_user_id = ?,
                    participant_favor_user_id = ?, participant_contra_user_id = ?,
                    status = ?, category = ?
                WHERE debate_id = ? AND status IN ({placeholders})
                """,
                (
                    debate.title,
                    debate.description,
                    debate.author_user_id,
                    debate.participant_favor_user_id,
                    debate.participant_contra_user_id,
                    debate.status.value,
                    debate.category,
                    debate.debate_id,
                    *allowed,
                ),
            )
            updated = cursor.rowcount > 0
            conn.commit()
            return updated

    def compare_and_set_status(self, debate_id: str, new_status: DebateStatus) -> bool:
        """Set status only if the stored status ranks strictly lower."""
        with self.db.get_connection("compare_and_set_status") as conn:
            updated = self._advance_status(conn, debate_id, new_status)
            conn.commit()
        return updated

    def delete_debate(self, debate_id: str) -> bool:
        """Delete a debate together with its arguments."""
        with self.db.get_connection("delete_debate") as conn:
            cursor = conn.execute("DELETE FROM debates WHERE debate_id = ?", (debate_id,))
            deleted = cursor.rowcount > 0
            conn.commit()

        if deleted:
            logger.info(f"Deleted debate {debate_id}")
        return deleted

    def list_debates(
        self, category: str | None = None, query: str | None = None
    ) -> list[Debate]:
        """Debates newest first, optionally filtered by category and title/description text."""
        sql = "SELECT * FROM debates"
        clauses: list[str] = []
        params: list[Any] = []

        if category is not None:
            clauses.append("category = ?")
            params.append(category)

        if query:
            clauses.append("(title LIKE ? OR description LIKE ?)")
            pattern = f"%{query}%"
            params.extend([pattern, pattern])

        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY created_at DESC"

        with self.db.get_connection("list_debates") as conn:
            rows = conn.execute(sql, params).fetchall()
            return [self._row_to_debate(row) for row in rows]

    def list_debates_for_user(self, user_id: str) -> list[Debate]:
        """Debates where the user argues either side, newest first."""
        with self.db.get_connection("list_debates_for_user") as conn:
            rows = conn.execute(
                """
                SELECT * FROM debates
                WHERE participant_favor_user_id = ? OR participant_contra_user_id = ?
                ORDER BY created_at DESC
                """,
                (user_id, user_id),
            ).fetchall()
            return [self._row_to_debate(row) for row in rows]

    def insert_argument(
        self, argument: Argument, new_status: DebateStatus | None = None
    ) -> Argument:
        """Store an argument and return it with its generated id.

        When `new_status` is given the debate status is advanced in the same
        transaction, so the argument and the status change commit together.
        """
        with self.db.get_connection("insert_argument") as conn:
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO arguments (
                        debate_id, user_id, stage, position, content, timestamp
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        argument.debate_id,
                        argument.user_id,
                        argument.stage.value,
                        argument.position.value,
                        argument.content,
                        argument.timestamp.isoformat(),
                    ),
                )
            except sqlite3.IntegrityError as e:
                if "FOREIGN KEY" in str(e):
                    raise DebateNotFoundError(argument.debate_id) from e
                raise SlotAlreadyFilledError(
                    argument.debate_id, argument.stage.value, argument.position.value
                ) from e
            if new_status is not None:
                self._advance_status(conn, argument.debate_id, new_status)
            conn.commit()
            return argument.model_copy(update={"argument_id": cursor.lastrowid})

    def list_arguments_for_debate(self, debate_id: str) -> list[Argument]:
        with self.db.get_connection("list_arguments_for_debate") as conn:
            rows = conn.execute(
                """
                SELECT * FROM arguments WHERE debate_id = ?
                ORDER BY timestamp, argument_id
                """,
                (debate_id,),
            ).fetchall()
            return [self._row_to_argument(row) for row in rows]

    def list_arguments_for_stage(self, debate_id: str, stage: DebateStage) -> list[Argument]:
        with self.db.get_connection("list_arguments_for_stage") as conn:
            rows = conn.execute(
                """
                SELECT * FROM arguments WHERE debate_id = ? AND stage = ?
                ORDER BY timestamp, argument_id
                """,
                (debate_id, stage.value),
            ).fetchall()
            return [self._row_to_argument(row) for row in rows]

    def get_argument(
        self, debate_id: str, stage: DebateStage, position: Position
    ) -> Argument | None:
        with self.db.get_connection("get_argument") as conn:
            row = conn.execute(
                """
                SELECT * FROM arguments
                WHERE debate_id = ? AND stage = ? AND position = ?
                """,
                (debate_id, stage.value, position.value),
            ).fetchone()
            return self._row_to_argument(row) if row else None

    def get_last_argument(self, debate_id: str) -> Argument | None:
        with self.db.get_connection("get_last_argument") as conn:
            row = conn.execute(
                """
                SELECT * FROM arguments WHERE debate_id = ?
                ORDER BY timestamp DESC, argument_id DESC LIMIT 1
                """,
                (debate_id,),
            ).fetchone()
            return self._row_to_argument(row) if row else None

    def _advance_status(
        self, conn: sqlite3.Connection, debate_id: str, new_status: DebateStatus
    ) -> bool:
        lower = _statuses_below(new_status)
        if not lower:
            return False
        placeholders = ", ".join("?" for _ in lower)
        cursor = conn.execute(
            f"""
            UPDATE debates SET status = ?
            WHERE debate_id = ? AND status IN ({placeholders})
            """,
            (new_status.value, debate_id, *lower),
        )
        if cursor.rowcount > 0:
            logger.info(f"Debate {debate_id} status -> {new_status.value}")
            return True
        return False

    def _insert_debate(self, conn: sqlite3.Connection, debate: Debate) -> None:
        conn.execute(
            """
            INSERT INTO debates (
                debate_id, title, description, author_user_id,
                participant_favor_user_id, participant_contra_user_id,
                status, category, created_at, pair_key
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                debate.debate_id,
                debate.title,
                debate.description,
                debate.author_user_id,
                debate.participant_favor_user_id,
                debate.participant_contra_user_id,
                debate.status.value,
                debate.category,
                debate.created_at.isoformat(),
                debate.pair_key,
            ),
        )

    def _row_to_debate(self, row: sqlite3.Row) -> Debate:
        return Debate(
            debate_id=row["debate_id"],
            title=row["title"],
            description=row["description"],
            author_user_id=row["author_user_id"],
            participant_favor_user_id=row["participant_favor_user_id"],
            participant_contra_user_id=row["participant_contra_user_id"],
            status=parse_enum(DebateStatus, row["status"]),
            category=row["category"],
            created_at=datetime.fromisoformat(row["created_at"]),
            pair_key=row["pair_key"],
        )

    def _row_to_argument(self, row: sqlite3.Row) -> Argument:
        return Argument(
            argument_id=row["argument_id"],
            debate_id=row["debate_id"],
            user_id=row["user_id"],
            stage=parse_enum(DebateStage, row["stage"]),
            position=parse_enum(Position, row["position"]),
            content=row["content"],
            timestamp=datetime.fromisoformat(row["timestamp"]),
        )
