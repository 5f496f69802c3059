"""Pytest configuration and shared fixtures.

Every test gets its own SQLite file under pytest's tmp_path, so stores,
engine and matchmaker fixtures never share state between tests.
"""

import pytest

from argumentor.database import DatabaseManager, SQLiteDebateStore, SQLiteStanceStore
from argumentor.debate_engine import DebateEngine
from argumentor.debate_engine.exceptions import NotificationFailedError
from argumentor.debate_engine.models import Stance, Topic
from argumentor.debate_engine.types import StanceValue
from argumentor.matchmaking import Matchmaker
from argumentor.notifications.base import DebateNotification


# =============================================================================
# FAKE COLLABORATORS
# =============================================================================


class RecordingNotifier:
    """Notifier that remembers what it was asked to deliver."""

    def __init__(self):
        self.sent: list[tuple[str, DebateNotification]] = []

    async def notify(self, target_user_id: str, notification: DebateNotification) -> None:
        self.sent.append((target_user_id, notification))


class FailingNotifier:
    """Notifier whose delivery always fails."""

    def __init__(self):
        self.attempts = 0

    async def notify(self, target_user_id: str, notification: DebateNotification) -> None:
        self.attempts += 1
        raise NotificationFailedError(f"cannot reach {target_user_id}")


# =============================================================================
# SHARED FIXTURES - Available to all test modules
# =============================================================================


@pytest.fixture
def db(tmp_path) -> DatabaseManager:
    """Fresh database with the default topic catalogue."""
    return DatabaseManager(tmp_path / "argumentor.db")


@pytest.fixture
def stance_store(db: DatabaseManager) -> SQLiteStanceStore:
    return SQLiteStanceStore(db)


@pytest.fixture
def debate_store(db: DatabaseManager) -> SQLiteDebateStore:
    return SQLiteDebateStore(db)


@pytest.fixture
def engine(debate_store: SQLiteDebateStore) -> DebateEngine:
    return DebateEngine(debate_store)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def failing_notifier() -> FailingNotifier:
    return FailingNotifier()


@pytest.fixture
def matchmaker(
    stance_store: SQLiteStanceStore,
    debate_store: SQLiteDebateStore,
    notifier: RecordingNotifier,
) -> Matchmaker:
    return Matchmaker(stance_store, debate_store, notifier)


@pytest.fixture
def debate_id(debate_store: SQLiteDebateStore) -> str:
    """A PENDING debate between alice (favor) and bob (contra)."""
    return debate_store.create_debate(
        title="nuclear_energy",
        participant_favor_user_id="alice",
        participant_contra_user_id="bob",
        category="matchmaking",
    )


@pytest.fixture
def declare(stance_store: SQLiteStanceStore):
    """Helper that records a stance, creating the topic when needed."""

    def _declare(user_id: str, topic_name: str, value: StanceValue) -> Stance:
        stance_store.add_topic(Topic(topic_name=topic_name, description=f"About {topic_name}"))
        stance = Stance(user_id=user_id, topic_name=topic_name, stance=value)
        stance_store.upsert_stance(stance)
        return stance

    return _declare


# =============================================================================
# PYTEST CONFIGURATION HOOKS
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
