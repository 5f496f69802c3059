"""Store contracts the debate core depends on."""

from typing import Protocol

from .models import Argument, Debate, Stance, Topic
from .types import DebateStage, DebateStatus, Position


class StanceStore(Protocol):
    """Read/write access to declared stances and the topic catalogue."""

    def get_topic(self, topic_name: str) -> Topic | None: ...

    def list_topics(self) -> list[Topic]: ...

    def get_stance(self, user_id: str, topic_name: str) -> Stance | None: ...

    def list_stances(self, user_id: str) -> list[Stance]: ...

    def list_stances_on_topic(self, topic_name: str) -> list[Stance]: ...

    def upsert_stance(self, stance: Stance) -> None: ...


class DebateStore(Protocol):
    """Read/write access to debates and their arguments."""

    def create_debate(
        self,
        title: str,
        participant_favor_user_id: str,
        participant_contra_user_id: str,
        description: str = "",
        author_user_id: str | None = None,
        category: str | None = None,
        pair_key: str | None = None,
    ) -> str: ...

    def create_debate_for_pair(
        self,
        pair_key: str,
        title: str,
        participant_favor_user_id: str,
        participant_contra_user_id: str,
        description: str = "",
        author_user_id: str | None = None,
        category: str | None = None,
    ) -> tuple[Debate, bool]: ...

    def get_debate(self, debate_id: str) -> Debate | None: ...

    def update_debate(self, debate: Debate) -> bool: ...

    def compare_and_set_status(self, debate_id: str, new_status: DebateStatus) -> bool: ...

    def delete_debate(self, debate_id: str) -> bool: ...

    def list_debates(
        self, category: str | None = None, query: str | None = None
    ) -> list[Debate]: ...

    def list_debates_for_user(self, user_id: str) -> list[Debate]: ...

    def insert_argument(
        self, argument: Argument, new_status: DebateStatus | None = None
    ) -> Argument: ...

    def list_arguments_for_debate(self, debate_id: str) -> list[Argument]: ...

    def list_arguments_for_stage(self, debate_id: str, stage: DebateStage) -> list[Argument]: ...

    def get_argument(
        self, debate_id: str, stage: DebateStage, position: Position
    ) -> Argument | None: ...
