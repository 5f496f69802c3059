"""Opponent search over declared stances."""

import json
import logging

from argumentor.debate_engine.exceptions import NotificationFailedError
from argumentor.debate_engine.models import Stance
from argumentor.debate_engine.ports import DebateStore, StanceStore
from argumentor.debate_engine.types import (
    Position,
    StanceValue,
    opposite_stance,
    position_for_stance,
)
from argumentor.notifications.base import DebateNotification, Notifier
from .models import MatchOutcome, MatchStatus

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "matchmaking"


def make_pair_key(user_a: str, user_b: str, topic_name: str) -> str:
    """Key identifying an unordered pair of users on a topic.

    JSON encoding keeps the key unambiguous for ids containing any separator.
    """
    first, second = sorted((user_a, user_b))
    return json.dumps([topic_name, first, second])


class Matchmaker:
    """Pairs a user with someone holding the opposite stance on a shared topic."""

    def __init__(
        self,
        stance_store: StanceStore,
        debate_store: DebateStore,
        notifier: Notifier,
        category: str = DEFAULT_CATEGORY,
    ):
        self.stance_store = stance_store
        self.debate_store = debate_store
        self.notifier = notifier
        self.category = category

    async def search(self, user_id: str) -> MatchOutcome:
        """Run one search attempt for the user.

        Stances are tried in the order the user declared them and the first
        compatible opponent wins. StoreUnavailableError propagates to the caller.
        """
        stances = [
            s for s in self.stance_store.list_stances(user_id)
            if s.stance != StanceValue.NEUTRAL
        ]
        if not stances:
            logger.debug(f"User {user_id} has no non-neutral stances")
            return MatchOutcome(status=MatchStatus.NO_STANCES_AVAILABLE)

        for stance in stances:
            opponent = self._find_opponent(stance)
            if opponent is None:
                continue
            return await self._create_match(stance, opponent.user_id)

        logger.debug(f"No opponent found for {user_id} across {len(stances)} stances")
        return MatchOutcome(status=MatchStatus.NO_MATCH_FOUND)

    def _find_opponent(self, stance: Stance) -> Stance | None:
        wanted = opposite_stance(stance.stance)
        for candidate in self.stance_store.list_stances_on_topic(stance.topic_name):
            if candidate.user_id != stance.user_id and candidate.stance == wanted:
                return candidate
        return None

    async def _create_match(self, stance: Stance, opponent_user_id: str) -> MatchOutcome:
        user_id = stance.user_id
        if position_for_stance(stance.stance) == Position.FAVOR:
            favor_user_id, contra_user_id = user_id, opponent_user_id
        else:
            favor_user_id, contra_user_id = opponent_user_id, user_id

        topic = self.stance_store.get_topic(stance.topic_name)
        debate, created = self.debate_store.create_debate_for_pair(
            pair_key=make_pair_key(user_id, opponent_user_id, stance.topic_name),
            title=stance.topic_name,
            participant_favor_user_id=favor_user_id,
            participant_contra_user_id=contra_user_id,
            description=topic.description if topic else "",
            author_user_id=user_id,
            category=self.category,
        )

        if created:
            logger.info(
                f"Matched {user_id} with {opponent_user_id} on '{stance.topic_name}' "
                f"(debate {debate.debate_id})"
            )
            await self._notify_opponent(opponent_user_id, debate.debate_id, stance.topic_name)
        else:
            logger.info(
                f"{user_id} joined existing debate {debate.debate_id} with {opponent_user_id}"
            )

        return MatchOutcome(
            status=MatchStatus.MATCHED,
            debate_id=debate.debate_id,
            opponent_user_id=opponent_user_id,
            topic_name=stance.topic_name,
            created=created,
        )

    async def _notify_opponent(self, opponent_user_id: str, debate_id: str, topic_name: str) -> None:
        notification = DebateNotification(debate_id=debate_id, topic_name=topic_name)
        try:
            await self.notifier.notify(opponent_user_id, notification)
        except NotificationFailedError as e:
            logger.warning(f"Failed to notify {opponent_user_id} about {debate_id}: {e}")
        except Exception as e:
            # The debate already exists, so a broken notifier must not undo the match
            logger.warning(
                f"Notifier error for {opponent_user_id} about {debate_id}: {e}", exc_info=True
            )
