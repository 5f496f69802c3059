"""Tests for opponent matching and recurring search sessions."""

import asyncio
import threading

from argumentor.debate_engine.exceptions import StoreUnavailableError
from argumentor.debate_engine.types import DebateStatus, StanceValue
from argumentor.matchmaking import (
    Matchmaker,
    MatchmakingService,
    MatchmakingSession,
    MatchOutcome,
    MatchStatus,
    make_pair_key,
)

FAVOR = StanceValue.FAVOR
AGAINST = StanceValue.AGAINST
NEUTRAL = StanceValue.NEUTRAL


class ExplodingNotifier:
    """Notifier with a bug: it raises something other than NotificationFailedError."""

    def __init__(self):
        self.attempts = 0

    async def notify(self, target_user_id, notification) -> None:
        self.attempts += 1
        raise RuntimeError("notifier bug")


class ScriptedMatchmaker:
    """Stand-in matchmaker that replays a list of outcomes or errors."""

    def __init__(self, *script):
        self.script = list(script)
        self.calls = 0

    async def search(self, user_id: str) -> MatchOutcome:
        self.calls += 1
        item = self.script.pop(0) if self.script else MatchOutcome(status=MatchStatus.NO_MATCH_FOUND)
        if isinstance(item, Exception):
            raise item
        return item


def test_opposite_stances_create_debate(matchmaker, debate_store, notifier, declare) -> None:
    """Opposite stances on a shared topic produce a PENDING debate and a notification."""
    declare("alice", "AI ethics", FAVOR)
    declare("bob", "AI ethics", AGAINST)

    outcome = asyncio.run(matchmaker.search("alice"))

    assert outcome.status == MatchStatus.MATCHED
    assert outcome.created
    assert outcome.opponent_user_id == "bob"
    assert outcome.topic_name == "AI ethics"

    debate = debate_store.get_debate(outcome.debate_id)
    assert debate.participant_favor_user_id == "alice"
    assert debate.participant_contra_user_id == "bob"
    assert debate.status == DebateStatus.PENDING
    assert debate.category == "matchmaking"
    assert debate.title == "AI ethics"
    assert debate.description == "About AI ethics"
    assert debate.author_user_id == "alice"

    assert len(notifier.sent) == 1
    target, notification = notifier.sent[0]
    assert target == "bob"
    assert notification.type == "new_debate"
    assert notification.debate_id == outcome.debate_id
    assert notification.topic_name == "AI ethics"


def test_positions_follow_searching_user_stance(matchmaker, debate_store, declare) -> None:
    """A searcher who is against the topic argues contra."""
    declare("alice", "marijuana", AGAINST)
    declare("bob", "marijuana", FAVOR)

    outcome = asyncio.run(matchmaker.search("alice"))
    debate = debate_store.get_debate(outcome.debate_id)

    assert debate.participant_favor_user_id == "bob"
    assert debate.participant_contra_user_id == "alice"


def test_no_stances_available(matchmaker, declare) -> None:
    """Users with only neutral stances, or none, have nothing to match on."""
    declare("alice", "abortion", NEUTRAL)

    assert asyncio.run(matchmaker.search("alice")).status == MatchStatus.NO_STANCES_AVAILABLE
    assert asyncio.run(matchmaker.search("nobody")).status == MatchStatus.NO_STANCES_AVAILABLE


def test_same_stance_never_matched(matchmaker, notifier, declare) -> None:
    """Agreeing users are not paired."""
    declare("alice", "abortion", FAVOR)
    declare("bob", "abortion", FAVOR)
    declare("carol", "abortion", NEUTRAL)

    outcome = asyncio.run(matchmaker.search("alice"))

    assert outcome.status == MatchStatus.NO_MATCH_FOUND
    assert notifier.sent == []


def test_never_matched_with_self(matchmaker, stance_store, declare) -> None:
    """A user's own stance is never a candidate opponent."""
    declare("alice", "abortion", FAVOR)
    declare("alice", "open_borders", AGAINST)

    assert asyncio.run(matchmaker.search("alice")).status == MatchStatus.NO_MATCH_FOUND


def test_first_declared_stance_wins(matchmaker, declare) -> None:
    """Stances are tried in declaration order and the first opponent found is used."""
    declare("alice", "climate_change", FAVOR)
    declare("alice", "social_media", AGAINST)
    declare("bob", "social_media", FAVOR)
    declare("carol", "climate_change", AGAINST)

    outcome = asyncio.run(matchmaker.search("alice"))

    assert outcome.topic_name == "climate_change"
    assert outcome.opponent_user_id == "carol"


def test_notification_failure_does_not_fail_match(
    stance_store, debate_store, failing_notifier, declare
) -> None:
    """Delivery errors are logged and swallowed."""
    matchmaker = Matchmaker(stance_store, debate_store, failing_notifier)
    declare("alice", "AI ethics", FAVOR)
    declare("bob", "AI ethics", AGAINST)

    outcome = asyncio.run(matchmaker.search("alice"))

    assert outcome.status == MatchStatus.MATCHED
    assert failing_notifier.attempts == 1
    assert debate_store.get_debate(outcome.debate_id) is not None


def test_unexpected_notifier_error_does_not_fail_match(stance_store, debate_store, declare) -> None:
    """Any notifier exception is logged and the debate is still reported."""
    notifier = ExplodingNotifier()
    matchmaker = Matchmaker(stance_store, debate_store, notifier)
    declare("alice", "AI ethics", FAVOR)
    declare("bob", "AI ethics", AGAINST)

    outcome = asyncio.run(matchmaker.search("alice"))

    assert outcome.status == MatchStatus.MATCHED
    assert outcome.created
    assert notifier.attempts == 1
    assert debate_store.get_debate(outcome.debate_id).participant_contra_user_id == "bob"


def test_simultaneous_searches_share_one_debate(matchmaker, debate_store, notifier, declare) -> None:
    """Both sides searching at once end up in the same debate."""
    declare("alice", "AI ethics", FAVOR)
    declare("bob", "AI ethics", AGAINST)

    async def both():
        return await asyncio.gather(matchmaker.search("alice"), matchmaker.search("bob"))

    first, second = asyncio.run(both())

    assert first.debate_id == second.debate_id
    assert [first.created, second.created].count(True) == 1
    assert len(debate_store.list_debates()) == 1
    assert len(notifier.sent) == 1


def test_pair_key_is_order_independent() -> None:
    """The pair key does not depend on who searched."""
    assert make_pair_key("alice", "bob", "t") == make_pair_key("bob", "alice", "t")
    assert make_pair_key("alice", "bob", "t") != make_pair_key("alice", "bob", "u")
    assert make_pair_key("a|b", "c", "t") != make_pair_key("a", "b|c", "t")


def test_session_stops_after_match(matchmaker, declare) -> None:
    """A session ends on its own once a debate is created."""
    declare("alice", "AI ethics", FAVOR)
    declare("bob", "AI ethics", AGAINST)

    async def run():
        session = MatchmakingSession(matchmaker, "alice", interval=0.01)
        assert session.start()
        outcome = await asyncio.wait_for(session.wait_for_match(), timeout=5)
        return session, outcome

    session, outcome = asyncio.run(run())

    assert outcome.status == MatchStatus.MATCHED
    assert not session.is_searching
    assert session.attempts == 1


def test_session_stops_without_stances() -> None:
    """NO_STANCES_AVAILABLE ends the session instead of retrying."""
    fake = ScriptedMatchmaker(MatchOutcome(status=MatchStatus.NO_STANCES_AVAILABLE))

    async def run():
        session = MatchmakingSession(fake, "alice", interval=0.01)
        session.start()
        return await asyncio.wait_for(session.wait_for_match(), timeout=5)

    outcome = asyncio.run(run())

    assert outcome.status == MatchStatus.NO_STANCES_AVAILABLE
    assert fake.calls == 1


def test_session_retries_until_stopped() -> None:
    """NO_MATCH_FOUND keeps searching; stop is idempotent and ends the session."""
    fake = ScriptedMatchmaker()

    async def run():
        session = MatchmakingSession(fake, "alice", interval=0.01)
        session.start()
        assert not session.start()
        await asyncio.sleep(0.05)
        assert session.is_searching
        session.stop()
        session.stop()
        result = await asyncio.wait_for(session.wait_for_match(), timeout=5)
        return session, result

    session, result = asyncio.run(run())

    assert result is None
    assert not session.is_searching
    assert fake.calls >= 2
    assert session.last_outcome.status == MatchStatus.NO_MATCH_FOUND


def test_session_stop_from_another_thread() -> None:
    """stop() may be called from a thread other than the event loop's."""
    fake = ScriptedMatchmaker()

    async def run():
        session = MatchmakingSession(fake, "alice", interval=10.0, max_backoff=10.0)
        session.start()
        await asyncio.sleep(0.01)
        stopper = threading.Thread(target=session.stop)
        stopper.start()
        result = await asyncio.wait_for(session.wait_for_match(), timeout=5)
        stopper.join()
        return session, result

    session, result = asyncio.run(run())

    assert result is None
    assert not session.is_searching
    assert fake.calls == 1


def test_session_backs_off_on_store_errors() -> None:
    """Store failures are retried and a later success still ends the session."""
    matched = MatchOutcome(status=MatchStatus.MATCHED, debate_id="debate_1")
    fake = ScriptedMatchmaker(
        StoreUnavailableError("list_stances", "disk I/O error"),
        StoreUnavailableError("list_stances", "disk I/O error"),
        matched,
    )

    async def run():
        session = MatchmakingSession(fake, "alice", interval=0.01, max_backoff=0.04)
        session.start()
        return await asyncio.wait_for(session.wait_for_match(), timeout=5)

    outcome = asyncio.run(run())

    assert outcome == matched
    assert fake.calls == 3


def test_service_keeps_one_session_per_user() -> None:
    """Starting twice reuses the running session; stop_all ends everything."""
    fake = ScriptedMatchmaker()

    async def run():
        service = MatchmakingService(fake, interval=0.01, max_backoff=0.01)
        first = service.start_search("alice")
        second = service.start_search("alice")
        other = service.start_search("bob")
        assert first is second
        assert other is not first
        assert service.get_session("alice") is first
        assert not service.stop_search("carol")
        assert service.stop_search("alice")
        assert not service.stop_search("alice")
        await service.stop_all()
        return first, other

    first, other = asyncio.run(run())

    assert not first.is_searching
    assert not other.is_searching


def test_service_moves_finished_sessions_to_history() -> None:
    """Ended sessions leave the live map and only the newest few are remembered."""
    no_stances = MatchOutcome(status=MatchStatus.NO_STANCES_AVAILABLE)

    async def run():
        service = MatchmakingService(
            ScriptedMatchmaker(no_stances, no_stances), interval=0.01, history_size=1
        )
        alice = service.start_search("alice")
        await asyncio.wait_for(alice.wait_for_match(), timeout=5)
        assert service.sessions == {}
        assert service.get_session("alice") is alice

        bob = service.start_search("bob")
        await asyncio.wait_for(bob.wait_for_match(), timeout=5)
        return service, bob

    service, bob = asyncio.run(run())

    assert service.sessions == {}
    assert service.get_session("alice") is None
    assert service.get_session("bob") is bob
    assert service.get_session("bob").last_outcome.status == MatchStatus.NO_STANCES_AVAILABLE


def test_stopped_sessions_leave_live_map() -> None:
    """stop_all empties the live session map once every loop has exited."""

    async def run():
        service = MatchmakingService(ScriptedMatchmaker(), interval=0.01, max_backoff=0.01)
        service.start_search("alice")
        service.start_search("bob")
        await service.stop_all()
        return service

    service = asyncio.run(run())

    assert service.sessions == {}
    assert not service.get_session("alice").is_searching
