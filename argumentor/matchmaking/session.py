"""Recurring, cancellable opponent search."""

import asyncio
import logging
import threading
from collections import OrderedDict
from collections.abc import Callable

from argumentor.debate_engine.exceptions import StoreUnavailableError
from .matchmaker import Matchmaker
from .models import MatchOutcome, MatchStatus

logger = logging.getLogger(__name__)

# Outcomes that end a session without further attempts
TERMINAL_STATUSES = {MatchStatus.MATCHED, MatchStatus.NO_STANCES_AVAILABLE}


class MatchmakingSession:
    """Calls Matchmaker.search on a fixed interval while searching.

    Attempts never overlap. stop() may be called from any thread; it prevents
    further attempts but lets one that is already running finish.
    """

    def __init__(
        self,
        matchmaker: Matchmaker,
        user_id: str,
        interval: float = 3.0,
        max_backoff: float = 30.0,
        on_finished: Callable[["MatchmakingSession"], None] | None = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.matchmaker = matchmaker
        self.user_id = user_id
        self.interval = interval
        self.max_backoff = max(max_backoff, interval)
        self.last_outcome: MatchOutcome | None = None
        self.attempts = 0
        self.on_finished = on_finished

        self._stopped = threading.Event()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._wakeup: asyncio.Event | None = None
        self._task: asyncio.Task | None = None
        self._done: asyncio.Future | None = None

    @property
    def started(self) -> bool:
        return self._task is not None

    @property
    def is_searching(self) -> bool:
        return self._task is not None and not self._task.done() and not self._stopped.is_set()

    def start(self) -> bool:
        """Begin searching on the running event loop. False if already started."""
        if self._task is not None:
            return False

        self._loop = asyncio.get_running_loop()
        self._wakeup = asyncio.Event()
        self._done = self._loop.create_future()
        self._task = self._loop.create_task(self._run())
        logger.info(f"Started matchmaking search for {self.user_id}")
        return True

    def stop(self) -> None:
        """Stop searching. Safe to call repeatedly and from other threads."""
        if self._stopped.is_set():
            return
        self._stopped.set()
        logger.info(f"Stopping matchmaking search for {self.user_id}")

        if self._loop is not None and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._wake)

    async def wait_for_match(self) -> MatchOutcome | None:
        """Wait until the session ends and return its final outcome.

        Returns None when the session was stopped before any attempt succeeded.
        """
        if self._done is None:
            raise RuntimeError("Session has not been started")
        return await asyncio.shield(self._done)

    def _wake(self) -> None:
        if self._wakeup is not None:
            self._wakeup.set()

    async def _run(self) -> None:
        delay = self.interval
        try:
            while not self._stopped.is_set():
                self.attempts += 1
                try:
                    outcome = await self.matchmaker.search(self.user_id)
                except StoreUnavailableError as e:
                    delay = min(delay * 2, self.max_backoff)
                    logger.error(
                        f"Search attempt {self.attempts} for {self.user_id} failed: {e}; "
                        f"retrying in {delay:.1f}s"
                    )
                else:
                    self.last_outcome = outcome
                    delay = self.interval
                    if outcome.status in TERMINAL_STATUSES:
                        logger.info(
                            f"Matchmaking for {self.user_id} finished: {outcome.status.value}"
                        )
                        break

                if self._stopped.is_set():
                    break
                try:
                    await asyncio.wait_for(self._wakeup.wait(), timeout=delay)
                except asyncio.TimeoutError:
                    pass
        except Exception as e:
            logger.error(f"Matchmaking session for {self.user_id} crashed: {e}")
            if not self._done.done():
                self._done.set_exception(e)
        finally:
            self._stopped.set()
            if not self._done.done():
                self._done.set_result(self._final_outcome())
            if self.on_finished is not None:
                self.on_finished(self)

    def _final_outcome(self) -> MatchOutcome | None:
        if self.last_outcome is not None and self.last_outcome.status in TERMINAL_STATUSES:
            return self.last_outcome
        return None


class MatchmakingService:
    """Keeps at most one matchmaking session per user.

    Running sessions live in `sessions`. Once a session ends it moves to a
    bounded history so its outcome can still be reported.
    """

    def __init__(
        self,
        matchmaker: Matchmaker,
        interval: float = 3.0,
        max_backoff: float = 30.0,
        history_size: int = 1024,
    ):
        self.matchmaker = matchmaker
        self.interval = interval
        self.max_backoff = max_backoff
        self.history_size = history_size
        self.sessions: dict[str, MatchmakingSession] = {}
        self.finished: OrderedDict[str, MatchmakingSession] = OrderedDict()

    def start_search(self, user_id: str) -> MatchmakingSession:
        """Start searching for the user, reusing a session that is still searching."""
        session = self.sessions.get(user_id)
        if session is not None and session.is_searching:
            return session

        session = MatchmakingSession(
            self.matchmaker,
            user_id,
            interval=self.interval,
            max_backoff=self.max_backoff,
            on_finished=self._session_finished,
        )
        self.sessions[user_id] = session
        session.start()
        return session

    def stop_search(self, user_id: str) -> bool:
        """Stop the user's search. False when no session is searching."""
        session = self.sessions.get(user_id)
        if session is None or not session.is_searching:
            return False
        session.stop()
        return True

    def get_session(self, user_id: str) -> MatchmakingSession | None:
        session = self.sessions.get(user_id)
        if session is None:
            session = self.finished.get(user_id)
        return session

    def _session_finished(self, session: MatchmakingSession) -> None:
        if self.sessions.get(session.user_id) is session:
            del self.sessions[session.user_id]
        self.finished[session.user_id] = session
        self.finished.move_to_end(session.user_id)
        while len(self.finished) > self.history_size:
            self.finished.popitem(last=False)

    async def stop_all(self) -> None:
        """Stop every session and wait for in-flight attempts to finish."""
        sessions = list(self.sessions.values())
        for session in sessions:
            session.stop()
        results = await asyncio.gather(
            *(s.wait_for_match() for s in sessions if s.started),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception):
                logger.error(f"Matchmaking session ended with error: {result}")
        logger.info(f"Stopped {len(sessions)} matchmaking sessions")
