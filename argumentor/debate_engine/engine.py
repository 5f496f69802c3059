"""Stage state machine for structured two-participant debates."""

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

from .exceptions import DebateNotFoundError, SlotAlreadyFilledError
from .models import (
    Argument,
    Debate,
    DebateState,
    SubmissionRejection,
    SubmissionResult,
)
from .ports import DebateStore
from .stages import get_stage_to_refute
from .transcript import build_transcript
from .types import STAGE_ORDER, STATUS_AFTER_STAGE, DebateStage, DebateStatus, Position

logger = logging.getLogger(__name__)

StageEntries = dict[DebateStage, dict[Position, Argument]]


def organize_entries(arguments: list[Argument]) -> StageEntries:
    """Index arguments by stage and position."""
    entries: StageEntries = {stage: {} for stage in STAGE_ORDER}
    for argument in arguments:
        entries[argument.stage][argument.position] = argument
    return entries


def compute_current_stage(entries: StageEntries) -> DebateStage | None:
    """First stage missing either position, or None when all are complete."""
    for stage in STAGE_ORDER:
        if len(entries[stage]) < len(Position):
            return stage
    return None


def expected_status(entries: StageEntries) -> DebateStatus:
    """Status implied by the stored arguments alone."""
    status = DebateStatus.ACTIVE if any(entries.values()) else DebateStatus.PENDING
    for stage in STAGE_ORDER:
        if len(entries[stage]) < len(Position):
            break
        status = STATUS_AFTER_STAGE[stage]
    return status


class DebateEngine:
    """Computes debate progression from stored arguments and accepts submissions.

    Submissions for one debate are serialized with a per-debate lock; status
    writes go through the store's compare-and-set so that concurrent writers
    cannot move a debate backwards or advance it twice.
    """

    def __init__(self, debate_store: DebateStore, poll_interval: float = 1.0):
        self.store = debate_store
        self.poll_interval = poll_interval
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, debate_id: str) -> asyncio.Lock:
        return self._locks.setdefault(debate_id, asyncio.Lock())

    def _release_lock(self, debate_id: str) -> None:
        # Finished debates accept no more writes
        self._locks.pop(debate_id, None)

    def _require_debate(self, debate_id: str) -> Debate:
        debate = self.store.get_debate(debate_id)
        if debate is None:
            raise DebateNotFoundError(debate_id)
        return debate

    def _reconcile_status(self, state: DebateState) -> None:
        """Bring a lagging stored status up to what the arguments imply."""
        target = expected_status(state.entries)
        debate = state.debate
        if target.rank > debate.status.rank and self.store.compare_and_set_status(
            debate.debate_id, target
        ):
            logger.warning(
                f"Debate {debate.debate_id} status lagged its arguments, "
                f"moved {debate.status.value} -> {target.value}"
            )

    async def is_phase_complete(self, debate_id: str, stage: DebateStage) -> bool:
        """True iff both a FAVOR and an AGAINST argument exist for the stage."""
        arguments = self.store.list_arguments_for_stage(debate_id, stage)
        return {arg.position for arg in arguments} == set(Position)

    async def advance_if_complete(self, debate_id: str, current_stage: DebateStage) -> bool:
        """Advance the stored status past `current_stage` if both entries exist.

        Returns True when the stage is complete and the debate status is at
        or beyond the stage's successor. Safe to call repeatedly.
        """
        async with self._lock_for(debate_id):
            advanced = await self._advance_if_complete(debate_id, current_stage)
        if advanced and current_stage is STAGE_ORDER[-1]:
            self._release_lock(debate_id)
        return advanced

    async def _advance_if_complete(self, debate_id: str, current_stage: DebateStage) -> bool:
        if not await self.is_phase_complete(debate_id, current_stage):
            return False

        next_status = STATUS_AFTER_STAGE[current_stage]
        if self.store.compare_and_set_status(debate_id, next_status):
            logger.info(
                f"Debate {debate_id} completed {current_stage.value}, now {next_status.value}"
            )
            return True

        # Already advanced by an earlier call
        debate = self._require_debate(debate_id)
        return debate.status.rank >= next_status.rank

    async def get_state(self, debate_id: str, user_id: str | None = None) -> DebateState:
        """Current stage, entries and, for a participant, whose turn it is."""
        debate = self._require_debate(debate_id)
        entries = organize_entries(self.store.list_arguments_for_debate(debate_id))
        current_stage = compute_current_stage(entries)

        user_position = debate.position_of(user_id) if user_id else None
        is_user_turn = (
            user_position is not None
            and current_stage is not None
            and not debate.is_finished
            and user_position not in entries[current_stage]
        )

        return DebateState(
            debate=debate,
            entries=entries,
            current_stage=current_stage,
            user_position=user_position,
            is_user_turn=is_user_turn,
        )

    async def is_user_turn(self, debate_id: str, user_id: str) -> bool:
        state = await self.get_state(debate_id, user_id)
        return state.is_user_turn

    async def submit_entry(self, debate_id: str, user_id: str, content: str) -> SubmissionResult:
        """Record the user's argument for the debate's current stage.

        Rejections are returned, not raised, and leave the arguments untouched.
        The argument and the status change it causes commit in one
        transaction. A status left behind by an older writer is caught up
        before the submission is judged.
        """
        if not content or not content.strip():
            return SubmissionResult.rejected(SubmissionRejection.EMPTY_CONTENT)

        async with self._lock_for(debate_id):
            result = await self._submit_locked(debate_id, user_id, content)

        finished = result.reason is SubmissionRejection.DEBATE_FINISHED or (
            result.stage_advanced and result.argument.stage is STAGE_ORDER[-1]
        )
        if finished:
            self._release_lock(debate_id)
        return result

    async def _submit_locked(self, debate_id: str, user_id: str, content: str) -> SubmissionResult:
        state = await self.get_state(debate_id, user_id)
        stage = state.current_stage

        if state.user_position is None:
            logger.warning(f"User {user_id} is not a participant of debate {debate_id}")
            return SubmissionResult.rejected(SubmissionRejection.NOT_A_PARTICIPANT)

        self._reconcile_status(state)

        if stage is None or state.debate.is_finished:
            return SubmissionResult.rejected(SubmissionRejection.DEBATE_FINISHED)

        if not state.is_user_turn:
            return SubmissionResult.rejected(SubmissionRejection.INVALID_TURN)

        completes_stage = state.user_position.opposite in state.entries[stage]
        new_status = STATUS_AFTER_STAGE[stage] if completes_stage else DebateStatus.ACTIVE

        try:
            stored = self.store.insert_argument(
                Argument(
                    debate_id=debate_id,
                    user_id=user_id,
                    stage=stage,
                    position=state.user_position,
                    content=content,
                ),
                new_status=new_status,
            )
        except SlotAlreadyFilledError:
            # Filled by a writer outside this process
            return SubmissionResult.rejected(SubmissionRejection.INVALID_TURN)

        logger.info(f"Debate {debate_id}: {state.user_position.value} submitted {stage.value}")
        if completes_stage:
            logger.info(f"Debate {debate_id} completed {stage.value}, now {new_status.value}")

        return SubmissionResult(accepted=True, argument=stored, stage_advanced=completes_stage)

    async def get_opponent_entry_to_refute(
        self, debate_id: str, user_id: str, stage: DebateStage
    ) -> Argument | None:
        """The opponent's argument from the stage preceding `stage`."""
        refuted_stage = get_stage_to_refute(stage)
        if refuted_stage is None:
            return None

        position = self._require_debate(debate_id).position_of(user_id)
        if position is None:
            return None

        return self.store.get_argument(debate_id, refuted_stage, position.opposite)

    async def get_user_entry(
        self, debate_id: str, user_id: str, stage: DebateStage
    ) -> Argument | None:
        position = self._require_debate(debate_id).position_of(user_id)
        if position is None:
            return None
        return self.store.get_argument(debate_id, stage, position)

    async def is_stage_completed_by_user(
        self, debate_id: str, user_id: str, stage: DebateStage
    ) -> bool:
        return await self.get_user_entry(debate_id, user_id, stage) is not None

    async def export_transcript(self, debate_id: str) -> dict[str, Any]:
        debate = self._require_debate(debate_id)
        return build_transcript(debate, self.store.list_arguments_for_debate(debate_id))

    async def watch_debate(
        self,
        debate_id: str,
        user_id: str | None = None,
        poll_interval: float | None = None,
    ) -> AsyncIterator[DebateState]:
        """Yield the debate state each time it changes, ending once finished."""
        interval = self.poll_interval if poll_interval is None else poll_interval
        last_state: DebateState | None = None
        while True:
            state = await self.get_state(debate_id, user_id)
            if state != last_state:
                yield state
                last_state = state
            if state.is_finished:
                return
            await asyncio.sleep(interval)
