"""Debate listing, progression and transcript endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from argumentor.database import SQLiteDebateStore
from argumentor.debate_engine import DebateEngine
from argumentor.debate_engine.models import Argument, Debate, SubmissionResult
from argumentor.debate_engine.types import DebateStage
from argumentor.web.dependencies import get_debate_store, get_engine
from argumentor.web.schemas import DebateStateResponse, EntryRequest, UserDebatesResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/debates", response_model=list[Debate])
async def list_debates(
    category: str | None = None,
    q: str | None = None,
    store: SQLiteDebateStore = Depends(get_debate_store),
):
    """List debates, newest first, optionally filtered by category and text."""
    return store.list_debates(category=category, query=q)


@router.get("/users/{user_id}/debates", response_model=UserDebatesResponse)
async def list_user_debates(user_id: str, store: SQLiteDebateStore = Depends(get_debate_store)):
    """A user's debates split into ongoing and completed."""
    debates = store.list_debates_for_user(user_id)
    return UserDebatesResponse(
        ongoing=[d for d in debates if not d.is_finished],
        completed=[d for d in debates if d.is_finished],
    )


@router.get("/debates/{debate_id}", response_model=DebateStateResponse)
async def get_debate(
    debate_id: str,
    user_id: str | None = None,
    engine: DebateEngine = Depends(get_engine),
):
    """Current stage, entries and turn information for a debate."""
    state = await engine.get_state(debate_id, user_id)
    return DebateStateResponse.from_state(state)


@router.post("/debates/{debate_id}/entries", response_model=SubmissionResult)
async def submit_entry(
    debate_id: str, body: EntryRequest, engine: DebateEngine = Depends(get_engine)
):
    """Submit the user's argument for the current stage."""
    result = await engine.submit_entry(debate_id, body.user_id, body.content)
    if not result:
        raise HTTPException(
            status_code=HTTP_409_CONFLICT,
            detail={"reason": result.reason.value if result.reason else None},
        )
    return result


@router.get(
    "/debates/{debate_id}/stages/{stage}/opponent-entry", response_model=Argument
)
async def get_opponent_entry(
    debate_id: str,
    stage: DebateStage,
    user_id: str,
    engine: DebateEngine = Depends(get_engine),
):
    """The opponent's argument the user must refute in `stage`."""
    entry = await engine.get_opponent_entry_to_refute(debate_id, user_id, stage)
    if entry is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="No entry to refute")
    return entry


@router.get("/debates/{debate_id}/transcript")
async def get_transcript(debate_id: str, engine: DebateEngine = Depends(get_engine)) -> dict[str, Any]:
    """Export the debate as a transcript document."""
    return await engine.export_transcript(debate_id)


@router.delete("/debates/{debate_id}")
async def delete_debate(debate_id: str, store: SQLiteDebateStore = Depends(get_debate_store)):
    """Delete a debate and its arguments."""
    if not store.delete_debate(debate_id):
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Debate not found")
    return {"status": "deleted", "debate_id": debate_id}
