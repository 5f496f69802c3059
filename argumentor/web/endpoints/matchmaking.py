"""Opponent search endpoints."""

import logging

from fastapi import APIRouter, Depends

from argumentor.matchmaking import MatchOutcome, Matchmaker, MatchmakingService
from argumentor.web.dependencies import get_matchmaker, get_matchmaking_service
from argumentor.web.schemas import MatchmakingStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/matchmaking")


@router.post("/{user_id}/search", response_model=MatchOutcome)
async def search_once(user_id: str, matchmaker: Matchmaker = Depends(get_matchmaker)):
    """Run a single search attempt."""
    return await matchmaker.search(user_id)


@router.post("/{user_id}/start", response_model=MatchmakingStatusResponse)
async def start_search(
    user_id: str, service: MatchmakingService = Depends(get_matchmaking_service)
):
    """Start searching in the background until matched or stopped."""
    session = service.start_search(user_id)
    return MatchmakingStatusResponse.from_session(user_id, session)


@router.post("/{user_id}/stop", response_model=MatchmakingStatusResponse)
async def stop_search(
    user_id: str, service: MatchmakingService = Depends(get_matchmaking_service)
):
    """Stop the user's background search. Stopping twice is harmless."""
    if not service.stop_search(user_id):
        logger.debug(f"No active search to stop for {user_id}")
    return MatchmakingStatusResponse.from_session(user_id, service.get_session(user_id))


@router.get("/{user_id}", response_model=MatchmakingStatusResponse)
async def get_search_status(
    user_id: str, service: MatchmakingService = Depends(get_matchmaking_service)
):
    """Report whether the user is searching and the latest attempt's outcome."""
    return MatchmakingStatusResponse.from_session(user_id, service.get_session(user_id))
