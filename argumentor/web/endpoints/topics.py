"""Topic catalogue and stance endpoints."""

import logging

from fastapi import APIRouter, Depends

from argumentor.database import SQLiteStanceStore
from argumentor.debate_engine.models import Stance, Topic
from argumentor.web.dependencies import get_stance_store
from argumentor.web.schemas import StanceRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/topics", response_model=list[Topic])
async def list_topics(store: SQLiteStanceStore = Depends(get_stance_store)):
    """List every topic users can take a stance on."""
    return store.list_topics()


@router.get("/users/{user_id}/stances", response_model=list[Stance])
async def list_user_stances(user_id: str, store: SQLiteStanceStore = Depends(get_stance_store)):
    """List a user's stances in the order they were declared."""
    return store.list_stances(user_id)


@router.put("/users/{user_id}/stances/{topic_name}", response_model=Stance)
async def set_stance(
    user_id: str,
    topic_name: str,
    body: StanceRequest,
    store: SQLiteStanceStore = Depends(get_stance_store),
):
    """Declare or change the user's stance on a topic."""
    stance = Stance(user_id=user_id, topic_name=topic_name, stance=body.stance)
    store.upsert_stance(stance)
    logger.info(f"User {user_id} set stance {body.stance.value} on '{topic_name}'")
    return stance
