"""Accessors for the services built in the application lifespan."""

from fastapi import Request

from argumentor.database import SQLiteDebateStore, SQLiteStanceStore
from argumentor.debate_engine import DebateEngine
from argumentor.matchmaking import Matchmaker, MatchmakingService


def get_stance_store(request: Request) -> SQLiteStanceStore:
    return request.app.state.stance_store


def get_debate_store(request: Request) -> SQLiteDebateStore:
    return request.app.state.debate_store


def get_engine(request: Request) -> DebateEngine:
    return request.app.state.engine


def get_matchmaker(request: Request) -> Matchmaker:
    return request.app.state.matchmaker


def get_matchmaking_service(request: Request) -> MatchmakingService:
    return request.app.state.matchmaking_service
