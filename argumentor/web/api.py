"""FastAPI web application for the Argumentor debate service."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from argumentor.config.settings import AppConfig, get_default_config
from argumentor.database import DatabaseManager, SQLiteDebateStore, SQLiteStanceStore
from argumentor.debate_engine import DebateEngine
from argumentor.debate_engine.exceptions import (
    DebateNotFoundError,
    StoreUnavailableError,
    UnknownTopicError,
    UnrecognizedValueError,
)
from argumentor.matchmaking import Matchmaker, MatchmakingService
from argumentor.notifications import create_notifier
from argumentor.web.endpoints.debates import router as debates_router
from argumentor.web.endpoints.matchmaking import router as matchmaking_router
from argumentor.web.endpoints.topics import router as topics_router

logger: logging.Logger = logging.getLogger(__name__)


def build_services(app: FastAPI, config: AppConfig) -> None:
    """Construct stores, engine and matchmaking services on app.state."""
    db = DatabaseManager(config.database.path, seed_topics=config.database.seed_topics)
    stance_store = SQLiteStanceStore(db)
    debate_store = SQLiteDebateStore(db)
    matchmaker = Matchmaker(
        stance_store,
        debate_store,
        create_notifier(config.notifications),
        category=config.matchmaking.category,
    )

    app.state.config = config
    app.state.db = db
    app.state.stance_store = stance_store
    app.state.debate_store = debate_store
    app.state.engine = DebateEngine(
        debate_store, poll_interval=config.system.watch_poll_seconds
    )
    app.state.matchmaker = matchmaker
    app.state.matchmaking_service = MatchmakingService(
        matchmaker,
        interval=config.matchmaking.search_interval_seconds,
        max_backoff=config.matchmaking.max_backoff_seconds,
    )


def get_allowed_origins() -> list[str] | None:
    """Get CORS origins from environment or use development defaults."""
    env_origins: str | None = os.environ.get("ALLOWED_ORIGINS")
    if env_origins:
        return [origin.strip() for origin in env_origins.split(",")]
    return None


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors raised by stores and the engine to HTTP responses."""

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable(_: Request, exc: StoreUnavailableError) -> JSONResponse:
        logger.error(f"Store unavailable: {exc}")
        return _error_response(HTTP_503_SERVICE_UNAVAILABLE, exc)

    @app.exception_handler(DebateNotFoundError)
    async def debate_not_found(_: Request, exc: DebateNotFoundError) -> JSONResponse:
        return _error_response(HTTP_404_NOT_FOUND, exc)

    @app.exception_handler(UnknownTopicError)
    async def unknown_topic(_: Request, exc: UnknownTopicError) -> JSONResponse:
        return _error_response(HTTP_404_NOT_FOUND, exc)

    @app.exception_handler(UnrecognizedValueError)
    async def unrecognized_value(_: Request, exc: UnrecognizedValueError) -> JSONResponse:
        logger.error(f"Corrupt stored value: {exc}")
        return _error_response(HTTP_500_INTERNAL_SERVER_ERROR, exc)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the application. The default config is loaded at startup when none is given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Manage application lifespan - startup and shutdown."""
        build_services(app, config or get_default_config())
        logger.info("Argumentor services initialized")

        yield

        await app.state.matchmaking_service.stop_all()

    app = FastAPI(
        title="Argumentor",
        description="Stance-based matchmaking and structured peer debates",
        version="0.1.0",
        lifespan=lifespan,
    )

    allowed_origins = get_allowed_origins()
    if allowed_origins:
        logger.info(f"Setting CORS allowed origins: {allowed_origins}")
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        # Development: Allow any localhost/127.0.0.1
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(topics_router, prefix="/v1")
    app.include_router(matchmaking_router, prefix="/v1")
    app.include_router(debates_router, prefix="/v1")

    return app


app: FastAPI = create_app()
