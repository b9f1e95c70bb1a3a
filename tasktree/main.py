"""
Main FastAPI application.

Build the app with ``create_app()``; run it with
``uvicorn tasktree.main:create_app --factory``.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from tasktree.core.config import Settings, get_settings
from tasktree.core.logging import setup_logging
from tasktree.db.session import build_engine, build_session_maker
from tasktree.errors import AppError, app_error_handler
from tasktree.routers import health, task

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    The engine is created by create_app; shutdown disposes its pool.
    """
    logger.info("Starting %s...", app.state.settings.APP_NAME)

    yield

    logger.info("Shutting down %s...", app.state.settings.APP_NAME)
    await app.state.engine.dispose()


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Create the FastAPI application.

    ``engine`` lets callers (tests, scripts) supply their own database; by
    default one is built from ``settings.DATABASE_URL``.
    """
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings.LOG_LEVEL)

    if engine is None:
        engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Hierarchical task tracker with status propagation",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_maker = build_session_maker(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AppError, app_error_handler)

    # Include routers (API endpoints)
    app.include_router(health.router, tags=["Health"])
    app.include_router(task.router)

    return app
