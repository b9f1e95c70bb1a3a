"""
Database session and engine configuration.

The engine and session factory are built by the application factory and
stored on ``app.state``; request handlers receive a session through the
``get_db`` dependency rather than a module-level global.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine. No connection is opened until first use."""
    return create_async_engine(database_url, echo=echo, future=True)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Keeps data accessible after commit
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Get a database session for one request.

    Committing is left to the service that did the writes; anything not
    committed is rolled back when the handler raises.
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
