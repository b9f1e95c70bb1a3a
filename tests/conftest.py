"""
Pytest configuration and shared fixtures.

Unit and service tests run against an in-memory SQLite database through
aiosqlite. Tests marked ``db`` need the real database from DATABASE_URL.
"""

import os
from typing import Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from tasktree.core.config import Settings
from tasktree.db.base import Base
from tasktree.db.session import build_session_maker
from tasktree.main import create_app
from tasktree.models.task import Task, TaskStatus
from tasktree.repositories.task_repository import TaskRepository
from tasktree.services.task_service import TaskService

SQLITE_URL = "sqlite+aiosqlite://"


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires database")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture
async def engine() -> AsyncEngine:
    """A fresh in-memory database with the schema created."""
    engine = create_async_engine(
        SQLITE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncSession:
    async with build_session_maker(engine)() as session:
        yield session


@pytest.fixture
def service(session: AsyncSession) -> TaskService:
    return TaskService(session)


@pytest.fixture
def add_task(session: AsyncSession):
    """Insert a task directly through the repository, in any status."""
    repository = TaskRepository(session)

    async def _add(
        name: str,
        parent: Optional[Task] = None,
        status: TaskStatus = TaskStatus.IN_PROGRESS,
    ) -> Task:
        task = await repository.create(name, parent.id if parent else None)
        if status is not TaskStatus.IN_PROGRESS:
            await repository.update_status(task.id, status)
        return task

    return _add


@pytest.fixture
def settings() -> Settings:
    return Settings(DATABASE_URL=SQLITE_URL, LOG_LEVEL="WARNING")


@pytest_asyncio.fixture
async def client(engine: AsyncEngine, settings: Settings) -> httpx.AsyncClient:
    """HTTP client talking to the app in-process."""
    app = create_app(settings=settings, engine=engine, configure_logging=False)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
