"""
Checks against the real database configured by DATABASE_URL.

Run ``alembic upgrade head`` first, then ``RUN_DB_TESTS=1 pytest -m db``.
"""

import httpx
import pytest

from tasktree.core.config import Settings
from tasktree.main import create_app


@pytest.mark.db
@pytest.mark.asyncio
async def test_migrated_database_is_healthy():
    app = create_app(settings=Settings(), configure_logging=False)
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            body = (await client.get("/health")).json()
    finally:
        await app.state.engine.dispose()

    assert body["db_ok"] is True
    assert body["tree_ok"] is True, body


@pytest.mark.db
@pytest.mark.asyncio
async def test_round_trip_on_real_database():
    app = create_app(settings=Settings(), configure_logging=False)
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            parent = (await client.post("/tasks", json={"name": "db parent"})).json()
            child = (
                await client.post("/tasks", json={"name": "db child", "parent_task_id": parent["id"]})
            ).json()

            updated = (await client.put(f"/tasks/{child['id']}", json={"status": "DONE"})).json()
            parent_after = (await client.get(f"/tasks/{parent['id']}")).json()
    finally:
        await app.state.engine.dispose()

    assert updated == {"updatedStatus": "COMPLETE"}
    assert parent_after["status"] == "COMPLETE"
