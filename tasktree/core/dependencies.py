"""
FastAPI dependencies for the application.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tasktree.core.config import Settings
from tasktree.db.session import get_db
from tasktree.services.task_service import TaskService


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


async def get_task_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> TaskService:
    """Dependency to get a TaskService bound to the request's session."""
    return TaskService(
        db,
        max_tree_depth=settings.MAX_TREE_DEPTH,
        propagate_to_root=settings.PROPAGATE_TO_ROOT,
    )
