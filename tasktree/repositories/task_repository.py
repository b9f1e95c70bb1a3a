"""
Task repository - database operations for Task.

Every public method converts SQLAlchemy failures into ``StoreError`` so the
service layer only ever sees domain errors.
"""

import functools
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tasktree.errors import StoreError
from tasktree.models.task import Task, TaskStatus

T = TypeVar("T")


def _store_errors(method: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    @functools.wraps(method)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await method(*args, **kwargs)
        except SQLAlchemyError as exc:
            detail = getattr(exc, "orig", None) or exc
            raise StoreError(f"Task store failure: {detail}") from exc

    return wrapper


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @_store_errors
    async def list(self) -> List[Task]:
        """List every task, oldest first."""
        result = await self.db.execute(select(Task).order_by(Task.id.asc()))
        return list(result.scalars().all())

    @_store_errors
    async def get_by_id(self, task_id: int) -> Optional[Task]:
        """Get a task by ID."""
        result = await self.db.execute(select(Task).where(Task.id == task_id))
        return result.scalar_one_or_none()

    @_store_errors
    async def list_children(self, parent_id: int) -> List[Task]:
        """Direct children of a task."""
        result = await self.db.execute(
            select(Task)
            .where(Task.parent_task_id == parent_id)
            .order_by(Task.id.asc())
        )
        return list(result.scalars().all())

    @_store_errors
    async def count_children(self, parent_id: int, status: Optional[TaskStatus] = None) -> int:
        """Count direct children, optionally only those in one status."""
        query = select(func.count()).select_from(Task).where(Task.parent_task_id == parent_id)
        if status is not None:
            query = query.where(Task.status == status.value)
        result = await self.db.execute(query)
        return int(result.scalar_one())

    @_store_errors
    async def create(self, name: str, parent_task_id: Optional[int] = None) -> Task:
        """Insert a new IN_PROGRESS task and return it with its assigned id."""
        task = Task(
            name=name,
            status=TaskStatus.IN_PROGRESS.value,
            parent_task_id=parent_task_id,
        )
        self.db.add(task)
        await self.db.flush()
        await self.db.refresh(task)
        return task

    @_store_errors
    async def commit(self) -> None:
        """Make every write of the current unit of work durable."""
        await self.db.commit()

    @_store_errors
    async def update_name(self, task_id: int, name: str) -> Optional[Task]:
        """Rename a task. Returns None if it does not exist."""
        task = await self.get_by_id(task_id)
        if not task:
            return None

        task.name = name
        await self.db.flush()
        return task

    @_store_errors
    async def update_status(self, task_id: int, status: TaskStatus) -> Optional[Task]:
        """Write a status. Returns None if the task does not exist."""
        task = await self.get_by_id(task_id)
        if not task:
            return None

        task.status = status.value
        await self.db.flush()
        return task
