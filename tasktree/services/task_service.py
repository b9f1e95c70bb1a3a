"""
Task business logic service.

Owns the status-propagation rules of the task tree. The service is handed a
session (the store handle) per request and keeps no task state between
calls.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tasktree.errors import (
    CircularDependencyError,
    NotFoundError,
    TreeIntegrityError,
    ValidationError,
)
from tasktree.models.task import Task, TaskStatus
from tasktree.repositories.task_repository import TaskRepository
from tasktree.schemas.health import HealthReport
from tasktree.schemas.task import TaskCreate, TaskDetail, TaskNode
from tasktree.services.task_tree import (
    build_hierarchy,
    effective_status,
    filter_by_status,
    reevaluate_parent,
    toggle_target,
    unreachable_task_ids,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_TREE_DEPTH = 1000


def _clean_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Task name is required")
    return name


class TaskService:
    """Service for task business logic."""

    def __init__(
        self,
        db: AsyncSession,
        max_tree_depth: int = DEFAULT_MAX_TREE_DEPTH,
        propagate_to_root: bool = False,
    ):
        self.repository = TaskRepository(db)
        self.max_tree_depth = max_tree_depth
        self.propagate_to_root = propagate_to_root

    async def _get_or_raise(self, task_id: int) -> Task:
        task = await self.repository.get_by_id(task_id)
        if not task:
            raise NotFoundError(f"Task {task_id} not found", {"task_id": task_id})
        return task

    # ---- queries ----

    async def list_tasks(self, status: Optional[TaskStatus] = None) -> List[Task]:
        """
        List all tasks.

        With a status, keep tasks in that status plus tasks that have a
        direct child in it.
        """
        tasks = await self.repository.list()
        if status is None:
            return tasks
        return filter_by_status(tasks, status)

    async def get_tree(self, status: Optional[TaskStatus] = None) -> List[TaskNode]:
        """Root tasks with their descendants nested under them."""
        tasks = await self.list_tasks(status)
        return build_hierarchy(tasks)

    async def get_task(self, task_id: int) -> TaskDetail:
        """Get a task and its child counts."""
        task = await self._get_or_raise(task_id)
        return TaskDetail(
            id=task.id,
            name=task.name,
            status=task.status,
            parent_task_id=task.parent_task_id,
            dependency_count=await self.dependency_count(task_id),
            done_count=await self.done_count(task_id),
            complete_count=await self.complete_count(task_id),
        )

    async def dependency_count(self, task_id: int) -> int:
        """Number of direct children. 0 for leaves and unknown ids."""
        return await self.repository.count_children(task_id)

    async def done_count(self, task_id: int) -> int:
        return await self.repository.count_children(task_id, TaskStatus.DONE)

    async def complete_count(self, task_id: int) -> int:
        return await self.repository.count_children(task_id, TaskStatus.COMPLETE)

    async def check_tree(self) -> HealthReport:
        """Count stored tasks and list any that no root leads to."""
        tasks = await self.repository.list()
        orphaned = unreachable_task_ids(tasks)
        if orphaned:
            logger.warning("Tasks unreachable from any root: %s", orphaned)
        return HealthReport(
            db_ok=True,
            task_count=len(tasks),
            tree_ok=not orphaned,
            unreachable_task_ids=orphaned,
        )

    # ---- mutations ----

    async def would_create_cycle(self, candidate_id: Optional[int], proposed_parent_id: Optional[int]) -> bool:
        """
        Walk up from ``proposed_parent_id`` looking for ``candidate_id``.

        Returns True when the candidate is met, False once a root or a
        missing row is reached. The walk is iterative and capped at
        ``max_tree_depth`` steps; a corrupt chain (a loop that does not
        include the candidate, or one deeper than the cap) raises
        TreeIntegrityError. With ``candidate_id=None`` only the chain
        itself is checked.
        """
        seen = set()
        current = proposed_parent_id

        while current is not None:
            if candidate_id is not None and current == candidate_id:
                return True
            if current in seen:
                raise TreeIntegrityError(
                    f"Task {current} is its own ancestor in the stored tree",
                    {"task_id": current},
                )
            if len(seen) >= self.max_tree_depth:
                raise TreeIntegrityError(
                    f"Parent chain of task {proposed_parent_id} exceeds {self.max_tree_depth} levels",
                    {"task_id": proposed_parent_id},
                )
            seen.add(current)

            task = await self.repository.get_by_id(current)
            if task is None:
                break
            current = task.parent_task_id

        return False

    async def create_task(self, data: TaskCreate) -> Task:
        """
        Create a new IN_PROGRESS task, optionally under a parent.

        The cycle check uses the id carried in the request body, if any. The
        new row always gets a fresh id from the store. The parent's status
        is left alone.
        """
        name = _clean_name(data.name)

        if data.parent_task_id is not None:
            parent = await self.repository.get_by_id(data.parent_task_id)
            if not parent:
                raise ValidationError(
                    f"Parent task {data.parent_task_id} does not exist",
                    {"parent_task_id": data.parent_task_id},
                )
            if await self.would_create_cycle(data.id, data.parent_task_id):
                raise CircularDependencyError(
                    "Circular dependency detected",
                    {"task_id": data.id, "parent_task_id": data.parent_task_id},
                )

        task = await self.repository.create(name, data.parent_task_id)
        await self.repository.commit()
        logger.info("Task created id=%s parent=%s", task.id, task.parent_task_id)
        return task

    async def rename_task(self, task_id: int, name: Optional[str]) -> str:
        """Rename a task. No status propagation."""
        name = _clean_name(name)
        task = await self.repository.update_name(task_id, name)
        if not task:
            raise NotFoundError(f"Task {task_id} not found", {"task_id": task_id})
        await self.repository.commit()
        logger.debug("Task renamed id=%s", task_id)
        return "Task name updated successfully"

    async def set_status(
        self,
        task_id: int,
        requested: TaskStatus,
        cascade: Optional[bool] = None,
    ) -> TaskStatus:
        """
        Apply a status change and propagate it to the parent.

        Rules, in order:
        1. A DONE request on a task without unfinished children becomes
           COMPLETE.
        2. The effective status is written.
        3. An IN_PROGRESS request forces the parent to DONE.
        4. The parent is re-evaluated from its current children: all
           COMPLETE makes it COMPLETE, any IN_PROGRESS makes it DONE,
           anything else leaves it as is.

        Only the parent is touched unless ``cascade`` is set (or the service
        was built with ``propagate_to_root``), in which case step 4 is
        repeated one level up at a time until a level does not change.

        Returns the effective status written for ``task_id``.
        """
        if cascade is None:
            cascade = self.propagate_to_root

        task = await self._get_or_raise(task_id)
        effective = await self._apply_status(task, requested, cascade)
        await self.repository.commit()
        return effective

    async def _apply_status(self, task: Task, requested: TaskStatus, cascade: bool) -> TaskStatus:
        """Write the effective status of ``task`` and propagate it, without committing."""
        task_id = task.id
        children = await self.repository.list_children(task_id)
        effective = effective_status(requested, [c.status for c in children])

        previous = task.status
        await self.repository.update_status(task_id, effective)
        logger.info(
            "Task status id=%s %s -> %s (requested %s)",
            task_id, previous, effective.value, requested.value,
        )

        parent_id = task.parent_task_id
        if parent_id is None:
            return effective

        parent = await self.repository.get_by_id(parent_id)
        if parent is None:
            logger.warning("Task %s points at missing parent %s", task_id, parent_id)
            return effective
        parent_before = parent.status

        if requested is TaskStatus.IN_PROGRESS:
            await self.repository.update_status(parent_id, TaskStatus.DONE)

        await self._reevaluate(parent_id)
        changed = parent.status != parent_before
        logger.debug("Parent %s re-evaluated %s -> %s", parent_id, parent_before, parent.status)

        if cascade and changed:
            await self._ascend(parent.parent_task_id)

        return effective

    async def toggle_status(self, task_id: int, cascade: Optional[bool] = None) -> TaskStatus:
        """
        Flip a task the way the tree view's checkbox does.

        COMPLETE reopens to IN_PROGRESS. Otherwise a leaf goes to COMPLETE,
        and a task with children goes to DONE while any child is in
        progress, else to COMPLETE.
        """
        task = await self._get_or_raise(task_id)
        children = await self.repository.list_children(task_id)
        target = toggle_target(task.status, [c.status for c in children])
        return await self.set_status(task_id, target, cascade=cascade)

    # ---- propagation helpers ----

    async def _reevaluate(self, parent_id: int) -> bool:
        """Re-derive one parent's status from its children. True if it changed."""
        siblings = await self.repository.list_children(parent_id)
        new_status = reevaluate_parent([s.status for s in siblings])
        if new_status is None:
            return False

        parent = await self.repository.get_by_id(parent_id)
        if parent is None or parent.status == new_status.value:
            return False

        await self.repository.update_status(parent_id, new_status)
        return True

    async def _ascend(self, start_id: Optional[int]) -> None:
        """Re-evaluate ancestors upward from ``start_id`` until one holds still."""
        current = start_id
        for _ in range(self.max_tree_depth):
            if current is None:
                return

            ancestor = await self.repository.get_by_id(current)
            if ancestor is None:
                return

            if not await self._reevaluate(current):
                return
            logger.debug("Cascade moved ancestor %s to %s", current, ancestor.status)
            current = ancestor.parent_task_id

        raise TreeIntegrityError(
            f"Status cascade exceeded {self.max_tree_depth} levels",
            {"task_id": start_id},
        )
