"""
Task router - API endpoints for tasks.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from tasktree.core.dependencies import get_task_service
from tasktree.models.task import TaskStatus
from tasktree.schemas.task import (
    CompleteCount,
    DependencyCount,
    DoneCount,
    MessageResponse,
    StatusUpdateResult,
    TaskCreate,
    TaskDetail,
    TaskNode,
    TaskRead,
    TaskRename,
    TaskStatusUpdate,
)
from tasktree.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskRead])
async def list_tasks(
    status: Optional[TaskStatus] = None,
    service: TaskService = Depends(get_task_service),
):
    """
    List tasks.

    With ``status``, returns tasks in that status and tasks with a direct
    child in it.
    """
    return await service.list_tasks(status)


@router.get("/tree", response_model=List[TaskNode])
async def get_task_tree(
    status: Optional[TaskStatus] = None,
    service: TaskService = Depends(get_task_service),
):
    """Root tasks with their children nested."""
    return await service.get_tree(status)


@router.get("/{task_id}", response_model=TaskDetail)
async def get_task(
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    """Get a task by ID, with its child counts."""
    return await service.get_task(task_id)


@router.get("/{task_id}/dependencies", response_model=DependencyCount)
async def get_dependency_count(
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    """Number of direct children of a task."""
    return DependencyCount(dependency_count=await service.dependency_count(task_id))


@router.get("/{task_id}/done-count", response_model=DoneCount)
async def get_done_count(
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    return DoneCount(done_count=await service.done_count(task_id))


@router.get("/{task_id}/complete-count", response_model=CompleteCount)
async def get_complete_count(
    task_id: int,
    service: TaskService = Depends(get_task_service),
):
    return CompleteCount(complete_count=await service.complete_count(task_id))


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    data: TaskCreate,
    service: TaskService = Depends(get_task_service),
):
    """Create a new task."""
    return await service.create_task(data)


@router.put("/edit-name/{task_id}", response_model=MessageResponse)
async def rename_task(
    task_id: int,
    data: TaskRename,
    service: TaskService = Depends(get_task_service),
):
    """Rename a task."""
    message = await service.rename_task(task_id, data.name)
    return MessageResponse(message=message)


@router.put("/{task_id}", response_model=StatusUpdateResult)
async def update_task_status(
    task_id: int,
    data: TaskStatusUpdate,
    cascade: Optional[bool] = Query(None, description="Propagate up to the root"),
    service: TaskService = Depends(get_task_service),
):
    """Change a task's status and propagate to its parent."""
    updated = await service.set_status(task_id, data.status, cascade=cascade)
    return StatusUpdateResult(updated_status=updated)


@router.post("/{task_id}/toggle", response_model=StatusUpdateResult)
async def toggle_task_status(
    task_id: int,
    cascade: Optional[bool] = Query(None, description="Propagate up to the root"),
    service: TaskService = Depends(get_task_service),
):
    """Flip a task between open and finished."""
    updated = await service.toggle_status(task_id, cascade=cascade)
    return StatusUpdateResult(updated_status=updated)
