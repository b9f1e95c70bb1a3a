"""
Pydantic schemas for request/response validation.
"""

from tasktree.schemas.health import HealthReport
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

__all__ = [
    "CompleteCount",
    "DependencyCount",
    "DoneCount",
    "HealthReport",
    "MessageResponse",
    "StatusUpdateResult",
    "TaskCreate",
    "TaskDetail",
    "TaskNode",
    "TaskRead",
    "TaskRename",
    "TaskStatusUpdate",
]
