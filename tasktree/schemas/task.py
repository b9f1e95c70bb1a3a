"""
Task Pydantic schemas.

Request bodies keep ``name`` optional so that a missing name is reported by
the service as a 400 validation error rather than a schema error. Unknown
fields are ignored: the UI sends whole task objects back.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from tasktree.models.task import TaskStatus


class TaskCreate(BaseModel):
    """Schema for creating a new task."""

    name: Optional[str] = None
    parent_task_id: Optional[int] = None
    # Client-supplied id, only used as the candidate in the cycle check
    id: Optional[int] = None


class TaskRename(BaseModel):
    """Schema for renaming a task."""

    name: Optional[str] = None


class TaskStatusUpdate(BaseModel):
    """Schema for a status change request."""

    status: TaskStatus


class TaskRead(BaseModel):
    """Schema for reading task data (API response)."""

    id: int
    name: str
    status: TaskStatus
    parent_task_id: Optional[int] = None

    # This tells Pydantic to work with SQLAlchemy models
    model_config = ConfigDict(from_attributes=True)


class TaskDetail(TaskRead):
    """A task together with its derived child counts."""

    dependency_count: int = Field(0, alias="dependencyCount")
    done_count: int = Field(0, alias="doneCount")
    complete_count: int = Field(0, alias="completeCount")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class TaskNode(TaskRead):
    """A task with its children nested, for tree rendering."""

    children: List["TaskNode"] = Field(default_factory=list)


class DependencyCount(BaseModel):
    dependency_count: int = Field(alias="dependencyCount")

    model_config = ConfigDict(populate_by_name=True)


class DoneCount(BaseModel):
    done_count: int = Field(alias="doneCount")

    model_config = ConfigDict(populate_by_name=True)


class CompleteCount(BaseModel):
    complete_count: int = Field(alias="completeCount")

    model_config = ConfigDict(populate_by_name=True)


class StatusUpdateResult(BaseModel):
    """Effective status applied to the task after promotion rules."""

    updated_status: TaskStatus = Field(alias="updatedStatus")

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


TaskNode.model_rebuild()
