"""
Models package.

Import all models here so they are registered with SQLAlchemy.
"""

from tasktree.models.task import Task, TaskStatus

__all__ = [
    "Task",
    "TaskStatus",
]
