"""
Task model.

Represents one node of the task tree. Children point at their parent through
``parent_task_id``; child lists are never stored on the parent row.
"""

import enum
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from tasktree.db.base import Base


class TaskStatus(str, enum.Enum):
    """
    Task lifecycle status, in advancement order.

    DONE means "finished by hand but some children are still open";
    COMPLETE means nothing below the task is left unfinished.
    """

    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    COMPLETE = "COMPLETE"


class Task(Base):
    """
    Tasks table - one row per task, nested through parent_task_id.
    """

    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "status IN ('IN_PROGRESS', 'DONE', 'COMPLETE')",
            name="ck_tasks_status",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Stored as plain text; TaskStatus validates values at the API edge
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=TaskStatus.IN_PROGRESS.value,
    )

    parent_task_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("tasks.id"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Task id={self.id} status={self.status} parent={self.parent_task_id}>"
