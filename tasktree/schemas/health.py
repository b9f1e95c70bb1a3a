"""Health report schema."""

from typing import List

from pydantic import BaseModel, Field


class HealthReport(BaseModel):
    api_ok: bool = True
    db_ok: bool
    task_count: int = 0
    tree_ok: bool = False
    unreachable_task_ids: List[int] = Field(default_factory=list)
