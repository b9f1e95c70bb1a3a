"""Health check router."""

import logging

from fastapi import APIRouter, Depends

from tasktree.core.dependencies import get_task_service
from tasktree.errors import StoreError
from tasktree.schemas.health import HealthReport
from tasktree.services.task_service import TaskService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthReport)
async def health_check(service: TaskService = Depends(get_task_service)):
    """Task store reachability and tree integrity."""
    try:
        return await service.check_tree()
    except StoreError:
        logger.warning("Health check could not read the tasks table", exc_info=True)
        return HealthReport(db_ok=False)
