"""Structured error helpers for API responses."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    def __init__(self, status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.payload = build_error_payload(code, message, details)


class TaskError(AppError):
    """Base class for task tree errors. Subclasses pin the status and code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "TASK_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(type(self).status_code, type(self).code, message, details)


class ValidationError(TaskError):
    """A required field is missing or empty, or a reference is invalid."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class CircularDependencyError(TaskError):
    """The requested parent would make a task its own ancestor."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "CIRCULAR_DEPENDENCY"


class NotFoundError(TaskError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "TASK_NOT_FOUND"


class StoreError(TaskError):
    """The underlying persistence layer failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORE_ERROR"


class TreeIntegrityError(StoreError):
    """The stored parent chain is corrupt (cycle or deeper than allowed)."""

    code = "TREE_INTEGRITY_ERROR"


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.payload)
