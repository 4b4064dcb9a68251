"""Translation of engine errors into HTTP responses."""

from __future__ import annotations

import sqlite3

import structlog
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from studybuddy.core.errors import (
    AttemptsExhaustedError,
    ConflictError,
    NotAuthorizedError,
    NotFoundError,
    ProgressionError,
    SubmissionValidationError,
)

logger = structlog.get_logger(__name__)

_STATUS_BY_ERROR: list[tuple[type[ProgressionError], int]] = [
    (SubmissionValidationError, status.HTTP_400_BAD_REQUEST),
    (NotAuthorizedError, status.HTTP_403_FORBIDDEN),
    (AttemptsExhaustedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
]


def to_http_error(error: ProgressionError) -> HTTPException:
    """Map an engine error to the HTTPException a route should raise."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))

    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Server error.",
    )


async def storage_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    """Report storage failures as an opaque 500."""
    logger.error(
        "storage.error",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error."},
    )
