"""
Custom exception hierarchy for Yeartrace.

Rule: every error carries a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class YeartraceException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidRecordDateError(YeartraceException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_RECORD_DATE"

    def __init__(self, value: Any):
        super().__init__(
            message=f"{value!r} is not an ISO calendar date (YYYY-MM-DD).",
            details={"date": str(value)},
        )


class BehaviorNotFoundError(YeartraceException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "BEHAVIOR_NOT_FOUND"

    def __init__(self, behavior_id: str):
        super().__init__(
            message=f"Behavior {behavior_id!r} is not in the catalog.",
            details={"behavior_id": behavior_id},
        )


class TierNotFoundError(YeartraceException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "TIER_NOT_FOUND"

    def __init__(self, tier_id: str):
        super().__init__(
            message=f"Status tier {tier_id!r} is not in the catalog.",
            details={"tier_id": tier_id},
        )


class DuplicateTierThresholdError(YeartraceException):
    http_status = status.HTTP_409_CONFLICT
    code = "DUPLICATE_TIER_THRESHOLD"

    def __init__(self, min_score: int, existing_tier_id: str):
        super().__init__(
            message=(
                f"A status tier with minScore {min_score} already exists "
                f"({existing_tier_id})."
            ),
            details={"min_score": min_score, "existing_tier_id": existing_tier_id},
        )


class StorageError(YeartraceException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_ERROR"

    def __init__(self, message: str, key: str | None = None):
        super().__init__(
            message=message,
            details={"key": key} if key else {},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def yeartrace_exception_handler(
    request: Request, exc: YeartraceException
) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
