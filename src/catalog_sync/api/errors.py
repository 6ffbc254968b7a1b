"""Error responses for catalog-sync.

Every error is returned in a single envelope:
    {"messages": [{"code", "messageType", "text", "timestamp"}]}

Core errors map to HTTP statuses; unexpected exceptions become a generic
500 that never carries the original cause.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import Enum

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from catalog_sync.core.errors import CatalogError, InternalError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class MessageType(str, Enum):
    """Type of message in error response."""

    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"
    EXCEPTION = "Exception"


class Message(BaseModel):
    """Single error message."""

    model_config = {"extra": "forbid", "populate_by_name": True}

    code: str
    message_type: MessageType = Field(alias="messageType")
    text: str
    timestamp: str | None = None


class Result(BaseModel):
    """Error envelope."""

    model_config = {"extra": "forbid"}

    messages: list[Message]


STATUS_CODES: dict[type[CatalogError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    InternalError: 500,
}


def status_for(exc: CatalogError) -> int:
    for exc_type, status_code in STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status_code
    return 500


def to_result(exc: CatalogError) -> Result:
    """Convert a core error to the response envelope."""
    message_type = MessageType.EXCEPTION if isinstance(exc, InternalError) else MessageType.ERROR
    return Result(
        messages=[
            Message(
                code=exc.code,
                messageType=message_type,
                text=exc.text,
                timestamp=datetime.now(UTC).isoformat(),
            )
        ]
    )


def error_response(exc: CatalogError, status_code: int | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code or status_for(exc),
        content=to_result(exc).model_dump(by_alias=True),
    )


async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Exception handler for core errors."""
    return error_response(exc)


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies and parameters are validation errors (400)."""
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in errors
    )
    text = f"Malformed request: {detail}" if detail else "Malformed request"
    return error_response(ValidationError(text))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler for unexpected errors."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(InternalError())
