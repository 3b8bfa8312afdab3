"""Translate domain failures into HTTP responses.

Every business failure is rendered as ``{"error": kind, "message": ..., "details": ...}``.
Plain Protean validation errors keep Protean's own FastAPI handlers.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers

from ordering.errors import (
    ConcurrentModification,
    DuplicateDiscountCode,
    InvalidStateTransition,
    OrderingError,
)

logger = structlog.get_logger(__name__)

_CONFLICTS = (InvalidStateTransition, ConcurrentModification, DuplicateDiscountCode)


def status_code_for(exc):
    if isinstance(exc, _CONFLICTS):
        return 409
    return 400


async def ordering_error_handler(request: Request, exc: OrderingError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.info(
        "Request rejected",
        path=request.url.path,
        error=exc.kind,
        status_code=status_code,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.kind, "message": exc.message, "details": exc.details},
    )


async def stale_write_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    return await ordering_error_handler(request, ConcurrentModification.from_stale_write(exc))


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    messages = getattr(exc, "messages", None)
    message = messages if isinstance(messages, str) else str(exc)
    return JSONResponse(
        status_code=404,
        content={"error": "not-found", "message": message, "details": {}},
    )


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(OrderingError, ordering_error_handler)
    app.add_exception_handler(ExpectedVersionError, stale_write_handler)
