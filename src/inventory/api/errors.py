"""Translate inventory errors into HTTP responses.

Protean's handlers cover its own exceptions (field validation, missing
aggregates). The inventory errors derive from those classes, and the more
specific handlers registered here take precedence for them.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from inventory.errors import (
    CatalogStateError,
    ConcurrentModificationError,
    DuplicateResourceError,
    InsufficientStockError,
    InvalidArgumentError,
    ResourceInUseError,
    ResourceNotFoundError,
    StoreUnavailableError,
)

logger = structlog.get_logger(__name__)

STATUS_BY_ERROR = {
    ResourceNotFoundError: 404,
    InvalidArgumentError: 400,
    InsufficientStockError: 400,
    CatalogStateError: 409,
    ConcurrentModificationError: 409,
    DuplicateResourceError: 409,
    ResourceInUseError: 409,
    StoreUnavailableError: 503,
}


def error_body(kind, message):
    return {"error": kind, "message": message}


def _handler_for(status_code):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        log = logger.error if status_code >= 500 else logger.warning
        log("Request failed", path=request.url.path, error=exc.kind, message=exc.message)
        return JSONResponse(status_code=status_code, content=error_body(exc.kind, exc.message))

    return handle


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(status_code=400, content=error_body("InvalidArgument", "; ".join(messages)))


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    for error_class, status_code in STATUS_BY_ERROR.items():
        app.add_exception_handler(error_class, _handler_for(status_code))
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
