"""
API error taxonomy and the handlers that render it.

Every failure leaves the service as a JSON body of the form
``{"error": "<message>"}`` with the status code carried by the exception.

Usage:
    raise NotFound("Not found")

    # Wrap store calls so database faults surface as StoreError
    with store_errors(session, "save_post", post_id=post_id):
        session.commit()
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.context import get_request_id

logger = structlog.get_logger(__name__)

__all__ = [
    "BlogAPIError",
    "ValidationError",
    "BadRequest",
    "Unauthorized",
    "NotFound",
    "Conflict",
    "ConfigError",
    "StoreError",
    "store_errors",
    "register_exception_handlers",
]


class BlogAPIError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BlogAPIError):
    status_code = 400
    default_message = "Invalid request"


class BadRequest(BlogAPIError):
    status_code = 400
    default_message = "Bad request"


class Unauthorized(BlogAPIError):
    status_code = 401
    default_message = "Unauthorized"


class NotFound(BlogAPIError):
    status_code = 404
    default_message = "Not found"


class Conflict(BlogAPIError):
    # Clients already treat blocked deletes as a plain 400
    status_code = 400
    default_message = "Resource is still referenced"


class ConfigError(BlogAPIError):
    status_code = 500
    default_message = "Server is not configured"


class StoreError(BlogAPIError):
    status_code = 500
    default_message = "Database error"


@contextmanager
def store_errors(session: Optional[Session], operation: str, **context) -> Iterator[None]:
    """
    Convert SQLAlchemy faults raised inside the block into StoreError.

    The session (when given) is rolled back so it can be reused. The
    original message is passed through to the client.
    """
    try:
        yield
    except SQLAlchemyError as e:
        if session is not None:
            session.rollback()
        logger.error(
            "Store operation failed",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
            **context,
        )
        raise StoreError(str(e) or None) from e


async def _blog_error_handler(request: Request, exc: BlogAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            method=request.method,
            status_code=exc.status_code,
            error=exc.message,
            request_id=get_request_id(),
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = ValidationError.default_message
    return JSONResponse(status_code=400, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Install JSON error rendering on the application."""
    app.add_exception_handler(BlogAPIError, _blog_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
