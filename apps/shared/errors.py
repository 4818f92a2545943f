"""
Error Handling

Base class for domain errors, consistent JSON error payloads, and helpers for
handling unexpected errors without leaking sensitive information.
"""

import logging
import uuid
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """
    Base class for errors raised by service logic.

    Subclasses set status_code and category so the HTTP layer can render
    them without knowing about each concrete error.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    category = "client_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def error_response(message: str, category: str, status_code: int) -> JSONResponse:
    """Consistent error payloads across the API."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "category": category,
        },
    )


def log_and_sanitize_error(
    error: Exception,
    context: str,
    user_message: Optional[str] = None
) -> tuple[str, str]:
    """
    Log full error details server-side and return sanitized message for client.

    Args:
        error: The exception that occurred
        context: Description of what operation failed (e.g., "Folder delete")
        user_message: Optional custom message to show user. If None, uses generic message.

    Returns:
        Tuple of (sanitized_message, error_id) for client response
    """
    # Generate unique error ID for correlation
    error_id = str(uuid.uuid4())[:8]

    logger.error(
        f"{context} failed [{error_id}]: {type(error).__name__}: {str(error)}",
        exc_info=error
    )

    if user_message:
        sanitized = f"{user_message} (Error ID: {error_id})"
    else:
        sanitized = f"{context} failed. Please try again later. (Error ID: {error_id})"

    return sanitized, error_id


def register_exception_handlers(app: FastAPI) -> None:
    """Render service, HTTP and database errors as {"error", "category"} payloads."""

    @app.exception_handler(ServiceError)
    async def service_exception_handler(request: Request, exc: ServiceError):
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
        return error_response(
            message=exc.message,
            category=exc.category,
            status_code=exc.status_code,
        )

    @app.exception_handler(IntegrityError)
    async def integrity_exception_handler(request: Request, exc: IntegrityError):
        logger.warning("Integrity violation on %s: %s", request.url.path, exc.orig)
        return error_response(
            message="The request conflicts with existing data.",
            category="conflict",
            status_code=status.HTTP_409_CONFLICT,
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s", request.url.path)
        return error_response(
            message="A database error occurred while processing the request.",
            category="database",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        detail = exc.detail
        message = (
            detail.get("message") if isinstance(detail, dict) else str(detail)
        ) or "Request failed."
        category = (
            detail.get("category") if isinstance(detail, dict) else None
        )

        if not category:
            if exc.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
                category = "security"
            elif exc.status_code >= 500:
                category = "server_error"
            else:
                category = "client_error"

        return error_response(
            message=message,
            category=category,
            status_code=exc.status_code,
        )

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        sanitized_msg, _ = log_and_sanitize_error(
            exc,
            f"{request.method} {request.url.path}",
            "An unexpected server error occurred. Please try again later.",
        )
        return error_response(
            message=sanitized_msg,
            category="server_error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
