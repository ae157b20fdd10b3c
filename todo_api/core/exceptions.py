"""
Domain errors and their HTTP mapping.
Challenge: Services raise typed outcomes; only this module knows status codes.
Design: One JSON shape for every failure ({"error": message}); internal detail stays in logs.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class TodoApiError(Exception):
    """Base for all errors the API surfaces to clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TodoApiError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class ConflictError(TodoApiError):
    """Uniqueness violation (e.g. email already registered). Surfaced as 400."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Email is already registered"


class AuthError(TodoApiError):
    """Bad credentials, or a missing/revoked session."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Please authenticate."


class CredentialsError(AuthError):
    """Unknown email or wrong password. The login contract reports this as 400."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Unable to login"


class TokenInvalidError(AuthError):
    """Token is malformed, expired, or its signature does not verify."""


class NotFoundError(TodoApiError):
    """Record absent, or present but owned by someone else."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InternalError(TodoApiError):
    """Store or hashing failure. Message is never shown to the client."""


class HashingError(InternalError):
    pass


async def _handle_api_error(request: Request, exc: TodoApiError) -> JSONResponse:
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, InternalError):
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc.message)
        body = {"error": InternalError.default_message}
    else:
        body = {"error": exc.message}
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body/query validation failures are plain 400s, like every other input error."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = ValidationError.default_message
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def _handle_store_error(request: Request, exc: Exception) -> JSONResponse:
    """Driver and store faults surface as the generic 500; the detail goes to the log only."""
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=InternalError.status_code,
        content={"error": InternalError.default_message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TodoApiError, _handle_api_error)
    app.add_exception_handler(SQLAlchemyError, _handle_store_error)
    app.add_exception_handler(OverflowError, _handle_store_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
