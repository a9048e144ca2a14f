"""Exception handlers for converting custom exceptions to HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from backend.app.core.exceptions import (
    IdeationAgentException,
    SessionNotFoundError,
    UserNotFoundError,
    ReportNotFoundError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidStatusTransitionError,
    ProgressRegressionError,
    ReportGenerationError,
)

logger = logging.getLogger(__name__)


async def ideation_exception_handler(request: Request, exc: IdeationAgentException) -> JSONResponse:
    """
    Handle all application exceptions and convert to appropriate HTTP responses.

    Args:
        request: The incoming request
        exc: The exception that was raised

    Returns:
        JSONResponse with appropriate status code and error details
    """
    if isinstance(exc, (SessionNotFoundError, UserNotFoundError, ReportNotFoundError)):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (EmailAlreadyRegisteredError, InvalidStatusTransitionError, ProgressRegressionError)):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(exc, InvalidCredentialsError):
        status_code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(exc, ReportGenerationError):
        logger.error(f"[ERROR] {request.method} {request.url.path}: {exc.message}")
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "type": exc.__class__.__name__,
            **({"info": exc.details} if exc.details else {})
        }
    )


def register_exception_handlers(app):
    """
    Register all custom exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(IdeationAgentException, ideation_exception_handler)
