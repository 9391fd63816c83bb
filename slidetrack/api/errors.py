"""
API error handling and exception mapping.

Converts the domain error taxonomy and framework errors into JSON
``ErrorResponse`` bodies with the matching HTTP status.
"""

from datetime import datetime, timezone
from typing import Callable

from fastapi import HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from slidetrack.api.schemas.base import ErrorResponse
from slidetrack.domain.exceptions import (
    ConflictError,
    DomainError,
    InvalidInputError,
    NotFoundError,
)
from slidetrack.infra.config.logging_config import get_logger

logger = get_logger("api.errors")


def status_for(exc: DomainError) -> int:
    """Map a domain error kind to its HTTP status code."""
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, InvalidInputError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, ConflictError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_body(error: str, detail: str) -> dict:
    return ErrorResponse(
        error=error, detail=detail, timestamp=datetime.now(timezone.utc)
    ).model_dump(mode="json")


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """
    Handle domain-specific errors.

    Args:
        request: The HTTP request
        exc: The domain error

    Returns:
        JSONResponse: Formatted error response
    """
    status_code = status_for(exc)
    logger.warning("api.domain_error", code=exc.code, status_code=status_code, detail=exc.message)
    return JSONResponse(status_code=status_code, content=_error_body(exc.code, exc.message))


def _validation_detail(exc: RequestValidationError) -> str:
    formatted_errors = []
    for error in exc.errors():
        location = " -> ".join(str(loc) for loc in error["loc"])
        formatted_errors.append(f"{location}: {error['msg']}")
    return "Validation failed: " + "; ".join(formatted_errors)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request body / parameter validation errors."""
    error_detail = _validation_detail(exc)
    logger.warning("api.validation_error", detail=error_detail)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body("VALIDATION_ERROR", error_detail),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    logger.warning("api.http_exception", status_code=exc.status_code, detail=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(f"HTTP_{exc.status_code}", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.

    The client gets a generic message; the traceback goes to the log only.
    """
    logger.exception("api.unexpected_error", error_type=type(exc).__name__, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred. Please try again later.",
        ),
    )


class InvalidInputRoute(APIRoute):
    """
    Route class for the tracking write path: a missing or malformed field in
    the request is reported as InvalidInput (400), the same as the checks the
    use cases run themselves.
    """

    def get_route_handler(self) -> Callable:
        handler = super().get_route_handler()

        async def route_handler(request: Request) -> Response:
            try:
                return await handler(request)
            except RequestValidationError as exc:
                raise InvalidInputError(_validation_detail(exc)) from exc

        return route_handler


def setup_error_handlers(app) -> None:
    """
    Setup error handlers for the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
