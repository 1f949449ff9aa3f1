"""Mapping of domain errors onto HTTP responses.

Every handler answers with ``{"detail": <message>, "error": <code>}`` plus
error-specific fields, so clients can branch on ``error`` without parsing text.
"""

from typing import Any

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from rolo.domain.error import (
    ConflictError,
    DependencyFailureError,
    DomainError,
    ForbiddenError,
    InconsistencyError,
    InvalidTransitionError,
    NotFoundError,
    SeatLimitExceededError,
    UnauthenticatedError,
    ValidationError,
)


def _error_response(
    status_code: int,
    error: str,
    detail: str,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "error": error, **extra},
        headers=headers,
    )


async def unauthenticated_handler(
    request: Request, exc: UnauthenticatedError
) -> JSONResponse:
    return _error_response(
        status.HTTP_401_UNAUTHORIZED,
        "unauthenticated",
        exc.reason,
        headers={"WWW-Authenticate": "Bearer"},
        expired=exc.expired,
    )


async def forbidden_handler(request: Request, exc: ForbiddenError) -> JSONResponse:
    return _error_response(
        status.HTTP_403_FORBIDDEN,
        "forbidden",
        "Insufficient permissions for this community",
        required_roles=exc.required_roles,
        current_role=exc.current_role,
        current_status=exc.current_status,
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(
        status.HTTP_404_NOT_FOUND, "not_found", str(exc), resource=exc.resource
    )


async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    if isinstance(exc, InvalidTransitionError):
        return _error_response(
            status.HTTP_409_CONFLICT,
            "invalid_transition",
            str(exc),
            current=exc.current,
            target=exc.target,
        )
    return _error_response(status.HTTP_409_CONFLICT, "conflict", str(exc))


async def seat_limit_handler(
    request: Request, exc: SeatLimitExceededError
) -> JSONResponse:
    return _error_response(
        status.HTTP_402_PAYMENT_REQUIRED,
        "seat_limit_exceeded",
        str(exc),
        seat_class=exc.seat_class,
        limit=exc.limit,
        current=exc.current,
    )


async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY, "validation_error", str(exc)
    )


async def value_validation_handler(
    request: Request, exc: PydanticValidationError
) -> JSONResponse:
    """Value objects built inside use cases (handles, emails, tokens)."""
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "; ".join(error["msg"] for error in exc.errors()),
    )


async def dependency_failure_handler(
    request: Request, exc: DependencyFailureError
) -> JSONResponse:
    logfire.warn(
        "Dependency failure",
        dependency=exc.dependency,
        retryable=exc.retryable,
        path=request.url.path,
    )
    return _error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "dependency_failure",
        f"{exc.dependency} is unavailable",
        headers={"Retry-After": "1"} if exc.retryable else None,
        retryable=exc.retryable,
    )


async def inconsistency_handler(
    request: Request, exc: InconsistencyError
) -> JSONResponse:
    logfire.error("Inconsistent state", error=str(exc), path=request.url.path)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "inconsistency",
        "The operation was only partially applied",
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logfire.error("Unmapped domain error", error=str(exc), type=type(exc).__name__)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Internal server error"
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register domain error handlers on the app."""
    app.add_exception_handler(UnauthenticatedError, unauthenticated_handler)
    app.add_exception_handler(ForbiddenError, forbidden_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ConflictError, conflict_handler)
    app.add_exception_handler(SeatLimitExceededError, seat_limit_handler)
    app.add_exception_handler(ValidationError, validation_handler)
    app.add_exception_handler(PydanticValidationError, value_validation_handler)
    app.add_exception_handler(DependencyFailureError, dependency_failure_handler)
    app.add_exception_handler(InconsistencyError, inconsistency_handler)
    app.add_exception_handler(DomainError, domain_error_handler)
