"""
Exception handlers for converting domain exceptions to HTTP responses.

Every handler answers with the same body shape:
``{"detail": ..., "error_type": ..., "details": {...}}``.

Domain exceptions are described by ``ERROR_RESPONSES``; one handler serves
all of them and looks up the closest entry along the exception's MRO.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    BusinessRuleViolationError,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ExternalServiceError,
    InactiveUserError,
    PayloadTooLargeError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorResponse:
    status_code: int
    error_type: str
    log_level: int = logging.WARNING
    include_details: bool = True
    headers: Optional[Dict[str, str]] = None
    # Replaces the exception message in the body when set
    public_message: Optional[str] = None


ERROR_RESPONSES: Dict[type, ErrorResponse] = {
    EntityNotFoundError: ErrorResponse(
        status.HTTP_404_NOT_FOUND, "entity_not_found", log_level=logging.INFO
    ),
    AccessDeniedError: ErrorResponse(status.HTTP_403_FORBIDDEN, "access_denied"),
    AuthenticationError: ErrorResponse(
        status.HTTP_401_UNAUTHORIZED,
        "authentication_error",
        log_level=logging.INFO,
        include_details=False,
        headers={"WWW-Authenticate": "Bearer"},
    ),
    ValidationError: ErrorResponse(status.HTTP_400_BAD_REQUEST, "validation_error"),
    ConflictError: ErrorResponse(status.HTTP_409_CONFLICT, "conflict_error"),
    PayloadTooLargeError: ErrorResponse(
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "payload_too_large"
    ),
    BusinessRuleViolationError: ErrorResponse(
        status.HTTP_422_UNPROCESSABLE_ENTITY, "business_rule_violation"
    ),
    InactiveUserError: ErrorResponse(
        status.HTTP_403_FORBIDDEN, "inactive_user", include_details=False
    ),
    ExternalServiceError: ErrorResponse(
        status.HTTP_502_BAD_GATEWAY, "external_service_error", log_level=logging.ERROR
    ),
    DomainException: ErrorResponse(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "domain_error",
        log_level=logging.ERROR,
        include_details=False,
        public_message="An internal error occurred",
    ),
}

INTEGRITY_MESSAGES = [
    ("unique constraint", "A record with this value already exists"),
    ("foreign key constraint", "Referenced record does not exist"),
    ("not null constraint", "Required field is missing"),
]


def create_error_response(
    status_code: int,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    error_type: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Create a standardized error response."""
    content: Dict[str, Any] = {"detail": message}
    if error_type:
        content["error_type"] = error_type
    if details:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _describe(exc: DomainException) -> str:
    if isinstance(exc, BusinessRuleViolationError):
        return f"{exc.rule_name}: {exc.message}"
    if isinstance(exc, ExternalServiceError):
        return f"{exc.service} failed: {exc.message}"
    return exc.message


def resolve_error_response(exc: DomainException) -> ErrorResponse:
    for klass in type(exc).__mro__:
        if klass in ERROR_RESPONSES:
            return ERROR_RESPONSES[klass]
    return ERROR_RESPONSES[DomainException]


async def domain_exception_handler(
    request: Request, exc: DomainException
) -> JSONResponse:
    entry = resolve_error_response(exc)
    logger.log(
        entry.log_level,
        f"{entry.error_type} on {request.method} {request.url.path}: {_describe(exc)}",
    )

    return create_error_response(
        status_code=entry.status_code,
        message=entry.public_message or exc.message,
        details=exc.details if entry.include_details else None,
        error_type=entry.error_type,
        headers=entry.headers,
    )


async def integrity_error_handler(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    logger.error(f"Database integrity error: {exc}")

    lowered = str(exc).lower()
    message = next(
        (text for marker, text in INTEGRITY_MESSAGES if marker in lowered),
        "Database constraint violation",
    )
    return create_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        message=message,
        error_type="integrity_error",
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning(f"Request validation error on {request.url.path}: {exc.errors()}")

    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Request validation failed",
        details={"validation_errors": exc.errors()},
        error_type="request_validation_error",
    )


EXCEPTION_HANDLERS = {
    **{exc_class: domain_exception_handler for exc_class in ERROR_RESPONSES},
    IntegrityError: integrity_error_handler,
    RequestValidationError: request_validation_error_handler,
}
