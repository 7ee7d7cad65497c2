"""
Naija Tax Calculator - Error Handling

Exception types raised by the validators and the calculation history, and the
FastAPI handlers that turn them (and framework errors) into one JSON shape:

    {"detail": {"code": ..., "message": ..., "timestamp": ..., "field"?: ..., "details"?: ...}}
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union
from uuid import UUID
import logging

from fastapi import FastAPI, Request, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import (
    SQLAlchemyError,
    IntegrityError,
    OperationalError,
    DataError,
)
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("naija_tax.errors")


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in detail.code"""

    # Input (422 / 400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_TIN = "INVALID_TIN"

    # Lookup (404 / 409)
    NOT_FOUND = "NOT_FOUND"
    CALCULATION_NOT_FOUND = "CALCULATION_NOT_FOUND"
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Plain HTTPExceptions raised by the framework
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    RATE_LIMITED = "RATE_LIMITED"

    # Storage (500)
    DATABASE_ERROR = "DATABASE_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DATA_INTEGRITY_ERROR = "DATA_INTEGRITY_ERROR"

    INTERNAL_ERROR = "INTERNAL_ERROR"


_HTTP_STATUS_CODES = {
    400: ErrorCode.INVALID_INPUT,
    401: ErrorCode.UNAUTHORIZED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    409: ErrorCode.RESOURCE_CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
    429: ErrorCode.RATE_LIMITED,
}


class AppException(Exception):
    """Base class for errors this application raises on purpose."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.field = field
        self.original_error = original_error
        self.timestamp = _utc_timestamp()

    def to_dict(self) -> Dict[str, Any]:
        """Body of the "detail" object in an error response."""
        body: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "timestamp": self.timestamp,
        }
        if self.field:
            body["field"] = self.field
        if self.details:
            body["details"] = self.details
        return body


# ============================================================================
# Input errors
# ============================================================================

class ValidationException(AppException):
    """Input rejected before or during a calculation (422)."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            field=field,
        )


class InvalidTINException(ValidationException):
    """TIN that is not 10 or 12 digits."""

    def __init__(self, tin: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"Invalid TIN format: {tin}. Expected 10 or 12 digits.",
            field="tin",
            code=ErrorCode.INVALID_TIN,
            details={"provided_tin": tin, "expected_format": "10 or 12 digits, hyphens and spaces allowed"},
        )


# ============================================================================
# Lookup errors
# ============================================================================

class NotFoundException(AppException):
    """Requested record does not exist (404)."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[Union[str, UUID]] = None,
        code: ErrorCode = ErrorCode.NOT_FOUND,
    ):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} '{resource_id}' not found"
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={
                "resource_type": resource_type,
                "resource_id": str(resource_id) if resource_id is not None else None,
            },
        )


class CalculationNotFoundException(NotFoundException):
    """No calculation with this id for the requesting owner."""

    def __init__(self, calculation_id: Union[str, UUID]):
        super().__init__("Calculation", calculation_id, code=ErrorCode.CALCULATION_NOT_FOUND)


# ============================================================================
# Handlers
# ============================================================================

def create_error_response(
    code: ErrorCode,
    message: str,
    status_code: int,
    details: Optional[Dict[str, Any]] = None,
    field: Optional[str] = None,
) -> JSONResponse:
    detail: Dict[str, Any] = {
        "code": code.value,
        "message": message,
        "timestamp": _utc_timestamp(),
    }
    if field:
        detail["field"] = field
    if details:
        detail["details"] = details

    return JSONResponse(status_code=status_code, content={"detail": detail})


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "%s %s -> %s %s: %s",
        request.method, request.url.path, exc.status_code, exc.code.value, exc.message,
        exc_info=exc.original_error,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, message)

    return create_error_response(code=code, message=message, status_code=exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Flatten pydantic errors to field paths such as body.incomes.0.amount."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    logger.warning(
        "%s %s -> 422: %d invalid field(s): %s",
        request.method, request.url.path, len(errors), ", ".join(e["field"] for e in errors),
    )

    return create_error_response(
        code=ErrorCode.VALIDATION_ERROR,
        message="Request validation failed",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        details={"errors": errors},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Map storage failures from the calculation history; driver messages stay in the log."""
    code = ErrorCode.DATABASE_ERROR
    message = "Could not access calculation history"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if isinstance(exc, IntegrityError):
        code = ErrorCode.DATA_INTEGRITY_ERROR
        message = "Calculation could not be stored"
        original = str(exc.orig).lower() if exc.orig else ""
        if "unique" in original or "duplicate" in original:
            code = ErrorCode.DUPLICATE_ENTRY
            message = "Calculation already exists"
            status_code = status.HTTP_409_CONFLICT
    elif isinstance(exc, OperationalError):
        code = ErrorCode.CONNECTION_ERROR
        message = "Calculation history is unavailable"
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif isinstance(exc, DataError):
        message = "Calculation data could not be stored"
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    logger.error(
        "%s %s -> %s %s",
        request.method, request.url.path, status_code, type(exc).__name__,
        exc_info=exc,
    )

    return create_error_response(code=code, message=message, status_code=status_code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.critical(
        "%s %s -> unhandled %s",
        request.method, request.url.path, type(exc).__name__,
        exc_info=exc,
    )

    return create_error_response(
        code=ErrorCode.INTERNAL_ERROR,
        message="An unexpected error occurred. Please try again later.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register every handler above on the application."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = [
    "AppException",
    "ErrorCode",
    "ValidationException",
    "InvalidTINException",
    "NotFoundException",
    "CalculationNotFoundException",
    "setup_exception_handlers",
    "create_error_response",
]
