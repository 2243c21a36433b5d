"""
Custom exceptions and error handlers for consistent error responses.

Provides the error taxonomy used by the services (NotFound, Conflict,
Validation, Unavailable, Internal) and the global exception handlers that
map it onto HTTP status codes.
"""

import logging
import math

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict

logger = logging.getLogger(__name__)


def json_safe(value: Any) -> Any:
    """Replace NaN and infinities (not valid JSON) with their string form."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {k: json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(v) for v in value]
    return value


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


# --- Taxonomy roots ---

class NotFoundError(AppException):
    """Account, item or id absent."""

    def __init__(self, message: str, error_code: str = "ERR_NOT_FOUND_001", details: Dict[str, Any] = None):
        super().__init__(message, error_code, status.HTTP_404_NOT_FOUND, details)


class ConflictError(AppException):
    """Uniqueness violation."""

    def __init__(self, message: str, error_code: str = "ERR_CONFLICT_001", details: Dict[str, Any] = None):
        super().__init__(message, error_code, status.HTTP_409_CONFLICT, details)


class ValidationFailedError(AppException):
    """Malformed or out-of-range input."""

    def __init__(self, message: str, error_code: str = "ERR_VALIDATION_001", details: Dict[str, Any] = None):
        super().__init__(message, error_code, status.HTTP_400_BAD_REQUEST, details)


class UnavailableError(AppException):
    """Item exists but is not in a sellable state."""

    def __init__(self, message: str, error_code: str = "ERR_UNAVAILABLE_001", details: Dict[str, Any] = None):
        super().__init__(message, error_code, status.HTTP_400_BAD_REQUEST, details)


class InternalError(AppException):
    """Underlying store failure."""

    def __init__(self, message: str = "An internal server error occurred", details: Dict[str, Any] = None):
        super().__init__(message, "ERR_INTERNAL_SERVER", status.HTTP_500_INTERNAL_SERVER_ERROR, details)


# --- Not found ---

class ResourceNotFoundError(NotFoundError):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID {resource_id} not found"
        super().__init__(
            message=message,
            details={"resource": resource, "id": resource_id}
        )


class AccountNotFoundError(NotFoundError):
    """Raised when a customer or partner account does not exist."""

    def __init__(self, kind: str, account_id: Any):
        super().__init__(
            message=f"{kind.capitalize()} with ID {account_id} not found",
            error_code="ERR_NOT_FOUND_002",
            details={"resource": kind, "id": account_id}
        )


class ItemNotFoundError(NotFoundError):
    """Raised when a product or phone unit does not exist."""

    def __init__(self, item_type: str, item_id: Any):
        super().__init__(
            message=f"{item_type.capitalize()} with ID {item_id} not found",
            error_code="ERR_NOT_FOUND_003",
            details={"resource": item_type, "id": item_id}
        )


# --- Conflicts ---

class DuplicateSerialError(ConflictError):
    def __init__(self, imei: str):
        super().__init__(
            message=f"IMEI {imei} is already registered",
            error_code="ERR_CONFLICT_002",
            details={"imei": imei}
        )


class DuplicateContactError(ConflictError):
    def __init__(self, phone_number: str):
        super().__init__(
            message=f"Phone number {phone_number} is already registered",
            error_code="ERR_CONFLICT_003",
            details={"phone_number": phone_number}
        )


class DuplicateUsernameError(ConflictError):
    def __init__(self, username: str):
        super().__init__(
            message=f"Username {username} is already taken",
            error_code="ERR_CONFLICT_004",
            details={"username": username}
        )


class DuplicateNameError(ConflictError):
    def __init__(self, resource: str, name: str):
        super().__init__(
            message=f"{resource.capitalize()} name '{name}' already exists",
            error_code="ERR_CONFLICT_005",
            details={"resource": resource, "name": name}
        )


# --- Validation ---

class InvalidQuantityError(ValidationFailedError):
    def __init__(self, message: str, quantity: Any = None):
        super().__init__(message, "ERR_VALIDATION_002", {"quantity": quantity})


class InvalidPriceError(ValidationFailedError):
    def __init__(self, item_name: str):
        super().__init__(
            f"Selling price for '{item_name}' is missing or invalid",
            "ERR_VALIDATION_003",
            {"item_name": item_name}
        )


class InvalidDiscountError(ValidationFailedError):
    def __init__(self, discount: float, subtotal: float):
        super().__init__(
            "discount exceeds item total",
            "ERR_VALIDATION_004",
            {"discount": discount, "subtotal": subtotal}
        )


class NegativeTotalError(ValidationFailedError):
    def __init__(self, total: float):
        super().__init__(
            "Final price after discount cannot be negative",
            "ERR_VALIDATION_005",
            {"total": total}
        )


class InvalidLedgerEntryError(ValidationFailedError):
    def __init__(self, message: str):
        super().__init__(message, "ERR_VALIDATION_006")


class InvalidDateError(ValidationFailedError):
    def __init__(self, value: Any):
        super().__init__(
            f"Invalid date '{value}', expected YYYY/MM/DD",
            "ERR_VALIDATION_007",
            {"value": value}
        )


# --- Unavailable ---

class ItemNotAvailableError(UnavailableError):
    def __init__(self, item_name: str, current_status: str):
        super().__init__(
            f"'{item_name}' is in status '{current_status}' and cannot be sold",
            "ERR_UNAVAILABLE_002",
            {"item_name": item_name, "status": current_status}
        )


class InsufficientStockError(UnavailableError):
    def __init__(self, item_name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for '{item_name}': {available} available, {requested} requested",
            "ERR_UNAVAILABLE_003",
            {"item_name": item_name, "available": available, "requested": requested}
        )


# --- Auth ---

class InsufficientPermissionsError(AppException):
    """Raised when user doesn't have permission to perform an action."""

    def __init__(self, message: str = "Insufficient permissions", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_PERM_001",
            status_code=status.HTTP_403_FORBIDDEN,
            details=details
        )


class AuthenticationError(AppException):
    """Raised for authentication failures."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(
            message=message,
            error_code="ERR_AUTH_001",
            status_code=status.HTTP_401_UNAUTHORIZED
        )


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": json_safe(exc.details)
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        401: "ERR_UNAUTHORIZED",
        403: "ERR_FORBIDDEN",
        404: "ERR_NOT_FOUND",
        409: "ERR_CONFLICT",
        413: "ERR_PAYLOAD_TOO_LARGE",
        500: "ERR_INTERNAL_SERVER"
    }

    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": exc.detail,
            "details": {}
        },
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors."""
    return JSONResponse(
        status_code=422,
        content={
            "error_code": "ERR_VALIDATION",
            "message": "Validation error",
            "details": {
                "errors": jsonable_errors(exc)
            }
        }
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may carry raw exception objects from custom validators
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        if "input" in err:
            err["input"] = json_safe(err["input"])
        errors.append(err)
    return errors


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception: %s: %s", type(exc).__name__, exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "ERR_INTERNAL_SERVER",
            "message": "An internal server error occurred",
            "details": {}
        }
    )
