"""
Custom exception classes for the application.

Every error carries a stable code, an HTTP status and optional details,
and renders to the standard error envelope via to_dict().
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "UNIT_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class DuplicateError(ConflictError):
    """Duplicate resource (409)."""

    def __init__(
        self,
        resource: str,
        field: str,
        value: str
    ):
        super().__init__(
            code=f"{resource.upper()}_{field.upper()}_EXISTS",
            message=f"{resource} with this {field} already exists",
            details={field: value}
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


class AuthenticationError(AppError):
    """Missing or unusable credentials (401)."""

    def __init__(self, message: str = "Unauthorized", code: str = "UNAUTHORIZED"):
        super().__init__(
            code=code,
            message=message,
            status_code=401
        )


class PermissionDeniedError(AppError):
    """Authenticated but not allowed (403)."""

    def __init__(self, permission: str, role: Optional[str]):
        super().__init__(
            code="FORBIDDEN",
            message="Forbidden - Insufficient permissions",
            status_code=403,
            details={"permission": permission, "role": role}
        )


# ===================
# AUTH ERRORS
# ===================

class TokenExpiredError(AuthenticationError):
    """Access token is past its expiry."""

    def __init__(self):
        super().__init__(message="Token expired", code="TOKEN_EXPIRED")


class InvalidTokenError(AuthenticationError):
    """Access token failed verification."""

    def __init__(self):
        super().__init__(message="Invalid token", code="INVALID_TOKEN")


# ===================
# UNIT ERRORS
# ===================

class UnitNotFoundError(NotFoundError):
    """Unit not found."""

    def __init__(self, unit_id: str):
        super().__init__(
            resource="Unit",
            identifier=unit_id,
            code="UNIT_NOT_FOUND"
        )


class UnitSKUExistsError(DuplicateError):
    """A unit with this SKU already exists in the project."""

    def __init__(self, sku: str):
        super().__init__(
            resource="Unit",
            field="sku",
            value=sku
        )


# ===================
# PROJECT ERRORS
# ===================

class ProjectNotFoundError(NotFoundError):
    """Project not found (or not visible to the organization)."""

    def __init__(self, project_id: str):
        super().__init__(
            resource="Project",
            identifier=project_id,
            code="PROJECT_NOT_FOUND"
        )


# ===================
# CURRENCY ERRORS
# ===================

class CurrencyNotFoundError(NotFoundError):
    """Currency not found by id or code."""

    def __init__(self, id_or_code: str):
        super().__init__(
            resource="Currency",
            identifier=id_or_code,
            code="CURRENCY_NOT_FOUND"
        )


class DefaultCurrencyMissingError(AppError):
    """The configured default currency is not in the currencies table."""

    def __init__(self, code: str):
        super().__init__(
            code="DEFAULT_CURRENCY_MISSING",
            message="Default currency not found",
            status_code=500,
            details={"currency_code": code}
        )


# ===================
# CSV ERRORS
# ===================

class MissingFileError(AppError):
    """No CSV file was sent with the request."""

    def __init__(self):
        super().__init__(
            code="CSV_FILE_REQUIRED",
            message="No CSV file provided",
            status_code=400
        )


class CSVFileTooLargeError(AppError):
    """Uploaded CSV is over the configured size limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            code="CSV_FILE_TOO_LARGE",
            message="CSV file too large",
            status_code=413,
            details={"size": size, "limit": limit}
        )


class CSVParseError(ValidationError):
    """CSV file could not be read as a table."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="CSV_PARSE_ERROR",
            message=message,
            details=details
        )


class RowMappingError(ValidationError):
    """A single CSV row could not be turned into a unit."""

    def __init__(self, field: str, value: str, message: Optional[str] = None):
        super().__init__(
            code="CSV_ROW_INVALID",
            message=message or f"Invalid value for {field}: {value!r}",
            details={"field": field, "value": value}
        )
