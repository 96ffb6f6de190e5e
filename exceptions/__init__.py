"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    DuplicateError,
    DatabaseError,
    AuthenticationError,
    PermissionDeniedError,

    # Auth
    TokenExpiredError,
    InvalidTokenError,

    # Units
    UnitNotFoundError,
    UnitSKUExistsError,

    # Projects
    ProjectNotFoundError,

    # Currencies
    CurrencyNotFoundError,
    DefaultCurrencyMissingError,

    # CSV
    MissingFileError,
    CSVFileTooLargeError,
    CSVParseError,
    RowMappingError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "DuplicateError",
    "DatabaseError",
    "AuthenticationError",
    "PermissionDeniedError",

    # Auth
    "TokenExpiredError",
    "InvalidTokenError",

    # Units
    "UnitNotFoundError",
    "UnitSKUExistsError",

    # Projects
    "ProjectNotFoundError",

    # Currencies
    "CurrencyNotFoundError",
    "DefaultCurrencyMissingError",

    # CSV
    "MissingFileError",
    "CSVFileTooLargeError",
    "CSVParseError",
    "RowMappingError",
]
