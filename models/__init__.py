"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    TimestampMixin,
)
from models.unit import (
    UnitType,
    UnitStatus,
    UnitRecord,
    UnitResponse,
)
from models.currency import (
    CurrencyResponse,
    CurrencyConversion,
)
from models.csv_import import (
    ImportAction,
    RowSuccess,
    RowFailure,
    ImportBatchResult,
    ImportSummary,
    ImportRowError,
    ImportResponse,
)
from models.bulk import (
    AdjustmentType,
    PriceField,
    PriceAdjustment,
    BulkStatusUpdate,
    BulkPriceUpdate,
    BulkDeleteRequest,
)
from models.audit import (
    AuditAction,
    AuditLogCreate,
)
from models.auth import CurrentUser

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",

    # Unit
    "UnitType",
    "UnitStatus",
    "UnitRecord",
    "UnitResponse",

    # Currency
    "CurrencyResponse",
    "CurrencyConversion",

    # CSV import
    "ImportAction",
    "RowSuccess",
    "RowFailure",
    "ImportBatchResult",
    "ImportSummary",
    "ImportRowError",
    "ImportResponse",

    # Bulk
    "AdjustmentType",
    "PriceField",
    "PriceAdjustment",
    "BulkStatusUpdate",
    "BulkPriceUpdate",
    "BulkDeleteRequest",

    # Audit
    "AuditAction",
    "AuditLogCreate",

    # Auth
    "CurrentUser",
]
