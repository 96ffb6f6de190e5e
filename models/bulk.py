"""
Bulk unit operation payloads.
"""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum

from models.base import BaseSchema
from models.unit import UnitStatus


class AdjustmentType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class PriceField(str, Enum):
    """Which price column(s) an adjustment applies to."""
    PRICE = "price"
    LIST_PRICE = "list_price"
    SALE_PRICE = "sale_price"
    ALL = "all"

    def columns(self) -> list[str]:
        if self is PriceField.ALL:
            return ["price", "list_price", "sale_price"]
        return [self.value]


class BulkStatusUpdate(BaseSchema):
    """Set the same status on many units."""

    unit_ids: list[str] = Field(..., min_length=1, description="Units to update")
    status: UnitStatus
    notes: Optional[str] = Field(None, max_length=1000)


class PriceAdjustment(BaseModel):
    """
    Price change applied per unit.

    percentage: new = current * (1 + value / 100)
    fixed:      new = current + value
    """

    type: AdjustmentType
    value: float
    apply_to: PriceField


class BulkPriceUpdate(BaseSchema):
    """Adjust prices on many units."""

    unit_ids: list[str] = Field(..., min_length=1)
    price_adjustment: PriceAdjustment


class BulkDeleteRequest(BaseSchema):
    """Delete many units."""

    unit_ids: list[str] = Field(..., min_length=1)
