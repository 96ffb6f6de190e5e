"""
Unit schemas for validation and serialization.
"""

from pydantic import Field, field_validator
from typing import Optional
from enum import Enum
from decimal import Decimal

from models.base import BaseSchema, TimestampMixin


class UnitType(str, Enum):
    """Real-estate unit types."""
    APARTMENT = "APARTMENT"
    HOUSE = "HOUSE"
    COMMERCIAL = "COMMERCIAL"
    LAND = "LAND"
    OFFICE = "OFFICE"
    PARKING = "PARKING"
    STORAGE = "STORAGE"


class UnitStatus(str, Enum):
    """Commercial availability of a unit."""
    AVAILABLE = "AVAILABLE"
    RESERVED = "RESERVED"
    SOLD = "SOLD"
    UNAVAILABLE = "UNAVAILABLE"


class UnitRecord(BaseSchema):
    """
    Canonical unit shape written to the units table.

    Produced by the CSV row mapper; (sku, project_id) is unique.
    """

    sku: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Unit SKU (unique within a project)",
        examples=["A-101", "TORRE-B-1204"]
    )
    name: Optional[str] = Field(None, max_length=255, description="Display name")
    unit_type: UnitType = Field(UnitType.APARTMENT, description="Unit type")
    status: UnitStatus = Field(UnitStatus.AVAILABLE, description="Availability")
    price: Decimal = Field(..., description="Price in the unit's currency")
    currency_id: str = Field(..., description="Currency UUID")
    project_id: str = Field(..., min_length=1, description="Project UUID")
    bedrooms: Optional[int] = Field(None, description="Number of bedrooms")
    bathrooms: Optional[Decimal] = Field(None, description="Number of bathrooms")
    area_sqm: Optional[Decimal] = Field(None, description="Area in m²")
    floor: Optional[int] = Field(None, description="Floor number")

    @field_validator("name")
    @classmethod
    def blank_name_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Empty names are stored as NULL."""
        return v or None

    def to_db(self) -> dict:
        """Row payload for insert/update (decimals as floats)."""
        return {
            "sku": self.sku,
            "name": self.name,
            "unit_type": self.unit_type.value,
            "status": self.status.value,
            "price": float(self.price),
            "currency_id": self.currency_id,
            "project_id": self.project_id,
            "bedrooms": self.bedrooms,
            "bathrooms": float(self.bathrooms) if self.bathrooms is not None else None,
            "area_sqm": float(self.area_sqm) if self.area_sqm is not None else None,
            "floor": self.floor,
        }


class UnitResponse(BaseSchema, TimestampMixin):
    """Unit as stored."""

    id: str = Field(..., description="Unit UUID")
    sku: str
    name: Optional[str] = None
    unit_type: UnitType
    status: UnitStatus
    price: Decimal
    list_price: Optional[Decimal] = None
    sale_price: Optional[Decimal] = None
    currency_id: str
    project_id: str
    bedrooms: Optional[int] = None
    bathrooms: Optional[Decimal] = None
    area_sqm: Optional[Decimal] = None
    floor: Optional[int] = None
