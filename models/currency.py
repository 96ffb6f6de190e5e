"""
Currency schemas.
"""

from pydantic import Field
from typing import Optional
from datetime import datetime

from models.base import BaseSchema


class CurrencyResponse(BaseSchema):
    """Currency as stored."""

    id: str = Field(..., description="Currency UUID")
    code: str = Field(..., description="ISO-like code, e.g. USD, CLP, UF")
    name: Optional[str] = None
    symbol: Optional[str] = None
    decimal_places: int = 2
    exchange_rate_to_usd: Optional[float] = Field(
        None,
        description="Units of this currency per one USD"
    )
    is_active: bool = True


class CurrencyConversion(BaseSchema):
    """Result of converting an amount between two currencies."""

    from_code: str = Field(..., serialization_alias="from")
    to_code: str = Field(..., serialization_alias="to")
    original_amount: float = Field(..., serialization_alias="originalAmount")
    converted_amount: float = Field(..., serialization_alias="convertedAmount")
    rate: float
    timestamp: datetime
