"""
Currency service: lookups and USD-pivot conversion.

exchange_rate_to_usd is "units of this currency per one USD", so
converting goes amount / from_rate * to_rate.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from uuid import UUID
import structlog

from config import get_supabase_client
from models.currency import CurrencyResponse, CurrencyConversion
from exceptions import CurrencyNotFoundError, DatabaseError

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")


def _looks_like_uuid(value: str) -> bool:
    try:
        UUID(value)
        return True
    except ValueError:
        return False


def _rate(currency: CurrencyResponse) -> Decimal:
    """Exchange rate, with missing or zero rates treated as parity."""
    if not currency.exchange_rate_to_usd:
        return Decimal("1")
    return Decimal(str(currency.exchange_rate_to_usd))


class CurrencyService:
    """Currency business logic."""

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "currencies"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(self) -> list[CurrencyResponse]:
        """Active currencies ordered by code."""
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("is_active", True)
                .order("code")
                .execute()
            )
            return [CurrencyResponse(**row) for row in result.data]

        except Exception as e:
            logger.error("get_currencies_failed", error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_code(self, code: str) -> Optional[CurrencyResponse]:
        """
        Get a currency by code (case-insensitive).

        Returns:
            CurrencyResponse or None if not found
        """
        logger.debug("getting_currency_by_code", code=code)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("code", code.strip().upper())
                .limit(1)
                .execute()
            )

            if not result.data:
                return None

            return CurrencyResponse(**result.data[0])

        except Exception as e:
            logger.error("get_currency_by_code_failed", code=code, error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_id_or_code(self, id_or_code: str) -> CurrencyResponse:
        """
        Get a currency by UUID or by code.

        Raises:
            CurrencyNotFoundError: If neither matches
        """
        currency = self.get_by_code(id_or_code)
        if currency:
            return currency

        if _looks_like_uuid(id_or_code):
            try:
                result = (
                    self.db.table(self.table)
                    .select("*")
                    .eq("id", id_or_code)
                    .limit(1)
                    .execute()
                )
            except Exception as e:
                logger.error("get_currency_failed", id=id_or_code, error=str(e))
                raise DatabaseError("select", str(e))

            if result.data:
                return CurrencyResponse(**result.data[0])

        raise CurrencyNotFoundError(id_or_code)

    # ===================
    # CONVERSION
    # ===================

    def convert(self, from_code: str, to_code: str, amount: Decimal) -> CurrencyConversion:
        """
        Convert an amount between two currencies through USD.

        Raises:
            CurrencyNotFoundError: If either code is unknown
        """
        source = self.get_by_code(from_code)
        if source is None:
            raise CurrencyNotFoundError(from_code)
        target = self.get_by_code(to_code)
        if target is None:
            raise CurrencyNotFoundError(to_code)

        from_rate = _rate(source)
        to_rate = _rate(target)

        converted = (amount / from_rate * to_rate).quantize(CENT, rounding=ROUND_HALF_UP)

        logger.info(
            "currency_converted",
            from_code=source.code,
            to_code=target.code,
            amount=str(amount),
            converted=str(converted)
        )

        return CurrencyConversion(
            from_code=source.code,
            to_code=target.code,
            original_amount=float(amount),
            converted_amount=float(converted),
            rate=float(to_rate / from_rate),
            timestamp=datetime.utcnow(),
        )


_currency_service: Optional[CurrencyService] = None

def get_currency_service() -> CurrencyService:
    """Get or create CurrencyService instance."""
    global _currency_service
    if _currency_service is None:
        _currency_service = CurrencyService()
    return _currency_service
