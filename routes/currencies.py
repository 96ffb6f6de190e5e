"""
Currency routes: list, convert, lookup.
"""

from decimal import Decimal
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.auth import CurrentUser
from services.currency_service import get_currency_service
from routes.dependencies import require_permission
from exceptions import AppError, ValidationError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.get("")
async def list_currencies(
    user: CurrentUser = Depends(require_permission("currencies.view")),
):
    """List active currencies ordered by code."""
    try:
        service = get_currency_service()
        currencies = service.get_all()

        return {
            "success": True,
            "data": {
                "currencies": [c.model_dump(mode="json") for c in currencies]
            }
        }

    except Exception as e:
        return handle_error(e)


# Registered before /{id_or_code} so "convert" is not taken as a code
@router.get("/convert")
async def convert_currency(
    from_code: Optional[str] = Query(None, alias="from", description="Source currency code"),
    to_code: Optional[str] = Query(None, alias="to", description="Target currency code"),
    amount: Optional[Decimal] = Query(None, description="Amount in the source currency"),
    user: CurrentUser = Depends(require_permission("currencies.view")),
):
    """Convert an amount between two currencies."""
    try:
        if not from_code or not to_code or amount is None:
            raise ValidationError(
                "from, to and amount are required",
                code="MISSING_PARAMETERS",
                details={"from": from_code, "to": to_code}
            )

        service = get_currency_service()
        conversion = service.convert(from_code, to_code, amount)

        return {
            "success": True,
            "data": conversion.model_dump(by_alias=True, mode="json")
        }

    except Exception as e:
        return handle_error(e)


@router.get("/{id_or_code}")
async def get_currency(
    id_or_code: str,
    user: CurrentUser = Depends(require_permission("currencies.view")),
):
    """Get one currency by UUID or code."""
    try:
        service = get_currency_service()
        currency = service.get_by_id_or_code(id_or_code)

        return {
            "success": True,
            "data": {"currency": currency.model_dump(mode="json")}
        }

    except Exception as e:
        return handle_error(e)
