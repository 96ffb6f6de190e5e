"""
Bulk unit operation routes.

All three endpoints only affect units in the caller's organization.
Unknown or foreign ids are skipped, not reported as errors.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
import structlog

from models.auth import CurrentUser
from models.bulk import BulkStatusUpdate, BulkPriceUpdate, BulkDeleteRequest
from services.bulk_operations_service import get_bulk_operations_service
from routes.dependencies import require_permission
from exceptions import AppError

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

@router.put("/bulk/status")
async def bulk_update_status(
    data: BulkStatusUpdate,
    user: CurrentUser = Depends(require_permission("units.bulk_update")),
):
    """Set one status on many units."""
    try:
        service = get_bulk_operations_service()
        result = service.update_status(data.unit_ids, data.status, user, notes=data.notes)

        return {
            "success": True,
            "data": result,
            "message": f"{result['updated_count']} units updated"
        }

    except Exception as e:
        return handle_error(e)


@router.put("/bulk/prices")
async def bulk_update_prices(
    data: BulkPriceUpdate,
    user: CurrentUser = Depends(require_permission("units.bulk_update")),
):
    """
    Adjust prices on many units.

    percentage: new = current * (1 + value / 100)
    fixed: new = current + value
    """
    try:
        service = get_bulk_operations_service()
        result = service.update_prices(data.unit_ids, data.price_adjustment, user)

        return {
            "success": True,
            "data": result,
            "message": f"Prices updated for {result['updated_count']} units"
        }

    except Exception as e:
        return handle_error(e)


@router.delete("/bulk")
async def bulk_delete(
    data: BulkDeleteRequest,
    user: CurrentUser = Depends(require_permission("units.delete")),
):
    """Delete many units."""
    try:
        service = get_bulk_operations_service()
        result = service.delete(data.unit_ids, user)

        return {
            "success": True,
            "data": result,
            "message": f"{result['deleted_count']} units deleted"
        }

    except Exception as e:
        return handle_error(e)
