"""
Bulk unit operations: status change, price adjustment, delete.

Each call only touches units whose project belongs to the caller's
organization and writes one audit row for the whole batch.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional
import structlog

from models.audit import AuditAction, AuditLogCreate
from models.auth import CurrentUser
from models.bulk import AdjustmentType, PriceAdjustment
from models.unit import UnitStatus
from services.audit_service import get_audit_service
from services.unit_service import get_unit_service

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")


def adjust_price(current: Any, adjustment: PriceAdjustment) -> Optional[float]:
    """
    Apply a percentage or fixed adjustment to one price.

    Missing prices stay missing. Results are rounded to cents.
    """
    if current is None:
        return None

    price = Decimal(str(current))
    value = Decimal(str(adjustment.value))

    if adjustment.type == AdjustmentType.PERCENTAGE:
        new_price = price * (1 + value / 100)
    else:
        new_price = price + value

    return float(new_price.quantize(CENT, rounding=ROUND_HALF_UP))


class BulkOperationsService:
    def __init__(self):
        self.units = get_unit_service()
        self.audit = get_audit_service()

    def _allowed_ids(self, unit_ids: list[str], user: CurrentUser, columns: str = "id") -> list[dict]:
        # Duplicate ids in the request count once
        return self.units.get_in_organization(
            list(dict.fromkeys(unit_ids)),
            user.organization_id,
            columns=columns
        )

    def update_status(
        self,
        unit_ids: list[str],
        status: UnitStatus,
        user: CurrentUser,
        notes: Optional[str] = None,
    ) -> dict:
        """Set status on every visible unit. Returns counts for the response."""
        rows = self._allowed_ids(unit_ids, user)
        updated = self.units.update_many([r["id"] for r in rows], {"status": status.value})

        self.audit.record(AuditLogCreate(
            action=AuditAction.UPDATE,
            entity_type="Unit",
            entity_id=f"bulk:{len(unit_ids)}",
            new_values={"status": status.value, "unit_count": updated},
            metadata={"unit_ids": unit_ids, "notes": notes},
            user_id=user.id,
            organization_id=user.organization_id,
        ))

        logger.info(
            "bulk_status_updated",
            requested=len(unit_ids),
            updated=updated,
            status=status.value
        )

        return {
            "updated_count": updated,
            "requested_count": len(unit_ids),
            "status": status.value,
        }

    def update_prices(
        self,
        unit_ids: list[str],
        adjustment: PriceAdjustment,
        user: CurrentUser,
    ) -> dict:
        """Adjust the selected price columns of every visible unit."""
        columns = adjustment.apply_to.columns()
        rows = self._allowed_ids(unit_ids, user, columns="id, " + ", ".join(columns))

        for row in rows:
            data = {column: adjust_price(row.get(column), adjustment) for column in columns}
            self.units.update(row["id"], data)

        self.audit.record(AuditLogCreate(
            action=AuditAction.UPDATE,
            entity_type="Unit",
            entity_id=f"bulk:{len(rows)}",
            new_values={"price_adjustment": adjustment.model_dump(mode="json")},
            metadata={"unit_ids": unit_ids},
            user_id=user.id,
            organization_id=user.organization_id,
        ))

        logger.info(
            "bulk_prices_updated",
            requested=len(unit_ids),
            updated=len(rows),
            adjustment_type=adjustment.type.value,
            apply_to=adjustment.apply_to.value
        )

        return {
            "updated_count": len(rows),
            "adjustment": adjustment.model_dump(mode="json"),
        }

    def delete(self, unit_ids: list[str], user: CurrentUser) -> dict:
        """Delete every visible unit."""
        rows = self._allowed_ids(unit_ids, user)
        deleted = self.units.delete_many([r["id"] for r in rows])

        self.audit.record(AuditLogCreate(
            action=AuditAction.DELETE,
            entity_type="Unit",
            entity_id=f"bulk:{deleted}",
            old_values={"unit_ids": unit_ids},
            new_values={},
            metadata={},
            user_id=user.id,
            organization_id=user.organization_id,
        ))

        logger.info("bulk_units_deleted", requested=len(unit_ids), deleted=deleted)

        return {"deleted_count": deleted}


_bulk_service: Optional[BulkOperationsService] = None

def get_bulk_operations_service() -> BulkOperationsService:
    global _bulk_service
    if _bulk_service is None:
        _bulk_service = BulkOperationsService()
    return _bulk_service
