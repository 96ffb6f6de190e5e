"""
Unit service for database operations on the units table.

Used by the CSV importer/exporter and bulk operations.
"""

from typing import Any, Optional
import structlog

from config import get_supabase_client
from models.unit import UnitRecord, UnitResponse, UnitStatus, UnitType
from exceptions import (
    UnitNotFoundError,
    UnitSKUExistsError,
    DatabaseError
)

logger = structlog.get_logger(__name__)

# Columns pulled for export: unit fields plus project/currency joins.
# projects!inner lets us filter units by the project's organization.
EXPORT_SELECT = "*, projects!inner(name, organization_id), currencies(code, symbol)"


def _is_unique_violation(error: Exception) -> bool:
    """Postgres unique_violation surfaced through PostgREST."""
    text = str(error).lower()
    return "23505" in text or "duplicate key" in text


class UnitService:
    """
    Unit business logic.

    All lookups that drive imports are keyed by (sku, project_id).
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "units"

    # ===================
    # READ OPERATIONS
    # ===================

    def get_by_sku_and_project(self, sku: str, project_id: str) -> Optional[UnitResponse]:
        """
        Get a unit by its (sku, project_id) key.

        Returns:
            UnitResponse or None if not found
        """
        logger.debug("getting_unit_by_sku", sku=sku, project_id=project_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("sku", sku)
                .eq("project_id", project_id)
                .limit(1)
                .execute()
            )

            if not result.data:
                return None

            return UnitResponse(**result.data[0])

        except Exception as e:
            logger.error(
                "get_unit_by_sku_failed",
                sku=sku,
                project_id=project_id,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    def get_for_export(
        self,
        organization_id: str,
        project_id: Optional[str] = None,
        status: Optional[UnitStatus] = None,
        unit_type: Optional[UnitType] = None,
    ) -> list[dict[str, Any]]:
        """
        Get units of an organization with project and currency joins.

        Ordered by project, then SKU.

        Returns:
            Raw joined rows (unit columns + `projects` + `currencies`)
        """
        logger.info(
            "getting_units_for_export",
            organization_id=organization_id,
            project_id=project_id,
            status=status,
            unit_type=unit_type
        )

        try:
            query = (
                self.db.table(self.table)
                .select(EXPORT_SELECT)
                .eq("projects.organization_id", organization_id)
            )

            if project_id:
                query = query.eq("project_id", project_id)
            if status:
                query = query.eq("status", status.value)
            if unit_type:
                query = query.eq("unit_type", unit_type.value)

            result = query.order("project_id").order("sku").execute()
            return result.data or []

        except Exception as e:
            logger.error("get_units_for_export_failed", error=str(e))
            raise DatabaseError("select", str(e))

    def get_in_organization(
        self,
        unit_ids: list[str],
        organization_id: str,
        columns: str = "id",
    ) -> list[dict[str, Any]]:
        """
        Filter unit ids down to those whose project belongs to the organization.

        Args:
            unit_ids: Candidate unit UUIDs
            organization_id: Caller's organization
            columns: Extra unit columns to return (comma separated)

        Returns:
            Matching unit rows
        """
        if not unit_ids:
            return []

        try:
            result = (
                self.db.table(self.table)
                .select(f"{columns}, projects!inner(organization_id)")
                .in_("id", unit_ids)
                .eq("projects.organization_id", organization_id)
                .execute()
            )
            return result.data or []

        except Exception as e:
            logger.error(
                "get_units_in_organization_failed",
                count=len(unit_ids),
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, unit: UnitRecord) -> UnitResponse:
        """
        Insert a new unit.

        Raises:
            UnitSKUExistsError: If (sku, project_id) already exists
        """
        logger.info("creating_unit", sku=unit.sku, project_id=unit.project_id)

        if self.get_by_sku_and_project(unit.sku, unit.project_id):
            raise UnitSKUExistsError(unit.sku)

        try:
            result = (
                self.db.table(self.table)
                .insert(unit.to_db())
                .execute()
            )

            created = UnitResponse(**result.data[0])

            logger.info("unit_created", unit_id=created.id, sku=created.sku)

            return created

        except Exception as e:
            if _is_unique_violation(e):
                raise UnitSKUExistsError(unit.sku)
            logger.error("create_unit_failed", sku=unit.sku, error=str(e))
            raise DatabaseError("insert", str(e))

    def update(self, unit_id: str, data: dict[str, Any]) -> UnitResponse:
        """
        Update columns of one unit.

        Raises:
            UnitNotFoundError: If no row was updated
        """
        logger.info("updating_unit", unit_id=unit_id, fields=list(data.keys()))

        try:
            result = (
                self.db.table(self.table)
                .update(data)
                .eq("id", unit_id)
                .execute()
            )
        except Exception as e:
            logger.error("update_unit_failed", unit_id=unit_id, error=str(e))
            raise DatabaseError("update", str(e))

        if not result.data:
            raise UnitNotFoundError(unit_id)

        return UnitResponse(**result.data[0])

    def upsert(self, unit: UnitRecord) -> tuple[UnitResponse, bool]:
        """
        Update the unit with the same (sku, project_id), or insert it.

        Returns:
            Tuple of (stored unit, created flag)
        """
        existing = self.get_by_sku_and_project(unit.sku, unit.project_id)

        if existing:
            return self.update(existing.id, unit.to_db()), False

        return self.create(unit), True

    def update_many(self, unit_ids: list[str], data: dict[str, Any]) -> int:
        """Apply the same column values to many units. Returns rows updated."""
        if not unit_ids:
            return 0

        try:
            result = (
                self.db.table(self.table)
                .update(data)
                .in_("id", unit_ids)
                .execute()
            )
            return len(result.data or [])

        except Exception as e:
            logger.error("update_units_failed", count=len(unit_ids), error=str(e))
            raise DatabaseError("update", str(e))

    def delete_many(self, unit_ids: list[str]) -> int:
        """Delete many units. Returns rows deleted."""
        if not unit_ids:
            return 0

        try:
            result = (
                self.db.table(self.table)
                .delete()
                .in_("id", unit_ids)
                .execute()
            )
            return len(result.data or [])

        except Exception as e:
            logger.error("delete_units_failed", count=len(unit_ids), error=str(e))
            raise DatabaseError("delete", str(e))


# Singleton instance for convenience
_unit_service: Optional[UnitService] = None

def get_unit_service() -> UnitService:
    """Get or create UnitService instance."""
    global _unit_service
    if _unit_service is None:
        _unit_service = UnitService()
    return _unit_service
