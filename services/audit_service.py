"""
Audit log writer.

One row per batch operation (import, bulk update, bulk delete), never
per unit.
"""

from typing import Optional
import structlog

from config import get_supabase_client
from models.audit import AuditAction, AuditLogCreate
from models.auth import CurrentUser
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class AuditService:
    def __init__(self):
        self.db = get_supabase_client()
        self.table = "audit_logs"

    def record(self, entry: AuditLogCreate) -> None:
        """
        Insert one audit row.

        Raises:
            DatabaseError: If the insert fails
        """
        try:
            self.db.table(self.table).insert(
                entry.model_dump(mode="json", exclude_none=True)
            ).execute()
        except Exception as e:
            logger.error(
                "audit_log_failed",
                action=entry.action.value,
                entity_id=entry.entity_id,
                error=str(e)
            )
            raise DatabaseError("insert", str(e))

        logger.info(
            "audit_logged",
            action=entry.action.value,
            entity_type=entry.entity_type,
            entity_id=entry.entity_id,
            user_id=entry.user_id
        )

    def record_import(
        self,
        user: CurrentUser,
        project_id: str,
        total_rows: int,
        successes: int,
        errors: int,
        dry_run: bool,
    ) -> bool:
        """
        Record the summary of a CSV import.

        No-op for dry runs and for batches where nothing succeeded.
        A failed write is logged and does not propagate.

        Returns:
            True if an audit row was written
        """
        if dry_run or successes == 0:
            return False

        try:
            self.record(AuditLogCreate(
                action=AuditAction.IMPORT,
                entity_type="Unit",
                entity_id=f"csv:{successes}",
                old_values={},
                new_values={"project_id": project_id, "total": total_rows},
                changes={"errors": errors, "successes": successes},
                user_id=user.id,
                organization_id=user.organization_id,
            ))
            return True
        except DatabaseError as e:
            logger.warning("import_audit_skipped", project_id=project_id, error=e.message)
            return False


_audit_service: Optional[AuditService] = None

def get_audit_service() -> AuditService:
    global _audit_service
    if _audit_service is None:
        _audit_service = AuditService()
    return _audit_service
