"""
Project lookups scoped to an organization.
"""

from typing import Any, Optional
from uuid import UUID
import structlog

from config import get_supabase_client
from exceptions import ProjectNotFoundError, DatabaseError

logger = structlog.get_logger(__name__)


def _is_uuid(value: str) -> bool:
    try:
        UUID(value)
        return True
    except (ValueError, TypeError, AttributeError):
        return False


class ProjectService:
    """Read access to projects for tenant checks."""

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "projects"

    def get_for_organization(self, project_id: str, organization_id: str) -> dict[str, Any]:
        """
        Get a project if it belongs to the organization.

        Raises:
            ProjectNotFoundError: If missing or owned by another organization
        """
        logger.debug(
            "getting_project",
            project_id=project_id,
            organization_id=organization_id
        )

        # projects.id is a uuid column; other values never match a row
        if not _is_uuid(project_id):
            raise ProjectNotFoundError(project_id)

        try:
            result = (
                self.db.table(self.table)
                .select("id, name, organization_id")
                .eq("id", project_id)
                .eq("organization_id", organization_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("get_project_failed", project_id=project_id, error=str(e))
            raise DatabaseError("select", str(e))

        if not result.data:
            raise ProjectNotFoundError(project_id)

        return result.data[0]


_project_service: Optional[ProjectService] = None

def get_project_service() -> ProjectService:
    """Get or create ProjectService instance."""
    global _project_service
    if _project_service is None:
        _project_service = ProjectService()
    return _project_service
