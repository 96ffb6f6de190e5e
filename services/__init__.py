"""
Business logic services.

Each service handles one domain area.
"""

from services.unit_service import UnitService, get_unit_service
from services.project_service import ProjectService, get_project_service
from services.currency_service import CurrencyService, get_currency_service
from services.audit_service import AuditService, get_audit_service
from services.unit_import_service import UnitImportService, get_unit_import_service
from services.unit_export_service import UnitExportService, get_unit_export_service
from services.bulk_operations_service import (
    BulkOperationsService,
    get_bulk_operations_service,
)

__all__ = [
    "UnitService",
    "get_unit_service",
    "ProjectService",
    "get_project_service",
    "CurrencyService",
    "get_currency_service",
    "AuditService",
    "get_audit_service",
    "UnitImportService",
    "get_unit_import_service",
    "UnitExportService",
    "get_unit_export_service",
    "BulkOperationsService",
    "get_bulk_operations_service",
]
