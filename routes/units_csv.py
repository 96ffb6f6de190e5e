"""
Unit CSV routes: import and export.

Import returns the batch envelope with `success: true` even when rows
fail; per-row failures are listed under `errors`.
"""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse, Response
from typing import Optional
import structlog

from config import settings
from models.auth import CurrentUser
from models.csv_import import ImportResponse
from models.unit import UnitStatus, UnitType
from parsers.csv_parser import read_unit_csv
from services.unit_import_service import get_unit_import_service
from services.unit_export_service import get_unit_export_service, export_filename
from routes.dependencies import require_permission
from exceptions import AppError, MissingFileError, CSVFileTooLargeError

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


def _form_flag(value: Optional[str]) -> bool:
    """Multipart booleans arrive as strings; only "true" counts."""
    return (value or "").strip().lower() == "true"


# ===================
# ROUTES
# ===================

@router.post("/import/csv")
async def import_units_csv(
    file: Optional[UploadFile] = File(None, description="CSV file with one unit per row"),
    project_id: str = Form(..., description="Target project"),
    update_existing: Optional[str] = Form(None, description='"true" to upsert by SKU'),
    dry_run: Optional[str] = Form(None, description='"true" to validate without writing'),
    user: CurrentUser = Depends(require_permission("units.csv_import")),
):
    """
    Import units from a CSV file into a project.

    Rows are processed in file order. A failing row is reported and the
    import continues with the next one.

    Raises:
        400: No file
        413: File over the size limit
        404: Project not in the caller's organization
        422: File is not a readable CSV
    """
    try:
        if file is None or not file.filename:
            raise MissingFileError()

        # Read one byte past the limit so oversized uploads are never fully buffered
        content = await file.read(settings.csv_max_bytes + 1)
        if len(content) > settings.csv_max_bytes:
            raise CSVFileTooLargeError(file.size or len(content), settings.csv_max_bytes)

        logger.info(
            "csv_upload_received",
            filename=file.filename,
            size=len(content),
            project_id=project_id
        )

        rows = read_unit_csv(content)

        service = get_unit_import_service()
        result = service.import_units(
            rows,
            project_id=project_id,
            user=user,
            update_existing=_form_flag(update_existing),
            dry_run=_form_flag(dry_run),
        )

        return ImportResponse.from_result(result).to_dict()

    except Exception as e:
        return handle_error(e)


@router.get("/export/csv")
async def export_units_csv(
    project_id: Optional[str] = Query(None, description="Only this project"),
    status: Optional[UnitStatus] = Query(None, description="Filter by status"),
    unit_type: Optional[UnitType] = Query(None, description="Filter by unit type"),
    user: CurrentUser = Depends(require_permission("units.view")),
):
    """
    Export the organization's units as CSV.

    Columns match the import format so the file can be re-imported.
    """
    try:
        service = get_unit_export_service()
        csv_text = service.export_units(
            organization_id=user.organization_id,
            project_id=project_id,
            status=status,
            unit_type=unit_type,
        )

        return Response(
            content=csv_text,
            media_type="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename={export_filename()}"
            }
        )

    except Exception as e:
        return handle_error(e)
