"""
Unit CSV import: reconcile parsed rows against a project.

Rows are processed one at a time, in file order. A row that fails
(missing SKU/price, bad number, duplicate SKU, database error) is
recorded and the batch moves on; the batch is not atomic and partial
success is a normal outcome.

Batch-level failures (foreign project, missing default currency) are
raised before any row is touched.
"""

from typing import Mapping, Optional
import structlog

from config import settings
from models.auth import CurrentUser
from models.currency import CurrencyResponse
from models.csv_import import (
    ImportAction,
    ImportBatchResult,
    RowFailure,
    RowSuccess,
)
from models.unit import UnitRecord
from services.audit_service import get_audit_service
from services.currency_service import get_currency_service
from services.project_service import get_project_service
from services.unit_service import get_unit_service
from services.unit_row_mapper import (
    REQUIRED_FIELDS_ERROR,
    has_required_fields,
    map_row,
    requested_currency_code,
    row_sku,
)
from exceptions import AppError, DefaultCurrencyMissingError, UnitSKUExistsError

logger = structlog.get_logger(__name__)

# Row i of the parsed list is line i + 2 of the file (line 1 is the header)
HEADER_OFFSET = 2


class _CurrencyResolver:
    """
    Per-batch currency lookup.

    Each code is looked up at most once per batch, so every row naming
    the same code gets the same currency.
    """

    def __init__(self, default: CurrencyResponse, lookup):
        self.default = default
        self._lookup = lookup
        self._cache: dict[str, Optional[CurrencyResponse]] = {default.code: default}

    def resolve(self, code: Optional[str]) -> CurrencyResponse:
        if not code:
            return self.default
        if code not in self._cache:
            self._cache[code] = self._lookup(code)
        return self._cache[code] or self.default


class UnitImportService:
    """Drives the row mapper over a file and persists or previews the result."""

    def __init__(self):
        self.units = get_unit_service()
        self.currencies = get_currency_service()
        self.projects = get_project_service()
        self.audit = get_audit_service()

    def import_units(
        self,
        rows: list[Mapping[str, Optional[str]]],
        project_id: str,
        user: CurrentUser,
        update_existing: bool = False,
        dry_run: bool = False,
    ) -> ImportBatchResult:
        """
        Import parsed CSV rows into a project.

        Args:
            rows: Parsed rows in file order (header label → cell)
            project_id: Target project (must belong to the user's organization)
            user: Acting user, recorded in the audit log
            update_existing: Upsert by (sku, project_id) instead of insert-only
            dry_run: Classify every row without writing anything

        Returns:
            ImportBatchResult with per-row successes and failures

        Raises:
            ProjectNotFoundError: If the project is not in the user's organization
            DefaultCurrencyMissingError: If the default currency is not configured
        """
        logger.info(
            "csv_import_started",
            project_id=project_id,
            rows=len(rows),
            update_existing=update_existing,
            dry_run=dry_run,
            user_id=user.id
        )

        self.projects.get_for_organization(project_id, user.organization_id)

        default_currency = self.currencies.get_by_code(settings.default_currency_code)
        if default_currency is None:
            logger.error(
                "default_currency_missing",
                currency_code=settings.default_currency_code
            )
            raise DefaultCurrencyMissingError(settings.default_currency_code)

        currencies = _CurrencyResolver(default_currency, self.currencies.get_by_code)
        result = ImportBatchResult(total_rows=len(rows), dry_run=dry_run)

        # SKUs a dry run has already "written", so later duplicate rows
        # classify the same way they would in a live run
        previewed: set[str] = set()

        for index, row in enumerate(rows):
            row_number = index + HEADER_OFFSET
            sku = row_sku(row)

            if not has_required_fields(row):
                logger.debug("csv_row_missing_required", row=row_number, sku=sku)
                result.failures.append(RowFailure(
                    row=row_number,
                    sku=sku,
                    error=REQUIRED_FIELDS_ERROR
                ))
                continue

            try:
                currency = currencies.resolve(requested_currency_code(row))
                unit = map_row(row, project_id, currency.id)

                if dry_run:
                    action = self._preview(unit, update_existing, previewed)
                else:
                    action = self._apply(unit, update_existing)

            except Exception as e:
                message = e.message if isinstance(e, AppError) else str(e)
                logger.warning(
                    "csv_row_failed",
                    row=row_number,
                    sku=sku,
                    error=message,
                    error_type=type(e).__name__
                )
                result.failures.append(RowFailure(
                    row=row_number,
                    sku=sku,
                    error=message or "Unknown error"
                ))
                continue

            result.successes.append(RowSuccess(
                row=row_number,
                sku=unit.sku,
                action=action
            ))

        self.audit.record_import(
            user=user,
            project_id=project_id,
            total_rows=result.total_rows,
            successes=len(result.successes),
            errors=result.error_count,
            dry_run=dry_run,
        )

        logger.info(
            "csv_import_completed",
            project_id=project_id,
            total_rows=result.total_rows,
            created=result.created,
            updated=result.updated,
            errors=result.error_count,
            dry_run=dry_run
        )

        return result

    # ===================
    # PER-ROW ACTIONS
    # ===================

    def _apply(self, unit: UnitRecord, update_existing: bool) -> ImportAction:
        """Write one unit. Insert-only mode fails on an existing SKU."""
        if update_existing:
            _, created = self.units.upsert(unit)
            return ImportAction.CREATED if created else ImportAction.UPDATED

        self.units.create(unit)
        return ImportAction.CREATED

    def _preview(
        self,
        unit: UnitRecord,
        update_existing: bool,
        previewed: set[str],
    ) -> ImportAction:
        """Classify one unit the way _apply would, without writing."""
        exists = (
            unit.sku in previewed
            or self.units.get_by_sku_and_project(unit.sku, unit.project_id) is not None
        )

        if exists and not update_existing:
            raise UnitSKUExistsError(unit.sku)

        previewed.add(unit.sku)
        return ImportAction.UPDATED if exists else ImportAction.CREATED


_import_service: Optional[UnitImportService] = None

def get_unit_import_service() -> UnitImportService:
    """Get or create UnitImportService instance."""
    global _import_service
    if _import_service is None:
        _import_service = UnitImportService()
    return _import_service
