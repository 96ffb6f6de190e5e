"""
Unit CSV export.

Writes units with the same column set the importer reads, so an
exported file can be edited and imported back.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional
import structlog

from models.unit import UnitStatus, UnitType
from parsers.csv_parser import write_unit_csv
from services.unit_service import get_unit_service
from services.unit_row_mapper import STATUS_TO_LABEL, UNIT_TYPE_TO_LABEL

logger = structlog.get_logger(__name__)


def format_number(value: Any) -> str:
    """
    Plain decimal text for a numeric cell.

    100000.0 → "100000", 85.50 → "85.5", None → "". Zero stays "0".
    """
    if value is None or value == "":
        return ""

    number = Decimal(str(value)).normalize()
    # normalize() can produce exponents (1E+5); "f" keeps plain notation
    return format(number, "f")


def export_filename(now: Optional[datetime] = None) -> str:
    """units_export_<epoch millis>.csv"""
    now = now or datetime.now(timezone.utc)
    return f"units_export_{int(now.timestamp() * 1000)}.csv"


def to_export_row(unit: dict[str, Any]) -> dict[str, str]:
    """Map one joined unit row to the export column labels."""
    project = unit.get("projects") or {}
    currency = unit.get("currencies") or {}

    unit_type = UnitType(unit["unit_type"])
    status = UnitStatus(unit["status"])

    return {
        "SKU": unit["sku"],
        "Nombre": unit.get("name") or "",
        "Tipo": UNIT_TYPE_TO_LABEL[unit_type],
        "Estado": STATUS_TO_LABEL[status],
        "Precio": format_number(unit.get("price")),
        "Moneda": currency.get("code") or "",
        "Habitaciones": format_number(unit.get("bedrooms")),
        "Baños": format_number(unit.get("bathrooms")),
        "Área M²": format_number(unit.get("area_sqm")),
        "Piso": format_number(unit.get("floor")),
        "Proyecto": project.get("name") or "",
    }


class UnitExportService:
    def __init__(self):
        self.units = get_unit_service()

    def export_units(
        self,
        organization_id: str,
        project_id: Optional[str] = None,
        status: Optional[UnitStatus] = None,
        unit_type: Optional[UnitType] = None,
    ) -> str:
        """
        Export an organization's units as CSV text.

        Args:
            organization_id: Caller's organization (always applied)
            project_id: Optional project filter
            status: Optional status filter
            unit_type: Optional unit type filter

        Returns:
            CSV with header SKU,Nombre,Tipo,Estado,Precio,Moneda,
            Habitaciones,Baños,Área M²,Piso,Proyecto
        """
        units = self.units.get_for_export(
            organization_id=organization_id,
            project_id=project_id,
            status=status,
            unit_type=unit_type,
        )

        csv_text = write_unit_csv([to_export_row(u) for u in units])

        logger.info(
            "units_exported",
            organization_id=organization_id,
            project_id=project_id,
            count=len(units)
        )

        return csv_text


_export_service: Optional[UnitExportService] = None

def get_unit_export_service() -> UnitExportService:
    global _export_service
    if _export_service is None:
        _export_service = UnitExportService()
    return _export_service
