"""
Row mapper for unit CSV imports.

Turns one loosely-typed CSV row (Spanish headers, free-text enum labels)
into a UnitRecord. Pure: no database access. Currency resolution happens
in the import service and is passed in as an id.

Enum columns resolve in three steps:
    1. Spanish label column (Tipo / Estado) through the label tables
    2. English code column (TipoEN / EstadoEN)
    3. Default (APARTMENT / AVAILABLE)
"""

from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Mapping, Optional, TypeVar
from enum import Enum

from exceptions import RowMappingError
from models.unit import UnitRecord, UnitStatus, UnitType
from utils.text_utils import clean_cell, normalize_label


REQUIRED_FIELDS_ERROR = "SKU and price required"

UNIT_TYPE_LABELS: Mapping[str, UnitType] = MappingProxyType({
    "DEPARTAMENTO": UnitType.APARTMENT,
    "CASA": UnitType.HOUSE,
    "COMERCIAL": UnitType.COMMERCIAL,
    "TERRENO": UnitType.LAND,
    "OFICINA": UnitType.OFFICE,
    "ESTACIONAMIENTO": UnitType.PARKING,
    "BODEGA": UnitType.STORAGE,
})

STATUS_LABELS: Mapping[str, UnitStatus] = MappingProxyType({
    "DISPONIBLE": UnitStatus.AVAILABLE,
    "RESERVADO": UnitStatus.RESERVED,
    "VENDIDO": UnitStatus.SOLD,
    "NO DISPONIBLE": UnitStatus.UNAVAILABLE,
})

# Inverse tables, used by the exporter so files re-import losslessly
UNIT_TYPE_TO_LABEL: Mapping[UnitType, str] = MappingProxyType(
    {v: k for k, v in UNIT_TYPE_LABELS.items()}
)
STATUS_TO_LABEL: Mapping[UnitStatus, str] = MappingProxyType(
    {v: k for k, v in STATUS_LABELS.items()}
)

DEFAULT_UNIT_TYPE = UnitType.APARTMENT
DEFAULT_STATUS = UnitStatus.AVAILABLE

E = TypeVar("E", bound=Enum)


# ===================
# FIELD ACCESS
# ===================

def _first_present(row: Mapping[str, Optional[str]], *columns: str) -> Optional[str]:
    """First non-blank cell among alternative header spellings."""
    for column in columns:
        value = clean_cell(row.get(column))
        if value is not None:
            return value
    return None


def row_sku(row: Mapping[str, Optional[str]]) -> Optional[str]:
    """SKU as written in the row, or None if blank."""
    return clean_cell(row.get("SKU"))


def has_required_fields(row: Mapping[str, Optional[str]]) -> bool:
    """True when both SKU and Precio are present and non-blank."""
    return row_sku(row) is not None and clean_cell(row.get("Precio")) is not None


def requested_currency_code(row: Mapping[str, Optional[str]]) -> Optional[str]:
    """Upper-cased Moneda code, or None when blank."""
    code = clean_cell(row.get("Moneda"))
    return code.upper() if code else None


# ===================
# ENUM RESOLUTION
# ===================

def _resolve_enum(
    row: Mapping[str, Optional[str]],
    label_column: str,
    code_column: str,
    labels: Mapping[str, E],
    enum_cls: type[E],
    default: E,
) -> E:
    # 1. Localized label
    label = normalize_label(row.get(label_column))
    if label is not None and label in labels:
        return labels[label]

    # 2. Explicit English code
    code = normalize_label(row.get(code_column))
    if code is not None:
        try:
            return enum_cls(code)
        except ValueError:
            raise RowMappingError(
                field=code_column,
                value=row.get(code_column),
                message=(
                    f"Invalid {code_column} value: {row.get(code_column)!r} "
                    f"(expected one of {', '.join(m.value for m in enum_cls)})"
                )
            )

    # 3. Default
    return default


def resolve_unit_type(row: Mapping[str, Optional[str]]) -> UnitType:
    """Tipo label → TipoEN code → APARTMENT."""
    return _resolve_enum(
        row, "Tipo", "TipoEN", UNIT_TYPE_LABELS, UnitType, DEFAULT_UNIT_TYPE
    )


def resolve_status(row: Mapping[str, Optional[str]]) -> UnitStatus:
    """Estado label → EstadoEN code → AVAILABLE."""
    return _resolve_enum(
        row, "Estado", "EstadoEN", STATUS_LABELS, UnitStatus, DEFAULT_STATUS
    )


# ===================
# NUMBERS
# ===================

def _parse_decimal(field: str, value: Optional[str]) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        number = Decimal(value)
    except InvalidOperation:
        raise RowMappingError(field=field, value=value)
    if not number.is_finite():
        raise RowMappingError(field=field, value=value)
    return number


def _parse_int(field: str, value: Optional[str]) -> Optional[int]:
    number = _parse_decimal(field, value)
    if number is None:
        return None
    if number != number.to_integral_value():
        raise RowMappingError(
            field=field,
            value=value,
            message=f"{field} must be a whole number: {value!r}"
        )
    return int(number)


# ===================
# ROW → UNIT
# ===================

def map_row(
    row: Mapping[str, Optional[str]],
    project_id: str,
    currency_id: str,
) -> UnitRecord:
    """
    Build the unit record for one CSV row.

    Callers must check has_required_fields() first.

    Args:
        row: Header label → raw cell
        project_id: Target project
        currency_id: Resolved currency (row's Moneda or the default)

    Returns:
        UnitRecord ready to insert or update

    Raises:
        RowMappingError: If a present value cannot be parsed
    """
    price = _parse_decimal("Precio", clean_cell(row.get("Precio")))
    if price is None or price <= 0:
        raise RowMappingError(
            field="Precio",
            value=row.get("Precio"),
            message=f"Precio must be a positive number: {row.get('Precio')!r}"
        )

    return UnitRecord(
        sku=row_sku(row),
        name=clean_cell(row.get("Nombre")),
        unit_type=resolve_unit_type(row),
        status=resolve_status(row),
        price=price,
        currency_id=currency_id,
        project_id=project_id,
        bedrooms=_parse_int("Habitaciones", clean_cell(row.get("Habitaciones"))),
        bathrooms=_parse_decimal("Baños", _first_present(row, "Baños", "Banos")),
        area_sqm=_parse_decimal("Área M²", _first_present(row, "Área M²", "AreaM2")),
        floor=_parse_int("Piso", clean_cell(row.get("Piso"))),
    )
