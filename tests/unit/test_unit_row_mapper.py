"""
Unit tests for the CSV row mapper.

Run: pytest tests/unit/test_unit_row_mapper.py -v
"""

import pytest
from decimal import Decimal

from services.unit_row_mapper import (
    has_required_fields,
    map_row,
    requested_currency_code,
    resolve_status,
    resolve_unit_type,
    row_sku,
)
from models.unit import UnitStatus, UnitType
from exceptions import RowMappingError

from tests.factories import PROJECT_ID, USD_ID


def _map(**cells):
    row = {"SKU": "A-101", "Precio": "100000", **cells}
    return map_row(row, PROJECT_ID, USD_ID)


class TestRequiredFields:
    """Tests for has_required_fields() and row_sku()"""

    def test_sku_and_price_present(self):
        assert has_required_fields({"SKU": "A-1", "Precio": "10"})

    @pytest.mark.parametrize("row", [
        {"SKU": "", "Precio": "10"},
        {"SKU": "   ", "Precio": "10"},
        {"SKU": "A-1", "Precio": ""},
        {"SKU": "A-1"},
        {},
    ])
    def test_blank_or_missing_fails(self, row):
        assert not has_required_fields(row)

    def test_row_sku_is_trimmed(self):
        assert row_sku({"SKU": "  A-1 "}) == "A-1"
        assert row_sku({"SKU": ""}) is None

    def test_currency_code_upper_cased(self):
        assert requested_currency_code({"Moneda": " clp "}) == "CLP"
        assert requested_currency_code({"Moneda": ""}) is None
        assert requested_currency_code({}) is None


class TestResolveUnitType:
    """Tests for resolve_unit_type()"""

    @pytest.mark.parametrize("label,expected", [
        ("Departamento", UnitType.APARTMENT),
        ("CASA", UnitType.HOUSE),
        ("comercial", UnitType.COMMERCIAL),
        ("Terreno", UnitType.LAND),
        ("Oficína", UnitType.OFFICE),
        ("Estacionamiento", UnitType.PARKING),
        ("Bodega", UnitType.STORAGE),
    ])
    def test_spanish_label(self, label, expected):
        assert resolve_unit_type({"Tipo": label}) == expected

    def test_label_wins_over_english_code(self):
        row = {"Tipo": "Casa", "TipoEN": "OFFICE"}
        assert resolve_unit_type(row) == UnitType.HOUSE

    def test_english_code_when_label_blank(self):
        assert resolve_unit_type({"Tipo": "", "TipoEN": "office"}) == UnitType.OFFICE

    def test_english_code_when_label_unknown(self):
        assert resolve_unit_type({"Tipo": "Loft", "TipoEN": "HOUSE"}) == UnitType.HOUSE

    def test_default_when_nothing_usable(self):
        assert resolve_unit_type({}) == UnitType.APARTMENT
        assert resolve_unit_type({"Tipo": "Loft"}) == UnitType.APARTMENT

    def test_invalid_english_code_rejected(self):
        with pytest.raises(RowMappingError) as exc_info:
            resolve_unit_type({"TipoEN": "CASTLE"})

        assert "TipoEN" in exc_info.value.message
        assert exc_info.value.details["field"] == "TipoEN"


class TestResolveStatus:
    """Tests for resolve_status()"""

    @pytest.mark.parametrize("label,expected", [
        ("Disponible", UnitStatus.AVAILABLE),
        ("reservado", UnitStatus.RESERVED),
        ("VENDIDO", UnitStatus.SOLD),
        ("No  Disponible", UnitStatus.UNAVAILABLE),
    ])
    def test_spanish_label(self, label, expected):
        assert resolve_status({"Estado": label}) == expected

    def test_english_code(self):
        assert resolve_status({"EstadoEN": "sold"}) == UnitStatus.SOLD

    def test_default(self):
        assert resolve_status({"Estado": ""}) == UnitStatus.AVAILABLE

    def test_invalid_english_code_rejected(self):
        with pytest.raises(RowMappingError):
            resolve_status({"EstadoEN": "ARCHIVED"})


class TestMapRow:
    """Tests for map_row()"""

    def test_full_row(self):
        unit = _map(
            Nombre="Depto 101",
            Tipo="Departamento",
            Estado="Reservado",
            Habitaciones="3",
            **{"Baños": "2.5", "Área M²": "85.50"},
            Piso="10",
        )

        assert unit.sku == "A-101"
        assert unit.name == "Depto 101"
        assert unit.unit_type == UnitType.APARTMENT
        assert unit.status == UnitStatus.RESERVED
        assert unit.price == Decimal("100000")
        assert unit.currency_id == USD_ID
        assert unit.project_id == PROJECT_ID
        assert unit.bedrooms == 3
        assert unit.bathrooms == Decimal("2.5")
        assert unit.area_sqm == Decimal("85.50")
        assert unit.floor == 10

    def test_minimal_row_uses_defaults(self):
        unit = _map()

        assert unit.name is None
        assert unit.unit_type == UnitType.APARTMENT
        assert unit.status == UnitStatus.AVAILABLE
        assert unit.bedrooms is None
        assert unit.bathrooms is None
        assert unit.area_sqm is None
        assert unit.floor is None

    def test_blank_numeric_cells_are_null(self):
        unit = _map(Habitaciones="", Piso="  ", **{"Baños": ""})

        assert unit.bedrooms is None
        assert unit.floor is None
        assert unit.bathrooms is None

    def test_ascii_header_fallbacks(self):
        unit = _map(Banos="1", AreaM2="40")

        assert unit.bathrooms == Decimal("1")
        assert unit.area_sqm == Decimal("40")

    def test_negative_floor_allowed(self):
        assert _map(Piso="-2").floor == -2

    def test_decimal_price(self):
        assert _map(Precio="3500.75").price == Decimal("3500.75")

    @pytest.mark.parametrize("price", ["abc", "0", "-10", "NaN"])
    def test_bad_price_rejected(self, price):
        with pytest.raises(RowMappingError):
            _map(Precio=price)

    def test_non_numeric_bedrooms_rejected(self):
        with pytest.raises(RowMappingError) as exc_info:
            _map(Habitaciones="dos")

        assert exc_info.value.message == "Invalid value for Habitaciones: 'dos'"

    def test_fractional_floor_rejected(self):
        with pytest.raises(RowMappingError) as exc_info:
            _map(Piso="2.5")

        assert "whole number" in exc_info.value.message

    def test_integral_decimal_accepted_for_int_field(self):
        assert _map(Habitaciones="2.0").bedrooms == 2
