"""
Unit tests for BulkOperationsService.

Run: pytest tests/unit/test_bulk_operations_service.py -v
"""

import pytest

from services.bulk_operations_service import BulkOperationsService, adjust_price
from models.bulk import AdjustmentType, PriceAdjustment, PriceField
from models.unit import UnitStatus

from tests.factories import OTHER_PROJECT_ID, PROJECT_ID, UnitFactory


def _adjustment(type_: str, value: float, apply_to: str = "price") -> PriceAdjustment:
    return PriceAdjustment(
        type=AdjustmentType(type_),
        value=value,
        apply_to=PriceField(apply_to),
    )


class TestAdjustPrice:
    """Tests for adjust_price()"""

    @pytest.mark.parametrize("current,type_,value,expected", [
        (1000, "percentage", 10, 1100.0),
        (1000, "percentage", -25, 750.0),
        (1000, "fixed", 250, 1250.0),
        (1000, "fixed", -1000, 0.0),
        (99.99, "percentage", 3.3, 103.29),
    ])
    def test_adjustment(self, current, type_, value, expected):
        assert adjust_price(current, _adjustment(type_, value)) == expected

    def test_missing_price_stays_missing(self):
        assert adjust_price(None, _adjustment("fixed", 10)) is None


class TestPriceField:

    def test_all_expands_to_every_column(self):
        assert PriceField.ALL.columns() == ["price", "list_price", "sale_price"]

    def test_single_column(self):
        assert PriceField.SALE_PRICE.columns() == ["sale_price"]


class TestBulkOperations:
    """Organization-scoped bulk writes."""

    @pytest.fixture
    def units(self, mock_supabase):
        own = UnitFactory.create_batch(
            2, project_id=PROJECT_ID, price=1000.0, list_price=1200.0
        )
        foreign = UnitFactory.create(project_id=OTHER_PROJECT_ID, price=1000.0)
        mock_supabase.set_table_data("units", own + [foreign])
        return {"own": [u["id"] for u in own], "foreign": foreign["id"]}

    def _unit(self, mock_supabase, unit_id):
        return next(u for u in mock_supabase.rows("units") if u["id"] == unit_id)

    def test_update_status(self, mock_db, mock_supabase, current_user, units):
        ids = units["own"] + [units["foreign"]]

        result = BulkOperationsService().update_status(ids, UnitStatus.SOLD, current_user)

        assert result == {"updated_count": 2, "requested_count": 3, "status": "SOLD"}
        assert self._unit(mock_supabase, units["own"][0])["status"] == "SOLD"
        assert self._unit(mock_supabase, units["foreign"])["status"] == "AVAILABLE"

    def test_update_status_writes_one_audit_row(self, mock_db, mock_supabase, current_user, units):
        BulkOperationsService().update_status(
            units["own"], UnitStatus.RESERVED, current_user, notes="Promo"
        )

        logs = mock_supabase.rows("audit_logs")
        assert len(logs) == 1
        assert logs[0]["action"] == "UPDATE"
        assert logs[0]["metadata"]["notes"] == "Promo"

    def test_update_prices_single_column(self, mock_db, mock_supabase, current_user, units):
        result = BulkOperationsService().update_prices(
            units["own"], _adjustment("percentage", 10), current_user
        )

        unit = self._unit(mock_supabase, units["own"][0])
        assert result["updated_count"] == 2
        assert unit["price"] == 1100.0
        assert unit["list_price"] == 1200.0

    def test_update_prices_all_columns(self, mock_db, mock_supabase, current_user, units):
        BulkOperationsService().update_prices(
            units["own"], _adjustment("fixed", 100, "all"), current_user
        )

        unit = self._unit(mock_supabase, units["own"][0])
        assert unit["price"] == 1100.0
        assert unit["list_price"] == 1300.0
        assert unit["sale_price"] is None

    def test_update_prices_skips_foreign_units(self, mock_db, mock_supabase, current_user, units):
        result = BulkOperationsService().update_prices(
            [units["foreign"]], _adjustment("fixed", 100), current_user
        )

        assert result["updated_count"] == 0
        assert self._unit(mock_supabase, units["foreign"])["price"] == 1000.0

    def test_delete(self, mock_db, mock_supabase, current_user, units):
        result = BulkOperationsService().delete(
            units["own"] + [units["foreign"]], current_user
        )

        assert result == {"deleted_count": 2}
        assert [u["id"] for u in mock_supabase.rows("units")] == [units["foreign"]]
        assert mock_supabase.rows("audit_logs")[0]["action"] == "DELETE"

    def test_duplicate_ids_counted_once(self, mock_db, current_user, units):
        ids = [units["own"][0], units["own"][0]]

        result = BulkOperationsService().update_status(ids, UnitStatus.SOLD, current_user)

        assert result["updated_count"] == 1
