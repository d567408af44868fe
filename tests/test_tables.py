"""
Tests for TableService, the table collaborator.
"""

import pytest

from pos_api.services.domain import OrderService, TableService
from shared.utils.exceptions import TableNotFoundError, ValidationError


class TestTableStatus:
    def test_get_table_status(self, db_session, seed_business_unit, seed_table):
        status = TableService(db_session).get_table_status(seed_business_unit.id, seed_table.id)

        assert status == "AVAILABLE"

    def test_update_table_status(self, db_session, seed_business_unit, seed_table):
        service = TableService(db_session)

        service.update_table_status(seed_business_unit.id, seed_table.id, "OUT_OF_ORDER")

        assert service.get_table_status(seed_business_unit.id, seed_table.id) == "OUT_OF_ORDER"

    def test_invalid_status(self, db_session, seed_business_unit, seed_table):
        with pytest.raises(ValidationError):
            TableService(db_session).update_table_status(
                seed_business_unit.id, seed_table.id, "BROKEN"
            )

    def test_missing_or_foreign_table(
        self, db_session, seed_business_unit, other_business_unit, seed_table
    ):
        service = TableService(db_session)

        with pytest.raises(TableNotFoundError):
            service.update_table_status(seed_business_unit.id, "missing", "OCCUPIED")
        with pytest.raises(TableNotFoundError):
            service.get_table_status(other_business_unit.id, seed_table.id)


class TestTablesWithCurrentOrder:
    def test_newest_open_order_per_table(
        self, db_session, seed_business_unit, seed_table, inactive_table, caller,
        menu_item_a, make_order_input,
    ):
        orders = OrderService(db_session)
        first, _ = orders.create_order(
            seed_business_unit.id, make_order_input((menu_item_a, 1)), caller
        )
        second, _ = orders.create_order(
            seed_business_unit.id, make_order_input((menu_item_a, 2)), caller
        )
        orders.cancel_order(seed_business_unit.id, second.id, caller)

        tables = TableService(db_session).list_tables_with_current_order(seed_business_unit.id)

        # Inactive tables are hidden; the cancelled order is not current
        assert [t.number for t in tables] == [5]
        assert tables[0].current_order.id == first.id
        assert tables[0].current_order.total_amount == 100.0

    def test_table_without_order(self, db_session, seed_business_unit, seed_table):
        tables = TableService(db_session).list_tables_with_current_order(seed_business_unit.id)

        assert tables[0].current_order is None
        assert tables[0].status == "AVAILABLE"
