"""
Table Repository - table lookups and the open order of each table.
"""

from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, joinedload

from pos_api.models import Order, Table
from shared.config.constants import OrderStatus
from .base import BaseRepository


class TableRepository(BaseRepository[Table]):
    """Repository for Table entities. Inactive tables are hidden by default."""

    @property
    def model(self) -> type[Table]:
        return Table

    def _base_query(self, business_unit_id: str) -> Select:
        return (
            select(Table)
            .where(Table.business_unit_id == business_unit_id)
            .order_by(Table.number.asc())
        )

    def find_open_orders(
        self,
        business_unit_id: str,
        table_ids: Sequence[str],
    ) -> dict[str, Order]:
        """
        Newest open (not completed, not cancelled) order per table.
        One query for all tables.
        """
        if not table_ids:
            return {}

        orders = self._db.execute(
            select(Order)
            .options(joinedload(Order.customer))
            .where(
                Order.business_unit_id == business_unit_id,
                Order.table_id.in_(list(table_ids)),
                Order.status.in_(OrderStatus.OPEN),
            )
            .order_by(Order.created_at.desc())
        ).scalars().unique().all()

        current: dict[str, Order] = {}
        for order in orders:
            # First hit per table is the newest thanks to the ordering
            current.setdefault(order.table_id, order)
        return current


def get_table_repository(db: Session) -> TableRepository:
    """Factory function for dependency injection."""
    return TableRepository(db)
