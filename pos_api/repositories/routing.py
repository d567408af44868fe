"""
Routing Repository - KitchenOrder / BarOrder lookups.
"""

from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from pos_api.models import BarOrder, KitchenOrder
from .base import BaseRepository


class _RoutingRepository(BaseRepository):
    """Shared queries for both routing tables."""

    def _base_query(self, business_unit_id: str) -> Select:
        return (
            select(self.model)
            .where(self.model.business_unit_id == business_unit_id)
            .order_by(self.model.created_at.asc())
        )

    def find_for_order(self, order_id: str, include_additions: bool = True) -> Sequence:
        """Routing records of an order, oldest first."""
        query = select(self.model).where(self.model.order_id == order_id)
        if not include_additions:
            query = query.where(self.model.is_addition.is_(False))
        return self._db.execute(query.order_by(self.model.created_at.asc())).scalars().all()

    def has_primary(self, order_id: str) -> bool:
        """True once the order has been sent out (addition records don't count)."""
        found = self._db.scalar(
            select(self.model.id)
            .where(
                self.model.order_id == order_id,
                self.model.is_addition.is_(False),
            )
            .limit(1)
        )
        return found is not None


class KitchenOrderRepository(_RoutingRepository):
    @property
    def model(self) -> type[KitchenOrder]:
        return KitchenOrder


class BarOrderRepository(_RoutingRepository):
    @property
    def model(self) -> type[BarOrder]:
        return BarOrder


def get_kitchen_order_repository(db: Session) -> KitchenOrderRepository:
    return KitchenOrderRepository(db)


def get_bar_order_repository(db: Session) -> BarOrderRepository:
    return BarOrderRepository(db)
