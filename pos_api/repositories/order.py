"""
Order Repository - Data access for orders and their items.
Eager loading prevents N+1 queries when materializing orders.
"""

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload, joinedload

from pos_api.models import Order, OrderItem, ORDER_NUMBER_CONSTRAINT
from shared.config.constants import OrderStatus
from shared.infrastructure.db import parse_unique_violation
from shared.utils.exceptions import OrderNumberConflictError
from .base import BaseRepository, RepositoryFilters


@dataclass
class OrderFilters(RepositoryFilters):
    """Filters specific to orders."""

    status: str | None = None
    statuses: list[str] | None = None
    table_id: str | None = None
    waiter_id: str | None = None


class OrderRepository(BaseRepository[Order]):
    """
    Repository for Order entities.

    Guarantees eager loading of:
    - items -> menu_item
    - table
    - customer
    """

    @property
    def model(self) -> type[Order]:
        return Order

    def _base_query(self, business_unit_id: str) -> Select:
        return (
            select(Order)
            .where(Order.business_unit_id == business_unit_id)
            .options(
                selectinload(Order.items).joinedload(OrderItem.menu_item),
                joinedload(Order.table),
                joinedload(Order.customer),
            )
            .order_by(Order.created_at.desc())
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, OrderFilters):
            return query

        if filters.status:
            query = query.where(Order.status == filters.status)
        elif filters.statuses:
            query = query.where(Order.status.in_(filters.statuses))

        if filters.table_id:
            query = query.where(Order.table_id == filters.table_id)

        if filters.waiter_id:
            query = query.where(Order.waiter_id == filters.waiter_id)

        return query

    def find_latest_number(self, business_unit_id: str, prefix: str) -> str | None:
        """
        Order number of the most recently created order whose number starts
        with ``prefix``. Ties on created_at fall back to the number itself.
        """
        return self._db.scalar(
            select(Order.order_number)
            .where(
                Order.business_unit_id == business_unit_id,
                Order.order_number.startswith(prefix, autoescape=True),
            )
            .order_by(Order.created_at.desc(), Order.order_number.desc())
            .limit(1)
        )

    def find_in_status(
        self,
        order_id: str,
        business_unit_id: str,
        statuses: Sequence[str],
        waiter_id: str | None = None,
    ) -> Order | None:
        """Order of the business unit, only if its status is one of ``statuses``."""
        query = self._base_query(business_unit_id).where(
            Order.id == order_id,
            Order.status.in_(list(statuses)),
        )
        if waiter_id is not None:
            query = query.where(Order.waiter_id == waiter_id)
        return self._db.scalar(query)

    def find_modifiable(
        self,
        order_id: str,
        business_unit_id: str,
        waiter_id: str,
    ) -> Order | None:
        """Draft order created by ``waiter_id``."""
        return self.find_in_status(
            order_id, business_unit_id, OrderStatus.MODIFIABLE, waiter_id=waiter_id
        )

    def insert(self, order: Order) -> Order:
        """
        Add and flush a new order with its items.

        Raises:
            OrderNumberConflictError: another order of the unit already holds
                ``order.order_number``. The session must be rolled back.
        """
        self._db.add(order)
        try:
            self._db.flush()
        except IntegrityError as exc:
            violation = parse_unique_violation(exc)
            if violation is not None and violation.involves(
                "order_number", constraint=ORDER_NUMBER_CONSTRAINT
            ):
                raise OrderNumberConflictError(
                    order.order_number,
                    business_unit_id=order.business_unit_id,
                ) from exc
            raise
        return order


def get_order_repository(db: Session) -> OrderRepository:
    """Factory function for dependency injection."""
    return OrderRepository(db)
