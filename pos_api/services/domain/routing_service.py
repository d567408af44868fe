"""
Kitchen/Bar Routing Service.

Fans the items of an order out to at most one KitchenOrder (FOOD) and one
BarOrder (DRINK). Records carry a denormalized snapshot of the order so the
kitchen and bar displays never join back to it.

Routing is guarded: an order that already has primary (non-addition)
records is not routed again.
"""

from typing import Iterable, Sequence

from sqlalchemy.orm import Session

from shared.config.constants import (
    ADDITION_NOTES_TEMPLATE,
    ADDITION_SUFFIX,
    ItemType,
    OrderItemStatus,
    OrderPriority,
    OrderStatus,
    RoutingStatus,
    TableStatus,
)
from shared.config.logging import kitchen_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import ErrorCode, InvalidStateError, OrderNotFoundError
from shared.utils.schemas import RoutingOutput
from pos_api.models import BarOrder, KitchenOrder, Order, OrderItem
from pos_api.repositories import (
    get_bar_order_repository,
    get_kitchen_order_repository,
    get_order_repository,
)
from pos_api.services.serializers import routing_record_to_output
from .table_service import TableService

# Statuses from which an order may be sent out
ROUTABLE_STATUSES = [OrderStatus.PENDING, OrderStatus.CONFIRMED]


def item_snapshot(item: OrderItem) -> dict:
    return {
        "id": item.id,
        "name": item.menu_item.name,
        "quantity": item.quantity,
        "notes": item.notes,
        "prep_time": item.menu_item.prep_time,
    }


def estimated_time(items: Iterable[OrderItem], default_minutes: int) -> int:
    """Longest prep time among ``items``; unset prep times count as the default."""
    return max(item.menu_item.prep_time or default_minutes for item in items)


def split_by_type(items: Iterable[OrderItem]) -> tuple[list[OrderItem], list[OrderItem]]:
    """(food, drinks) preserving input order."""
    food, drinks = [], []
    for item in items:
        if item.menu_item.type == ItemType.FOOD:
            food.append(item)
        elif item.menu_item.type == ItemType.DRINK:
            drinks.append(item)
    return food, drinks


class RoutingService:
    """Domain service creating KitchenOrder / BarOrder records."""

    def __init__(
        self,
        db: Session,
        food_prep_minutes: int | None = None,
        drink_prep_minutes: int | None = None,
    ):
        self._db = db
        self._orders = get_order_repository(db)
        self._kitchen = get_kitchen_order_repository(db)
        self._bar = get_bar_order_repository(db)
        self._tables = TableService(db)
        self._food_minutes = (
            food_prep_minutes
            if food_prep_minutes is not None
            else settings.default_food_prep_minutes
        )
        self._drink_minutes = (
            drink_prep_minutes
            if drink_prep_minutes is not None
            else settings.default_drink_prep_minutes
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def send_order(self, business_unit_id: str, order_id: str) -> RoutingOutput:
        """
        Route a draft (or confirmed but never routed) order and commit.

        Raises:
            OrderNotFoundError: order missing or in another business unit
            InvalidStateError: order is COMPLETED or CANCELLED, or was never
                routed and is neither PENDING nor CONFIRMED
        """
        order = self._orders.find_by_id(order_id, business_unit_id)
        if order is None:
            raise OrderNotFoundError(order_id, business_unit_id=business_unit_id)

        if order.status in OrderStatus.TERMINAL:
            raise InvalidStateError(
                f"Order cannot be sent to kitchen and bar while {order.status}",
                code=ErrorCode.ORDER_NOT_MODIFIABLE,
                current_state=order.status,
                order_id=order.id,
            )

        if self.is_routed(order.id):
            logger.info(
                "Order already routed, skipping",
                order_id=order.id,
                order_number=order.order_number,
            )
            return self._existing_routing(order)

        if order.status not in ROUTABLE_STATUSES:
            raise InvalidStateError(
                f"Order cannot be sent to kitchen and bar while {order.status}",
                code=ErrorCode.ORDER_NOT_MODIFIABLE,
                current_state=order.status,
                order_id=order.id,
            )

        result = self.route_order(order)
        safe_commit(self._db)
        return result

    def is_routed(self, order_id: str) -> bool:
        return self._kitchen.has_primary(order_id) or self._bar.has_primary(order_id)

    def route_order(self, order: Order) -> RoutingOutput:
        """
        Create primary routing records for every item of ``order``, confirm
        it and occupy its table. Runs inside the caller's transaction.
        """
        kitchen_order, bar_order = self._create_records(order, order.items)

        for item in order.items:
            if item.status == OrderItemStatus.PENDING:
                item.status = OrderItemStatus.CONFIRMED
        if order.status != OrderStatus.CONFIRMED:
            order.status = OrderStatus.CONFIRMED
        order.touch()
        self._tables.set_status(order.table, TableStatus.OCCUPIED)
        self._db.flush()

        logger.info(
            "Order routed",
            order_id=order.id,
            order_number=order.order_number,
            kitchen_items=len(kitchen_order.items) if kitchen_order else 0,
            bar_items=len(bar_order.items) if bar_order else 0,
        )
        return self._to_output(order.id, kitchen_order, bar_order)

    def route_additions(self, order: Order, items: Sequence[OrderItem]) -> RoutingOutput:
        """Route only ``items`` as addition records. Runs inside the caller's transaction."""
        kitchen_order, bar_order = self._create_records(order, items, is_addition=True)
        self._db.flush()

        logger.info(
            "Order additions routed",
            order_id=order.id,
            order_number=order.order_number,
            kitchen_items=len(kitchen_order.items) if kitchen_order else 0,
            bar_items=len(bar_order.items) if bar_order else 0,
        )
        return self._to_output(order.id, kitchen_order, bar_order)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _create_records(
        self,
        order: Order,
        items: Sequence[OrderItem],
        is_addition: bool = False,
    ) -> tuple[KitchenOrder | None, BarOrder | None]:
        food, drinks = split_by_type(items)

        if is_addition:
            order_number = f"{order.order_number}{ADDITION_SUFFIX}"
            notes = ADDITION_NOTES_TEMPLATE.format(order_number=order.order_number)
        else:
            order_number = order.order_number
            notes = order.notes

        common = dict(
            order_id=order.id,
            business_unit_id=order.business_unit_id,
            order_number=order_number,
            table_number=order.table.number,
            waiter_name=order.waiter.name,
            status=RoutingStatus.PENDING,
            priority=OrderPriority.NORMAL,
            notes=notes,
            is_addition=is_addition,
        )

        kitchen_order = None
        if food:
            kitchen_order = KitchenOrder(
                items=[item_snapshot(item) for item in food],
                estimated_time=estimated_time(food, self._food_minutes),
                **common,
            )
            self._db.add(kitchen_order)

        bar_order = None
        if drinks:
            bar_order = BarOrder(
                items=[item_snapshot(item) for item in drinks],
                estimated_time=estimated_time(drinks, self._drink_minutes),
                **common,
            )
            self._db.add(bar_order)

        return kitchen_order, bar_order

    def _existing_routing(self, order: Order) -> RoutingOutput:
        kitchen = self._kitchen.find_for_order(order.id, include_additions=False)
        bar = self._bar.find_for_order(order.id, include_additions=False)
        result = self._to_output(
            order.id,
            kitchen[0] if kitchen else None,
            bar[0] if bar else None,
        )
        return result.model_copy(update={"already_routed": True})

    def _to_output(
        self,
        order_id: str,
        kitchen_order: KitchenOrder | None,
        bar_order: BarOrder | None,
    ) -> RoutingOutput:
        return RoutingOutput(
            order_id=order_id,
            kitchen_order=routing_record_to_output(kitchen_order) if kitchen_order else None,
            bar_order=routing_record_to_output(bar_order) if bar_order else None,
        )
