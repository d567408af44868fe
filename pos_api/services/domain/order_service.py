"""
Order Domain Service.

Order lifecycle: creation with order number allocation, draft update,
additions, cancellation and settlement. Every public method runs as one
transaction and commits on success; any exception leaves the session
dirty for the caller to roll back.
"""

import random
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from shared.config.constants import Limits, OrderItemStatus, OrderStatus, TableStatus
from shared.config.logging import order_logger as logger
from shared.config.settings import settings
from shared.infrastructure.db import safe_commit
from shared.utils.decimals import ZERO, final_amount, line_total, sum_amounts, to_decimal
from shared.utils.exceptions import (
    CustomerNotFoundError,
    MenuItemUnavailableError,
    OrderNotCancellableError,
    OrderNotCompletableError,
    OrderNotFoundError,
    OrderNotModifiableError,
    OrderNumberConflictError,
    OrderNumberExhaustedError,
    UnauthorizedError,
)
from shared.utils.schemas import CallerIdentity, CreateOrderInput, OrderItemInput, RoutingOutput
from pos_api.models import Customer, MenuItem, Order, OrderItem, User, utcnow
from pos_api.repositories import OrderFilters, get_menu_item_repository, get_order_repository
from .order_number import OrderNumberSequencer
from .routing_service import RoutingService
from .table_service import TableService


# Settlement refusal per current status
_NOT_COMPLETABLE_MESSAGES = {
    OrderStatus.PENDING: "Cannot settle a draft order. Please send it to the kitchen first.",
    OrderStatus.CONFIRMED: (
        "Order is still being prepared. Please wait until all items are ready before settling."
    ),
    OrderStatus.IN_PROGRESS: (
        "Order is still being prepared. Please wait until all items are ready before settling."
    ),
    OrderStatus.COMPLETED: "This order has already been settled.",
    OrderStatus.CANCELLED: "Cannot settle a cancelled order.",
}


@dataclass
class PricedLine:
    """A requested line priced at the live menu price."""

    menu_item: MenuItem
    quantity: int
    notes: str | None
    unit_price: Decimal
    total_price: Decimal


class OrderService:
    """
    Domain service for Order operations.

    ``sleep`` and ``jitter`` are injectable so tests can run the
    order-number retry loop without waiting.
    """

    def __init__(
        self,
        db: Session,
        sequencer: OrderNumberSequencer | None = None,
        routing: RoutingService | None = None,
        max_attempts: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
        jitter: Callable[[float, float], float] = random.uniform,
    ):
        self._db = db
        self._orders = get_order_repository(db)
        self._menu = get_menu_item_repository(db)
        self._tables = TableService(db)
        self._sequencer = sequencer or OrderNumberSequencer(db)
        self._routing = routing or RoutingService(db)
        self._max_attempts = max_attempts or settings.order_number_max_attempts
        self._sleep = sleep
        self._jitter = jitter

    # =========================================================================
    # Queries
    # =========================================================================

    def get_order(self, business_unit_id: str, order_id: str) -> Order | None:
        return self._orders.find_by_id(order_id, business_unit_id)

    def require_order(self, business_unit_id: str, order_id: str) -> Order:
        order = self.get_order(business_unit_id, order_id)
        if order is None:
            raise OrderNotFoundError(order_id, business_unit_id=business_unit_id)
        return order

    def list_orders(
        self,
        business_unit_id: str,
        status: str | None = None,
        table_id: str | None = None,
        limit: int = Limits.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Sequence[Order]:
        """Orders of the business unit, most recent first."""
        filters = OrderFilters(
            status=status, table_id=table_id, limit=limit, offset=offset
        )
        return self._orders.find_all(business_unit_id, filters)

    # =========================================================================
    # Creation
    # =========================================================================

    def create_order(
        self,
        business_unit_id: str,
        data: CreateOrderInput,
        caller: CallerIdentity,
        is_draft: bool = False,
    ) -> tuple[Order, RoutingOutput | None]:
        """
        Create an order with its items, optionally routing it right away.

        Validation happens before any write. Number allocation and insert are
        retried on an order number collision only; the order, its items and
        its routing records are committed together.

        Raises:
            TableNotFoundError, CustomerNotFoundError, MenuItemUnavailableError
            UnauthorizedError: caller is not an active staff member of the unit
            OrderNumberExhaustedError: every attempt collided
        """
        table = self._tables.get_active_table(business_unit_id, data.table_id)
        self._require_waiter(business_unit_id, caller)
        self._validate_customer(business_unit_id, data.customer_id)
        lines = self._price_lines(business_unit_id, data.items)
        total = sum_amounts(line.total_price for line in lines)
        item_status = OrderItemStatus.PENDING if is_draft else OrderItemStatus.CONFIRMED
        code = self._sequencer.get_business_unit_code(business_unit_id)

        for attempt in range(1, self._max_attempts + 1):
            order_number = self._sequencer.next_number(business_unit_id, code)
            order = Order(
                business_unit_id=business_unit_id,
                order_number=order_number,
                table_id=table.id,
                waiter_id=caller.user_id,
                customer_id=data.customer_id,
                status=OrderStatus.PENDING if is_draft else OrderStatus.CONFIRMED,
                total_amount=total,
                discount_amount=ZERO,
                final_amount=final_amount(total, ZERO),
                notes=data.notes,
                customer_count=data.customer_count,
                is_walk_in=data.is_walk_in,
                walk_in_name=data.walk_in_name,
                items=self._build_items(lines, item_status),
            )
            order.table = table

            try:
                self._orders.insert(order)
            except OrderNumberConflictError as exc:
                self._db.rollback()
                if attempt == self._max_attempts:
                    break
                delay = self._jitter(
                    settings.order_number_retry_min_delay,
                    settings.order_number_retry_max_delay,
                )
                logger.info(
                    "Retrying order number allocation",
                    business_unit_id=business_unit_id,
                    order_number=exc.order_number,
                    attempt=attempt,
                    delay=round(delay, 3),
                )
                self._sleep(delay)
                # Rollback expired the table; reload it for the next attempt
                table = self._tables.get_active_table(business_unit_id, data.table_id)
                continue

            routing = None if is_draft else self._routing.route_order(order)
            safe_commit(self._db)

            logger.info(
                "Order created",
                order_id=order.id,
                order_number=order_number,
                business_unit_id=business_unit_id,
                is_draft=is_draft,
                item_count=len(lines),
                total=str(total),
                attempt=attempt,
            )
            return order, routing

        raise OrderNumberExhaustedError(
            self._max_attempts,
            business_unit_id=business_unit_id,
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    def update_order(
        self,
        business_unit_id: str,
        order_id: str,
        data: CreateOrderInput,
        caller: CallerIdentity,
    ) -> Order:
        """
        Replace the items and metadata of the caller's own draft.

        Raises:
            OrderNotModifiableError: missing, foreign, not PENDING, or another waiter's
        """
        order = self._orders.find_modifiable(order_id, business_unit_id, caller.user_id)
        if order is None:
            raise OrderNotModifiableError(
                order_id, business_unit_id=business_unit_id, user_id=caller.user_id
            )

        if data.table_id != order.table_id:
            order.table = self._tables.get_active_table(business_unit_id, data.table_id)
        self._validate_customer(business_unit_id, data.customer_id)
        lines = self._price_lines(business_unit_id, data.items)
        total = sum_amounts(line.total_price for line in lines)

        # delete-orphan cascade removes the previous items on flush
        order.items = self._build_items(lines, OrderItemStatus.PENDING)
        order.total_amount = total
        order.final_amount = final_amount(total, order.discount_amount)
        order.customer_id = data.customer_id
        order.notes = data.notes
        order.customer_count = data.customer_count
        order.is_walk_in = data.is_walk_in
        order.walk_in_name = data.walk_in_name
        order.touch()

        safe_commit(self._db)
        logger.info(
            "Order updated",
            order_id=order.id,
            order_number=order.order_number,
            item_count=len(lines),
            total=str(total),
        )
        return order

    def add_items(
        self,
        business_unit_id: str,
        order_id: str,
        items: Sequence[OrderItemInput],
        caller: CallerIdentity,
    ) -> tuple[Order, RoutingOutput]:
        """
        Append items to an order already in the kitchen/bar and route only
        the new items as addition records.

        Raises:
            OrderNotModifiableError: missing, foreign or not CONFIRMED/IN_PROGRESS/READY
        """
        order = self._orders.find_in_status(
            order_id, business_unit_id, OrderStatus.ACCEPTS_ADDITIONS
        )
        if order is None:
            raise OrderNotModifiableError(
                order_id, business_unit_id=business_unit_id, user_id=caller.user_id
            )

        lines = self._price_lines(business_unit_id, items)
        additional = sum_amounts(line.total_price for line in lines)
        new_items = self._build_items(lines, OrderItemStatus.CONFIRMED)

        order.items.extend(new_items)
        order.total_amount = to_decimal(order.total_amount) + additional
        order.final_amount = to_decimal(order.final_amount) + additional
        order.touch()
        self._db.flush()

        routing = self._routing.route_additions(order, new_items)
        safe_commit(self._db)

        logger.info(
            "Items added to order",
            order_id=order.id,
            order_number=order.order_number,
            item_count=len(new_items),
            additional=str(additional),
            user_id=caller.user_id,
        )
        return order, routing

    def cancel_order(
        self,
        business_unit_id: str,
        order_id: str,
        caller: CallerIdentity,
    ) -> Order:
        """
        Cancel a PENDING or CONFIRMED order.

        Routing records already created are left untouched.
        """
        order = self._orders.find_in_status(
            order_id, business_unit_id, OrderStatus.CANCELLABLE
        )
        if order is None:
            raise OrderNotCancellableError(
                order_id, business_unit_id=business_unit_id, user_id=caller.user_id
            )

        previous = order.status
        order.status = OrderStatus.CANCELLED
        order.touch()
        safe_commit(self._db)

        logger.info(
            "Order cancelled",
            order_id=order.id,
            order_number=order.order_number,
            previous_status=previous,
            user_id=caller.user_id,
        )
        return order

    def complete_order(
        self,
        business_unit_id: str,
        order_id: str,
        caller: CallerIdentity,
    ) -> Order:
        """
        Settle a READY or SERVED order and free its table.

        Raises:
            OrderNotFoundError: missing or foreign
            OrderNotCompletableError: any other status, with a status-specific message
        """
        order = self.require_order(business_unit_id, order_id)
        if order.status not in OrderStatus.COMPLETABLE:
            detail = _NOT_COMPLETABLE_MESSAGES.get(
                order.status, f"Order cannot be settled in {order.status} status."
            )
            raise OrderNotCompletableError(detail, order.status, order_id=order.id)

        order.status = OrderStatus.COMPLETED
        now = utcnow()
        order.completed_at = now
        order.updated_at = now
        self._tables.set_status(order.table, TableStatus.AVAILABLE)
        safe_commit(self._db)

        logger.info(
            "Order completed",
            order_id=order.id,
            order_number=order.order_number,
            final_amount=str(order.final_amount),
            user_id=caller.user_id,
        )
        return order

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_waiter(self, business_unit_id: str, caller: CallerIdentity) -> None:
        """The caller must be an active staff member of the unit."""
        found = self._db.scalar(
            select(User.id).where(
                User.id == caller.user_id,
                User.business_unit_id == business_unit_id,
                User.is_active.is_(True),
            )
        )
        if found is None:
            raise UnauthorizedError(
                business_unit_id=business_unit_id, user_id=caller.user_id
            )

    def _validate_customer(self, business_unit_id: str, customer_id: str | None) -> None:
        if customer_id is None:
            return
        found = self._db.scalar(
            select(Customer.id).where(
                Customer.id == customer_id,
                Customer.business_unit_id == business_unit_id,
                Customer.is_active.is_(True),
            )
        )
        if found is None:
            raise CustomerNotFoundError(customer_id, business_unit_id=business_unit_id)

    def _price_lines(
        self,
        business_unit_id: str,
        items: Sequence[OrderItemInput],
    ) -> list[PricedLine]:
        """
        Price every requested line at the live menu price.

        Raises MenuItemUnavailableError if any distinct id is missing,
        unavailable or owned by another business unit.
        """
        requested = {item.menu_item_id for item in items}
        available = self._menu.find_available(business_unit_id, list(requested))
        missing = sorted(requested - available.keys())
        if missing:
            raise MenuItemUnavailableError(missing, business_unit_id=business_unit_id)

        lines = []
        for item in items:
            menu_item = available[item.menu_item_id]
            unit_price = to_decimal(menu_item.price)
            lines.append(
                PricedLine(
                    menu_item=menu_item,
                    quantity=item.quantity,
                    notes=item.notes,
                    unit_price=unit_price,
                    total_price=line_total(unit_price, item.quantity),
                )
            )
        return lines

    @staticmethod
    def _build_items(lines: Sequence[PricedLine], status: str) -> list[OrderItem]:
        return [
            OrderItem(
                menu_item=line.menu_item,
                quantity=line.quantity,
                unit_price=line.unit_price,
                total_price=line.total_price,
                status=status,
                notes=line.notes,
            )
            for line in lines
        ]
