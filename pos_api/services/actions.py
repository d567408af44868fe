"""
Order actions: the public boundary of the order subsystem.

Every action returns an ActionResult. Domain exceptions become
``success=False`` with their user-facing message and ErrorCode; anything
unexpected is logged with its traceback and reported with its message or
the action's fallback string. No exception escapes an action.
"""

from functools import wraps
from typing import Callable

from sqlalchemy.orm import Session

from shared.config.logging import order_logger as logger
from shared.utils.exceptions import AppException, ErrorCode, UnauthorizedError
from shared.utils.schemas import (
    ActionResult,
    AddItemsInput,
    CallerIdentity,
    CreateOrderInput,
)
from pos_api.services.domain import OrderService, RoutingService
from pos_api.services.serializers import order_to_output


def action(fallback: str) -> Callable:
    """
    Wrap an OrderActions method so it always returns an ActionResult.

    The session is rolled back on every failure.
    """

    def decorator(func: Callable[..., ActionResult]) -> Callable[..., ActionResult]:
        @wraps(func)
        def wrapper(self: "OrderActions", *args, **kwargs) -> ActionResult:
            try:
                return func(self, *args, **kwargs)
            except AppException as exc:
                self._db.rollback()
                return ActionResult.fail(exc.detail, exc.code)
            except Exception as exc:
                self._db.rollback()
                logger.error(
                    fallback,
                    action=func.__name__,
                    error_type=type(exc).__name__,
                    exc_info=True,
                )
                return ActionResult.fail(str(exc) or fallback, ErrorCode.UNKNOWN)

        return wrapper

    return decorator


def _require_caller(caller: CallerIdentity | None) -> CallerIdentity:
    if caller is None:
        raise UnauthorizedError()
    return caller


class OrderActions:
    """
    Structured-result facade over the order domain services.

    Usage:
        actions = OrderActions(db)
        result = actions.create_order(business_unit_id, data, caller)
        if not result.success:
            show(result.error)
    """

    def __init__(
        self,
        db: Session,
        order_service: OrderService | None = None,
        routing_service: RoutingService | None = None,
    ):
        self._db = db
        self._routing = routing_service or RoutingService(db)
        self._orders = order_service or OrderService(db, routing=self._routing)

    def _materialize(self, business_unit_id: str, order_id: str):
        # Re-read with eager loading; the committed instance is expired
        return order_to_output(self._orders.require_order(business_unit_id, order_id))

    @action("Failed to create order")
    def create_order(
        self,
        business_unit_id: str,
        data: CreateOrderInput,
        caller: CallerIdentity | None,
        is_draft: bool = False,
    ) -> ActionResult:
        caller = _require_caller(caller)
        order, routing = self._orders.create_order(
            business_unit_id, data, caller, is_draft=is_draft
        )
        return ActionResult.ok(
            order=self._materialize(business_unit_id, order.id),
            routing=routing,
        )

    @action("Failed to update order")
    def update_order(
        self,
        business_unit_id: str,
        order_id: str,
        data: CreateOrderInput,
        caller: CallerIdentity | None,
    ) -> ActionResult:
        caller = _require_caller(caller)
        order = self._orders.update_order(business_unit_id, order_id, data, caller)
        return ActionResult.ok(order=self._materialize(business_unit_id, order.id))

    @action("Failed to get order")
    def get_order(self, business_unit_id: str, order_id: str) -> ActionResult:
        """Missing orders are reported as a failure with ORDER_NOT_FOUND."""
        return ActionResult.ok(order=self._materialize(business_unit_id, order_id))

    @action("Failed to list orders")
    def list_orders(
        self,
        business_unit_id: str,
        status: str | None = None,
        table_id: str | None = None,
    ) -> ActionResult:
        orders = self._orders.list_orders(business_unit_id, status=status, table_id=table_id)
        return ActionResult.ok(orders=[order_to_output(order) for order in orders])

    @action("Failed to send order")
    def send_order_to_kitchen_and_bar(
        self,
        business_unit_id: str,
        order_id: str,
        caller: CallerIdentity | None,
    ) -> ActionResult:
        _require_caller(caller)
        routing = self._routing.send_order(business_unit_id, order_id)
        return ActionResult.ok(
            order=self._materialize(business_unit_id, order_id),
            routing=routing,
        )

    @action("Failed to add items to order")
    def add_items_to_order(
        self,
        business_unit_id: str,
        order_id: str,
        data: AddItemsInput,
        caller: CallerIdentity | None,
    ) -> ActionResult:
        caller = _require_caller(caller)
        order, routing = self._orders.add_items(business_unit_id, order_id, data.items, caller)
        return ActionResult.ok(
            order=self._materialize(business_unit_id, order.id),
            routing=routing,
        )

    @action("Failed to cancel order")
    def cancel_order(
        self,
        business_unit_id: str,
        order_id: str,
        caller: CallerIdentity | None,
    ) -> ActionResult:
        caller = _require_caller(caller)
        order = self._orders.cancel_order(business_unit_id, order_id, caller)
        return ActionResult.ok(order=self._materialize(business_unit_id, order.id))

    @action("Failed to complete order")
    def complete_order(
        self,
        business_unit_id: str,
        order_id: str,
        caller: CallerIdentity | None,
    ) -> ActionResult:
        caller = _require_caller(caller)
        order = self._orders.complete_order(business_unit_id, order_id, caller)
        return ActionResult.ok(order=self._materialize(business_unit_id, order.id))

