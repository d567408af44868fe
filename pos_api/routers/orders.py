"""
Orders router.
Thin controller over OrderActions; every endpoint answers with an ActionResult body.
"""

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import (
    AddItemsInput,
    CallerIdentity,
    CreateOrderInput,
    OrderStatusType,
)
from pos_api.services.actions import OrderActions
from ._common import current_caller, to_response


router = APIRouter(
    prefix="/api/business-units/{business_unit_id}/orders",
    tags=["orders"],
)


def get_actions(db: Session = Depends(get_db)) -> OrderActions:
    return OrderActions(db)


@router.post("")
def create_order(
    business_unit_id: str,
    body: CreateOrderInput,
    is_draft: bool = Query(default=False),
    actions: OrderActions = Depends(get_actions),
    caller: CallerIdentity | None = Depends(current_caller),
) -> JSONResponse:
    """Create an order. Unless ``is_draft`` it is routed to kitchen/bar at once."""
    result = actions.create_order(business_unit_id, body, caller, is_draft=is_draft)
    return to_response(result, success_status=status.HTTP_201_CREATED)


@router.get("")
def list_orders(
    business_unit_id: str,
    status_filter: OrderStatusType | None = Query(default=None, alias="status"),
    table_id: str | None = Query(default=None),
    actions: OrderActions = Depends(get_actions),
) -> JSONResponse:
    result = actions.list_orders(business_unit_id, status=status_filter, table_id=table_id)
    return to_response(result)


@router.get("/{order_id}")
def get_order(
    business_unit_id: str,
    order_id: str,
    actions: OrderActions = Depends(get_actions),
) -> JSONResponse:
    return to_response(actions.get_order(business_unit_id, order_id))


@router.put("/{order_id}")
def update_order(
    business_unit_id: str,
    order_id: str,
    body: CreateOrderInput,
    actions: OrderActions = Depends(get_actions),
    caller: CallerIdentity | None = Depends(current_caller),
) -> JSONResponse:
    """Replace the items of a draft order."""
    return to_response(actions.update_order(business_unit_id, order_id, body, caller))


@router.post("/{order_id}/items")
def add_items(
    business_unit_id: str,
    order_id: str,
    body: AddItemsInput,
    actions: OrderActions = Depends(get_actions),
    caller: CallerIdentity | None = Depends(current_caller),
) -> JSONResponse:
    return to_response(actions.add_items_to_order(business_unit_id, order_id, body, caller))


@router.post("/{order_id}/send")
def send_order(
    business_unit_id: str,
    order_id: str,
    actions: OrderActions = Depends(get_actions),
    caller: CallerIdentity | None = Depends(current_caller),
) -> JSONResponse:
    """Route a draft to kitchen and bar. Repeated calls do not duplicate routing."""
    return to_response(
        actions.send_order_to_kitchen_and_bar(business_unit_id, order_id, caller)
    )


@router.post("/{order_id}/cancel")
def cancel_order(
    business_unit_id: str,
    order_id: str,
    actions: OrderActions = Depends(get_actions),
    caller: CallerIdentity | None = Depends(current_caller),
) -> JSONResponse:
    return to_response(actions.cancel_order(business_unit_id, order_id, caller))


@router.post("/{order_id}/complete")
def complete_order(
    business_unit_id: str,
    order_id: str,
    actions: OrderActions = Depends(get_actions),
    caller: CallerIdentity | None = Depends(current_caller),
) -> JSONResponse:
    """Settle a READY or SERVED order and free its table."""
    return to_response(actions.complete_order(business_unit_id, order_id, caller))
