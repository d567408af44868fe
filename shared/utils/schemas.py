"""
Shared Pydantic schemas for the order subsystem.

Input schemas validate what UI callers send; output schemas are the
normalized shape returned across the action boundary (all money as float).
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from shared.config.constants import Limits
from shared.utils.exceptions import ErrorCode


# =============================================================================
# Common Types
# =============================================================================

OrderStatusType = Literal[
    "PENDING", "CONFIRMED", "IN_PROGRESS", "READY", "SERVED", "COMPLETED", "CANCELLED"
]
OrderItemStatusType = Literal[
    "PENDING", "CONFIRMED", "PREPARING", "READY", "SERVED", "CANCELLED"
]
ItemTypeType = Literal["FOOD", "DRINK"]
TableStatusType = Literal["AVAILABLE", "OCCUPIED", "RESERVED", "OUT_OF_ORDER"]
RoutingStatusType = Literal["PENDING", "ACCEPTED", "PREPARING", "READY", "SERVED", "CANCELLED"]
PriorityType = Literal["LOW", "NORMAL", "HIGH", "URGENT"]
StationType = Literal["KITCHEN", "BAR"]


# =============================================================================
# Caller Identity
# =============================================================================


class CallerIdentity(BaseModel):
    """Staff member performing an operation. Passed explicitly, never looked up globally."""

    user_id: str = Field(min_length=1)
    name: str | None = None


# =============================================================================
# Order Inputs
# =============================================================================


class OrderItemInput(BaseModel):
    """One requested line. Prices are never accepted from the caller."""

    menu_item_id: str = Field(min_length=1)
    quantity: int = Field(gt=0, le=Limits.MAX_ITEM_QUANTITY)
    notes: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)


class CreateOrderInput(BaseModel):
    """Order payload used by create_order and update_order."""

    table_id: str = Field(min_length=1)
    customer_id: str | None = None
    is_walk_in: bool = False
    walk_in_name: str | None = Field(default=None, max_length=100)
    customer_count: int | None = Field(default=None, ge=1)
    notes: str | None = Field(default=None, max_length=Limits.MAX_NOTES_LENGTH)
    items: list[OrderItemInput] = Field(min_length=1, max_length=Limits.MAX_ITEMS_PER_ORDER)


class AddItemsInput(BaseModel):
    """Items appended to an order already in the kitchen/bar."""

    items: list[OrderItemInput] = Field(min_length=1, max_length=Limits.MAX_ITEMS_PER_ORDER)


# =============================================================================
# Order Outputs
# =============================================================================


class MenuItemSnapshot(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: float
    type: ItemTypeType
    prep_time: int | None = None
    image_url: str | None = None


class TableSummary(BaseModel):
    id: str
    number: int
    capacity: int
    location: str | None = None


class CustomerSummary(BaseModel):
    id: str
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None


class OrderItemOutput(BaseModel):
    """A single order line with its price snapshot."""

    id: str
    menu_item_id: str
    quantity: int
    unit_price: float
    total_price: float
    status: OrderItemStatusType
    notes: str | None = None
    menu_item: MenuItemSnapshot


class OrderOutput(BaseModel):
    """Fully materialized order."""

    id: str
    order_number: str
    business_unit_id: str
    table_id: str
    waiter_id: str
    customer_id: str | None = None
    status: OrderStatusType
    total_amount: float
    discount_amount: float
    final_amount: float
    notes: str | None = None
    customer_count: int | None = None
    is_walk_in: bool
    walk_in_name: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    table: TableSummary
    customer: CustomerSummary | None = None
    items: list[OrderItemOutput]


class OrderSummary(BaseModel):
    """Compact order view used on table cards."""

    id: str
    order_number: str
    status: OrderStatusType
    total_amount: float
    customer_count: int | None = None
    is_walk_in: bool
    walk_in_name: str | None = None
    created_at: datetime
    customer: CustomerSummary | None = None


# =============================================================================
# Kitchen / Bar Routing
# =============================================================================


class RoutingItemSnapshot(BaseModel):
    """Denormalized line stored on a KitchenOrder/BarOrder."""

    id: str
    name: str
    quantity: int
    notes: str | None = None
    prep_time: int | None = None


class RoutingRecordOutput(BaseModel):
    """A KitchenOrder or BarOrder."""

    id: str
    station: StationType
    order_id: str
    order_number: str
    table_number: int
    waiter_name: str
    items: list[RoutingItemSnapshot]
    status: RoutingStatusType
    priority: PriorityType
    estimated_time: int | None = None
    notes: str | None = None
    is_addition: bool = False
    created_at: datetime


class RoutingOutput(BaseModel):
    """Result of fanning an order out to kitchen and bar."""

    order_id: str
    kitchen_order: RoutingRecordOutput | None = None
    bar_order: RoutingRecordOutput | None = None
    already_routed: bool = False


# =============================================================================
# Tables
# =============================================================================


class TableWithCurrentOrder(BaseModel):
    """Active table with its newest open order, if any."""

    id: str
    business_unit_id: str
    number: int
    capacity: int
    status: TableStatusType
    location: str | None = None
    is_active: bool
    current_order: OrderSummary | None = None


# =============================================================================
# Action Boundary
# =============================================================================


class ActionResult(BaseModel):
    """
    Uniform result of every public order action.

    Callers branch on ``success`` and display ``error`` verbatim;
    ``error_code`` is the typed reason.
    """

    success: bool
    error: str | None = None
    error_code: ErrorCode | None = None
    order: OrderOutput | None = None
    orders: list[OrderOutput] | None = None
    routing: RoutingOutput | None = None

    @classmethod
    def ok(cls, **payload) -> "ActionResult":
        return cls(success=True, **payload)

    @classmethod
    def fail(cls, error: str, error_code: ErrorCode = ErrorCode.UNKNOWN) -> "ActionResult":
        return cls(success=False, error=error, error_code=error_code)
