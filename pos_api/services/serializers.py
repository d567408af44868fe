"""
ORM -> output schema conversion.

Every monetary value is converted with to_number() here, so nothing that
leaves the service layer carries a Decimal.
"""

from pos_api.models import BarOrder, Customer, KitchenOrder, MenuItem, Order, OrderItem, Table
from shared.utils.decimals import to_number
from shared.utils.schemas import (
    CustomerSummary,
    MenuItemSnapshot,
    OrderItemOutput,
    OrderOutput,
    OrderSummary,
    RoutingItemSnapshot,
    RoutingRecordOutput,
    TableSummary,
    TableWithCurrentOrder,
)


def menu_item_to_snapshot(menu_item: MenuItem) -> MenuItemSnapshot:
    return MenuItemSnapshot(
        id=menu_item.id,
        name=menu_item.name,
        description=menu_item.description,
        price=to_number(menu_item.price),
        type=menu_item.type,
        prep_time=menu_item.prep_time,
        image_url=menu_item.image_url,
    )


def table_to_summary(table: Table) -> TableSummary:
    return TableSummary(
        id=table.id,
        number=table.number,
        capacity=table.capacity,
        location=table.location,
    )


def customer_to_summary(customer: Customer | None) -> CustomerSummary | None:
    if customer is None:
        return None
    return CustomerSummary(
        id=customer.id,
        first_name=customer.first_name,
        last_name=customer.last_name,
        email=customer.email,
        phone=customer.phone,
    )


def order_item_to_output(item: OrderItem) -> OrderItemOutput:
    return OrderItemOutput(
        id=item.id,
        menu_item_id=item.menu_item_id,
        quantity=item.quantity,
        unit_price=to_number(item.unit_price),
        total_price=to_number(item.total_price),
        status=item.status,
        notes=item.notes,
        menu_item=menu_item_to_snapshot(item.menu_item),
    )


def order_to_output(order: Order) -> OrderOutput:
    """Fully materialized order with items, table and customer."""
    return OrderOutput(
        id=order.id,
        order_number=order.order_number,
        business_unit_id=order.business_unit_id,
        table_id=order.table_id,
        waiter_id=order.waiter_id,
        customer_id=order.customer_id,
        status=order.status,
        total_amount=to_number(order.total_amount),
        discount_amount=to_number(order.discount_amount),
        final_amount=to_number(order.final_amount),
        notes=order.notes,
        customer_count=order.customer_count,
        is_walk_in=order.is_walk_in,
        walk_in_name=order.walk_in_name,
        created_at=order.created_at,
        updated_at=order.updated_at,
        completed_at=order.completed_at,
        table=table_to_summary(order.table),
        customer=customer_to_summary(order.customer),
        items=[order_item_to_output(item) for item in order.items],
    )


def order_to_summary(order: Order) -> OrderSummary:
    return OrderSummary(
        id=order.id,
        order_number=order.order_number,
        status=order.status,
        total_amount=to_number(order.total_amount),
        customer_count=order.customer_count,
        is_walk_in=order.is_walk_in,
        walk_in_name=order.walk_in_name,
        created_at=order.created_at,
        customer=customer_to_summary(order.customer),
    )


def table_to_output(table: Table, current_order: Order | None = None) -> TableWithCurrentOrder:
    return TableWithCurrentOrder(
        id=table.id,
        business_unit_id=table.business_unit_id,
        number=table.number,
        capacity=table.capacity,
        status=table.status,
        location=table.location,
        is_active=table.is_active,
        current_order=order_to_summary(current_order) if current_order else None,
    )


def routing_record_to_output(record: KitchenOrder | BarOrder) -> RoutingRecordOutput:
    return RoutingRecordOutput(
        id=record.id,
        station="KITCHEN" if isinstance(record, KitchenOrder) else "BAR",
        order_id=record.order_id,
        order_number=record.order_number,
        table_number=record.table_number,
        waiter_name=record.waiter_name,
        items=[RoutingItemSnapshot(**line) for line in record.items],
        status=record.status,
        priority=record.priority,
        estimated_time=record.estimated_time,
        notes=record.notes,
        is_addition=record.is_addition,
        created_at=record.created_at,
    )
