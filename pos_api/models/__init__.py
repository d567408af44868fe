"""
SQLAlchemy ORM Models Package.

- base: Base class and TimestampMixin
- business_unit: BusinessUnit, User
- table: Table
- menu: Category, MenuItem
- customer: Customer
- order: Order, OrderItem
- kitchen: KitchenOrder, BarOrder
"""

from .base import Base, TimestampMixin, new_id, utcnow

from .business_unit import BusinessUnit, User
from .table import Table
from .menu import Category, MenuItem
from .customer import Customer
from .order import Order, OrderItem, ORDER_NUMBER_CONSTRAINT
from .kitchen import KitchenOrder, BarOrder, RoutingRecordMixin

__all__ = [
    "Base",
    "TimestampMixin",
    "new_id",
    "utcnow",
    "BusinessUnit",
    "User",
    "Table",
    "Category",
    "MenuItem",
    "Customer",
    "Order",
    "OrderItem",
    "ORDER_NUMBER_CONSTRAINT",
    "KitchenOrder",
    "BarOrder",
    "RoutingRecordMixin",
]
