"""
Repository Pattern implementation.
Centralizes data access with guaranteed eager loading and business unit scoping.

Usage:
    from pos_api.repositories import OrderFilters, get_order_repository

    repo = get_order_repository(db)
    orders = repo.find_all(business_unit_id, filters=OrderFilters(status="PENDING"))
    order = repo.find_by_id(order_id, business_unit_id)
"""

from .base import BaseRepository, RepositoryFilters
from .order import OrderRepository, OrderFilters, get_order_repository
from .menu import MenuItemRepository, get_menu_item_repository
from .table import TableRepository, get_table_repository
from .routing import (
    KitchenOrderRepository,
    BarOrderRepository,
    get_kitchen_order_repository,
    get_bar_order_repository,
)

__all__ = [
    # Base
    "BaseRepository",
    "RepositoryFilters",
    # Order
    "OrderRepository",
    "OrderFilters",
    "get_order_repository",
    # Menu
    "MenuItemRepository",
    "get_menu_item_repository",
    # Table
    "TableRepository",
    "get_table_repository",
    # Routing
    "KitchenOrderRepository",
    "BarOrderRepository",
    "get_kitchen_order_repository",
    "get_bar_order_repository",
]
