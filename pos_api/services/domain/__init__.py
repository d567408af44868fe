"""
Domain Services.

Structure:
    Router (thin controller)
        ↓
    OrderActions (structured-result boundary)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from pos_api.services.domain import OrderService

    service = OrderService(db)
    order, routing = service.create_order(business_unit_id, data, caller)
"""

from .order_number import OrderNumberSequencer, format_order_number, parse_sequence
from .table_service import TableService
from .routing_service import RoutingService
from .order_service import OrderService

__all__ = [
    "OrderNumberSequencer",
    "format_order_number",
    "parse_sequence",
    "TableService",
    "RoutingService",
    "OrderService",
]
