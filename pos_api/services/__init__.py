"""
Order subsystem services.

- domain: business logic (OrderService, RoutingService, TableService, OrderNumberSequencer)
- actions: OrderActions, the structured-result boundary called by UI code and the router
- serializers: ORM -> output schema conversion
"""

from .actions import OrderActions

__all__ = ["OrderActions"]
