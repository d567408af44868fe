"""
Centralized constants for the order subsystem.
Avoids magic strings for statuses, item types and routing targets.

Usage:
    from shared.config.constants import OrderStatus, ItemType

    if order.status in OrderStatus.CANCELLABLE:
        ...
"""

from typing import Final


# =============================================================================
# Order Status
# =============================================================================


class OrderStatus:
    """
    Order status constants.

    PENDING (draft) -> CONFIRMED (sent to kitchen/bar) -> IN_PROGRESS
    -> READY -> SERVED -> COMPLETED. PENDING and CONFIRMED may be CANCELLED.
    """

    PENDING: Final[str] = "PENDING"
    CONFIRMED: Final[str] = "CONFIRMED"
    IN_PROGRESS: Final[str] = "IN_PROGRESS"
    READY: Final[str] = "READY"
    SERVED: Final[str] = "SERVED"
    COMPLETED: Final[str] = "COMPLETED"
    CANCELLED: Final[str] = "CANCELLED"

    ALL: Final[list[str]] = [
        PENDING, CONFIRMED, IN_PROGRESS, READY, SERVED, COMPLETED, CANCELLED,
    ]

    # Status groups
    OPEN: Final[list[str]] = [PENDING, CONFIRMED, IN_PROGRESS, READY, SERVED]
    MODIFIABLE: Final[list[str]] = [PENDING]
    CANCELLABLE: Final[list[str]] = [PENDING, CONFIRMED]
    ACCEPTS_ADDITIONS: Final[list[str]] = [CONFIRMED, IN_PROGRESS, READY]
    COMPLETABLE: Final[list[str]] = [READY, SERVED]
    TERMINAL: Final[list[str]] = [COMPLETED, CANCELLED]


class OrderItemStatus:
    """Per-item status, tracks kitchen/bar progress independently of the order."""

    PENDING: Final[str] = "PENDING"
    CONFIRMED: Final[str] = "CONFIRMED"
    PREPARING: Final[str] = "PREPARING"
    READY: Final[str] = "READY"
    SERVED: Final[str] = "SERVED"
    CANCELLED: Final[str] = "CANCELLED"


# =============================================================================
# Menu
# =============================================================================


class ItemType:
    """Menu item type, decides where an item is prepared."""

    FOOD: Final[str] = "FOOD"
    DRINK: Final[str] = "DRINK"

    ALL: Final[list[str]] = [FOOD, DRINK]


# =============================================================================
# Tables
# =============================================================================


class TableStatus:
    """Table status constants."""

    AVAILABLE: Final[str] = "AVAILABLE"
    OCCUPIED: Final[str] = "OCCUPIED"
    RESERVED: Final[str] = "RESERVED"
    OUT_OF_ORDER: Final[str] = "OUT_OF_ORDER"

    ALL: Final[list[str]] = [AVAILABLE, OCCUPIED, RESERVED, OUT_OF_ORDER]


# =============================================================================
# Kitchen / Bar routing records
# =============================================================================


class RoutingStatus:
    """Status of a KitchenOrder/BarOrder. Only PENDING is written by this core."""

    PENDING: Final[str] = "PENDING"
    ACCEPTED: Final[str] = "ACCEPTED"
    PREPARING: Final[str] = "PREPARING"
    READY: Final[str] = "READY"
    SERVED: Final[str] = "SERVED"
    CANCELLED: Final[str] = "CANCELLED"


class OrderPriority:
    """Priority of a routing record."""

    LOW: Final[str] = "LOW"
    NORMAL: Final[str] = "NORMAL"
    HIGH: Final[str] = "HIGH"
    URGENT: Final[str] = "URGENT"


# Suffix and note used for routing records created by add_items_to_order
ADDITION_SUFFIX: Final[str] = "-ADD"
ADDITION_NOTES_TEMPLATE: Final[str] = "Additional items for {order_number}"


# =============================================================================
# Limits
# =============================================================================


class Limits:
    """Pagination and input limits."""

    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 200
    MAX_ITEMS_PER_ORDER: Final[int] = 100
    MAX_ITEM_QUANTITY: Final[int] = 999
    MAX_NOTES_LENGTH: Final[int] = 500
