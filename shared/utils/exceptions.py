"""
Centralized exceptions for consistent error handling.

Every exception carries an ErrorCode so callers branch on a typed value
instead of matching message text. Messages are user-facing and meant to be
displayed verbatim.

Usage:
    from shared.utils.exceptions import TableNotFoundError, MenuItemUnavailableError

    raise TableNotFoundError(table_id, business_unit_id=business_unit_id)
    raise MenuItemUnavailableError(missing_ids)
"""

from enum import Enum
from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """Typed failure reasons surfaced through ActionResult.error_code."""

    TABLE_NOT_FOUND = "TABLE_NOT_FOUND"
    BUSINESS_UNIT_NOT_FOUND = "BUSINESS_UNIT_NOT_FOUND"
    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    MENU_ITEM_UNAVAILABLE = "MENU_ITEM_UNAVAILABLE"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_NOT_MODIFIABLE = "ORDER_NOT_MODIFIABLE"
    ORDER_NOT_CANCELLABLE = "ORDER_NOT_CANCELLABLE"
    ORDER_NOT_COMPLETABLE = "ORDER_NOT_COMPLETABLE"
    ORDER_NUMBER_CONFLICT = "ORDER_NUMBER_CONFLICT"
    ORDER_NUMBER_EXHAUSTED = "ORDER_NUMBER_EXHAUSTED"
    ORDER_NUMBER_MALFORMED = "ORDER_NUMBER_MALFORMED"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION = "VALIDATION"
    UNKNOWN = "UNKNOWN"


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, code=code.value, **log_context)

        self.code = code
        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def __str__(self) -> str:
        return self.detail


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Table", table_id, code=ErrorCode.TABLE_NOT_FOUND)
    """

    def __init__(
        self,
        entity: str,
        entity_id: str | None = None,
        code: ErrorCode = ErrorCode.ORDER_NOT_FOUND,
        detail: str | None = None,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail or f"{entity} not found",
            code=code,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


class BusinessUnitNotFoundError(NotFoundError):
    """Business unit does not exist."""

    def __init__(self, business_unit_id: str | None = None, **log_context: Any):
        super().__init__(
            "Business unit",
            business_unit_id,
            code=ErrorCode.BUSINESS_UNIT_NOT_FOUND,
            **log_context,
        )


class TableNotFoundError(NotFoundError):
    """Table missing, inactive, or owned by another business unit."""

    def __init__(self, table_id: str | None = None, **log_context: Any):
        super().__init__("Table", table_id, code=ErrorCode.TABLE_NOT_FOUND, **log_context)


class CustomerNotFoundError(NotFoundError):
    """Customer missing or owned by another business unit."""

    def __init__(self, customer_id: str | None = None, **log_context: Any):
        super().__init__(
            "Customer", customer_id, code=ErrorCode.CUSTOMER_NOT_FOUND, **log_context
        )


class OrderNotFoundError(NotFoundError):
    """Order missing or owned by another business unit."""

    def __init__(self, order_id: str | None = None, **log_context: Any):
        super().__init__("Order", order_id, code=ErrorCode.ORDER_NOT_FOUND, **log_context)


# =============================================================================
# 401 Unauthorized
# =============================================================================


class UnauthorizedError(AppException):
    """No caller identity was supplied (401)."""

    def __init__(self, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            code=ErrorCode.UNAUTHORIZED,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Order must contain at least one item")
    """

    def __init__(
        self,
        detail: str,
        code: ErrorCode = ErrorCode.VALIDATION,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code=code,
            log_level="warning",
            **log_context,
        )


class MenuItemUnavailableError(ValidationError):
    """One or more requested menu items are missing or unavailable."""

    def __init__(self, menu_item_ids: list[str], **log_context: Any):
        self.menu_item_ids = menu_item_ids
        super().__init__(
            "Some menu items are not available",
            code=ErrorCode.MENU_ITEM_UNAVAILABLE,
            menu_item_ids=menu_item_ids,
            **log_context,
        )


class InvalidStateError(ValidationError):
    """Entity is in an invalid state for the operation."""

    def __init__(
        self,
        detail: str,
        code: ErrorCode,
        current_state: str | None = None,
        **log_context: Any,
    ):
        super().__init__(detail, code=code, current_state=current_state, **log_context)


class OrderNotModifiableError(InvalidStateError):
    """
    Draft update refused.

    Missing order, wrong business unit, another waiter's order and a
    non-PENDING status all produce the same message.
    """

    def __init__(self, order_id: str | None = None, **log_context: Any):
        super().__init__(
            "Order not found or cannot be modified",
            code=ErrorCode.ORDER_NOT_MODIFIABLE,
            order_id=order_id,
            **log_context,
        )


class OrderNotCancellableError(InvalidStateError):
    """Cancellation refused: order missing or past CONFIRMED."""

    def __init__(self, order_id: str | None = None, **log_context: Any):
        super().__init__(
            "Order not found or cannot be cancelled",
            code=ErrorCode.ORDER_NOT_CANCELLABLE,
            order_id=order_id,
            **log_context,
        )


class OrderNotCompletableError(InvalidStateError):
    """Settlement refused for the order's current status."""

    def __init__(self, detail: str, current_state: str, **log_context: Any):
        super().__init__(
            detail,
            code=ErrorCode.ORDER_NOT_COMPLETABLE,
            current_state=current_state,
            **log_context,
        )


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409).

    Usage:
        raise ConflictError("Order number already taken", code=ErrorCode.ORDER_NUMBER_CONFLICT)
    """

    def __init__(
        self,
        detail: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            code=code,
            log_level="warning",
            **log_context,
        )


class OrderNumberConflictError(ConflictError):
    """The allocated order number was taken by a concurrent insert. Retried."""

    def __init__(self, order_number: str, **log_context: Any):
        self.order_number = order_number
        super().__init__(
            f"Order number {order_number} already exists",
            code=ErrorCode.ORDER_NUMBER_CONFLICT,
            order_number=order_number,
            **log_context,
        )


class OrderNumberExhaustedError(ConflictError):
    """Every allocation attempt collided."""

    def __init__(self, attempts: int, **log_context: Any):
        super().__init__(
            "Failed to generate unique order number after multiple attempts",
            code=ErrorCode.ORDER_NUMBER_EXHAUSTED,
            attempts=attempts,
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Failed to route order", order_id=order_id)
    """

    def __init__(
        self,
        detail: str = "Internal server error",
        code: ErrorCode = ErrorCode.UNKNOWN,
        **log_context: Any,
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            code=code,
            log_level="error",
            **log_context,
        )


class MalformedOrderNumberError(InternalError):
    """Latest order number of a business unit has a non-numeric suffix."""

    def __init__(self, order_number: str, **log_context: Any):
        super().__init__(
            f"Cannot derive next order number from malformed order number '{order_number}'",
            code=ErrorCode.ORDER_NUMBER_MALFORMED,
            order_number=order_number,
            **log_context,
        )
