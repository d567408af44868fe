"""
Order Models: Order, OrderItem.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .business_unit import BusinessUnit, User
    from .customer import Customer
    from .menu import MenuItem
    from .table import Table


# Name referenced when classifying unique violations on insert
ORDER_NUMBER_CONSTRAINT = "uq_order_business_unit_number"


class Order(TimestampMixin, Base):
    """
    One dine-in transaction for one table.

    ``order_number`` is "<BusinessUnit.code>-<N>" and unique per business
    unit. Items are replaced wholesale while the order is PENDING and frozen
    once it has been routed to kitchen/bar.
    """

    # "order" is a reserved SQL keyword
    __tablename__ = "restaurant_order"

    business_unit_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("business_unit.id"), nullable=False, index=True
    )
    order_number: Mapped[str] = mapped_column(String(64), nullable=False)
    table_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("restaurant_table.id"), nullable=False, index=True
    )
    waiter_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("app_user.id"), nullable=False, index=True
    )
    customer_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("customer.id"), index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), default="PENDING", nullable=False, index=True
    )  # PENDING, CONFIRMED, IN_PROGRESS, READY, SERVED, COMPLETED, CANCELLED
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    discount_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), default=Decimal("0.00"), nullable=False
    )
    final_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    customer_count: Mapped[Optional[int]] = mapped_column(Integer)
    is_walk_in: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    walk_in_name: Mapped[Optional[str]] = mapped_column(Text)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint("business_unit_id", "order_number", name=ORDER_NUMBER_CONSTRAINT),
        CheckConstraint("total_amount >= 0", name="chk_order_total_non_negative"),
        CheckConstraint("discount_amount >= 0", name="chk_order_discount_non_negative"),
        CheckConstraint("final_amount >= 0", name="chk_order_final_non_negative"),
        # Sequencer lookup: latest order of a business unit
        Index("ix_order_business_unit_created", "business_unit_id", "created_at"),
        Index("ix_order_business_unit_status", "business_unit_id", "status"),
    )

    # Relationships
    business_unit: Mapped["BusinessUnit"] = relationship()
    table: Mapped["Table"] = relationship(back_populates="orders")
    waiter: Mapped["User"] = relationship()
    customer: Mapped[Optional["Customer"]] = relationship()
    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.created_at",
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, order_number='{self.order_number}', status='{self.status}')>"


class OrderItem(TimestampMixin, Base):
    """
    A single line within an order.
    Stores the menu price at the time of ordering; later menu price changes
    never touch it.
    """

    __tablename__ = "order_item"

    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("restaurant_order.id", ondelete="CASCADE"), nullable=False, index=True
    )
    menu_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("menu_item.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default="PENDING", nullable=False
    )  # PENDING, CONFIRMED, PREPARING, READY, SERVED, CANCELLED
    notes: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_order_item_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="chk_order_item_price_non_negative"),
    )

    # Relationships
    order: Mapped["Order"] = relationship(back_populates="items")
    menu_item: Mapped["MenuItem"] = relationship()
