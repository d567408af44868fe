"""
Kitchen/Bar Routing Models: KitchenOrder, BarOrder.

Append-only records created when an order is sent out. They carry a
denormalized snapshot (order number, table number, waiter name, items) so the
kitchen and bar displays never join back to the order tables.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class RoutingRecordMixin(TimestampMixin):
    """Columns shared by KitchenOrder and BarOrder."""

    # Plain FK used for the single-routing guard and unit scoping; no relationship
    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("restaurant_order.id"), nullable=False, index=True
    )
    business_unit_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("business_unit.id"), nullable=False, index=True
    )
    order_number: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    table_number: Mapped[int] = mapped_column(Integer, nullable=False)
    waiter_name: Mapped[str] = mapped_column(Text, nullable=False)
    # [{"id", "name", "quantity", "notes", "prep_time"}, ...]
    items: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default="PENDING", nullable=False, index=True
    )  # PENDING, ACCEPTED, PREPARING, READY, SERVED, CANCELLED
    priority: Mapped[str] = mapped_column(String(10), default="NORMAL", nullable=False)
    estimated_time: Mapped[Optional[int]] = mapped_column(Integer)  # minutes
    notes: Mapped[Optional[str]] = mapped_column(Text)
    # True for records created by add_items_to_order ("<order_number>-ADD")
    is_addition: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class KitchenOrder(RoutingRecordMixin, Base):
    """FOOD items of one order."""

    __tablename__ = "kitchen_order"

    __table_args__ = (
        Index("ix_kitchen_order_business_unit_status", "business_unit_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<KitchenOrder(id={self.id}, order_number='{self.order_number}', status='{self.status}')>"


class BarOrder(RoutingRecordMixin, Base):
    """DRINK items of one order."""

    __tablename__ = "bar_order"

    __table_args__ = (
        Index("ix_bar_order_business_unit_status", "business_unit_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<BarOrder(id={self.id}, order_number='{self.order_number}', status='{self.status}')>"
