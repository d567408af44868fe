"""
Customer Model.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Customer(TimestampMixin, Base):
    """Registered customer an order may be linked to."""

    __tablename__ = "customer"

    business_unit_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("business_unit.id"), nullable=False, index=True
    )
    customer_number: Mapped[str] = mapped_column(String(32), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(Text)
    last_name: Mapped[Optional[str]] = mapped_column(Text)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    type: Mapped[str] = mapped_column(String(20), default="REGULAR", nullable=False)  # WALK_IN, REGULAR, VIP
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
