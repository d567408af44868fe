"""
Table Model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .business_unit import BusinessUnit
    from .order import Order


class Table(TimestampMixin, Base):
    """
    Physical table in a business unit.

    The order subsystem validates tables before creating orders and moves
    them between AVAILABLE and OCCUPIED; it never creates or deletes them.
    """

    # "table" is a reserved SQL keyword
    __tablename__ = "restaurant_table"

    business_unit_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("business_unit.id"), nullable=False, index=True
    )
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(Text)  # "Main", "Terrace", "VIP"
    status: Mapped[str] = mapped_column(
        String(20), default="AVAILABLE", nullable=False, index=True
    )  # AVAILABLE, OCCUPIED, RESERVED, OUT_OF_ORDER
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("business_unit_id", "number", name="uq_table_business_unit_number"),
        Index("ix_table_business_unit_status", "business_unit_id", "status"),
    )

    business_unit: Mapped["BusinessUnit"] = relationship(back_populates="tables")
    orders: Mapped[list["Order"]] = relationship(back_populates="table")

    def __repr__(self) -> str:
        return f"<Table(id={self.id}, number={self.number}, status={self.status})>"
