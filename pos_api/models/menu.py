"""
Menu Models: Category, MenuItem.

Read-only from the order subsystem's perspective.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .business_unit import BusinessUnit


class Category(TimestampMixin, Base):
    """Menu section ("Mains", "Cocktails")."""

    __tablename__ = "menu_category"

    business_unit_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("business_unit.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    items: Mapped[list["MenuItem"]] = relationship(back_populates="category")


class MenuItem(TimestampMixin, Base):
    """
    A sellable item. ``type`` decides routing (FOOD -> kitchen, DRINK -> bar);
    ``prep_time`` is in minutes.
    """

    __tablename__ = "menu_item"

    business_unit_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("business_unit.id"), nullable=False, index=True
    )
    category_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("menu_category.id"), index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    type: Mapped[str] = mapped_column(String(10), default="FOOD", nullable=False)  # FOOD, DRINK
    prep_time: Mapped[Optional[int]] = mapped_column(Integer)
    image_url: Mapped[Optional[str]] = mapped_column(Text)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_menu_item_price_non_negative"),
        Index("ix_menu_item_business_unit_available", "business_unit_id", "is_available"),
    )

    business_unit: Mapped["BusinessUnit"] = relationship(back_populates="menu_items")
    category: Mapped[Optional["Category"]] = relationship(back_populates="items")

    def __repr__(self) -> str:
        return f"<MenuItem(id={self.id}, name='{self.name}', type={self.type})>"
