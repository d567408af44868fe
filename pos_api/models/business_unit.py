"""
Business Unit and Staff Models: BusinessUnit, User.

Owned by the administration screens; the order subsystem only reads them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .table import Table
    from .menu import MenuItem


class BusinessUnit(TimestampMixin, Base):
    """
    One restaurant/outlet. ``code`` prefixes every order number of the unit
    ("REST01" -> "REST01-10001").
    """

    __tablename__ = "business_unit"

    code: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="PHP", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    tables: Mapped[list["Table"]] = relationship(back_populates="business_unit")
    menu_items: Mapped[list["MenuItem"]] = relationship(back_populates="business_unit")

    def __repr__(self) -> str:
        return f"<BusinessUnit(id={self.id}, code='{self.code}')>"


class User(TimestampMixin, Base):
    """Staff member. Waiters create orders; their name is copied onto routing records."""

    __tablename__ = "app_user"

    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255))
    business_unit_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("business_unit.id"), index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
