"""
Menu Repository - batch lookups of menu items for pricing and routing.
"""

from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from pos_api.models import MenuItem
from .base import BaseRepository


class MenuItemRepository(BaseRepository[MenuItem]):
    """Repository for MenuItem entities."""

    @property
    def model(self) -> type[MenuItem]:
        return MenuItem

    def _base_query(self, business_unit_id: str) -> Select:
        return (
            select(MenuItem)
            .where(MenuItem.business_unit_id == business_unit_id)
            .order_by(MenuItem.name)
        )

    def find_available(
        self,
        business_unit_id: str,
        menu_item_ids: Sequence[str],
    ) -> dict[str, MenuItem]:
        """
        Available menu items of the unit among ``menu_item_ids``, keyed by id.
        Missing, foreign and unavailable ids are simply absent.
        """
        if not menu_item_ids:
            return {}

        items = self._db.execute(
            self._base_query(business_unit_id).where(
                MenuItem.id.in_(set(menu_item_ids)),
                MenuItem.is_available.is_(True),
            )
        ).scalars().all()

        return {item.id: item for item in items}


def get_menu_item_repository(db: Session) -> MenuItemRepository:
    """Factory function for dependency injection."""
    return MenuItemRepository(db)
