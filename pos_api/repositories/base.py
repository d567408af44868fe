"""
Base Repository implementation.
Provides common data access patterns with business unit isolation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TypeVar, Generic, Sequence

from sqlalchemy import Select
from sqlalchemy.orm import Session

from shared.config.constants import Limits


ModelT = TypeVar("ModelT")


@dataclass
class RepositoryFilters:
    """Base filters for repository queries."""

    # Pagination
    limit: int = Limits.DEFAULT_PAGE_SIZE
    offset: int = 0

    # Inactive rows (tables, menu items) are hidden unless asked for
    include_inactive: bool = False

    def __post_init__(self):
        """Validate and normalize filters."""
        self.limit = min(max(1, self.limit), Limits.MAX_PAGE_SIZE)
        self.offset = max(0, self.offset)


class BaseRepository(ABC, Generic[ModelT]):
    """
    Abstract base repository with common operations.

    Every query is scoped to one business unit.

    Subclasses must implement:
    - model: the SQLAlchemy model class
    - _base_query(): base query with eager loading
    - _apply_filters(): entity-specific filters (optional)
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    @abstractmethod
    def _base_query(self, business_unit_id: str) -> Select:
        """
        Return base query with proper eager loading.
        Subclasses must implement this with selectinload/joinedload.
        """
        ...

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply entity-specific filters to query."""
        return query

    def _active_only(self, query: Select, include_inactive: bool) -> Select:
        if not include_inactive and hasattr(self.model, "is_active"):
            query = query.where(self.model.is_active.is_(True))
        return query

    def find_all(
        self,
        business_unit_id: str,
        filters: RepositoryFilters | None = None,
    ) -> Sequence[ModelT]:
        """Find all entities of a business unit matching filters."""
        filters = filters or RepositoryFilters()
        query = self._base_query(business_unit_id)
        query = self._active_only(query, filters.include_inactive)
        query = self._apply_filters(query, filters)
        query = query.offset(filters.offset).limit(filters.limit)

        return self._db.execute(query).scalars().unique().all()

    def find_by_id(
        self,
        entity_id: str,
        business_unit_id: str,
        include_inactive: bool = False,
    ) -> ModelT | None:
        """Find entity by ID within a business unit."""
        query = self._base_query(business_unit_id).where(self.model.id == entity_id)
        query = self._active_only(query, include_inactive)
        return self._db.scalar(query)
