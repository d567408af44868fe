"""
Table Service.

The table registry is owned by the back office; the order subsystem only
validates tables and moves them between AVAILABLE and OCCUPIED.
"""

from sqlalchemy.orm import Session

from shared.config.constants import Limits, TableStatus
from shared.config.logging import table_logger as logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import TableNotFoundError, ValidationError
from shared.utils.schemas import TableWithCurrentOrder
from pos_api.models import Table
from pos_api.repositories import RepositoryFilters, get_table_repository
from pos_api.services.serializers import table_to_output


class TableService:
    """Domain service for the table collaborator."""

    def __init__(self, db: Session):
        self._db = db
        self._repo = get_table_repository(db)

    def get_active_table(self, business_unit_id: str, table_id: str) -> Table:
        """
        Table that exists, belongs to the business unit and is active.

        Raises TableNotFoundError otherwise.
        """
        table = self._repo.find_by_id(table_id, business_unit_id)
        if table is None:
            raise TableNotFoundError(table_id, business_unit_id=business_unit_id)
        return table

    def get_table_status(self, business_unit_id: str, table_id: str) -> str:
        table = self.get_active_table(business_unit_id, table_id)
        return table.status

    def set_status(self, table: Table, status: str) -> None:
        """Change status inside the caller's transaction (no commit)."""
        if status not in TableStatus.ALL:
            raise ValidationError(f"Invalid table status: {status}")
        if table.status == status:
            return

        previous = table.status
        table.status = status
        table.touch()
        logger.info(
            "Table status changed",
            table_id=table.id,
            table_number=table.number,
            previous=previous,
            status=status,
        )

    def update_table_status(
        self,
        business_unit_id: str,
        table_id: str,
        status: str,
    ) -> Table:
        """Set and commit the status of an active table."""
        table = self.get_active_table(business_unit_id, table_id)
        self.set_status(table, status)
        safe_commit(self._db)
        return table

    def list_tables_with_current_order(
        self,
        business_unit_id: str,
    ) -> list[TableWithCurrentOrder]:
        """Active tables by number, each with its newest open order (if any)."""
        tables = self._repo.find_all(
            business_unit_id, RepositoryFilters(limit=Limits.MAX_PAGE_SIZE)
        )
        current = self._repo.find_open_orders(business_unit_id, [t.id for t in tables])
        return [table_to_output(table, current.get(table.id)) for table in tables]
