"""
Tables router.
Floor view of a business unit: tables with their current order, status reads and updates.
Domain errors propagate as AppException (an HTTPException).
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import TableStatusType, TableWithCurrentOrder
from pos_api.services.domain import TableService
from pos_api.services.serializers import table_to_output


router = APIRouter(
    prefix="/api/business-units/{business_unit_id}/tables",
    tags=["tables"],
)


class TableStatusBody(BaseModel):
    status: TableStatusType


class TableStatusOutput(BaseModel):
    table_id: str
    status: TableStatusType


@router.get("", response_model=list[TableWithCurrentOrder])
def list_tables(business_unit_id: str, db: Session = Depends(get_db)):
    return TableService(db).list_tables_with_current_order(business_unit_id)


@router.get("/{table_id}/status", response_model=TableStatusOutput)
def get_table_status(business_unit_id: str, table_id: str, db: Session = Depends(get_db)):
    status = TableService(db).get_table_status(business_unit_id, table_id)
    return TableStatusOutput(table_id=table_id, status=status)


@router.put("/{table_id}/status", response_model=TableWithCurrentOrder)
def update_table_status(
    business_unit_id: str,
    table_id: str,
    body: TableStatusBody,
    db: Session = Depends(get_db),
):
    table = TableService(db).update_table_status(business_unit_id, table_id, body.status)
    return table_to_output(table)
