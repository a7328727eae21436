"""
Tables router.

GET /status is the pull counterpart of TABLE_STATUS_UPDATED: dashboards
call it on load, then follow the WebSocket for changes.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.config.logging import tables_logger as logger
from shared.infrastructure.db import get_db
from shared.utils.schemas import ClearTableRequest, ClearTableResponse, TableStatusOutput
from shared.utils.validators import sort_table_ids
from rest_api.services.domain import StoreConfigService
from ws_gateway.coordinator import TableCoordinator, get_coordinator


router = APIRouter(prefix="/api/tables", tags=["tables"])


@router.get("/status", response_model=TableStatusOutput)
async def get_table_status(
    db: Session = Depends(get_db),
    coordinator: TableCoordinator = Depends(get_coordinator),
) -> TableStatusOutput:
    """Configured table count and the currently occupied tables."""
    total_tables = StoreConfigService(db).total_tables()
    occupied = await coordinator.current_occupancy()
    return TableStatusOutput(
        total_tables=total_tables,
        occupied_tables=sort_table_ids(occupied),
    )


@router.post("/clear", response_model=ClearTableResponse)
async def clear_table(
    body: ClearTableRequest,
    coordinator: TableCoordinator = Depends(get_coordinator),
) -> ClearTableResponse:
    """
    Release every live viewer of a table.

    Orders are untouched: a table with an active order stays occupied.
    """
    released, occupied = await coordinator.clear_table(body.table_id)
    logger.info("Staff cleared table", table_id=body.table_id, released_viewers=released)
    return ClearTableResponse(
        table_id=body.table_id,
        released_viewers=released,
        occupied=body.table_id in occupied,
        occupied_tables=sort_table_ids(occupied),
    )
