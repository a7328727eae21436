"""
Store configuration router - /api/config

Banner, discount and total table count shared by the menu and dashboards.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import StoreConfigInput, StoreConfigOutput
from rest_api.services.domain import StoreConfigService


router = APIRouter(prefix="/api/config", tags=["config"])


@router.get("", response_model=StoreConfigOutput)
def get_store_config(db: Session = Depends(get_db)) -> StoreConfigOutput:
    return StoreConfigService(db).get_config()


@router.post("", response_model=StoreConfigOutput)
def update_store_config(
    body: StoreConfigInput,
    db: Session = Depends(get_db),
) -> StoreConfigOutput:
    """Replace the store configuration (created on first use)."""
    return StoreConfigService(db).update_config(body)
