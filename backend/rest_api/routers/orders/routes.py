"""
Orders router.

Customers place orders from their table; the kitchen dashboard advances
them through Pending → Cooking → Coming to Table → Completed. Every
successful mutation is followed by an ORDER_* event and an occupancy
broadcast on /ws/tables.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from shared.config.settings import settings
from shared.infrastructure.db import get_db
from shared.security.rate_limit import limiter
from shared.utils.schemas import (
    CreateOrderRequest,
    DeleteOrderResponse,
    OrderOutput,
    UpdateOrderStatusRequest,
)
from rest_api.services.domain import OrderService
from ws_gateway.coordinator import TableCoordinator, get_coordinator


router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=list[OrderOutput])
def list_orders(db: Session = Depends(get_db)) -> list[OrderOutput]:
    """All orders, newest first."""
    return OrderService(db).list_orders()


@router.get("/{order_id}", response_model=OrderOutput)
def get_order(order_id: int, db: Session = Depends(get_db)) -> OrderOutput:
    return OrderService(db).get_order(order_id)


@router.post("", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.order_create_rate_limit)
async def create_order(
    request: Request,
    body: CreateOrderRequest,
    db: Session = Depends(get_db),
    coordinator: TableCoordinator = Depends(get_coordinator),
) -> OrderOutput:
    """
    Place a new order for a table.

    The order starts in Pending and marks its table occupied.
    """
    order = OrderService(db).create_order(body)
    await coordinator.order_created(order)
    return order


@router.put("/{order_id}/status", response_model=OrderOutput)
async def update_order_status(
    order_id: int,
    body: UpdateOrderStatusRequest,
    db: Session = Depends(get_db),
    coordinator: TableCoordinator = Depends(get_coordinator),
) -> OrderOutput:
    """
    Move an order to its next status.

    Only the exact next status is accepted (400 otherwise, 409 when the
    order is already Completed).
    """
    order = OrderService(db).update_status(order_id, body.status)
    await coordinator.order_updated(order)
    return order


@router.post("/{order_id}/advance", response_model=OrderOutput)
async def advance_order(
    order_id: int,
    db: Session = Depends(get_db),
    coordinator: TableCoordinator = Depends(get_coordinator),
) -> OrderOutput:
    """Advance an order one step along the flow."""
    order = OrderService(db).advance(order_id)
    await coordinator.order_updated(order)
    return order


@router.delete("/{order_id}", response_model=DeleteOrderResponse)
async def delete_order(
    order_id: int,
    db: Session = Depends(get_db),
    coordinator: TableCoordinator = Depends(get_coordinator),
) -> DeleteOrderResponse:
    """Hard delete an order; its table is released unless still in use."""
    deleted = OrderService(db).delete_order(order_id)
    await coordinator.order_deleted(deleted.id)
    return DeleteOrderResponse(order_id=deleted.id)
