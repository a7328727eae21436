"""
Order Domain Service.

Owns the order lifecycle: Pending → Cooking → Coming to Table → Completed.
Routers stay thin and only translate HTTP to these calls; occupancy
reconciliation and broadcasting happen in the router after a successful
commit, so a failed mutation never reaches live clients.
"""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config.constants import (
    OrderStatus,
    get_next_order_status,
    validate_order_status,
)
from shared.config.logging import orders_logger as logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import (
    DatabaseError,
    InvalidTransitionError,
    OrderAlreadyCompletedError,
    OrderNotFoundError,
    ValidationError,
)
from shared.utils.schemas import CreateOrderRequest, OrderItemOutput, OrderOutput
from shared.utils.validators import canonical_table_id, table_id_to_storage
from rest_api.models import Order, OrderItem
from rest_api.repositories import OrderRepository, ProductRepository


def to_output(order: Order) -> OrderOutput:
    """Serialize an order; table_no goes back out in canonical form."""
    return OrderOutput(
        id=order.id,
        table_no=canonical_table_id(order.table_no),
        status=order.status,
        total_cents=order.total_cents,
        items=[OrderItemOutput.model_validate(item) for item in order.items],
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


class OrderService:
    """
    Domain service for Order operations.

    Every mutation commits through safe_commit(); store failures are
    rolled back and surfaced as DatabaseError (503).
    """

    def __init__(self, db: Session):
        self._db = db
        self._repo = OrderRepository(db)

    # =========================================================================
    # Queries
    # =========================================================================

    def list_orders(self) -> list[OrderOutput]:
        """All orders, newest first."""
        try:
            orders = self._repo.find_all()
        except SQLAlchemyError as e:
            raise DatabaseError("order listing", error=str(e)) from e
        return [to_output(order) for order in orders]

    def get_order(self, order_id: int) -> OrderOutput:
        return to_output(self._get_or_404(order_id))

    # =========================================================================
    # Commands
    # =========================================================================

    def create_order(self, request: CreateOrderRequest) -> OrderOutput:
        """
        Persist a new order in Pending status.

        Item prices are captured as sent and never updated afterwards.
        """
        self._check_products_exist(request)

        order = Order(
            table_no=table_id_to_storage(request.table_no),
            total_cents=request.total_cents,
            status=OrderStatus.PENDING,
            items=[
                OrderItem(
                    product_id=item.product_id,
                    name=item.name,
                    qty=item.qty,
                    unit_price_cents=item.unit_price_cents,
                )
                for item in request.items
            ],
        )
        try:
            self._repo.add(order)
            safe_commit(self._db)
        except IntegrityError as e:
            self._db.rollback()
            raise ValidationError(
                "Order references a product that does not exist",
                table_no=order.table_no,
                error=str(e.orig),
            ) from e
        except SQLAlchemyError as e:
            self._db.rollback()
            raise DatabaseError("order creation", table_no=order.table_no, error=str(e)) from e

        logger.info(
            "Order created",
            order_id=order.id,
            table_no=order.table_no,
            items_count=len(order.items),
            total_cents=order.total_cents,
        )
        return to_output(order)

    def update_status(self, order_id: int, new_status: str) -> OrderOutput:
        """
        Move an order to new_status.

        Only the exact next status of the flow is accepted; skips,
        backwards moves and terminal orders are rejected.
        """
        if not validate_order_status(new_status):
            raise ValidationError(f"Unknown order status '{new_status}'", order_id=order_id)

        order = self._get_or_404(order_id)
        expected = get_next_order_status(order.status)
        if expected is None:
            raise OrderAlreadyCompletedError(order.id, order.status)
        if new_status != expected:
            raise InvalidTransitionError("Order", order.status, new_status, order_id=order.id)

        return self._apply_status(order, new_status)

    def advance(self, order_id: int) -> OrderOutput:
        """Advance an order exactly one step along the flow."""
        order = self._get_or_404(order_id)
        next_status = get_next_order_status(order.status)
        if next_status is None:
            raise OrderAlreadyCompletedError(order.id, order.status)
        return self._apply_status(order, next_status)

    def delete_order(self, order_id: int) -> OrderOutput:
        """
        Hard delete an order and its items.

        Returns the serialized order as it was before deletion.
        """
        order = self._get_or_404(order_id)
        snapshot = to_output(order)
        try:
            self._repo.delete_by_id(order.id)
            safe_commit(self._db)
        except SQLAlchemyError as e:
            raise DatabaseError("order deletion", order_id=order_id, error=str(e)) from e

        logger.info("Order deleted", order_id=order_id, table_no=order.table_no, status=order.status)
        return snapshot

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_products_exist(self, request: CreateOrderRequest) -> None:
        """Reject items that point at an unknown product before anything is written."""
        referenced = {item.product_id for item in request.items if item.product_id is not None}
        try:
            missing = referenced - ProductRepository(self._db).find_existing_ids(referenced)
        except SQLAlchemyError as e:
            raise DatabaseError("product lookup", error=str(e)) from e
        if missing:
            raise ValidationError(
                f"Unknown product id(s): {', '.join(str(i) for i in sorted(missing))}",
                product_ids=sorted(missing),
            )

    def _get_or_404(self, order_id: int) -> Order:
        try:
            order = self._repo.find_by_id(order_id)
        except SQLAlchemyError as e:
            raise DatabaseError("order lookup", order_id=order_id, error=str(e)) from e
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def _apply_status(self, order: Order, new_status: str) -> OrderOutput:
        previous = order.status
        self._repo.update_status(order.id, new_status)
        try:
            safe_commit(self._db)
        except SQLAlchemyError as e:
            raise DatabaseError("order status update", order_id=order.id, error=str(e)) from e

        logger.info(
            "Order status changed",
            order_id=order.id,
            table_no=order.table_no,
            from_status=previous,
            to_status=new_status,
        )
        return to_output(order)
