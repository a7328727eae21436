"""
Order Repository - the Order Store used by order services and occupancy.

Eager loading of items prevents N+1 queries when serializing orders.
"""

from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, selectinload

from rest_api.models import Order
from shared.config.constants import OrderStatus
from .base import BaseRepository


class OrderRepository(BaseRepository[Order]):
    """
    Repository for Order entities.

    Guarantees eager loading of items. Default order is newest first.
    """

    @property
    def model(self) -> type[Order]:
        return Order

    def _base_query(self) -> Select:
        return (
            select(Order)
            .options(selectinload(Order.items))
            .order_by(Order.created_at.desc(), Order.id.desc())
        )

    def find_active_table_numbers(
        self,
        excluded_statuses: frozenset[str] = OrderStatus.TERMINAL,
    ) -> list[str]:
        """
        Distinct table_no of orders whose status is not in excluded_statuses.

        Projects the table column only; no order rows are materialized.
        """
        rows = self._db.execute(
            select(Order.table_no)
            .where(Order.status.not_in(excluded_statuses))
            .distinct()
        ).scalars().all()
        return list(rows)

    def update_status(self, order_id: int, status: str) -> Order | None:
        """
        Set the status of an order.

        Returns the updated (unflushed) order, or None when it does not exist.
        """
        order = self.find_by_id(order_id)
        if order is None:
            return None
        order.status = status
        order.touch()
        return order

    def delete_by_id(self, order_id: int) -> Order | None:
        """
        Hard delete an order and its items.

        Returns the deleted order (detached snapshot), or None when it does not exist.
        """
        order = self.find_by_id(order_id)
        if order is None:
            return None
        self._db.delete(order)
        self._db.flush()
        return order


def get_order_repository(db: Session) -> OrderRepository:
    """Factory function for OrderRepository."""
    return OrderRepository(db)
