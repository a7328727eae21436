"""
Order Models: Order, OrderItem.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import OrderStatus
from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .catalog import Product


class Order(TimestampMixin, Base):
    """
    An order placed from a table.

    table_no holds the canonical table identifier in string form ("5", "Patio").
    Status moves only along Pending -> Cooking -> Coming to Table -> Completed.
    """

    __tablename__ = "customer_order"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    table_no: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    # Trusted as sent by the customer menu
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(32), default=OrderStatus.PENDING, nullable=False, index=True
    )

    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    __table_args__ = (
        # Occupancy query: active orders projected to table_no
        Index("ix_customer_order_status_table", "status", "table_no"),
        CheckConstraint("total_cents >= 0", name="chk_order_total_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, table_no='{self.table_no}', status='{self.status}')>"


class OrderItem(Base):
    """
    A single line within an order.
    Stores the price at the time of order for historical accuracy.
    """

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customer_order.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Loose reference: deleting a product must not rewrite order history
    product_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("product.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    qty: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("qty > 0", name="chk_order_item_qty_positive"),
        CheckConstraint("unit_price_cents >= 0", name="chk_order_item_price_non_negative"),
    )

    order: Mapped["Order"] = relationship(back_populates="items")
    product: Mapped[Optional["Product"]] = relationship()
