"""
Shared Pydantic schemas used across the application.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from shared.config.constants import Limits
from shared.utils.validators import canonical_table_id


# =============================================================================
# Common Types
# =============================================================================

OrderStatusValue = Literal["Pending", "Cooking", "Coming to Table", "Completed", "Cancelled"]
TableIdValue = int | str


class ErrorResponse(BaseModel):
    """Error body returned by AppException handlers."""

    detail: str


# =============================================================================
# Order Schemas
# =============================================================================


class OrderItemInput(BaseModel):
    """A single order line as sent by the customer menu."""

    product_id: int | None = None
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    qty: int = Field(ge=Limits.MIN_QUANTITY, le=Limits.MAX_QUANTITY)
    # Price captured at order time; later menu changes never touch it
    unit_price_cents: int = Field(ge=Limits.MIN_PRICE_CENTS, le=Limits.MAX_PRICE_CENTS)


class CreateOrderRequest(BaseModel):
    """Request to place a new order from a table."""

    table_no: TableIdValue
    items: list[OrderItemInput] = Field(min_length=1, max_length=Limits.MAX_ORDER_ITEMS)
    # Computed client-side and trusted as given
    total_cents: int = Field(ge=0)

    @field_validator("table_no", mode="before")
    @classmethod
    def normalize_table_no(cls, value):
        return canonical_table_id(value)


class OrderItemOutput(BaseModel):
    """Output for a single order line."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int | None = None
    name: str
    qty: int
    unit_price_cents: int


class OrderOutput(BaseModel):
    """Output for an order with its items."""

    id: int
    table_no: TableIdValue
    status: OrderStatusValue
    total_cents: int
    items: list[OrderItemOutput]
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UpdateOrderStatusRequest(BaseModel):
    """Request to move an order to its next status."""

    status: OrderStatusValue


class DeleteOrderResponse(BaseModel):
    """Response after deleting an order."""

    order_id: int
    deleted: bool = True


# =============================================================================
# Table Schemas
# =============================================================================


class TableStatusOutput(BaseModel):
    """Occupancy snapshot for initial page load."""

    total_tables: int
    occupied_tables: list[TableIdValue]


class ClearTableRequest(BaseModel):
    """Request to release live presence for a table."""

    table_id: TableIdValue

    @field_validator("table_id", mode="before")
    @classmethod
    def normalize_table_id(cls, value):
        return canonical_table_id(value)


class ClearTableResponse(BaseModel):
    """Response after clearing a table."""

    table_id: TableIdValue
    released_viewers: int
    occupied: bool
    occupied_tables: list[TableIdValue]


# =============================================================================
# Catalog Schemas
# =============================================================================


class ProductCreate(BaseModel):
    """Request to add a menu product."""

    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price_cents: int = Field(ge=Limits.MIN_PRICE_CENTS, le=Limits.MAX_PRICE_CENTS)
    category: str | None = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    image_url: str | None = Field(default=None, max_length=Limits.MAX_URL_LENGTH)
    is_available: bool = True


class ProductUpdate(BaseModel):
    """Partial update of a menu product."""

    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price_cents: int | None = Field(default=None, ge=Limits.MIN_PRICE_CENTS, le=Limits.MAX_PRICE_CENTS)
    category: str | None = Field(default=None, max_length=Limits.MAX_NAME_LENGTH)
    image_url: str | None = Field(default=None, max_length=Limits.MAX_URL_LENGTH)
    is_available: bool | None = None


class ProductOutput(BaseModel):
    """Output for a menu product."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    price_cents: int
    category: str | None = None
    image_url: str | None = None
    is_available: bool


# =============================================================================
# Store Config Schemas
# =============================================================================


class StoreConfigInput(BaseModel):
    """Request to update the singleton store configuration."""

    banner_text: str = Field(default="", max_length=Limits.MAX_BANNER_LENGTH)
    discount_cents: int = Field(default=0, ge=0, le=Limits.MAX_PRICE_CENTS)
    is_banner_active: bool = False
    total_tables: int = Field(default=10, ge=1, le=Limits.MAX_TOTAL_TABLES)


class StoreConfigOutput(BaseModel):
    """Output for the store configuration."""

    model_config = ConfigDict(from_attributes=True)

    banner_text: str
    discount_cents: int
    is_banner_active: bool
    total_tables: int


# =============================================================================
# WebSocket Schemas
# =============================================================================


class ClientMessage(BaseModel):
    """A message sent by a live table client over /ws/tables."""

    type: Literal["JOIN_TABLE", "LEAVE_TABLE", "PING"]
    table_id: TableIdValue | None = None

    @field_validator("table_id", mode="before")
    @classmethod
    def normalize_table_id(cls, value):
        if value is None:
            return None
        return canonical_table_id(value)

    @model_validator(mode="after")
    def require_table_for_presence(self):
        if self.type != "PING" and self.table_id is None:
            raise ValueError(f"table_id is required for {self.type}")
        return self
