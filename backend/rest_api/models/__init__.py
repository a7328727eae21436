"""
SQLAlchemy ORM models.

Import from here so every table is registered on Base.metadata:
    from rest_api.models import Base, Order, OrderItem, Product, StoreConfig
"""

from .base import Base, TimestampMixin, utcnow
from .catalog import Product
from .order import Order, OrderItem
from .store_config import StoreConfig, STORE_CONFIG_KEY

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "Product",
    "Order",
    "OrderItem",
    "StoreConfig",
    "STORE_CONFIG_KEY",
]
