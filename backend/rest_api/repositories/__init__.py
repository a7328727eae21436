"""
Repository Pattern implementation.
Centralizes data access with guaranteed eager loading.

Usage:
    from rest_api.repositories import get_order_repository

    repo = get_order_repository(db)
    orders = repo.find_all()
    busy = repo.find_active_table_numbers()
"""

from .base import BaseRepository
from .order import OrderRepository, get_order_repository
from .product import ProductRepository, get_product_repository

__all__ = [
    # Base
    "BaseRepository",
    # Order
    "OrderRepository",
    "get_order_repository",
    # Product
    "ProductRepository",
    "get_product_repository",
]
