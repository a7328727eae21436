"""
Services module for business logic.

- domain/: Application services (business logic)

Usage:
    from rest_api.services.domain import OrderService
    service = OrderService(db)
    orders = service.list_orders()
"""

from .domain import OrderService, ProductService, StoreConfigService

__all__ = [
    "OrderService",
    "ProductService",
    "StoreConfigService",
]
