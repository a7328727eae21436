"""
Domain Services - Application Layer.

Services contain business logic and orchestrate operations.
They use Repositories for data access.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from rest_api.services.domain import OrderService

    # In router
    service = OrderService(db)
    order = service.advance(order_id)
"""

from .order_service import OrderService, to_output
from .product_service import ProductService
from .store_config_service import StoreConfigService

__all__ = [
    "OrderService",
    "ProductService",
    "StoreConfigService",
    "to_output",
]
