"""
Catalog routers - menu products and store configuration.
"""

from .products import router as products_router
from .store_config import router as store_config_router

__all__ = ["products_router", "store_config_router"]
