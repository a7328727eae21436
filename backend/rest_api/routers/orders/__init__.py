"""
Order routers - /api/orders/*
Customer order placement and kitchen status updates.
"""

from .routes import router

__all__ = ["router"]
