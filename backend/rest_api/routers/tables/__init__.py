"""
Table routers - /api/tables/*
Occupancy snapshot for page loads and staff table clearing.
"""

from .routes import router

__all__ = ["router"]
