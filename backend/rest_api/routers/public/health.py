"""
Health check endpoints for the REST API.
Provides basic and detailed health status of the service and its dependencies.
"""

import asyncio

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text

from shared.config.settings import settings
from shared.infrastructure.db import SessionLocal, engine
from shared.utils.health import (
    HealthStatus,
    aggregate_health_checks,
    health_check_with_timeout,
)
from ws_gateway.coordinator import TableCoordinator, get_coordinator


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check():
    """
    Basic health check endpoint.
    Returns service status without checking dependencies.
    """
    return {
        "status": "healthy",
        "service": "tableside",
        "environment": settings.environment,
    }


def _ping_database() -> None:
    with SessionLocal() as db:
        db.execute(text("SELECT 1"))


@health_check_with_timeout(timeout=3.0, component="database")
async def check_database_health() -> dict:
    """Check Order Store connectivity."""
    await asyncio.to_thread(_ping_database)
    return {"dialect": engine.dialect.name}


@router.get("/health/detailed")
async def detailed_health_check(
    coordinator: TableCoordinator = Depends(get_coordinator),
):
    """
    Detailed health check with database connectivity and live table stats.

    Returns 503 Service Unavailable if the database is down.
    """
    health = await aggregate_health_checks([check_database_health()])

    body = {
        "service": "tableside",
        "environment": settings.environment,
        "status": health["status"],
        "dependencies": health["components"],
        "live_tables": coordinator.get_stats(),
    }

    if health["status"] != HealthStatus.HEALTHY.value:
        return JSONResponse(content=body, status_code=503)
    return body
