"""
REST API main application.
Entry point for the FastAPI server: HTTP API plus the /ws/tables live channel.

Run with:
    uvicorn rest_api.main:app --app-dir backend --port 8000
"""

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from shared.security.rate_limit import limiter, rate_limit_exceeded_handler
from rest_api.core.cors import configure_cors
from rest_api.core.lifespan import lifespan
from rest_api.core.middlewares import register_middlewares
from rest_api.routers.catalog import products_router, store_config_router
from rest_api.routers.orders import router as orders_router
from rest_api.routers.public import health_router
from rest_api.routers.tables import router as tables_router
from ws_gateway.router import router as ws_router


app = FastAPI(
    title="Tableside API",
    description="Live table occupancy and order status coordinator",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

register_middlewares(app)
configure_cors(app)

app.include_router(health_router)
app.include_router(orders_router)
app.include_router(tables_router)
app.include_router(products_router)
app.include_router(store_config_router)
app.include_router(ws_router)
