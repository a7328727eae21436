"""
CORS configuration for the customer menu and staff dashboards.

CORS covers the HTTP API only; browsers do not preflight /ws/tables.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import settings
from shared.infrastructure.correlation import REQUEST_ID_HEADER


# Vite dev server and preview
DEV_PORTS = (5173, 4173)
DEV_HOSTS = ("localhost", "127.0.0.1")


def get_cors_origins() -> list[str]:
    """
    ALLOWED_ORIGINS (comma-separated) when set, otherwise the local
    frontend dev servers.
    """
    configured = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
    if configured:
        return configured
    return [f"http://{host}:{port}" for host in DEV_HOSTS for port in DEV_PORTS]


def configure_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=0 if settings.environment == "development" else 600,
    )
