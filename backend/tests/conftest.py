"""
Pytest configuration and fixtures for backend tests.

The settings module is read at import time, so the test environment is
configured before any application import.
"""

import os
import time

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketState

import ws_gateway.coordinator as coordinator_module
from rest_api.main import app
from rest_api.models import Base, Order, OrderItem, Product
from shared.infrastructure.db import SessionLocal, engine, get_db
from ws_gateway.connection_manager import ConnectionManager
from ws_gateway.coordinator import TableCoordinator
from ws_gateway.occupancy import OccupancyReconciler


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.

    Uses the application's in-memory SQLite engine so the occupancy
    reconciler, which opens its own sessions, sees the same data.
    """
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def coordinator(monkeypatch):
    """A fresh process-wide TableCoordinator for each test."""
    fresh = TableCoordinator()
    monkeypatch.setattr(coordinator_module, "coordinator", fresh)
    return fresh


@pytest.fixture(scope="function")
def client(db_session, coordinator):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_order(db_session):
    """Insert an order directly into the Order Store."""
    def _make_order(table_no="1", status="Pending", items=None):
        order = Order(
            table_no=str(table_no),
            status=status,
            total_cents=1800,
            items=items or [OrderItem(name="Truffle Burger", qty=1, unit_price_cents=1800)],
        )
        db_session.add(order)
        db_session.commit()
        return order

    return _make_order


@pytest.fixture
def seed_product(db_session):
    product = Product(
        name="Caesar Salad",
        description="Crisp romaine with parmesan crisp",
        price_cents=1200,
        category="Starter",
    )
    db_session.add(product)
    db_session.commit()
    return product


def order_payload(table_no=5, qty=2, unit_price_cents=1800):
    """Request body for POST /api/orders."""
    return {
        "table_no": table_no,
        "items": [
            {"name": "Truffle Burger", "qty": qty, "unit_price_cents": unit_price_cents},
        ],
        "total_cents": qty * unit_price_cents,
    }


# =============================================================================
# Fakes for the live channel
# =============================================================================


class FakeWebSocket:
    """In-memory stand-in for a connected starlette WebSocket."""

    def __init__(self, fail_on_send: bool = False):
        self.sent: list[dict] = []
        self.accepted = False
        self.closed_with: int | None = None
        self.fail_on_send = fail_on_send
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED

    async def accept(self):
        self.accepted = True

    async def send_json(self, payload):
        if self.fail_on_send:
            raise RuntimeError("connection reset by peer")
        self.sent.append(payload)

    async def close(self, code: int = 1000, reason: str | None = None):
        self.closed_with = code
        self.application_state = WebSocketState.DISCONNECTED

    def of_type(self, event_type: str) -> list[dict]:
        return [message for message in self.sent if message["type"] == event_type]


class StaticLoader:
    """Order Store stand-in returning a fixed list of active table numbers."""

    def __init__(self, tables=None, error: Exception | None = None):
        self.tables = list(tables or [])
        self.error = error
        self.calls = 0
        # Seconds to block on successive calls, consumed in order
        self.delays: list[float] = []

    def __call__(self):
        self.calls += 1
        if self.delays:
            time.sleep(self.delays.pop(0))
        if self.error is not None:
            raise self.error
        return list(self.tables)


@pytest.fixture
def store():
    return StaticLoader()


@pytest.fixture
def live(store):
    """TableCoordinator wired to an in-memory Order Store."""
    return TableCoordinator(
        reconciler=OccupancyReconciler(loader=store, timeout=1.0),
        manager=ConnectionManager(queue_size=16, send_timeout=1.0, max_connections=10),
    )


@pytest_asyncio.fixture
async def connect(live):
    """Register FakeWebSockets on the live coordinator; closes them afterwards."""
    async def _connect(session_id: str, fail_on_send: bool = False) -> FakeWebSocket:
        websocket = FakeWebSocket(fail_on_send=fail_on_send)
        await live.manager.connect(websocket, session_id)
        return websocket

    yield _connect
    await live.manager.shutdown()
