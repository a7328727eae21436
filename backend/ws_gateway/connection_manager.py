"""
WebSocket connection manager.

Registry of connected clients plus the broadcast channel.

Each client owns a bounded outbound queue drained by a dedicated sender
task. Publishing only enqueues (put_nowait), so events reach every client in
the order they were triggered on the server, and a slow client never delays
the others. Delivery is at-most-once: a full queue drops the event for that
client and a failed send deregisters it.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from shared.config.constants import EventType, WSCloseCode
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.utils.schemas import OrderOutput
from shared.utils.validators import TableId, sort_table_ids

logger = get_logger(__name__)


def is_ws_connected(ws: WebSocket) -> bool:
    """True if the WebSocket can still be written to."""
    return (
        ws.client_state == WebSocketState.CONNECTED
        and ws.application_state == WebSocketState.CONNECTED
    )


@dataclass
class ClientConnection:
    """A registered client: socket, outbound queue and sender task."""

    session_id: str
    websocket: WebSocket
    queue: asyncio.Queue
    connected_at: float = field(default_factory=time.time)
    sender: asyncio.Task | None = None
    dropped: int = 0


class ConnectionManager:
    """
    Manages WebSocket connections for live table and order notifications.

    Registry mutations are guarded by an asyncio.Lock. Publishing iterates a
    snapshot of the registry and never awaits.
    """

    def __init__(
        self,
        queue_size: int | None = None,
        send_timeout: float | None = None,
        max_connections: int | None = None,
    ) -> None:
        self._queue_size = queue_size or settings.ws_send_queue_size
        self._send_timeout = send_timeout or settings.ws_send_timeout
        self._max_connections = max_connections or settings.ws_max_total_connections
        self._clients: dict[str, ClientConnection] = {}
        self._lock = asyncio.Lock()
        self._shutdown = False
        self._total_dropped = 0
        self._total_send_failures = 0

    # =========================================================================
    # Registry
    # =========================================================================

    async def connect(self, websocket: WebSocket, session_id: str) -> ClientConnection:
        """
        Accept a WebSocket and register it under session_id.

        Raises:
            ConnectionError: If the server is shutting down or full.
        """
        if self._shutdown:
            raise ConnectionError("Server is shutting down")

        await websocket.accept()

        client = None
        async with self._lock:
            if len(self._clients) < self._max_connections:
                client = ClientConnection(
                    session_id=session_id,
                    websocket=websocket,
                    queue=asyncio.Queue(maxsize=self._queue_size),
                )
                client.sender = asyncio.create_task(
                    self._sender_loop(client),
                    name=f"ws_sender_{session_id}",
                )
                self._clients[session_id] = client

        if client is None:
            await websocket.close(code=WSCloseCode.SERVER_OVERLOADED, reason="Too many connections")
            raise ConnectionError(f"Connection limit reached ({self._max_connections})")

        logger.info("Client connected", session_id=session_id, total=len(self._clients))
        return client

    async def disconnect(self, session_id: str) -> bool:
        """
        Deregister a client and stop its sender task.

        Returns:
            True if the client was registered.
        """
        async with self._lock:
            client = self._clients.pop(session_id, None)
        if client is None:
            return False

        await self._stop_sender(client)
        logger.info("Client disconnected", session_id=session_id, total=len(self._clients))
        return True

    def is_connected(self, session_id: str) -> bool:
        return session_id in self._clients

    @property
    def total_connections(self) -> int:
        return len(self._clients)

    # =========================================================================
    # Publishing
    # =========================================================================

    def send_to(self, session_id: str, payload: dict[str, Any]) -> bool:
        """Enqueue a message for a single client."""
        client = self._clients.get(session_id)
        if client is None:
            return False
        return self._enqueue(client, payload)

    def broadcast(self, payload: dict[str, Any]) -> int:
        """
        Enqueue a message for every registered client.

        Returns:
            Number of clients the message was queued for.
        """
        queued = 0
        for client in list(self._clients.values()):
            if self._enqueue(client, payload):
                queued += 1
        return queued

    def broadcast_occupancy(self, occupied: set[TableId]) -> int:
        """Full occupied set, sorted; never a delta."""
        return self.broadcast(build_table_status_event(occupied))

    def broadcast_order_created(self, order: OrderOutput) -> int:
        return self.broadcast({
            "type": EventType.ORDER_CREATED,
            "order": order.model_dump(mode="json"),
        })

    def broadcast_order_updated(self, order: OrderOutput) -> int:
        return self.broadcast({
            "type": EventType.ORDER_UPDATED,
            "order": order.model_dump(mode="json"),
        })

    def broadcast_order_deleted(self, order_id: int) -> int:
        return self.broadcast({
            "type": EventType.ORDER_DELETED,
            "order_id": order_id,
        })

    def _enqueue(self, client: ClientConnection, payload: dict[str, Any]) -> bool:
        try:
            client.queue.put_nowait(payload)
        except asyncio.QueueFull:
            client.dropped += 1
            self._total_dropped += 1
            logger.warning(
                "Outbound queue full - event dropped",
                session_id=client.session_id,
                event_type=payload.get("type"),
                dropped=client.dropped,
            )
            return False
        return True

    async def drain(self, timeout: float = 5.0) -> None:
        """Wait until every client's queue has been sent."""
        queues = [client.queue for client in list(self._clients.values())]
        if not queues:
            return
        try:
            await asyncio.wait_for(
                asyncio.gather(*(queue.join() for queue in queues)),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Outbound queue drain timeout", clients=len(queues))

    # =========================================================================
    # Sender
    # =========================================================================

    async def _sender_loop(self, client: ClientConnection) -> None:
        """Single writer for a client's socket."""
        ws = client.websocket
        while True:
            payload = await client.queue.get()
            try:
                if not is_ws_connected(ws):
                    raise ConnectionError("WebSocket is not connected")
                await asyncio.wait_for(ws.send_json(payload), timeout=self._send_timeout)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._total_send_failures += 1
                logger.warning(
                    "Failed to send message - dropping client",
                    session_id=client.session_id,
                    event_type=payload.get("type"),
                    error=str(e) or type(e).__name__,
                )
                await self._mark_dead(client)
                return
            finally:
                client.queue.task_done()

    async def _mark_dead(self, client: ClientConnection) -> None:
        """Deregister a client whose socket failed; its sender exits on its own."""
        async with self._lock:
            if self._clients.get(client.session_id) is client:
                del self._clients[client.session_id]
        # Unblock drain() for anything still queued
        while not client.queue.empty():
            client.queue.get_nowait()
            client.queue.task_done()

    async def _stop_sender(self, client: ClientConnection) -> None:
        sender = client.sender
        if sender is None or sender.done():
            return
        sender.cancel()
        try:
            await sender
        except asyncio.CancelledError:
            pass
        while not client.queue.empty():
            client.queue.get_nowait()
            client.queue.task_done()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def shutdown(self) -> int:
        """
        Close every connection with GOING_AWAY and reject new ones.

        Returns:
            Number of connections closed.
        """
        self._shutdown = True

        async with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()

        closed = 0
        for client in clients:
            await self._stop_sender(client)
            try:
                await client.websocket.close(code=WSCloseCode.GOING_AWAY, reason="Server shutdown")
                closed += 1
            except Exception as e:
                logger.warning("Failed to close connection during shutdown", error=str(e))

        logger.info("WebSocket shutdown complete", closed=closed)
        return closed

    def get_stats(self) -> dict[str, Any]:
        return {
            "total_connections": len(self._clients),
            "max_connections": self._max_connections,
            "queue_size": self._queue_size,
            "dropped_events": self._total_dropped,
            "send_failures": self._total_send_failures,
            "shutting_down": self._shutdown,
        }


def build_table_status_event(occupied: set[TableId]) -> dict[str, Any]:
    return {
        "type": EventType.TABLE_STATUS_UPDATED,
        "occupied_tables": sort_table_ids(occupied),
    }
