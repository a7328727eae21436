"""
Live tables WebSocket endpoint.

/ws/tables - customer menus join/leave their table, dashboards listen for
TABLE_STATUS_UPDATED and ORDER_* events. Transport teardown is treated as an
implicit leave of the session's last joined table.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PydanticValidationError

from shared.config.constants import ClientMessageType, EventType, WSCloseCode
from shared.config.logging import ws_gateway_logger as logger
from shared.config.settings import settings
from shared.infrastructure.correlation import bind_session_id
from shared.utils.schemas import ClientMessage
from ws_gateway.coordinator import TableCoordinator, get_coordinator

router = APIRouter(tags=["live-tables"])


async def handle_client_message(
    coordinator: TableCoordinator,
    session_id: str,
    data: str,
) -> None:
    """
    Apply one client message.

    Malformed messages are answered with an ERROR event; the connection
    stays open.
    """
    if data.strip().lower() == "ping":
        coordinator.manager.send_to(session_id, {"type": EventType.PONG})
        return

    try:
        message = ClientMessage.model_validate_json(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        detail = first.get("msg", "Invalid message")
        logger.debug("Rejected client message", session_id=session_id, detail=detail)
        coordinator.manager.send_to(session_id, {"type": EventType.ERROR, "detail": detail})
        return

    if message.type == ClientMessageType.PING:
        coordinator.manager.send_to(session_id, {"type": EventType.PONG})
    elif message.type == ClientMessageType.JOIN_TABLE:
        await coordinator.join(session_id, message.table_id)
    elif message.type == ClientMessageType.LEAVE_TABLE:
        await coordinator.leave(session_id, message.table_id)


@router.websocket("/ws/tables")
async def tables_websocket(
    websocket: WebSocket,
    coordinator: TableCoordinator = Depends(get_coordinator),
):
    session_id = uuid.uuid4().hex

    with bind_session_id(session_id):
        try:
            await coordinator.manager.connect(websocket, session_id)
        except ConnectionError as e:
            logger.warning("WebSocket connection rejected", error=str(e))
            return

        try:
            await coordinator.send_snapshot(session_id)
            while True:
                data = await websocket.receive_text()

                if len(data) > settings.ws_max_message_size:
                    logger.warning(
                        "Message too large - closing connection",
                        size=len(data),
                        max_size=settings.ws_max_message_size,
                    )
                    await websocket.close(
                        code=WSCloseCode.MESSAGE_TOO_BIG,
                        reason="Message too large",
                    )
                    break

                await handle_client_message(coordinator, session_id, data)
        except WebSocketDisconnect:
            pass
        finally:
            await coordinator.disconnect(session_id)
