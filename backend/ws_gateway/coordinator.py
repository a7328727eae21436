"""
Table Coordinator.

Single entry point for everything that can change occupancy: viewer
join/leave/disconnect, staff table clears, and order create/update/delete.
Each trigger reconciles occupancy and broadcasts the full occupied set.

Presence mutations and the presence snapshot used for reconciliation are
taken under one asyncio.Lock. The lock is released before the Order Store
query. Every round computes afresh and broadcasts its own result; rounds
that overlap may publish in completion order, not trigger order.
"""

from __future__ import annotations

import asyncio
from typing import Any

from shared.config.logging import ws_gateway_logger as logger
from shared.utils.schemas import OrderOutput
from shared.utils.validators import TableId, canonical_table_id
from ws_gateway.connection_manager import ConnectionManager, build_table_status_event
from ws_gateway.occupancy import OccupancyReconciler
from ws_gateway.presence import PresenceTracker


class TableCoordinator:
    """
    Composes PresenceTracker, OccupancyReconciler and ConnectionManager.

    Usage:
        coordinator = get_coordinator()
        await coordinator.join(session_id, table_id)
        await coordinator.order_updated(order_output)
    """

    def __init__(
        self,
        presence: PresenceTracker | None = None,
        reconciler: OccupancyReconciler | None = None,
        manager: ConnectionManager | None = None,
    ) -> None:
        self.presence = presence or PresenceTracker()
        self.reconciler = reconciler or OccupancyReconciler()
        self.manager = manager or ConnectionManager()
        self._lock = asyncio.Lock()
        self._round = 0
        self._broadcasts = 0
        self._last_occupied: set[TableId] = set()

    # =========================================================================
    # Presence triggers
    # =========================================================================

    async def join(self, session_id: str, table_id: Any) -> set[TableId]:
        table = canonical_table_id(table_id)
        async with self._lock:
            viewers = self.presence.join(session_id, table)
            round_no, snapshot = self._take_snapshot()
        logger.info(
            "Viewer joined table",
            session_id=session_id,
            table_id=table,
            viewers=viewers,
        )
        return await self._reconcile_and_publish(round_no, snapshot)

    async def leave(self, session_id: str, table_id: Any) -> set[TableId] | None:
        """
        Explicit leave from a client.

        Returns:
            The broadcast occupied set, or None when nothing changed.
        """
        async with self._lock:
            changed = self.presence.leave(table_id, session_id=session_id)
            if not changed:
                return None
            round_no, snapshot = self._take_snapshot()
        logger.info("Viewer left table", session_id=session_id, table_id=table_id)
        return await self._reconcile_and_publish(round_no, snapshot)

    async def disconnect(self, session_id: str) -> set[TableId] | None:
        """
        Transport teardown: deregister the client and release its table once.

        Returns:
            The broadcast occupied set, or None when the session held no table.
        """
        await self.manager.disconnect(session_id)
        async with self._lock:
            released = self.presence.disconnect_session(session_id)
            if released is None:
                return None
            round_no, snapshot = self._take_snapshot()
        logger.info("Session released table on disconnect", session_id=session_id, table_id=released)
        return await self._reconcile_and_publish(round_no, snapshot)

    async def clear_table(self, table_id: TableId) -> tuple[int, set[TableId]]:
        """
        Staff release of every viewer at a table.

        Active orders still keep the table occupied.

        Returns:
            (released viewer count, occupied set after reconciliation)
        """
        async with self._lock:
            released = self.presence.release_table(table_id)
            round_no, snapshot = self._take_snapshot()
        logger.info("Table cleared", table_id=table_id, released_viewers=released)
        occupied = await self._reconcile_and_publish(round_no, snapshot)
        return released, occupied

    # =========================================================================
    # Order triggers
    # =========================================================================

    async def order_created(self, order: OrderOutput) -> set[TableId]:
        async with self._lock:
            self.manager.broadcast_order_created(order)
            round_no, snapshot = self._take_snapshot()
        return await self._reconcile_and_publish(round_no, snapshot)

    async def order_updated(self, order: OrderOutput) -> set[TableId]:
        async with self._lock:
            self.manager.broadcast_order_updated(order)
            round_no, snapshot = self._take_snapshot()
        return await self._reconcile_and_publish(round_no, snapshot)

    async def order_deleted(self, order_id: int) -> set[TableId]:
        async with self._lock:
            self.manager.broadcast_order_deleted(order_id)
            round_no, snapshot = self._take_snapshot()
        return await self._reconcile_and_publish(round_no, snapshot)

    # =========================================================================
    # Reads
    # =========================================================================

    async def current_occupancy(self) -> set[TableId]:
        """Reconcile without broadcasting (pull snapshot for page loads)."""
        async with self._lock:
            snapshot = self.presence.snapshot()
        return await self.reconciler.compute_occupied(snapshot)

    async def send_snapshot(self, session_id: str) -> set[TableId]:
        """
        Send the current occupancy to one newly connected client.

        If a broadcast went out while the snapshot was computed, the last
        broadcast set is sent instead.
        """
        async with self._lock:
            broadcasts_before = self._broadcasts
            snapshot = self.presence.snapshot()
        occupied = await self.reconciler.compute_occupied(snapshot)
        async with self._lock:
            if self._broadcasts != broadcasts_before:
                occupied = set(self._last_occupied)
            self.manager.send_to(session_id, build_table_status_event(occupied))
        return occupied

    def get_stats(self) -> dict[str, Any]:
        return {
            "presence": self.presence.get_stats(),
            "occupancy": {
                **self.reconciler.get_stats(),
                "rounds": self._round,
                "broadcasts": self._broadcasts,
                "occupied_tables": len(self._last_occupied),
            },
            "connections": self.manager.get_stats(),
        }

    # =========================================================================
    # Internals
    # =========================================================================

    def _take_snapshot(self) -> tuple[int, set[TableId]]:
        """Number a reconciliation round and capture presence (lock held)."""
        self._round += 1
        return self._round, self.presence.snapshot()

    async def _reconcile_and_publish(self, round_no: int, snapshot: set[TableId]) -> set[TableId]:
        occupied = await self.reconciler.compute_occupied(snapshot)
        async with self._lock:
            self._broadcasts += 1
            self._last_occupied = occupied
            sent = self.manager.broadcast_occupancy(occupied)
        logger.debug("Occupancy broadcast", round=round_no, occupied=len(occupied), clients=sent)
        return occupied


coordinator = TableCoordinator()


def get_coordinator() -> TableCoordinator:
    """FastAPI dependency returning the process-wide coordinator."""
    return coordinator
