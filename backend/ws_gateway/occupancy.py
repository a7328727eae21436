"""
Occupancy Reconciler.

A table is occupied when it has a non-terminal order in the Order Store or
at least one live viewer. compute_occupied() merges both sources under
canonical table ids.

The store query is blocking SQLAlchemy I/O, so it runs in a worker thread
with a timeout. A failed or slow store degrades the round to presence-only
occupancy instead of failing the broadcast.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from typing import Any

from shared.config.constants import OrderStatus
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.db import get_db_context
from shared.utils.validators import TableId, canonical_table_id
from rest_api.repositories import OrderRepository

logger = get_logger(__name__)

ActiveTablesLoader = Callable[[], Iterable[Any]]


def load_active_table_numbers() -> list[str]:
    """
    Synchronous Order Store lookup of tables with a non-terminal order.

    Runs in a worker thread with its own session.
    """
    with get_db_context() as db:
        return OrderRepository(db).find_active_table_numbers(OrderStatus.TERMINAL)


def merge_occupancy(active_tables: Iterable[Any], present_tables: Iterable[Any]) -> set[TableId]:
    """
    Union of order tables and presence tables as canonical ids.

    Pure: the result depends only on the two inputs. Values that are not
    valid table ids are skipped with a warning.
    """
    occupied: set[TableId] = set()
    for source, values in (("orders", active_tables), ("presence", present_tables)):
        for value in values:
            try:
                occupied.add(canonical_table_id(value))
            except ValueError:
                logger.warning("Skipping invalid table id", source=source, value=repr(value))
    return occupied


class OccupancyReconciler:
    """
    Computes the occupied-table set from the Order Store and presence.

    Usage:
        reconciler = OccupancyReconciler()
        occupied = await reconciler.compute_occupied(presence.snapshot())
    """

    def __init__(
        self,
        loader: ActiveTablesLoader | None = None,
        timeout: float | None = None,
    ) -> None:
        self._loader = loader or load_active_table_numbers
        self._timeout = timeout if timeout is not None else settings.occupancy_lookup_timeout
        self._lookup_success = 0
        self._lookup_timeouts = 0
        self._lookup_errors = 0

    async def load_active_tables(self) -> list[Any] | None:
        """
        Query the Order Store off the event loop.

        Returns:
            Table ids with a non-terminal order, or None if the store failed.
        """
        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(self._loader),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            self._lookup_timeouts += 1
            logger.warning(
                "Order store lookup timed out - using presence only",
                timeout=self._timeout,
                total_timeouts=self._lookup_timeouts,
            )
            return None
        except Exception as e:
            self._lookup_errors += 1
            logger.warning(
                "Order store lookup failed - using presence only",
                error=str(e),
                total_errors=self._lookup_errors,
            )
            return None

        self._lookup_success += 1
        return list(result)

    async def compute_occupied(self, present_tables: Iterable[Any]) -> set[TableId]:
        """
        Occupied tables for one reconciliation round.

        present_tables must be a snapshot taken by the caller; it is not
        read again after the store query.
        """
        present = list(present_tables)
        active = await self.load_active_tables()
        if active is None:
            active = []
        return merge_occupancy(active, present)

    def get_stats(self) -> dict[str, Any]:
        return {
            "timeout": self._timeout,
            "lookups": {
                "success": self._lookup_success,
                "timeouts": self._lookup_timeouts,
                "errors": self._lookup_errors,
            },
        }
