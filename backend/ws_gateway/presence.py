"""
Presence Tracker.

Counts live viewer sessions per table and remembers, per session, the table
it last joined so a dropped connection can be released on disconnect.

The tracker itself holds no lock: every call is synchronous and completes
without awaiting. TableCoordinator serializes access with its asyncio.Lock.
"""

from __future__ import annotations

from typing import Any

from shared.config.logging import get_logger
from shared.utils.validators import TableId, canonical_table_id

logger = get_logger(__name__)


class PresenceTracker:
    """
    In-memory table -> viewer count map plus session -> joined table record.

    Invariants:
    - counts are always positive; a table reaching zero is removed
    - keys are canonical table ids, so "3", " 3 " and 3 share one entry
    """

    def __init__(self) -> None:
        self._counts: dict[TableId, int] = {}
        self._session_tables: dict[str, TableId] = {}

    def join(self, session_id: str, table_id: Any) -> int:
        """
        Register one viewer for a table.

        Joins accumulate: joining the same table twice counts twice. The
        session record is overwritten with the latest table, so switching
        tables without a leave keeps the first table counted.

        Returns:
            The table's new viewer count.
        """
        table = canonical_table_id(table_id)
        count = self._counts.get(table, 0) + 1
        self._counts[table] = count
        self._session_tables[session_id] = table
        logger.debug("Viewer joined table", session_id=session_id, table_id=table, viewers=count)
        return count

    def leave(self, table_id: Any, session_id: str | None = None) -> bool:
        """
        Release one viewer from a table.

        Leaving an untracked table is a no-op. When session_id is given and
        its recorded table is the one being left, the record is cleared so a
        later disconnect does not release the table again.

        Returns:
            True if a count was decremented.
        """
        table = canonical_table_id(table_id)
        if session_id is not None and self._session_tables.get(session_id) == table:
            del self._session_tables[session_id]

        count = self._counts.get(table)
        if not count:
            return False

        if count <= 1:
            del self._counts[table]
        else:
            self._counts[table] = count - 1
        logger.debug(
            "Viewer left table",
            session_id=session_id,
            table_id=table,
            viewers=count - 1,
        )
        return True

    def disconnect_session(self, session_id: str) -> TableId | None:
        """
        Release the session's recorded table exactly once.

        Returns:
            The released table id, or None when the session had no record
            or the table was no longer tracked.
        """
        table = self._session_tables.pop(session_id, None)
        if table is None:
            return None
        if not self.leave(table):
            return None
        return table

    def release_table(self, table_id: Any) -> int:
        """
        Drop every viewer of a table (staff clear).

        Session records pointing at the table are cleared as well.

        Returns:
            Number of viewers released.
        """
        table = canonical_table_id(table_id)
        released = self._counts.pop(table, 0)
        stale = [sid for sid, t in self._session_tables.items() if t == table]
        for sid in stale:
            del self._session_tables[sid]
        return released

    def count(self, table_id: Any) -> int:
        return self._counts.get(canonical_table_id(table_id), 0)

    def snapshot(self) -> set[TableId]:
        """Tables with at least one live viewer."""
        return set(self._counts)

    def joined_table(self, session_id: str) -> TableId | None:
        return self._session_tables.get(session_id)

    def get_stats(self) -> dict[str, int]:
        return {
            "tracked_tables": len(self._counts),
            "viewers": sum(self._counts.values()),
            "sessions": len(self._session_tables),
        }
