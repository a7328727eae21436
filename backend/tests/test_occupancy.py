"""
Tests for the OccupancyReconciler and the end-to-end occupancy scenarios.
"""

import asyncio
import time

import pytest

from conftest import StaticLoader
from shared.config.constants import EventType, OrderStatus
from ws_gateway.occupancy import (
    OccupancyReconciler,
    load_active_table_numbers,
    merge_occupancy,
)
from ws_gateway.presence import PresenceTracker


class TestMergeOccupancy:
    """Pure union of order tables and presence tables."""

    def test_union_is_deduplicated_and_canonical(self):
        occupied = merge_occupancy(["5", "3", " 3 "], [3, "Patio", 8])

        assert occupied == {3, 5, 8, "Patio"}

    def test_same_inputs_same_output(self):
        active = ["1", "Bar"]
        present = {2}

        assert merge_occupancy(active, present) == merge_occupancy(active, present)
        assert active == ["1", "Bar"]
        assert present == {2}

    def test_invalid_ids_are_skipped(self):
        assert merge_occupancy(["", "4"], []) == {4}


class TestOccupancyScenarios:
    """Scenarios from the occupancy rules."""

    @pytest.mark.asyncio
    async def test_active_order_without_presence(self):
        """Scenario A: one Cooking order for table 5, no viewers."""
        reconciler = OccupancyReconciler(loader=StaticLoader(["5"]))

        assert await reconciler.compute_occupied(PresenceTracker().snapshot()) == {5}

    @pytest.mark.asyncio
    async def test_string_presence_key_matches_numeric_table(self):
        """Scenario B: presence stored as "3" with two viewers."""
        presence = PresenceTracker()
        presence.join("s1", "3")
        presence.join("s2", "3")
        reconciler = OccupancyReconciler(loader=StaticLoader([]))

        occupied = await reconciler.compute_occupied(presence.snapshot())

        assert occupied == {3}
        assert 3 in occupied

    @pytest.mark.asyncio
    async def test_completed_order_does_not_occupy(self, db_session, make_order):
        """Scenario C: table 7 has only a Completed order."""
        make_order(table_no="7", status=OrderStatus.COMPLETED)
        reconciler = OccupancyReconciler()

        occupied = await reconciler.compute_occupied(set())

        assert 7 not in occupied

    @pytest.mark.asyncio
    async def test_disconnect_without_leave_frees_table(self, live, connect):
        """Scenario D: join table 2, then drop the connection."""
        await connect("s1")
        await live.join("s1", 2)
        assert live.presence.count(2) == 1

        occupied = await live.disconnect("s1")

        assert live.presence.count(2) == 0
        assert 2 not in occupied

    @pytest.mark.asyncio
    async def test_disconnect_keeps_table_with_active_order(self, live, store, connect):
        store.tables = ["2"]
        await connect("s1")
        await live.join("s1", 2)

        occupied = await live.disconnect("s1")

        assert occupied == {2}

    @pytest.mark.asyncio
    async def test_deleting_last_active_order_frees_table(self, live, store, connect):
        """Scenario E: delete the only active order of table 9."""
        store.tables = ["9"]
        dashboard = await connect("dashboard")
        await live.manager.drain()

        store.tables = []
        occupied = await live.order_deleted(41)
        await live.manager.drain()

        assert 9 not in occupied
        assert dashboard.sent == [
            {"type": EventType.ORDER_DELETED, "order_id": 41},
            {"type": EventType.TABLE_STATUS_UPDATED, "occupied_tables": []},
        ]


class TestOrderStoreLookup:
    """The Order Store query and its failure handling."""

    def test_only_non_terminal_orders_count(self, db_session, make_order):
        make_order(table_no="1", status=OrderStatus.PENDING)
        make_order(table_no="2", status=OrderStatus.COOKING)
        make_order(table_no="3", status=OrderStatus.COMING_TO_TABLE)
        make_order(table_no="4", status=OrderStatus.COMPLETED)
        make_order(table_no="5", status=OrderStatus.CANCELLED)
        make_order(table_no="1", status=OrderStatus.COOKING)

        assert sorted(load_active_table_numbers()) == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_store_failure_degrades_to_presence(self):
        loader = StaticLoader(["5"], error=RuntimeError("database is locked"))
        reconciler = OccupancyReconciler(loader=loader)

        occupied = await reconciler.compute_occupied({2})

        assert occupied == {2}
        assert reconciler.get_stats()["lookups"]["errors"] == 1

    @pytest.mark.asyncio
    async def test_store_timeout_degrades_to_presence(self):
        def slow_loader():
            time.sleep(0.3)
            return ["5"]

        reconciler = OccupancyReconciler(loader=slow_loader, timeout=0.05)

        occupied = await reconciler.compute_occupied({"Bar"})

        assert occupied == {"Bar"}
        assert reconciler.get_stats()["lookups"]["timeouts"] == 1

    @pytest.mark.asyncio
    async def test_lookup_runs_off_the_event_loop(self):
        """A blocking store query must not stall other coroutines."""
        ticks = []

        def blocking_loader():
            time.sleep(0.1)
            return []

        async def ticker():
            for _ in range(3):
                ticks.append(time.perf_counter())
                await asyncio.sleep(0.01)

        reconciler = OccupancyReconciler(loader=blocking_loader)
        await asyncio.gather(reconciler.compute_occupied(set()), ticker())

        assert len(ticks) == 3
        assert ticks[-1] - ticks[0] < 0.09
