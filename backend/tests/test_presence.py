"""
Tests for the PresenceTracker.
"""

import pytest

from ws_gateway.presence import PresenceTracker


class TestPresenceCounts:
    """Join/leave bookkeeping."""

    def test_join_creates_entry(self):
        presence = PresenceTracker()

        assert presence.join("s1", 4) == 1
        assert presence.count(4) == 1
        assert presence.snapshot() == {4}

    def test_joins_accumulate(self):
        presence = PresenceTracker()
        presence.join("s1", 4)
        presence.join("s2", 4)

        assert presence.count(4) == 2

    def test_count_equals_joins_minus_leaves(self):
        """After j joins and l <= j leaves the count is j - l."""
        presence = PresenceTracker()
        for i in range(5):
            presence.join(f"s{i}", 8)
        for _ in range(3):
            presence.leave(8)

        assert presence.count(8) == 2
        assert 8 in presence.snapshot()

    def test_leave_to_zero_removes_entry(self):
        presence = PresenceTracker()
        presence.join("s1", 4)

        assert presence.leave(4) is True
        assert presence.count(4) == 0
        assert presence.snapshot() == set()

    def test_leave_untracked_table_is_noop(self):
        presence = PresenceTracker()

        assert presence.leave(12) is False
        assert presence.snapshot() == set()

    def test_extra_leaves_never_go_negative(self):
        presence = PresenceTracker()
        presence.join("s1", 4)
        presence.leave(4)

        assert presence.leave(4) is False
        presence.join("s2", 4)
        assert presence.count(4) == 1

    def test_string_and_int_ids_share_an_entry(self):
        presence = PresenceTracker()
        presence.join("s1", "3")
        presence.join("s2", " 3 ")
        presence.join("s3", 3)

        assert presence.count(3) == 3
        assert presence.count("3") == 3
        assert presence.snapshot() == {3}

    def test_named_tables_are_kept_as_strings(self):
        presence = PresenceTracker()
        presence.join("s1", " Patio-2 ")

        assert presence.snapshot() == {"Patio-2"}

    def test_invalid_table_id_rejected(self):
        presence = PresenceTracker()

        with pytest.raises(ValueError):
            presence.join("s1", "   ")
        assert presence.snapshot() == set()


class TestPresenceSessions:
    """Session record and disconnect handling."""

    def test_disconnect_releases_joined_table(self):
        presence = PresenceTracker()
        presence.join("s1", 2)

        assert presence.disconnect_session("s1") == 2
        assert presence.count(2) == 0
        assert presence.snapshot() == set()

    def test_disconnect_releases_exactly_once(self):
        """Two joins from one session, then a disconnect: one leave only."""
        presence = PresenceTracker()
        presence.join("s1", 2)
        presence.join("s1", 2)

        presence.disconnect_session("s1")

        assert presence.count(2) == 1

    def test_disconnect_without_record_is_noop(self):
        presence = PresenceTracker()
        presence.join("s1", 2)

        assert presence.disconnect_session("unknown") is None
        assert presence.count(2) == 1

    def test_explicit_leave_clears_session_record(self):
        presence = PresenceTracker()
        presence.join("s1", 2)
        presence.join("s2", 2)

        presence.leave(2, session_id="s1")
        assert presence.joined_table("s1") is None

        # Disconnect must not release table 2 a second time
        assert presence.disconnect_session("s1") is None
        assert presence.count(2) == 1

    def test_leave_of_other_table_keeps_session_record(self):
        presence = PresenceTracker()
        presence.join("s1", 2)
        presence.join("s2", 5)

        presence.leave(5, session_id="s1")

        assert presence.joined_table("s1") == 2

    def test_table_switch_without_leave_keeps_first_table(self):
        """Known limitation: only the last joined table is released."""
        presence = PresenceTracker()
        presence.join("s1", 1)
        presence.join("s1", 2)

        presence.disconnect_session("s1")

        assert presence.count(1) == 1
        assert presence.count(2) == 0
        assert presence.snapshot() == {1}

    def test_release_table_drops_all_viewers(self):
        presence = PresenceTracker()
        presence.join("s1", 6)
        presence.join("s2", 6)
        presence.join("s3", 7)

        assert presence.release_table("6") == 2
        assert presence.snapshot() == {7}
        assert presence.disconnect_session("s1") is None
        assert presence.disconnect_session("s3") == 7

    def test_stats(self):
        presence = PresenceTracker()
        presence.join("s1", 1)
        presence.join("s2", 1)
        presence.join("s3", 2)

        assert presence.get_stats() == {"tracked_tables": 2, "viewers": 3, "sessions": 3}
