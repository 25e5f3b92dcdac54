"""Tests for SyncEngine - completed time blocks credited to learning goals."""

from __future__ import annotations

from typing import Any

import pytest

from tracker_analytics import const
from tracker_analytics.engines.sync_engine import SyncEngine

WEDNESDAY = "2024-06-05"


@pytest.fixture
def time_block() -> dict[str, Any]:
    """Completed one-hour Wednesday block linked to goal-1."""
    return {
        const.DATA_TIME_BLOCK_ID: "block-1",
        const.DATA_TIME_BLOCK_DAY: 3,
        const.DATA_TIME_BLOCK_START_TIME: "19:00",
        const.DATA_TIME_BLOCK_END_TIME: "20:00",
        const.DATA_TIME_BLOCK_TASK_NAME: "React Study",
        const.DATA_TIME_BLOCK_IS_COMPLETED: True,
        const.DATA_TIME_BLOCK_LINKED_GOAL_ID: "goal-1",
    }


@pytest.fixture
def goal() -> dict[str, Any]:
    """Minutes-based goal with no entries yet."""
    return {
        const.DATA_ITEM_ID: "goal-1",
        const.DATA_ITEM_KIND: const.ITEM_KIND_GOAL,
        const.DATA_GOAL_UNIT: "minutes",
        const.DATA_GOAL_TARGET_AMOUNT: 600,
        const.DATA_GOAL_ENTRIES: {},
    }


# =============================================================================
# TEST: SYNCED ENTRY
# =============================================================================


class TestBuildSyncedEntry:
    """Entry produced when a linked block is completed."""

    def test_new_entry(self, time_block: dict[str, Any], goal: dict[str, Any]) -> None:
        """One hour on Wednesday → 60 minutes on 2024-06-05."""
        entry = SyncEngine.build_synced_entry(time_block, goal, reference_date=WEDNESDAY)

        assert entry == {
            "day_key": "2024-06-05",
            "value": 60.0,
            "duration_minutes": 60,
            "notes": "+60min from time block: React Study",
        }

    def test_accumulates_onto_existing_entry(
        self, time_block: dict[str, Any], goal: dict[str, Any]
    ) -> None:
        """Existing value is added to, existing notes kept on their own line."""
        goal[const.DATA_GOAL_ENTRIES]["2024-06-05"] = {
            const.DATA_ENTRY_VALUE: 30,
            const.DATA_ENTRY_NOTES: "Morning reading",
        }

        entry = SyncEngine.build_synced_entry(time_block, goal, reference_date=WEDNESDAY)

        assert entry is not None
        assert entry["value"] == 90.0
        assert entry["notes"] == "Morning reading\n+60min from time block: React Study"

    def test_sunday_with_monday_start(
        self, time_block: dict[str, Any], goal: dict[str, Any]
    ) -> None:
        """Sunday closes a Monday-start week."""
        time_block[const.DATA_TIME_BLOCK_DAY] = 0

        entry = SyncEngine.build_synced_entry(time_block, goal, 1, WEDNESDAY)

        assert entry is not None
        assert entry["day_key"] == "2024-06-09"

    def test_sunday_with_sunday_start(
        self, time_block: dict[str, Any], goal: dict[str, Any]
    ) -> None:
        """Sunday opens a Sunday-start week."""
        time_block[const.DATA_TIME_BLOCK_DAY] = 0

        entry = SyncEngine.build_synced_entry(time_block, goal, 0, WEDNESDAY)

        assert entry is not None
        assert entry["day_key"] == "2024-06-02"

    def test_day_seven_is_sunday(
        self, time_block: dict[str, Any], goal: dict[str, Any]
    ) -> None:
        """A Sunday block stored as day 7 is credited to Sunday of a Monday-start week."""
        time_block[const.DATA_TIME_BLOCK_DAY] = 7

        entry = SyncEngine.build_synced_entry(time_block, goal, 1, WEDNESDAY)

        assert entry is not None
        assert entry["day_key"] == "2024-06-09"
        assert entry["value"] == 60.0

    def test_hours_unit_is_time_based(
        self, time_block: dict[str, Any], goal: dict[str, Any]
    ) -> None:
        """Hour-based goals are credited in minutes as well."""
        goal[const.DATA_GOAL_UNIT] = "Hours"

        entry = SyncEngine.build_synced_entry(time_block, goal, reference_date=WEDNESDAY)

        assert entry is not None
        assert entry["value"] == 60.0


class TestNoSync:
    """Blocks that produce no entry."""

    def test_not_completed(self, time_block: dict[str, Any], goal: dict[str, Any]) -> None:
        """Incomplete blocks are not synced."""
        time_block[const.DATA_TIME_BLOCK_IS_COMPLETED] = False

        assert SyncEngine.build_synced_entry(time_block, goal, reference_date=WEDNESDAY) is None

    def test_linked_to_other_goal(
        self, time_block: dict[str, Any], goal: dict[str, Any]
    ) -> None:
        """Blocks linked elsewhere are not synced to this goal."""
        time_block[const.DATA_TIME_BLOCK_LINKED_GOAL_ID] = "goal-2"

        assert SyncEngine.build_synced_entry(time_block, goal, reference_date=WEDNESDAY) is None

    def test_unlinked(self, time_block: dict[str, Any], goal: dict[str, Any]) -> None:
        """Unlinked blocks are not synced."""
        time_block[const.DATA_TIME_BLOCK_LINKED_GOAL_ID] = None

        assert SyncEngine.build_synced_entry(time_block, goal, reference_date=WEDNESDAY) is None

    def test_non_time_unit(self, time_block: dict[str, Any], goal: dict[str, Any]) -> None:
        """Page-counted goals do not take minutes."""
        goal[const.DATA_GOAL_UNIT] = "pages"

        assert SyncEngine.build_synced_entry(time_block, goal, reference_date=WEDNESDAY) is None

    def test_end_before_start(self, time_block: dict[str, Any], goal: dict[str, Any]) -> None:
        """No positive duration, no entry."""
        time_block[const.DATA_TIME_BLOCK_END_TIME] = "18:00"

        assert SyncEngine.build_synced_entry(time_block, goal, reference_date=WEDNESDAY) is None

    @pytest.mark.parametrize("weekday", [8, -1, "3", None, True])
    def test_invalid_weekday(
        self, time_block: dict[str, Any], goal: dict[str, Any], weekday: Any
    ) -> None:
        """Weekdays outside 0-7 (or not ints) are skipped."""
        time_block[const.DATA_TIME_BLOCK_DAY] = weekday

        assert SyncEngine.build_synced_entry(time_block, goal, reference_date=WEDNESDAY) is None


class TestHelpers:
    """Unit and duration helpers."""

    @pytest.mark.parametrize(
        ("unit", "expected"),
        [
            ("minutes", True),
            ("Minutes read", True),
            ("hours", True),
            ("pages", False),
            ("", False),
            (None, False),
        ],
    )
    def test_is_time_based_unit(self, unit: Any, expected: bool) -> None:
        """Minute/hour units match case-insensitively."""
        assert SyncEngine.is_time_based_unit(unit) is expected

    def test_block_duration(self, time_block: dict[str, Any]) -> None:
        """Duration in whole minutes."""
        time_block[const.DATA_TIME_BLOCK_END_TIME] = "20:45"

        assert SyncEngine.block_duration_minutes(time_block) == 105
