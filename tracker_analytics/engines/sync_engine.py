"""Sync Engine - Time-block completion → learning-goal entry.

When a weekly time block linked to a time-based learning goal is marked
complete, its duration is credited to the goal on the block's date in the
current week. This engine only computes the entry to write; the caller merges
and persists it.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import (
    WEEKDAY_INDEX_MAX,
    WEEKDAY_INDEX_MIN,
    minutes_between,
    resolve_date_for_weekday,
    to_date,
)
from ..utils.math_utils import coerce_bool
from .progress_engine import ProgressEngine

if TYPE_CHECKING:
    from ..type_defs import SyncedEntry


class SyncEngine:
    """Pure logic engine for the time-block → learning-goal contract.

    All methods are static/class methods - no instance state.
    """

    @staticmethod
    def is_time_based_unit(unit: object) -> bool:
        """Return True if a goal unit measures time (minutes or hours).

        Matches case-insensitively anywhere in the label ("Minutes read",
        "hours").
        """
        if not isinstance(unit, str):
            return False
        label = unit.lower()
        return any(token in label for token in const.TIME_BASED_UNITS)

    @staticmethod
    def block_duration_minutes(time_block: Mapping[str, Any]) -> int | None:
        """Return the block's duration in minutes, or None if unusable."""
        return minutes_between(
            time_block.get(const.DATA_TIME_BLOCK_START_TIME),
            time_block.get(const.DATA_TIME_BLOCK_END_TIME),
        )

    @classmethod
    def build_synced_entry(
        cls,
        time_block: Mapping[str, Any],
        goal: Mapping[str, Any],
        week_start: int = const.DEFAULT_WEEK_START,
        reference_date: date | datetime | str | None = None,
    ) -> SyncedEntry | None:
        """Compute the goal entry produced by completing a linked time block.

        The entry accumulates onto whatever the goal already has for that day
        (value added, notes appended on a new line) so the caller can write it
        back without losing earlier logs.

        Args:
            time_block: Completed time block (day 0=Sunday ... 6=Saturday, 7=Sunday)
            goal: The learning goal the block is linked to
            week_start: 0 for Sunday-start weeks, 1 for Monday-start weeks.
                helpers.report_helpers.sync_time_block passes the configured
                `week_start` option.
            reference_date: Any day of the current week. Defaults to today.

        Returns:
            SyncedEntry, or None when the block is not completed, not linked to
            this goal, the goal unit is not time-based, or the times do not
            give a positive duration.

        Example:
            build_synced_entry(
                {"day": 3, "start_time": "19:00", "end_time": "20:00",
                 "task_name": "React Study", "is_completed": True,
                 "linked_goal_id": "goal-1"},
                {"id": "goal-1", "unit": "minutes", "target_amount": 600,
                 "entries": {}},
                reference_date="2024-06-05",
            )
            # {"day_key": "2024-06-05", "value": 60.0, "duration_minutes": 60,
            #  "notes": "+60min from time block: React Study"}
        """
        if not coerce_bool(time_block.get(const.DATA_TIME_BLOCK_IS_COMPLETED)):
            return None

        linked_goal_id = time_block.get(const.DATA_TIME_BLOCK_LINKED_GOAL_ID)
        if not linked_goal_id or linked_goal_id != goal.get(const.DATA_ITEM_ID):
            return None

        if not cls.is_time_based_unit(goal.get(const.DATA_GOAL_UNIT)):
            const.LOGGER.debug(
                "Goal %s unit %s is not time-based; time block not synced",
                goal.get(const.DATA_ITEM_ID),
                goal.get(const.DATA_GOAL_UNIT),
            )
            return None

        duration = cls.block_duration_minutes(time_block)
        if duration is None:
            const.LOGGER.warning(
                "Time block %s has no usable duration (%s-%s); not synced",
                time_block.get(const.DATA_TIME_BLOCK_ID, "unknown"),
                time_block.get(const.DATA_TIME_BLOCK_START_TIME),
                time_block.get(const.DATA_TIME_BLOCK_END_TIME),
            )
            return None

        weekday = time_block.get(const.DATA_TIME_BLOCK_DAY)
        if (
            isinstance(weekday, bool)
            or not isinstance(weekday, int)
            or not WEEKDAY_INDEX_MIN <= weekday <= WEEKDAY_INDEX_MAX
        ):
            const.LOGGER.warning(
                "Time block %s has invalid weekday %s; not synced",
                time_block.get(const.DATA_TIME_BLOCK_ID, "unknown"),
                weekday,
            )
            return None

        reference = None if reference_date is None else to_date(reference_date)
        log_date = resolve_date_for_weekday(weekday, week_start, reference)
        key = log_date.isoformat()

        entries = goal.get(const.DATA_GOAL_ENTRIES) or {}
        existing = entries.get(key)
        existing_value = ProgressEngine.entry_value(existing) if existing is not None else 0.0
        existing_notes = ProgressEngine.entry_notes(existing)

        note = const.SYNC_NOTE_TEMPLATE.format(
            minutes=duration,
            task_name=time_block.get(const.DATA_TIME_BLOCK_TASK_NAME, ""),
        )
        notes = f"{existing_notes}\n{note}" if existing_notes else note

        return {
            "day_key": key,
            "value": existing_value + duration,
            "duration_minutes": duration,
            "notes": notes,
        }
