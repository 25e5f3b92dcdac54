"""One-call analytics report over a tracker snapshot.

Runs every engine once against the same "today" and window so the numbers in
one report always agree with each other: category aggregates, the meal
category tally, achievements, trend rows and per-item streaks.

The same validated options also drive the time-block sync, so a block lands
on the date the configured week start puts it on.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.achievement_engine import AchievementEngine
from ..engines.aggregation_engine import AggregationEngine
from ..engines.completion_engine import CompletionEngine
from ..engines.sync_engine import SyncEngine
from ..utils.dt_utils import dt_today_local, to_date
from .config_helpers import validate_analytics_config

if TYPE_CHECKING:
    from ..type_defs import AnalyticsReport, StreakResult, SyncedEntry, TrackerSnapshot


# Snapshot lists whose items carry daily records, with the kind they reduce as
_STREAK_SOURCES: tuple[tuple[str, str], ...] = (
    (const.SNAPSHOT_HABITS, const.ITEM_KIND_HABIT),
    (const.SNAPSHOT_ROUTINES, const.ITEM_KIND_ROUTINE),
    (const.SNAPSHOT_LEARNING_GOALS, const.ITEM_KIND_GOAL),
    (const.SNAPSHOT_MEAL_LOGS, const.ITEM_KIND_MEAL_DAY),
)


def build_item_streaks(
    snapshot: TrackerSnapshot | Mapping[str, Any] | None,
    reference_date: date | datetime | str,
    required_meal_slots: tuple[str, ...] | list[str] = const.DEFAULT_REQUIRED_MEAL_SLOTS,
) -> dict[str, StreakResult]:
    """Return item id → StreakResult for every streak-bearing item.

    Items are tagged with the kind of the list they came from. Items without
    an id cannot be reported and are skipped.
    """
    snapshot = snapshot or {}
    streaks: dict[str, StreakResult] = {}

    for snapshot_key, kind in _STREAK_SOURCES:
        for item in snapshot.get(snapshot_key) or []:
            item_id = item.get(const.DATA_ITEM_ID)
            if not item_id:
                const.LOGGER.debug("Skipping %s item without id in streak report", kind)
                continue
            tagged = item if item.get(const.DATA_ITEM_KIND) == kind else {
                **item,
                const.DATA_ITEM_KIND: kind,
            }
            streaks[str(item_id)] = CompletionEngine.item_streak(
                tagged, reference_date, required_meal_slots
            )

    return streaks


def build_analytics_report(
    snapshot: TrackerSnapshot | Mapping[str, Any] | None,
    reference_date: date | datetime | str | None = None,
    config: Mapping[str, Any] | None = None,
    previous_percentages: Mapping[str, Any] | None = None,
) -> AnalyticsReport:
    """Compute the full analytics report for one snapshot.

    Args:
        snapshot: Tracked items per category
        reference_date: Day to treat as today. Defaults to today (local).
        config: Raw or already-validated analytics options
        previous_percentages: Category percentages of the previous window,
            used for the trend rows' change column

    Returns:
        AnalyticsReport

    Raises:
        InvalidDayKeyError: If any record key is not a canonical day key.
        InvalidTargetError: If a learning goal's target is not finite.
        vol.Invalid: If `config` is invalid.
    """
    options = validate_analytics_config(config)
    today = dt_today_local() if reference_date is None else to_date(reference_date)
    window_days = options["window_days"]
    required_meal_slots = options["required_meal_slots"]
    snapshot = snapshot or {}

    aggregates = AggregationEngine.aggregate(
        snapshot,
        reference_date=today,
        window_days=window_days,
        required_meal_slots=required_meal_slots,
    )
    percentages = AggregationEngine.percentages(aggregates)

    report: AnalyticsReport = {
        "day_key": today.isoformat(),
        "window_days": window_days,
        "aggregates": aggregates,
        "percentages": percentages,
        "meal_category_tally": AggregationEngine.meal_category_tally(
            snapshot.get(const.SNAPSHOT_MEAL_LOGS),
            reference_date=today,
            window_days=window_days,
        ),
        "achievements": AchievementEngine.derive(
            percentages, options["achievement_rules"]
        ),
        "trends": AchievementEngine.build_trends(percentages, previous_percentages),
        "streaks": build_item_streaks(snapshot, today, required_meal_slots),
    }

    const.LOGGER.debug(
        "Analytics report for %s: %s, %s achievement(s), %s streak(s)",
        report["day_key"],
        percentages,
        len(report["achievements"]),
        len(report["streaks"]),
    )
    return report


def sync_time_block(
    time_block: Mapping[str, Any],
    goal: Mapping[str, Any],
    reference_date: date | datetime | str | None = None,
    config: Mapping[str, Any] | None = None,
) -> SyncedEntry | None:
    """Compute a completed time block's goal entry using the configured week start.

    Args:
        time_block: The completed block
        goal: The learning goal the block is linked to
        reference_date: Any day of the current week. Defaults to today (local).
        config: Raw or already-validated analytics options

    Returns:
        The entry to write, or None when the block does not sync

    Raises:
        vol.Invalid: If `config` is invalid.
    """
    options = validate_analytics_config(config)
    today = dt_today_local() if reference_date is None else to_date(reference_date)
    return SyncEngine.build_synced_entry(time_block, goal, options["week_start"], today)
