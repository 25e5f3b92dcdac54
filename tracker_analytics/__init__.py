"""Tracker Analytics - progress and analytics engine for a productivity tracker.

Streaks, composite completion, goal accumulation, rolling-window category
rates, achievements and the time-block → learning-goal sync, as pure
functions over caller-supplied snapshots. No storage, no UI.

Typical use:
    from tracker_analytics import build_analytics_report

    report = build_analytics_report(snapshot, reference_date="2024-06-05")
"""

from .engines import (
    AchievementEngine,
    AggregationEngine,
    CompletionEngine,
    InvalidTargetError,
    ProgressEngine,
    StreakEngine,
    SyncEngine,
)
from .helpers.config_helpers import ANALYTICS_CONFIG_SCHEMA, validate_analytics_config
from .helpers.report_helpers import build_analytics_report, sync_time_block
from .utils.dt_utils import InvalidDayKeyError, set_default_timezone

__all__ = [
    "ANALYTICS_CONFIG_SCHEMA",
    "AchievementEngine",
    "AggregationEngine",
    "CompletionEngine",
    "InvalidDayKeyError",
    "InvalidTargetError",
    "ProgressEngine",
    "StreakEngine",
    "SyncEngine",
    "build_analytics_report",
    "set_default_timezone",
    "sync_time_block",
    "validate_analytics_config",
]
