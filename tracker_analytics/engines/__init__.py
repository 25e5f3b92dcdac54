"""Engine modules for Tracker Analytics.

Contains specialized computation engines:
- streak_engine: Current / longest streaks over a day key → boolean map
- completion_engine: Composite completion status and kind → daily-boolean dispatch
- progress_engine: Learning-goal accumulation and project milestone progress
- aggregation_engine: Rolling-window completion rate per category
- achievement_engine: Threshold rules → achievements, category trend rows
- sync_engine: Time-block completion → learning-goal entry
"""

# Use relative imports within package to avoid mypy module resolution issues
from .achievement_engine import AchievementEngine
from .aggregation_engine import AggregationEngine
from .completion_engine import CompletionEngine
from .progress_engine import InvalidTargetError, ProgressEngine
from .streak_engine import StreakEngine
from .sync_engine import SyncEngine

__all__ = [
    "AchievementEngine",
    "AggregationEngine",
    "CompletionEngine",
    "InvalidTargetError",
    "ProgressEngine",
    "StreakEngine",
    "SyncEngine",
]
