"""Type definitions for Tracker Analytics data structures.

HYBRID APPROACH (TypedDict + dict[str, Any])
============================================

1. **TypedDict for STATIC structures** (fixed keys known at design time):
   - Tracked item definitions: HabitData, RoutineData, LearningGoalData, ...
   - Engine results: StreakResult, GoalProgress, CategoryAggregate, ...

2. **Mapping[str, Any] for DYNAMIC structures** (keys are day keys):
   - Completion maps: {"2024-06-01": True, ...}
   - Entry maps: {"2024-06-01": {"value": 25, "notes": "..."}, ...}

NOTE: TypedDict is STATIC ANALYSIS ONLY. Inputs come from an external store
and every engine still reads them with `.get()` defaults.

IMPORTANT: This file must only import from typing. Engines and helpers import
it under TYPE_CHECKING.
"""

from typing import Any, Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

ItemId = str  # Stable identifier supplied by the store
DayKey = str  # ISO 8601 date string (no time) "2024-06-01"
CategoryId = str  # One of const.CATEGORY_ORDER

CompletionStatus = Literal["complete", "partial", "incomplete"]

# Day key -> truthy completion indicator
CompletionMap = dict[DayKey, Any]
# Day key -> completed subtask ids (list/set) or {subtask_id: bool}
CompositeCompletionMap = dict[DayKey, Any]


# =============================================================================
# Tracked Item Inputs
# =============================================================================


class LearningEntry(TypedDict):
    """One day's logged amount for a learning goal."""

    value: float
    notes: NotRequired[str]


class SubTask(TypedDict):
    """A routine subtask."""

    id: str
    name: NotRequired[str]


class HabitData(TypedDict):
    """Binary habit: one boolean per day."""

    id: ItemId
    kind: Literal["habit"]
    name: NotRequired[str]
    completions: CompletionMap


class RoutineData(TypedDict):
    """Routine with ordered subtasks and per-day completed-subtask sets."""

    id: ItemId
    kind: Literal["routine"]
    name: NotRequired[str]
    subtasks: list[SubTask]
    completions: CompositeCompletionMap


class LearningGoalData(TypedDict):
    """Cumulative-value learning goal."""

    id: ItemId
    kind: Literal["goal"]
    name: NotRequired[str]
    unit: str
    target_amount: float
    entries: dict[DayKey, LearningEntry | float]


class MilestoneData(TypedDict):
    """A project milestone."""

    id: str
    name: NotRequired[str]
    status: str
    due_date: NotRequired[DayKey | None]


class ProjectData(TypedDict):
    """Milestone-based project (not streak-bearing)."""

    id: ItemId
    kind: Literal["project"]
    name: NotRequired[str]
    milestones: list[MilestoneData]


class MealSlotEntry(TypedDict):
    """One meal slot on one day."""

    logged: bool
    category: NotRequired[str]
    details: NotRequired[str]


class MealLogData(TypedDict):
    """Meal log: day key -> slot name -> slot entry."""

    id: ItemId
    kind: Literal["meal_day"]
    entries: dict[DayKey, dict[str, MealSlotEntry]]


class TimeBlockData(TypedDict):
    """Fixed day-of-week time block from the external scheduling feature.

    `day` uses 0=Sunday ... 6=Saturday; 7 is also accepted as Sunday.
    """

    id: str
    day: int
    start_time: str  # "HH:MM"
    end_time: str  # "HH:MM"
    task_name: str
    is_completed: bool
    linked_goal_id: NotRequired[str | None]


class TrackerSnapshot(TypedDict, total=False):
    """Everything one analytics pass needs, fetched by the caller."""

    habits: list[HabitData]
    routines: list[RoutineData]
    learning_goals: list[LearningGoalData]
    projects: list[ProjectData]
    meal_logs: list[MealLogData]


# =============================================================================
# Engine Results
# =============================================================================


class StreakResult(TypedDict):
    """Current and longest run of consecutive completed days.

    Invariant: longest >= current >= 0.
    """

    current: int
    longest: int


class CompletionResult(TypedDict):
    """Composite reduction of one day's sub-completions."""

    status: CompletionStatus
    fraction: float  # completed / total, 0.0 when total is 0
    completed: int
    total: int


class GoalProgress(TypedDict):
    """Accumulated total and clamped percentage for a learning goal."""

    total: float
    target: float
    percentage: float  # 0.0 to 100.0


class ProjectProgress(TypedDict):
    """Milestone completion for one project."""

    project_id: ItemId
    completed: int
    total: int
    percentage: float  # 0.0 to 100.0


class CategoryAggregate(TypedDict):
    """One category's completion over the trailing window."""

    category_id: CategoryId
    completion_percentage: int  # 0 to 100
    sample_size: int


class TallyEntry(TypedDict):
    """Frequency of one logged sub-category (breakdown display)."""

    name: str
    count: int
    placeholder: bool


class AchievementRule(TypedDict):
    """One row of the achievement threshold table."""

    category: CategoryId
    threshold: float
    title: str
    subtitle: NotRequired[str | None]


class Achievement(TypedDict):
    """Derived milestone badge. Never persisted."""

    title: str
    subtitle: str | None
    threshold_met: CategoryId | None  # None for the no-activity placeholder


class TrendRow(TypedDict):
    """Category trend row for summary tables."""

    category_id: CategoryId
    label: str
    completion: int
    change: str  # Signed percentage string, e.g. "+5%"


class SyncedEntry(TypedDict):
    """Entry to write into a learning goal after a time block completes."""

    day_key: DayKey
    value: float  # Existing value for the day plus duration_minutes
    duration_minutes: int
    notes: str


# =============================================================================
# Configuration & Report
# =============================================================================


class AnalyticsConfig(TypedDict):
    """Validated engine configuration (see helpers.config_helpers)."""

    window_days: int
    week_start: int
    required_meal_slots: list[str]
    achievement_rules: list[AchievementRule]


class AnalyticsReport(TypedDict):
    """Result of one full analytics pass over a TrackerSnapshot."""

    day_key: DayKey
    window_days: int
    aggregates: list[CategoryAggregate]
    percentages: dict[CategoryId, int]
    meal_category_tally: list[TallyEntry]
    achievements: list[Achievement]
    trends: list[TrendRow]
    streaks: dict[ItemId, StreakResult]
