"""Aggregation Engine - Rolling-window completion rates per category.

This engine normalizes five differently-shaped kinds of tracked data into one
comparable integer percentage per category:

- habits:   true indicators / (items × window days)
- routines: mean over window days of the share of fully-completed routines
- learning: unweighted mean of each goal's clamped progress percentage
- projects: unweighted mean of each project's milestone completion
- meals:    complete days / days with any record in the window

The window is the trailing span of calendar days ending today:
[today − W + 1, today]. Every computation returns 0 for empty input instead
of raising or producing NaN.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Mapping, Sequence
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_today_local, iter_window, to_date
from ..utils.math_utils import mean, to_whole_percentage
from .completion_engine import CompletionEngine
from .progress_engine import ProgressEngine

if TYPE_CHECKING:
    from ..type_defs import CategoryAggregate, TallyEntry, TrackerSnapshot


# Category handler signature: (items, window_keys, required_meal_slots)
#   -> (percentage, sample_size)
CategoryHandler = Callable[
    [Sequence[Mapping[str, Any]], list[str], Sequence[str]], tuple[int, int]
]


class AggregationEngine:
    """Pure logic engine for category-level completion percentages.

    All methods are static/class methods - no instance state.

    Example:
        aggregates = AggregationEngine.aggregate(
            snapshot,
            reference_date="2024-06-05",
            window_days=7,
        )
        # [{"category_id": "habits", "completion_percentage": 57, "sample_size": 2}, ...]
    """

    # =========================================================================
    # CATEGORY HANDLER REGISTRY
    # =========================================================================

    _CATEGORY_HANDLERS: dict[str, CategoryHandler] = {}

    @classmethod
    def _register_handlers(cls) -> None:
        """Populate _CATEGORY_HANDLERS on first use."""
        if cls._CATEGORY_HANDLERS:
            return

        cls._CATEGORY_HANDLERS = {
            const.CATEGORY_HABITS: cls._aggregate_habits,
            const.CATEGORY_LEARNING: cls._aggregate_learning,
            const.CATEGORY_PROJECTS: cls._aggregate_projects,
            const.CATEGORY_ROUTINES: cls._aggregate_routines,
            const.CATEGORY_MEALS: cls._aggregate_meals,
        }

    # =========================================================================
    # WINDOW HELPERS
    # =========================================================================

    @staticmethod
    def _dt_today_local() -> date:
        """Return today's date in the local timezone."""
        return dt_today_local()

    @classmethod
    def window_keys(
        cls,
        reference_date: date | datetime | str | None = None,
        window_days: int = const.DEFAULT_WINDOW_DAYS,
    ) -> list[str]:
        """Return the ascending day keys of the trailing window.

        Window lengths below 1 are clamped to 1 (today only).
        """
        today = cls._dt_today_local() if reference_date is None else to_date(reference_date)
        days = max(1, int(window_days))
        if days != window_days:
            const.LOGGER.debug("Window length %s clamped to %s", window_days, days)
        return iter_window(today, days)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    @classmethod
    def aggregate(
        cls,
        snapshot: TrackerSnapshot | Mapping[str, Any] | None,
        reference_date: date | datetime | str | None = None,
        window_days: int = const.DEFAULT_WINDOW_DAYS,
        required_meal_slots: Sequence[str] = const.DEFAULT_REQUIRED_MEAL_SLOTS,
    ) -> list[CategoryAggregate]:
        """Compute one CategoryAggregate per category, in category order.

        Args:
            snapshot: Tracked items per category (missing lists count as empty)
            reference_date: Last day of the window. Defaults to today (local).
            window_days: Window length in days
            required_meal_slots: Slots that make a meal day complete

        Returns:
            List of CategoryAggregate ordered habits, learning, projects,
            routines, meals.

        Raises:
            InvalidDayKeyError: If any record key is not a canonical day key.
            InvalidTargetError: If a learning goal's target is not finite.
        """
        snapshot = snapshot or {}
        window = cls.window_keys(reference_date, window_days)
        return [
            cls.aggregate_category(
                category_id,
                snapshot.get(const.CATEGORY_SNAPSHOT_MAP[category_id]) or [],
                window,
                required_meal_slots,
            )
            for category_id in const.CATEGORY_ORDER
        ]

    @classmethod
    def aggregate_category(
        cls,
        category_id: str,
        items: Sequence[Mapping[str, Any]] | None,
        window: list[str],
        required_meal_slots: Sequence[str] = const.DEFAULT_REQUIRED_MEAL_SLOTS,
    ) -> CategoryAggregate:
        """Compute a single category over an explicit window of day keys.

        Unknown categories resolve to 0 with a warning.
        """
        cls._register_handlers()

        handler = cls._CATEGORY_HANDLERS.get(category_id)
        if handler is None:
            const.LOGGER.warning("Unknown analytics category: %s", category_id)
            return cls._make_aggregate(category_id, 0, 0)

        kind = const.CATEGORY_KIND_MAP[category_id]
        typed_items = [cls._with_kind(item, kind) for item in items or []]
        percentage, sample_size = handler(typed_items, window, required_meal_slots)

        const.LOGGER.debug(
            "Aggregated %s: %s%% over %s item(s), window %s..%s",
            category_id,
            percentage,
            sample_size,
            window[0] if window else None,
            window[-1] if window else None,
        )
        return cls._make_aggregate(category_id, percentage, sample_size)

    @staticmethod
    def percentages(aggregates: Sequence[CategoryAggregate]) -> dict[str, int]:
        """Flatten aggregates to category id → percentage."""
        return {agg["category_id"]: agg["completion_percentage"] for agg in aggregates}

    # Convenience wrappers with the window resolved from today

    @classmethod
    def habit_rate(
        cls,
        habits: Sequence[Mapping[str, Any]] | None,
        reference_date: date | datetime | str | None = None,
        window_days: int = const.DEFAULT_WINDOW_DAYS,
    ) -> int:
        """Habit completion percentage over the trailing window."""
        window = cls.window_keys(reference_date, window_days)
        return cls.aggregate_category(const.CATEGORY_HABITS, habits, window)[
            "completion_percentage"
        ]

    @classmethod
    def routine_rate(
        cls,
        routines: Sequence[Mapping[str, Any]] | None,
        reference_date: date | datetime | str | None = None,
        window_days: int = const.DEFAULT_WINDOW_DAYS,
    ) -> int:
        """Routine completion percentage over the trailing window."""
        window = cls.window_keys(reference_date, window_days)
        return cls.aggregate_category(const.CATEGORY_ROUTINES, routines, window)[
            "completion_percentage"
        ]

    @classmethod
    def learning_rate(cls, goals: Sequence[Mapping[str, Any]] | None) -> int:
        """Mean learning-goal progress (not window-based)."""
        return cls.aggregate_category(const.CATEGORY_LEARNING, goals, [])[
            "completion_percentage"
        ]

    @classmethod
    def project_rate(cls, projects: Sequence[Mapping[str, Any]] | None) -> int:
        """Mean project milestone completion (not window-based)."""
        return cls.aggregate_category(const.CATEGORY_PROJECTS, projects, [])[
            "completion_percentage"
        ]

    @classmethod
    def meal_rate(
        cls,
        meal_logs: Sequence[Mapping[str, Any]] | None,
        reference_date: date | datetime | str | None = None,
        window_days: int = const.DEFAULT_WINDOW_DAYS,
        required_meal_slots: Sequence[str] = const.DEFAULT_REQUIRED_MEAL_SLOTS,
    ) -> int:
        """Share of recorded days in the window with every required meal logged."""
        window = cls.window_keys(reference_date, window_days)
        return cls.aggregate_category(
            const.CATEGORY_MEALS, meal_logs, window, required_meal_slots
        )["completion_percentage"]

    @classmethod
    def meal_category_tally(
        cls,
        meal_logs: Sequence[Mapping[str, Any]] | None,
        reference_date: date | datetime | str | None = None,
        window_days: int = const.DEFAULT_WINDOW_DAYS,
    ) -> list[TallyEntry]:
        """Count logged meal categories on window days (breakdown display).

        Categories are normalized to stripped lower case. The result is
        ordered by count (desc) then name. With nothing to count, a single
        placeholder entry is returned so a chart always has something to draw.
        """
        window = set(cls.window_keys(reference_date, window_days))
        counts: Counter[str] = Counter()

        for log in meal_logs or []:
            entries = log.get(const.DATA_MEAL_ENTRIES) or {}
            for key, slots in entries.items():
                if to_date(key).isoformat() not in window:
                    continue
                for entry in (slots or {}).values():
                    if not CompletionEngine.is_slot_logged(entry):
                        continue
                    category = (
                        entry.get(const.DATA_MEAL_SLOT_CATEGORY)
                        if isinstance(entry, Mapping)
                        else None
                    )
                    if isinstance(category, str) and category.strip():
                        counts[category.strip().lower()] += 1

        if not counts:
            return [{"name": const.TALLY_NO_DATA, "count": 1, "placeholder": True}]

        return [
            {"name": name, "count": count, "placeholder": False}
            for name, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
        ]

    # =========================================================================
    # CATEGORY HANDLERS
    # =========================================================================

    @staticmethod
    def _aggregate_habits(
        items: Sequence[Mapping[str, Any]],
        window: list[str],
        _required_meal_slots: Sequence[str],
    ) -> tuple[int, int]:
        possible = len(items) * len(window)
        if possible == 0:
            return 0, len(items)

        window_set = set(window)
        completed = 0
        for habit in items:
            done_map = CompletionEngine.completion_map(habit)
            completed += sum(1 for key, done in done_map.items() if done and key in window_set)

        return to_whole_percentage(completed / possible * 100), len(items)

    @staticmethod
    def _aggregate_routines(
        items: Sequence[Mapping[str, Any]],
        window: list[str],
        _required_meal_slots: Sequence[str],
    ) -> tuple[int, int]:
        if not items or not window:
            return 0, len(items)

        done_maps = [CompletionEngine.completion_map(routine) for routine in items]
        per_day = [
            sum(1 for done_map in done_maps if done_map.get(key, False)) / len(items) * 100
            for key in window
        ]
        return to_whole_percentage(mean(per_day)), len(items)

    @staticmethod
    def _aggregate_learning(
        items: Sequence[Mapping[str, Any]],
        _window: list[str],
        _required_meal_slots: Sequence[str],
    ) -> tuple[int, int]:
        if not items:
            return 0, 0
        per_goal = [ProgressEngine.goal_progress(goal)["percentage"] for goal in items]
        return to_whole_percentage(mean(per_goal)), len(items)

    @staticmethod
    def _aggregate_projects(
        items: Sequence[Mapping[str, Any]],
        _window: list[str],
        _required_meal_slots: Sequence[str],
    ) -> tuple[int, int]:
        if not items:
            return 0, 0
        per_project = [
            ProgressEngine.project_progress(project)["percentage"] for project in items
        ]
        return to_whole_percentage(mean(per_project)), len(items)

    @staticmethod
    def _aggregate_meals(
        items: Sequence[Mapping[str, Any]],
        window: list[str],
        required_meal_slots: Sequence[str],
    ) -> tuple[int, int]:
        window_set = set(window)
        recorded_days = 0
        complete_days = 0
        for log in items:
            for key, done in CompletionEngine.completion_map(log, required_meal_slots).items():
                if key not in window_set:
                    continue
                recorded_days += 1
                if done:
                    complete_days += 1

        percentage = to_whole_percentage(complete_days / max(1, recorded_days) * 100)
        return percentage, recorded_days

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _with_kind(item: Mapping[str, Any], kind: str) -> Mapping[str, Any]:
        """Tag an item with its category's kind when the store left it off."""
        if item.get(const.DATA_ITEM_KIND) == kind:
            return item
        return {**item, const.DATA_ITEM_KIND: kind}

    @staticmethod
    def _make_aggregate(
        category_id: str, percentage: int, sample_size: int
    ) -> CategoryAggregate:
        return {
            "category_id": category_id,
            "completion_percentage": percentage,
            "sample_size": sample_size,
        }
