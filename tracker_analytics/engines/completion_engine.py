"""Completion Engine - Composite completion reduction and kind dispatch.

This engine provides stateless functions for:
- Resolving one day's sub-completions into complete / partial / incomplete
- Routine days (subtasks) and meal days (required slots)
- Reducing any streak-bearing item to a day key → boolean map
- Item streaks (StreakEngine over the reduced map)

Every tracked-item kind answers the same question ("was this day done?")
through one registered reducer, so the streak and window logic downstream
never branches on kind.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import day_key
from ..utils.math_utils import coerce_bool
from .progress_engine import ProgressEngine
from .streak_engine import StreakEngine

if TYPE_CHECKING:
    from ..type_defs import CompletionResult, StreakResult


# =============================================================================
# TYPE ALIASES
# =============================================================================

# Reducer signature: (item, required_meal_slots) -> {day_key: done}
DayReducer = Callable[[Mapping[str, Any], Sequence[str]], dict[str, bool]]


class CompletionEngine:
    """Pure logic engine for composite completion.

    All methods are static/class methods - no instance state.

    Status rules (fraction = completed / total):
        - complete: fraction == 1 and total > 0
        - partial: 0 < fraction < 1
        - incomplete: fraction == 0, including total == 0
    """

    # =========================================================================
    # DAY REDUCER REGISTRY
    # =========================================================================

    # Maps item kind to its day reducer
    _DAY_REDUCERS: dict[str, DayReducer] = {}

    @classmethod
    def _register_reducers(cls) -> None:
        """Populate _DAY_REDUCERS on first use."""
        if cls._DAY_REDUCERS:
            return

        cls._DAY_REDUCERS = {
            const.ITEM_KIND_HABIT: cls._reduce_habit,
            const.ITEM_KIND_ROUTINE: cls._reduce_routine,
            const.ITEM_KIND_GOAL: cls._reduce_goal,
            const.ITEM_KIND_MEAL_DAY: cls._reduce_meal_log,
            const.ITEM_KIND_PROJECT: cls._reduce_project,
        }

    # =========================================================================
    # STATUS RESOLUTION
    # =========================================================================

    @staticmethod
    def resolve_status(
        completed_ids: Any,
        all_ids: Iterable[str],
    ) -> CompletionResult:
        """Reduce a day's completed sub-item ids against the defined set.

        Ids marked complete but not in `all_ids` are ignored (e.g. a subtask
        that has since been deleted).

        Args:
            completed_ids: Completed ids as a list/set, or {id: bool}
            all_ids: Every sub-item id defined for the item

        Returns:
            CompletionResult with status, fraction, completed and total

        Example:
            resolve_status({"a", "b"}, ["a", "b", "c", "d"])
            # {"status": "partial", "fraction": 0.5, "completed": 2, "total": 4}
        """
        defined = set(all_ids)
        marked = CompletionEngine._completed_id_set(completed_ids)

        total = len(defined)
        completed = len(defined & marked)
        fraction = completed / total if total else 0.0

        if total > 0 and completed == total:
            status = const.COMPLETION_STATUS_COMPLETE
        elif completed > 0:
            status = const.COMPLETION_STATUS_PARTIAL
        else:
            status = const.COMPLETION_STATUS_INCOMPLETE

        return {
            "status": status,
            "fraction": fraction,
            "completed": completed,
            "total": total,
        }

    @classmethod
    def resolve_routine_day(
        cls,
        routine: Mapping[str, Any],
        day: str | date | datetime,
    ) -> CompletionResult:
        """Resolve one routine day against its defined subtasks."""
        completions = routine.get(const.DATA_ROUTINE_COMPLETIONS) or {}
        key = day_key(day)
        return cls.resolve_status(
            cls._lookup_day(completions, key),
            cls.subtask_ids(routine),
        )

    @classmethod
    def resolve_meal_day(
        cls,
        meal_slots: Mapping[str, Any] | None,
        required_slots: Sequence[str] = const.DEFAULT_REQUIRED_MEAL_SLOTS,
    ) -> CompletionResult:
        """Resolve one meal day against the required slots.

        Slot names compare case-insensitively; optional slots (snack by
        default) never count towards or against completion.

        Example:
            resolve_meal_day({
                "breakfast": {"logged": True},
                "lunch": {"logged": True},
                "dinner": {"logged": True},
                "snack": {"logged": False},
            })
            # status "complete"
        """
        logged = {
            cls._normalize_slot(name)
            for name, entry in (meal_slots or {}).items()
            if cls.is_slot_logged(entry)
        }
        required = [cls._normalize_slot(slot) for slot in required_slots]
        return cls.resolve_status(logged, required)

    @classmethod
    def resolve_day(
        cls,
        item: Mapping[str, Any],
        day: str | date | datetime,
        required_meal_slots: Sequence[str] = const.DEFAULT_REQUIRED_MEAL_SLOTS,
    ) -> CompletionResult:
        """Resolve any item's status for one day (calendar colouring).

        Binary kinds (habit, goal) resolve as a single-part item. Projects are
        not day-based and always resolve as incomplete with total 0.
        """
        kind = item.get(const.DATA_ITEM_KIND)
        key = day_key(day)

        if kind == const.ITEM_KIND_ROUTINE:
            return cls.resolve_routine_day(item, key)

        if kind == const.ITEM_KIND_MEAL_DAY:
            entries = item.get(const.DATA_MEAL_ENTRIES) or {}
            return cls.resolve_meal_day(
                cls._lookup_day(entries, key), required_meal_slots
            )

        if kind in (const.ITEM_KIND_HABIT, const.ITEM_KIND_GOAL):
            done = cls.completion_map(item, required_meal_slots).get(key, False)
            return cls.resolve_status({"done"} if done else set(), ["done"])

        return cls.resolve_status(set(), [])

    # =========================================================================
    # KIND DISPATCH
    # =========================================================================

    @classmethod
    def completion_map(
        cls,
        item: Mapping[str, Any],
        required_meal_slots: Sequence[str] = const.DEFAULT_REQUIRED_MEAL_SLOTS,
    ) -> dict[str, bool]:
        """Reduce an item's raw records to canonical day key → done.

        Args:
            item: Tracked item with a `kind` tag
            required_meal_slots: Slots that make a meal day complete

        Returns:
            Day key → boolean. Empty for projects and unknown kinds.

        Raises:
            InvalidDayKeyError: If any record key is not a canonical day key.
        """
        cls._register_reducers()

        kind = item.get(const.DATA_ITEM_KIND)
        reducer = cls._DAY_REDUCERS.get(kind) if isinstance(kind, str) else None
        if reducer is None:
            const.LOGGER.warning(
                "Unknown item kind %s for item %s; no completion data",
                kind,
                item.get(const.DATA_ITEM_ID, "unknown"),
            )
            return {}
        return reducer(item, required_meal_slots)

    @classmethod
    def item_streak(
        cls,
        item: Mapping[str, Any],
        reference_date: date | datetime | str | None = None,
        required_meal_slots: Sequence[str] = const.DEFAULT_REQUIRED_MEAL_SLOTS,
    ) -> StreakResult:
        """Streak for any streak-bearing item via its reduced day map.

        A routine day only counts when every subtask is done; a meal day only
        when every required slot is logged.
        """
        return StreakEngine.calculate(
            cls.completion_map(item, required_meal_slots),
            reference_date,
        )

    # =========================================================================
    # REDUCERS
    # =========================================================================

    @staticmethod
    def _reduce_habit(
        item: Mapping[str, Any], _required_meal_slots: Sequence[str]
    ) -> dict[str, bool]:
        completions = item.get(const.DATA_HABIT_COMPLETIONS) or {}
        return {day_key(key): coerce_bool(value) for key, value in completions.items()}

    @classmethod
    def _reduce_routine(
        cls, item: Mapping[str, Any], _required_meal_slots: Sequence[str]
    ) -> dict[str, bool]:
        completions = item.get(const.DATA_ROUTINE_COMPLETIONS) or {}
        subtask_ids = cls.subtask_ids(item)
        return {
            day_key(key): cls.resolve_status(value, subtask_ids)["status"]
            == const.COMPLETION_STATUS_COMPLETE
            for key, value in completions.items()
        }

    @staticmethod
    def _reduce_goal(
        item: Mapping[str, Any], _required_meal_slots: Sequence[str]
    ) -> dict[str, bool]:
        entries = item.get(const.DATA_GOAL_ENTRIES) or {}
        return {
            day_key(key): ProgressEngine.has_logged(entry)
            for key, entry in entries.items()
        }

    @classmethod
    def _reduce_meal_log(
        cls, item: Mapping[str, Any], required_meal_slots: Sequence[str]
    ) -> dict[str, bool]:
        entries = item.get(const.DATA_MEAL_ENTRIES) or {}
        return {
            day_key(key): cls.resolve_meal_day(slots, required_meal_slots)["status"]
            == const.COMPLETION_STATUS_COMPLETE
            for key, slots in entries.items()
        }

    @staticmethod
    def _reduce_project(
        item: Mapping[str, Any], _required_meal_slots: Sequence[str]
    ) -> dict[str, bool]:
        # Milestone-based; no daily records
        return {}

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def subtask_ids(routine: Mapping[str, Any]) -> list[str]:
        """Return the routine's subtask ids in definition order."""
        ids: list[str] = []
        for subtask in routine.get(const.DATA_ROUTINE_SUBTASKS) or []:
            if isinstance(subtask, Mapping):
                subtask_id = subtask.get(const.DATA_SUBTASK_ID)
            else:
                subtask_id = subtask
            if subtask_id is not None and subtask_id not in ids:
                ids.append(str(subtask_id))
        return ids

    @staticmethod
    def is_slot_logged(entry: Any) -> bool:
        """Return True if a meal slot entry is marked logged."""
        if isinstance(entry, Mapping):
            return coerce_bool(entry.get(const.DATA_MEAL_SLOT_LOGGED))
        return coerce_bool(entry)

    @staticmethod
    def _normalize_slot(name: str) -> str:
        return str(name).strip().lower()

    @staticmethod
    def _completed_id_set(raw: Any) -> set[str]:
        """Normalize list/set/{id: bool} completion data to a set of ids."""
        if not raw:
            return set()
        if isinstance(raw, Mapping):
            return {str(key) for key, value in raw.items() if coerce_bool(value)}
        if isinstance(raw, str):
            return {raw}
        if isinstance(raw, Iterable):
            return {str(value) for value in raw}
        return set()

    @staticmethod
    def _lookup_day(records: Mapping[Any, Any], key: str) -> Any:
        """Find a day's record whether stored under a string or a date key."""
        if key in records:
            return records[key]
        for raw_key, value in records.items():
            if isinstance(raw_key, date) and raw_key.isoformat() == key:
                return value
        return None
