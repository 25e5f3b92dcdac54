"""Progress Engine - Pure logic for cumulative goals and project milestones.

This engine provides stateless, pure Python functions for:
- Summing sparse learning-goal entries into a total
- Expressing the total as a clamped percentage of a target
- Deciding whether a day's entry counts as "logged"
- Project milestone completion, overdue checks and "next up" ordering

Entry maps are sparse: a day with no entry contributes zero. Negative values
(corrections) are part of the total.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_today_local, is_valid_day_key, parse_day_key, to_date
from ..utils.math_utils import (
    calculate_percentage,
    clamp,
    coerce_number,
    is_finite_number,
    round_value,
)

if TYPE_CHECKING:
    from ..type_defs import GoalProgress, MilestoneData, ProjectProgress


class InvalidTargetError(ValueError):
    """Raised when a goal target is not a finite number.

    Attributes:
        target: The rejected target value
    """

    def __init__(self, target: object) -> None:
        """Initialize InvalidTargetError.

        Args:
            target: The rejected target value
        """
        self.target = target
        super().__init__(f"Invalid goal target {target!r}: must be a finite number")


class ProgressEngine:
    """Pure logic engine for goal accumulation and project progress.

    All methods are static - no instance state.
    """

    # =========================================================================
    # LEARNING GOALS
    # =========================================================================

    @staticmethod
    def validate_target(target: object) -> float:
        """Return the target as a float, rejecting non-finite values.

        Non-positive targets are valid here; they simply yield 0%.

        Raises:
            InvalidTargetError: If target is NaN, ±inf, a bool or not a number.
        """
        if not is_finite_number(target):
            raise InvalidTargetError(target)
        return float(target)  # type: ignore[arg-type]

    @staticmethod
    def entry_value(entry: Any) -> float:
        """Return an entry's numeric value (bare numbers are accepted)."""
        if isinstance(entry, Mapping):
            return coerce_number(entry.get(const.DATA_ENTRY_VALUE))
        return coerce_number(entry)

    @staticmethod
    def entry_notes(entry: Any) -> str:
        """Return an entry's notes, or an empty string."""
        if isinstance(entry, Mapping):
            notes = entry.get(const.DATA_ENTRY_NOTES)
            if isinstance(notes, str):
                return notes
        return ""

    @classmethod
    def total(cls, entries: Mapping[Any, Any] | None) -> float:
        """Sum all entry values, corrections included."""
        if not entries:
            return 0.0
        return round_value(sum(cls.entry_value(entry) for entry in entries.values()))

    @classmethod
    def accumulate(
        cls,
        entries: Mapping[Any, Any] | None,
        target: object,
    ) -> GoalProgress:
        """Sum a goal's entries and express them as a percentage of target.

        Args:
            entries: Day key → {"value": n, "notes": "..."} (or a bare number)
            target: Target amount

        Returns:
            GoalProgress with total, target and percentage clamped to [0, 100].
            A target <= 0 always yields 0%.

        Raises:
            InvalidTargetError: If target is not a finite number.

        Example:
            accumulate({"2024-06-01": {"value": 75}, "2024-06-02": {"value": 50}}, 100)
            # {"total": 125.0, "target": 100.0, "percentage": 100.0}
        """
        safe_target = cls.validate_target(target)
        total = cls.total(entries)

        if safe_target <= 0:
            percentage = 0.0
        else:
            percentage = clamp(calculate_percentage(total, safe_target), 0.0, 100.0)

        return {"total": total, "target": safe_target, "percentage": percentage}

    @classmethod
    def goal_progress(cls, goal: Mapping[str, Any]) -> GoalProgress:
        """Accumulate a LearningGoalData item."""
        return cls.accumulate(
            goal.get(const.DATA_GOAL_ENTRIES),
            goal.get(const.DATA_GOAL_TARGET_AMOUNT),
        )

    @classmethod
    def has_logged(cls, entry: Any) -> bool:
        """Return True if an entry counts as "the user logged this day".

        A positive value or non-blank notes; anything else is treated as
        absent for logging checks even though its value still counts in
        the total.
        """
        if entry is None:
            return False
        return cls.entry_value(entry) > 0 or bool(cls.entry_notes(entry).strip())

    @classmethod
    def merge_entry(
        cls,
        entries: Mapping[str, Any] | None,
        day: str | date,
        entry: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Return a new entry map with `entry` stored for `day`.

        An entry that does not count as logged removes the day instead, so
        clearing the form deletes the record. The input map is not mutated.

        Raises:
            InvalidDayKeyError: If `day` is not a canonical day key.
        """
        key = parse_day_key(day).isoformat()
        merged = dict(entries or {})
        if cls.has_logged(entry):
            merged[key] = dict(entry)
        else:
            merged.pop(key, None)
        return merged

    # =========================================================================
    # PROJECTS
    # =========================================================================

    @staticmethod
    def normalize_milestone_status(status: object) -> str:
        """Normalize status spellings ("In Progress", "in_progress", "To Do")."""
        if not isinstance(status, str):
            return const.MILESTONE_STATUS_TODO
        compact = status.strip().lower().replace("_", " ").replace("-", " ")
        compact = " ".join(compact.split())
        aliases = {
            "to do": const.MILESTONE_STATUS_TODO,
            "todo": const.MILESTONE_STATUS_TODO,
            "in progress": const.MILESTONE_STATUS_IN_PROGRESS,
            "completed": const.MILESTONE_STATUS_COMPLETED,
            "complete": const.MILESTONE_STATUS_COMPLETED,
            "done": const.MILESTONE_STATUS_COMPLETED,
            "delayed": const.MILESTONE_STATUS_DELAYED,
        }
        return aliases.get(compact, compact)

    @classmethod
    def is_milestone_completed(cls, milestone: Mapping[str, Any]) -> bool:
        return (
            cls.normalize_milestone_status(milestone.get(const.DATA_MILESTONE_STATUS))
            == const.MILESTONE_STATUS_COMPLETED
        )

    @classmethod
    def project_progress(cls, project: Mapping[str, Any]) -> ProjectProgress:
        """Fraction of a project's milestones that are completed, as a percent.

        A project without milestones is 0%.
        """
        milestones = project.get(const.DATA_PROJECT_MILESTONES) or []
        total = len(milestones)
        completed = sum(1 for m in milestones if cls.is_milestone_completed(m))
        return {
            "project_id": str(project.get(const.DATA_ITEM_ID, "")),
            "completed": completed,
            "total": total,
            "percentage": calculate_percentage(completed, total),
        }

    @classmethod
    def is_milestone_overdue(
        cls,
        milestone: Mapping[str, Any],
        reference_date: date | datetime | str | None = None,
    ) -> bool:
        """Return True if the milestone is due before today and not completed.

        Milestones without a valid due date are never overdue.
        """
        due = milestone.get(const.DATA_MILESTONE_DUE_DATE)
        if not is_valid_day_key(due):
            return False
        today = dt_today_local() if reference_date is None else to_date(reference_date)
        return parse_day_key(due) < today and not cls.is_milestone_completed(milestone)

    @classmethod
    def next_up_milestones(
        cls,
        milestones: list[MilestoneData] | None,
        limit: int = const.DEFAULT_NEXT_UP_MILESTONE_LIMIT,
    ) -> list[MilestoneData]:
        """Return the next open milestones ordered by due date.

        Completed milestones are skipped; milestones without a valid due date
        sort last. Ties keep their input order.
        """
        open_milestones = [m for m in milestones or [] if not cls.is_milestone_completed(m)]
        far_future = date.max

        def _due(milestone: Mapping[str, Any]) -> date:
            due = milestone.get(const.DATA_MILESTONE_DUE_DATE)
            return parse_day_key(due) if is_valid_day_key(due) else far_future

        return sorted(open_milestones, key=_due)[: max(limit, 0)]

    @classmethod
    def next_milestone_status(cls, status: object) -> str:
        """Return the status after `status` in the quick-cycle order.

        Unknown statuses restart the cycle at "todo".
        """
        normalized = cls.normalize_milestone_status(status)
        cycle = const.MILESTONE_STATUS_CYCLE
        if normalized not in cycle:
            return const.MILESTONE_STATUS_TODO
        return cycle[(cycle.index(normalized) + 1) % len(cycle)]
