"""Streak Engine - Current and longest runs of consecutive completed days.

One deterministic algorithm shared by every streak-bearing item kind. Kinds
with richer daily records (routines, meal logs, learning goals) are first
reduced to a day key → boolean map by CompletionEngine, then fed here.

Design Principles:
    - Stateless: operates only on the map passed in
    - Order-insensitive: keys are deduplicated and sorted before scanning
    - Calendar-based: consecutive means "one calendar day apart", never 24h
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Any

from ..utils.dt_utils import dt_today_local, parse_day_key, to_date
from ..utils.math_utils import coerce_bool

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..type_defs import StreakResult


class StreakEngine:
    """Compute current and longest streaks from a completion map.

    Current streak:
        Walk backward from today while each day is completed. If today is not
        completed yet, yesterday gets one day of grace: the walk starts there
        instead, so a running streak survives until the user has had a chance
        to log today. With neither day completed the current streak is 0.

    Longest streak:
        Scan the sorted completed days once, counting runs of days exactly
        one apart. The running current streak is also a candidate.

    Example:
        streaks = StreakEngine.calculate(
            {"2024-06-01": True, "2024-06-02": True, "2024-06-03": True},
            reference_date=date(2024, 6, 4),
        )
        # {"current": 3, "longest": 3}  (grace: today not logged yet)
    """

    @staticmethod
    def _dt_today_local() -> date:
        """Return today's date in the local timezone."""
        return dt_today_local()

    @classmethod
    def _resolve_today(cls, reference_date: date | datetime | str | None) -> date:
        """Normalize the optional reference day to a date."""
        if reference_date is None:
            return cls._dt_today_local()
        return to_date(reference_date)

    # ────────────────────────────────────────────────────────────────
    # Public API
    # ────────────────────────────────────────────────────────────────

    @classmethod
    def calculate(
        cls,
        completions: Mapping[Any, Any] | None,
        reference_date: date | datetime | str | None = None,
    ) -> StreakResult:
        """Return `{"current": int, "longest": int}` for one item.

        Args:
            completions: Day key → completion indicator. Indicators are
                coerced leniently (True, 1, "yes", ...).
            reference_date: Day to treat as today. Defaults to today (local).

        Returns:
            StreakResult with longest >= current >= 0.

        Raises:
            InvalidDayKeyError: If any key is not a canonical day key.
        """
        days = cls.completed_days(completions)
        if not days:
            return {"current": 0, "longest": 0}

        today = cls._resolve_today(reference_date)
        current = cls._current_from_days(set(days), today)
        longest = max(cls._longest_from_sorted(days), current)
        return {"current": current, "longest": longest}

    @classmethod
    def current_streak(
        cls,
        completions: Mapping[Any, Any] | None,
        reference_date: date | datetime | str | None = None,
    ) -> int:
        """Return only the current streak."""
        days = cls.completed_days(completions)
        if not days:
            return 0
        return cls._current_from_days(set(days), cls._resolve_today(reference_date))

    @classmethod
    def longest_streak(
        cls,
        completions: Mapping[Any, Any] | None,
        reference_date: date | datetime | str | None = None,
    ) -> int:
        """Return only the longest streak (including a still-running one)."""
        return cls.calculate(completions, reference_date)["longest"]

    @staticmethod
    def completed_days(completions: Mapping[Any, Any] | None) -> list[date]:
        """Return the sorted, deduplicated dates whose indicator is true.

        Every key is validated, completed or not, so a malformed key can never
        slip into the ordering.

        Raises:
            InvalidDayKeyError: If any key is not a canonical day key.
        """
        if not completions:
            return []

        days: set[date] = set()
        for key, indicator in completions.items():
            day = parse_day_key(key)
            if coerce_bool(indicator):
                days.add(day)
        return sorted(days)

    # ────────────────────────────────────────────────────────────────
    # Internals
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def _current_from_days(days: set[date], today: date) -> int:
        """Walk back from today (or yesterday, with grace) over completed days."""
        yesterday = today - timedelta(days=1)
        if today in days:
            cursor = today
        elif yesterday in days:
            cursor = yesterday
        else:
            return 0

        streak = 0
        while cursor in days:
            streak += 1
            cursor -= timedelta(days=1)
        return streak

    @staticmethod
    def _longest_from_sorted(days: list[date]) -> int:
        """Longest run of consecutive days in an ascending, unique list."""
        longest = 0
        run = 0
        previous: date | None = None
        for day in days:
            if previous is not None and (day - previous).days == 1:
                run += 1
            else:
                run = 1
            longest = max(longest, run)
            previous = day
        return longest
