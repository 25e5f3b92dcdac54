# File: utils/dt_utils.py
"""Calendar-day utilities for Tracker Analytics.

Pure Python date functions. Everything the engines compare or subtract is a
calendar day (a `datetime.date` or its canonical `YYYY-MM-DD` day key), never
a timestamp, so daylight-saving transitions cannot shift a result.

⚠️ UTILS PURITY: this module must not import from `engines` or `helpers`.
   Uses standard library: datetime, zoneinfo, re; third-party: dateutil.

Functions:
    - dt_today_local: Get today's date in the local timezone
    - today: Today's day key
    - days_ago: Day key N days before a reference day
    - day_key: Canonical YYYY-MM-DD key for a date, datetime or key
    - parse_day_key: Strict day key validation and parsing
    - is_valid_day_key: Non-raising validation predicate
    - day_difference: Whole-day difference between two days
    - add_days: Shift a day key by N days
    - iter_window: Ascending day keys of a trailing window
    - resolve_date_for_weekday: Map a schedule weekday to a date this week
    - parse_time_of_day: Parse "HH:MM"
    - minutes_between: Duration in minutes between two "HH:MM" values
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
import logging
import re
from zoneinfo import ZoneInfo

from dateutil.relativedelta import MO, SU, relativedelta

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to keep utils free of package imports)
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

DAY_KEY_FORMAT = "%Y-%m-%d"
TIME_OF_DAY_FORMAT = "%H:%M"

# Schedule weekday indices (0=Sunday ... 6=Saturday; 7 is also Sunday)
WEEKDAY_INDEX_MIN = 0
WEEKDAY_INDEX_MAX = 7

WEEK_START_SUNDAY = 0
WEEK_START_MONDAY = 1

_DAY_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class InvalidDayKeyError(ValueError):
    """Raised when a day key is not a canonical YYYY-MM-DD calendar date.

    Attributes:
        key: The rejected value
    """

    def __init__(self, key: object) -> None:
        """Initialize InvalidDayKeyError.

        Args:
            key: The rejected value
        """
        self.key = key
        super().__init__(f"Invalid day key {key!r}: expected YYYY-MM-DD")


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the local timezone used to decide which calendar day it is.

    Call this once at startup with the user's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone.

    Returns:
        The configured default timezone (ZoneInfo object)
    """
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Day Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in the local timezone as a `datetime.date`.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Today's date in the specified timezone.

    Example:
        datetime.date(2024, 6, 5)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


def today(tz: ZoneInfo | None = None) -> str:
    """Return today's day key (YYYY-MM-DD) in the local timezone.

    Example:
        "2024-06-05"
    """
    return dt_today_local(tz).isoformat()


def days_ago(
    n: int,
    reference_date: date | str | None = None,
    tz: ZoneInfo | None = None,
) -> str:
    """Return the day key `n` calendar days before the reference day.

    `days_ago(0)` equals `today()`. A negative `n` looks forward.

    Args:
        n: Number of days to go back
        reference_date: Day to count from. Defaults to today (local).
        tz: Optional timezone override used when reference_date is None.

    Returns:
        Day key string.

    Example:
        days_ago(1, "2024-06-05") → "2024-06-04"
    """
    ref = dt_today_local(tz) if reference_date is None else to_date(reference_date)
    return (ref - timedelta(days=n)).isoformat()


# ==============================================================================
# Day Key Parsing / Formatting
# ==============================================================================


def parse_day_key(key: str | date) -> date:
    """Strictly parse a day key into a `datetime.date`.

    Only the canonical `YYYY-MM-DD` form that denotes a real calendar date is
    accepted. A `date` passes through; a `datetime` is rejected because it
    carries a time-of-day.

    Args:
        key: Day key string (or date)

    Returns:
        The parsed date.

    Raises:
        InvalidDayKeyError: If the key is not canonical or not a real date.

    Examples:
        parse_day_key("2024-06-01") → datetime.date(2024, 6, 1)
        parse_day_key("2024-6-1")   → InvalidDayKeyError
        parse_day_key("2024-02-30") → InvalidDayKeyError
    """
    if isinstance(key, datetime):
        raise InvalidDayKeyError(key)
    if isinstance(key, date):
        return key
    if not isinstance(key, str) or not _DAY_KEY_PATTERN.match(key):
        raise InvalidDayKeyError(key)
    try:
        return date.fromisoformat(key)
    except ValueError as err:
        raise InvalidDayKeyError(key) from err


def is_valid_day_key(key: object) -> bool:
    """Return True if `key` is a canonical YYYY-MM-DD day key string."""
    if not isinstance(key, str):
        return False
    try:
        parse_day_key(key)
    except InvalidDayKeyError:
        return False
    return True


def to_date(value: str | date | datetime, tz: ZoneInfo | None = None) -> date:
    """Normalize a day key, date or datetime to the local calendar date.

    Aware datetimes are converted to the local timezone first; naive
    datetimes are taken as already local.

    Raises:
        InvalidDayKeyError: If a string value is not a canonical day key.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz or DEFAULT_TIME_ZONE)
        return value.date()
    return parse_day_key(value)


def day_key(value: str | date | datetime, tz: ZoneInfo | None = None) -> str:
    """Return the canonical day key for a date, datetime or day key.

    Formats the local calendar fields; a timestamp late in the local evening
    stays on its local day instead of rolling over to the UTC date.

    Args:
        value: Date-like value to format
        tz: Optional timezone override for aware datetimes

    Returns:
        Day key string (YYYY-MM-DD).

    Raises:
        InvalidDayKeyError: If a string value is not a canonical day key.

    Example:
        day_key(datetime(2024, 6, 1, 23, 30, tzinfo=ZoneInfo("America/New_York")),
                tz=ZoneInfo("America/New_York")) → "2024-06-01"
    """
    return to_date(value, tz).strftime(DAY_KEY_FORMAT)


# ==============================================================================
# Day Arithmetic
# ==============================================================================


def day_difference(a: str | date, b: str | date) -> int:
    """Return the whole-day difference `a − b` (positive if `a` is later).

    Computed from calendar ordinals so DST transitions never produce a
    fractional or off-by-one result.

    Examples:
        day_difference("2024-06-05", "2024-06-01") → 4
        day_difference("2024-03-09", "2024-03-11") → -2
    """
    return parse_day_key(a).toordinal() - parse_day_key(b).toordinal()


def add_days(key: str | date, n: int) -> str:
    """Return the day key `n` days after `key` (negative `n` goes back)."""
    return (parse_day_key(key) + timedelta(days=n)).isoformat()


def iter_window(end: str | date, days: int) -> list[str]:
    """Return the ascending day keys of the `days`-long window ending at `end`.

    Args:
        end: Last day of the window (inclusive)
        days: Window length; values below 1 produce an empty list

    Example:
        iter_window("2024-06-05", 3) → ["2024-06-03", "2024-06-04", "2024-06-05"]
    """
    end_date = parse_day_key(end)
    return [
        (end_date - timedelta(days=offset)).isoformat()
        for offset in range(days - 1, -1, -1)
    ]


def resolve_date_for_weekday(
    weekday_index: int,
    week_start: int = WEEK_START_MONDAY,
    reference_date: str | date | None = None,
) -> date:
    """Map a schedule weekday back to its concrete date in the current week.

    Weekly schedules store a weekday index (0=Sunday ... 6=Saturday). Grids
    numbered Monday=1 ... Sunday=7 are accepted too: 7 is Sunday. The
    week containing `reference_date` starts on Sunday (week_start=0) or
    Monday (week_start=1); with a Monday start, Sunday is the last day.

    Args:
        weekday_index: 0=Sunday ... 6=Saturday, or 7=Sunday
        week_start: 0 for Sunday-start weeks, 1 for Monday-start weeks
        reference_date: Any day of the target week. Defaults to today.

    Returns:
        The date of that weekday within the week.

    Raises:
        ValueError: If weekday_index or week_start is out of range.

    Examples:
        # 2024-06-05 is a Wednesday
        resolve_date_for_weekday(1, 1, "2024-06-05") → date(2024, 6, 3)   # Monday
        resolve_date_for_weekday(0, 1, "2024-06-05") → date(2024, 6, 9)   # Sunday
        resolve_date_for_weekday(0, 0, "2024-06-05") → date(2024, 6, 2)   # Sunday
        resolve_date_for_weekday(7, 1, "2024-06-05") → date(2024, 6, 9)   # Sunday
    """
    if not WEEKDAY_INDEX_MIN <= weekday_index <= WEEKDAY_INDEX_MAX:
        raise ValueError(f"weekday_index must be 0-7, got {weekday_index}")
    if week_start not in (WEEK_START_SUNDAY, WEEK_START_MONDAY):
        raise ValueError(f"week_start must be 0 or 1, got {week_start}")

    ref = dt_today_local() if reference_date is None else parse_day_key(reference_date)

    anchor = MO(-1) if week_start == WEEK_START_MONDAY else SU(-1)
    week_begin = ref + relativedelta(weekday=anchor)

    offset = (weekday_index - week_start) % 7
    return week_begin + timedelta(days=offset)


# ==============================================================================
# Time-of-Day
# ==============================================================================


def parse_time_of_day(value: str | None) -> time | None:
    """Parse an "HH:MM" string into a `datetime.time`.

    Returns:
        Parsed time, or None if the value is empty or malformed.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), TIME_OF_DAY_FORMAT).time()
    except ValueError:
        _LOGGER.debug("Unparseable time of day: %s", value)
        return None


def minutes_between(start: str | None, end: str | None) -> int | None:
    """Return whole minutes from `start` to `end` ("HH:MM", same day).

    Returns:
        Positive minute count, or None if either side is unparseable or the
        end is not after the start.

    Examples:
        minutes_between("09:00", "10:30") → 90
        minutes_between("10:00", "09:00") → None
    """
    start_time = parse_time_of_day(start)
    end_time = parse_time_of_day(end)
    if start_time is None or end_time is None:
        return None

    start_minutes = start_time.hour * 60 + start_time.minute
    end_minutes = end_time.hour * 60 + end_time.minute
    if end_minutes <= start_minutes:
        return None
    return end_minutes - start_minutes
