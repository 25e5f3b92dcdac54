# File: utils/math_utils.py
"""Math and coercion utilities for Tracker Analytics.

Pure Python math functions.

⚠️ UTILS PURITY: this module must not import from `engines` or `helpers`.

Functions:
    - round_value: Consistent rounding to configured precision
    - clamp: Bound a value to a range
    - calculate_percentage: Ratio as a percentage with zero-target protection
    - to_whole_percentage: Round and clamp to an integer in [0, 100]
    - mean: Average of a sequence, 0.0 when empty
    - is_finite_number: Real, finite, non-boolean number check
    - coerce_number: Lenient numeric coercion with fallback
    - coerce_bool: Lenient boolean coercion for completion indicators
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
import math

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to keep utils free of package imports)
# ==============================================================================

DATA_FLOAT_PRECISION = 2

PERCENT_MIN = 0
PERCENT_MAX = 100

_TRUE_STRINGS = frozenset({"true", "t", "yes", "y", "1"})
_FALSE_STRINGS = frozenset({"false", "f", "no", "n", "0", ""})


# ==============================================================================
# Rounding / Percentages
# ==============================================================================


def round_value(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a value to the configured precision.

    Examples:
        round_value(33.3333) → 33.33
        round_value(10.0) → 10.0
    """
    return round(value, precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
        clamp(50, 0, 100) → 50
    """
    return max(min_val, min(value, max_val))


def calculate_percentage(
    current: float,
    target: float,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Calculate progress percentage with proper rounding.

    Not clamped; callers that need [0, 100] wrap this in `clamp`.

    Args:
        current: Current progress value
        target: Target/total value
        precision: Number of decimal places for rounding

    Returns:
        Percentage with proper rounding, or 0.0 if target is not positive

    Examples:
        calculate_percentage(50, 100) → 50.0
        calculate_percentage(1, 3) → 33.33
        calculate_percentage(5, 0) → 0.0
    """
    if target <= 0:
        return 0.0
    return round_value((current / target) * 100, precision)


def to_whole_percentage(value: float) -> int:
    """Round to the nearest integer percentage and clamp to [0, 100].

    Halves round up (42.5 → 43) to match how percentages are displayed.
    Non-finite input yields 0.

    Examples:
        to_whole_percentage(42.857) → 43
        to_whole_percentage(42.5) → 43
        to_whole_percentage(120.0) → 100
    """
    if not math.isfinite(value):
        return PERCENT_MIN
    return int(clamp(math.floor(value + 0.5), PERCENT_MIN, PERCENT_MAX))


def mean(values: Iterable[float]) -> float:
    """Return the arithmetic mean, or 0.0 for an empty iterable."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


# ==============================================================================
# Coercion
# ==============================================================================


def is_finite_number(value: object) -> bool:
    """Return True for int/float values that are finite (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def coerce_number(value: object, fallback: float = 0.0) -> float:
    """Coerce a stored value to a finite float.

    Numeric strings are parsed; anything else that is not a finite number
    (None, NaN, inf, garbage) becomes `fallback`.

    Examples:
        coerce_number("12.5") → 12.5
        coerce_number(None) → 0.0
        coerce_number(float("nan")) → 0.0
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return fallback
    if not isinstance(value, (int, float)):
        return fallback
    number = float(value)
    if not math.isfinite(number):
        return fallback
    return number


def coerce_bool(value: object) -> bool:
    """Coerce a stored completion indicator to a boolean.

    Stores are loose about booleans: accept True/False, 1/0, and the usual
    string spellings ("true", "t", "yes", "y", "1" and their negatives).
    Unknown strings are logged and treated as False.

    Examples:
        coerce_bool("Yes") → True
        coerce_bool(0) → False
        coerce_bool(None) → False
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized not in _FALSE_STRINGS:
            _LOGGER.debug("Unrecognized completion indicator %r, treating as False", value)
        return False
    return bool(value)
