# File: utils/__init__.py
"""Pure Python utilities for Tracker Analytics.

⚠️ UTILS PURITY: no imports from `engines` or `helpers` allowed in this module.

Submodules:
    - dt_utils: Day keys, calendar arithmetic, weekday resolution, time of day
    - math_utils: Rounding, clamping, percentages, lenient coercion

Usage:
    from . import dt_utils
    from .math_utils import clamp
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
