"""Analytics configuration schema and validation.

## Overview
Every tunable the engines take as a parameter (window length, week start,
required meal slots, achievement rule table) can be supplied by the caller as
a plain dict. This module validates such a dict with voluptuous and fills in
the `DEFAULT_*` constants for anything left out.

## Usage
    config = validate_analytics_config({"window_days": 14})
    report = build_analytics_report(snapshot, config=config)

Invalid input raises `vol.Invalid` (usually `vol.MultipleInvalid`); the
error path points at the offending key.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import voluptuous as vol

from .. import const

if TYPE_CHECKING:
    from ..type_defs import AchievementRule, AnalyticsConfig


# =============================================================================
# INPUT VALIDATION HELPERS
# =============================================================================


def validate_meal_slots(value: Any) -> list[str]:
    """Validate the required meal slot list.

    Args:
        value: List of slot names (a single string is accepted as one slot)

    Returns:
        Stripped, lower-cased, de-duplicated slot names in input order

    Raises:
        vol.Invalid: If the list is empty or contains a non-string/blank name
    """
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise vol.Invalid("Required meal slots must be a list of slot names")

    slots: list[str] = []
    for name in value:
        if not isinstance(name, str) or not name.strip():
            raise vol.Invalid(f"Invalid meal slot name: {name!r}")
        normalized = name.strip().lower()
        if normalized not in slots:
            slots.append(normalized)

    if not slots:
        raise vol.Invalid("At least one meal slot must be required")
    return slots


def validate_threshold(value: Any) -> int:
    """Validate an achievement threshold (whole percentage 0-100).

    Raises:
        vol.Invalid: If the value is not a number or out of range
    """
    if isinstance(value, bool):
        raise vol.Invalid("Threshold must be a number, not a boolean")
    try:
        threshold = int(value)
    except (TypeError, ValueError) as err:
        raise vol.Invalid(f"Invalid threshold: {value!r}") from err
    if not 0 <= threshold <= 100:
        raise vol.Invalid(f"Threshold must be between 0 and 100, got {threshold}")
    return threshold


def validate_rule_template(value: Any) -> str:
    """Validate an achievement title/subtitle template.

    The only placeholder a template may use is `{percentage}`; literal braces
    must be doubled (`{{` / `}}`).

    Raises:
        vol.Invalid: If the template is not a string or does not format
    """
    if not isinstance(value, str):
        raise vol.Invalid("Achievement text must be a string")
    try:
        value.format(percentage=0)
    except (KeyError, IndexError) as err:
        raise vol.Invalid(
            f"Unknown placeholder {err} in '{value}'. Only {{percentage}} is supported."
        ) from err
    except (AttributeError, TypeError, ValueError) as err:
        raise vol.Invalid(f"Malformed template '{value}': {err}") from err
    return value


# ----------------------------------------------------------------------------------
# ACHIEVEMENT RULE SCHEMA
# ----------------------------------------------------------------------------------

ACHIEVEMENT_RULE_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_RULE_CATEGORY): vol.In(const.CATEGORY_ORDER),
        vol.Required(const.DATA_RULE_THRESHOLD): validate_threshold,
        vol.Required(const.DATA_RULE_TITLE): vol.All(
            str, vol.Length(min=1), validate_rule_template
        ),
        vol.Optional(const.DATA_RULE_SUBTITLE): vol.Any(None, validate_rule_template),
    }
)

THRESHOLD_OVERRIDES_SCHEMA = vol.Schema({vol.In(const.CATEGORY_ORDER): validate_threshold})


# ----------------------------------------------------------------------------------
# ANALYTICS CONFIG SCHEMA
# ----------------------------------------------------------------------------------

ANALYTICS_CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(const.CONF_WINDOW_DAYS, default=const.DEFAULT_WINDOW_DAYS): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
        vol.Optional(const.CONF_WEEK_START, default=const.DEFAULT_WEEK_START): vol.All(
            vol.Coerce(int),
            vol.In([const.WEEK_START_SUNDAY, const.WEEK_START_MONDAY]),
        ),
        vol.Optional(
            const.CONF_REQUIRED_MEAL_SLOTS,
            default=list(const.DEFAULT_REQUIRED_MEAL_SLOTS),
        ): validate_meal_slots,
        vol.Optional(const.CONF_ACHIEVEMENT_RULES): [ACHIEVEMENT_RULE_SCHEMA],
        vol.Optional(const.CONF_THRESHOLD_OVERRIDES, default=dict): THRESHOLD_OVERRIDES_SCHEMA,
    }
)


# =============================================================================
# PUBLIC API
# =============================================================================


def apply_threshold_overrides(
    rules: list[AchievementRule],
    overrides: Mapping[str, int] | None,
) -> list[AchievementRule]:
    """Return a copy of `rules` with per-category thresholds replaced.

    Every rule of an overridden category takes the new threshold.
    """
    if not overrides:
        return [dict(rule) for rule in rules]  # type: ignore[misc]

    updated: list[AchievementRule] = []
    for rule in rules:
        copy: AchievementRule = dict(rule)  # type: ignore[assignment]
        category = rule.get(const.DATA_RULE_CATEGORY)
        if category in overrides:
            copy[const.DATA_RULE_THRESHOLD] = overrides[category]  # type: ignore[literal-required]
        updated.append(copy)
    return updated


def validate_analytics_config(raw: Mapping[str, Any] | None = None) -> AnalyticsConfig:
    """Validate a raw config dict and return a fully populated AnalyticsConfig.

    Args:
        raw: Caller-supplied options; None or {} yields the defaults

    Returns:
        AnalyticsConfig with window_days, week_start, required_meal_slots and
        achievement_rules (threshold overrides already applied)

    Raises:
        vol.Invalid: If any option is invalid
    """
    validated = ANALYTICS_CONFIG_SCHEMA(dict(raw or {}))

    rules = validated.get(const.CONF_ACHIEVEMENT_RULES)
    if rules is None:
        rules = [dict(rule) for rule in const.DEFAULT_ACHIEVEMENT_RULES]
    rules = apply_threshold_overrides(rules, validated[const.CONF_THRESHOLD_OVERRIDES])

    const.LOGGER.debug(
        "Analytics config: window %s day(s), week start %s, %s rule(s)",
        validated[const.CONF_WINDOW_DAYS],
        validated[const.CONF_WEEK_START],
        len(rules),
    )

    return {
        "window_days": validated[const.CONF_WINDOW_DAYS],
        "week_start": validated[const.CONF_WEEK_START],
        "required_meal_slots": validated[const.CONF_REQUIRED_MEAL_SLOTS],
        "achievement_rules": rules,
    }
