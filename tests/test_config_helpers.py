"""Tests for config_helpers - voluptuous validation of analytics options."""

from __future__ import annotations

from typing import Any

import pytest
import voluptuous as vol

from tracker_analytics import const
from tracker_analytics.helpers.config_helpers import (
    ANALYTICS_CONFIG_SCHEMA,
    apply_threshold_overrides,
    validate_analytics_config,
    validate_meal_slots,
    validate_rule_template,
    validate_threshold,
)


class TestDefaults:
    """Missing options take the DEFAULT_* constants."""

    def test_none_gives_defaults(self) -> None:
        """validate_analytics_config() is fully populated."""
        config = validate_analytics_config()

        assert config == {
            "window_days": const.DEFAULT_WINDOW_DAYS,
            "week_start": const.DEFAULT_WEEK_START,
            "required_meal_slots": ["breakfast", "lunch", "dinner"],
            "achievement_rules": [dict(rule) for rule in const.DEFAULT_ACHIEVEMENT_RULES],
        }

    def test_empty_dict_gives_defaults(self) -> None:
        """{} behaves like None."""
        assert validate_analytics_config({}) == validate_analytics_config(None)

    def test_validated_config_revalidates(self) -> None:
        """A validated config passes through unchanged."""
        config = validate_analytics_config({"window_days": 3, "week_start": 0})

        assert validate_analytics_config(config) == config


class TestOptions:
    """Individual option validation."""

    def test_window_days_coerced(self) -> None:
        """Numeric strings are coerced to int."""
        assert validate_analytics_config({"window_days": "14"})["window_days"] == 14

    @pytest.mark.parametrize("window_days", [0, -1, "abc"])
    def test_window_days_invalid(self, window_days: Any) -> None:
        """Window must be a whole number of days, at least 1."""
        with pytest.raises(vol.Invalid):
            validate_analytics_config({"window_days": window_days})

    def test_week_start_invalid(self) -> None:
        """Only Sunday (0) and Monday (1)."""
        with pytest.raises(vol.Invalid):
            validate_analytics_config({"week_start": 2})

    def test_meal_slots_normalized(self) -> None:
        """Slots are trimmed, lower-cased and de-duplicated."""
        config = validate_analytics_config(
            {"required_meal_slots": ["Breakfast", " lunch ", "breakfast"]}
        )

        assert config["required_meal_slots"] == ["breakfast", "lunch"]

    @pytest.mark.parametrize("slots", [[], ["  "], [3], 42])
    def test_meal_slots_invalid(self, slots: Any) -> None:
        """Empty lists and non-string names are rejected."""
        with pytest.raises(vol.Invalid):
            validate_meal_slots(slots)

    def test_single_slot_string(self) -> None:
        """A bare string is one slot."""
        assert validate_meal_slots("Dinner") == ["dinner"]

    def test_unknown_key_rejected(self) -> None:
        """Typos in option names are errors, not silently ignored."""
        with pytest.raises(vol.Invalid):
            ANALYTICS_CONFIG_SCHEMA({"windowdays": 7})


class TestAchievementRules:
    """Rule table and threshold overrides."""

    def test_custom_rules(self) -> None:
        """A valid custom table replaces the defaults."""
        rules = [{"category": "habits", "threshold": 60, "title": "Habit hero"}]

        config = validate_analytics_config({"achievement_rules": rules})

        assert config["achievement_rules"] == rules

    @pytest.mark.parametrize(
        "rule",
        [
            {"category": "workouts", "threshold": 50, "title": "Gym"},
            {"category": "habits", "threshold": 150, "title": "Too high"},
            {"category": "habits", "threshold": True, "title": "Bool"},
            {"category": "habits", "threshold": 50, "title": ""},
            {"category": "habits", "threshold": 50},
            {"category": "habits", "threshold": 50, "title": "Streak {days} kept"},
            {"category": "habits", "threshold": 50, "title": "Almost {"},
            {"category": "habits", "threshold": 50, "title": "Ok", "subtitle": "{0}%"},
        ],
    )
    def test_invalid_rule(self, rule: dict[str, Any]) -> None:
        """Unknown categories, bad thresholds, missing titles, unformattable text."""
        with pytest.raises(vol.Invalid):
            validate_analytics_config({"achievement_rules": [rule]})

    def test_threshold_overrides(self) -> None:
        """Overrides replace the threshold of the matching category only."""
        config = validate_analytics_config({"threshold_overrides": {"habits": 60}})
        thresholds = {
            rule["category"]: rule["threshold"] for rule in config["achievement_rules"]
        }

        assert thresholds[const.CATEGORY_HABITS] == 60
        assert thresholds[const.CATEGORY_ROUTINES] == const.DEFAULT_THRESHOLD_ROUTINES
        assert const.DEFAULT_ACHIEVEMENT_RULES[0]["threshold"] == const.DEFAULT_THRESHOLD_HABITS

    def test_override_unknown_category(self) -> None:
        """Overrides for unknown categories are rejected."""
        with pytest.raises(vol.Invalid):
            validate_analytics_config({"threshold_overrides": {"workouts": 60}})

    def test_apply_threshold_overrides_copies(self) -> None:
        """The input table is not mutated."""
        rules = [{"category": "meals", "threshold": 70, "title": "Healthy days"}]

        updated = apply_threshold_overrides(rules, {"meals": 40})

        assert updated[0]["threshold"] == 40
        assert rules[0]["threshold"] == 70

    def test_validate_threshold(self) -> None:
        """Thresholds coerce to whole percentages."""
        assert validate_threshold("75") == 75
        with pytest.raises(vol.Invalid):
            validate_threshold(-1)

    def test_rule_template_literal_braces(self) -> None:
        """Doubled braces and the percentage placeholder are accepted."""
        rules = [
            {
                "category": "habits",
                "threshold": 50,
                "title": "{{streak}} at {percentage}%",
                "subtitle": None,
            }
        ]

        config = validate_analytics_config({"achievement_rules": rules})

        assert config["achievement_rules"][0]["title"] == "{{streak}} at {percentage}%"

    def test_validate_rule_template(self) -> None:
        """Templates are trial-formatted with a percentage."""
        assert validate_rule_template("{percentage}% done") == "{percentage}% done"
        with pytest.raises(vol.Invalid, match="Only \\{percentage\\}"):
            validate_rule_template("Streak {days} kept")
        with pytest.raises(vol.Invalid):
            validate_rule_template(42)
