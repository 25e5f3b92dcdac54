"""Achievement Engine - Threshold rules over category percentages.

This engine provides stateless, pure Python functions for:
- Evaluating the achievement rule table against category percentages
- The single "no recent activity" placeholder when nothing fires
- Category trend rows with a signed change versus a previous window

Rules are data, not code: the default table lives in const and any caller can
pass its own (see helpers.config_helpers for validation).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.math_utils import to_whole_percentage

if TYPE_CHECKING:
    from ..type_defs import Achievement, AchievementRule, TrendRow


class AchievementEngine:
    """Pure logic engine for achievements and trends.

    All methods are static - no instance state. Achievements are derived on
    every request and never persisted.
    """

    @staticmethod
    def default_rules() -> list[AchievementRule]:
        """Return a fresh copy of the default rule table."""
        return [dict(rule) for rule in const.DEFAULT_ACHIEVEMENT_RULES]  # type: ignore[misc]

    @staticmethod
    def order_rules(rules: Sequence[AchievementRule]) -> list[AchievementRule]:
        """Order rules by category order, keeping table order within a category.

        Rules for categories outside const.CATEGORY_ORDER go last.
        """
        rank = {category: index for index, category in enumerate(const.CATEGORY_ORDER)}
        return sorted(
            rules,
            key=lambda rule: rank.get(rule.get(const.DATA_RULE_CATEGORY), len(rank)),
        )

    @classmethod
    def derive(
        cls,
        percentages: Mapping[str, Any],
        rules: Sequence[AchievementRule] | None = None,
    ) -> list[Achievement]:
        """Emit one achievement per rule whose category meets its threshold.

        Args:
            percentages: Category id → completion percentage
            rules: Rule table. Defaults to const.DEFAULT_ACHIEVEMENT_RULES.

        Returns:
            Achievements in category order, or exactly one placeholder when
            no rule fires.

        Example:
            derive({"habits": 85, "learning": 20})
            # [{"title": "Consistent: 85% habits", "subtitle": "Good job!",
            #   "threshold_met": "habits"}]
        """
        rule_table = cls.default_rules() if rules is None else list(rules)

        achievements: list[Achievement] = []
        for rule in cls.order_rules(rule_table):
            category = rule.get(const.DATA_RULE_CATEGORY)
            if category not in percentages:
                const.LOGGER.debug("No percentage for rule category %s, skipping", category)
                continue

            percentage = to_whole_percentage(float(percentages[category] or 0))
            if percentage < rule.get(const.DATA_RULE_THRESHOLD, 0):
                continue

            achievements.append(cls._make_achievement(rule, percentage))

        if not achievements:
            return [cls.placeholder()]
        return achievements

    @staticmethod
    def placeholder() -> Achievement:
        """The single achievement shown when nothing has been earned."""
        return {
            "title": const.ACHIEVEMENT_PLACEHOLDER_TITLE,
            "subtitle": const.ACHIEVEMENT_PLACEHOLDER_SUBTITLE,
            "threshold_met": None,
        }

    @staticmethod
    def build_trends(
        current: Mapping[str, Any],
        previous: Mapping[str, Any] | None = None,
    ) -> list[TrendRow]:
        """Build one trend row per category in category order.

        `change` is the signed difference to the previous window's percentage
        ("+5%", "-12%"), or "+0%" when no previous value is known.
        """
        rows: list[TrendRow] = []
        for category in const.CATEGORY_ORDER:
            completion = to_whole_percentage(float(current.get(category) or 0))
            if previous is None or category not in previous:
                change = const.TREND_NO_CHANGE
            else:
                delta = completion - to_whole_percentage(float(previous[category] or 0))
                change = f"{delta:+d}%"
            rows.append(
                {
                    "category_id": category,
                    "label": const.CATEGORY_LABELS[category],
                    "completion": completion,
                    "change": change,
                }
            )
        return rows

    @staticmethod
    def _format_template(template: str, percentage: int) -> str:
        """Fill `{percentage}` into a rule template.

        Templates that do not format (unknown placeholder, stray brace) are
        shown as written and logged.
        """
        try:
            return template.format(percentage=percentage)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as err:
            const.LOGGER.warning(
                "Achievement template %r does not format (%s); using it as-is",
                template,
                err,
            )
            return template

    @classmethod
    def _make_achievement(cls, rule: AchievementRule, percentage: int) -> Achievement:
        """Format a rule's templates with the category percentage."""
        title = cls._format_template(rule.get(const.DATA_RULE_TITLE, ""), percentage)
        subtitle_template = rule.get(const.DATA_RULE_SUBTITLE)
        subtitle = (
            cls._format_template(subtitle_template, percentage)
            if subtitle_template
            else None
        )
        return {
            "title": title,
            "subtitle": subtitle,
            "threshold_met": rule.get(const.DATA_RULE_CATEGORY),
        }
