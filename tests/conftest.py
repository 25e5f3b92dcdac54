"""Shared fixtures for Tracker Analytics tests.

All fixtures are anchored on REFERENCE_DAY (Wednesday 2024-06-05) so the
expected numbers can be worked out by hand:

    habit     2024-06-01..03 done, 06-04 not done    → 3/7 in window = 43%
    routine   06-04 and 06-05 fully done, 06-03 half  → 2/7 days     = 29%
    goal      75 + 50 of 100 minutes                  → 100%
    project   2 of 4 milestones completed             → 50%
    meals     06-04 complete, 06-05 breakfast only    → 1/2 days     = 50%
"""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from tracker_analytics import const
from tracker_analytics.utils import dt_utils

REFERENCE_DAY = date(2024, 6, 5)
REFERENCE_KEY = "2024-06-05"


@pytest.fixture
def reference_day() -> date:
    """Return the fixed "today" used across tests (a Wednesday)."""
    return REFERENCE_DAY


@pytest.fixture
def restore_default_timezone() -> Any:
    """Restore the module-level default timezone after a test changes it."""
    original = dt_utils.get_default_timezone()
    yield
    dt_utils.set_default_timezone(original)


@pytest.fixture
def habit() -> dict[str, Any]:
    """Habit done three days running, then missed yesterday."""
    return {
        const.DATA_ITEM_ID: "habit-1",
        const.DATA_ITEM_KIND: const.ITEM_KIND_HABIT,
        const.DATA_ITEM_NAME: "Drink water",
        const.DATA_HABIT_COMPLETIONS: {
            "2024-06-01": True,
            "2024-06-02": True,
            "2024-06-03": True,
            "2024-06-04": False,
        },
    }


@pytest.fixture
def routine() -> dict[str, Any]:
    """Four-subtask routine, complete today and yesterday."""
    return {
        const.DATA_ITEM_ID: "routine-1",
        const.DATA_ITEM_KIND: const.ITEM_KIND_ROUTINE,
        const.DATA_ITEM_NAME: "Morning routine",
        const.DATA_ROUTINE_SUBTASKS: [
            {const.DATA_SUBTASK_ID: "a", const.DATA_SUBTASK_NAME: "Stretch"},
            {const.DATA_SUBTASK_ID: "b", const.DATA_SUBTASK_NAME: "Shower"},
            {const.DATA_SUBTASK_ID: "c", const.DATA_SUBTASK_NAME: "Breakfast"},
            {const.DATA_SUBTASK_ID: "d", const.DATA_SUBTASK_NAME: "Plan day"},
        ],
        const.DATA_ROUTINE_COMPLETIONS: {
            "2024-06-03": {"a": True, "b": True, "c": False, "d": False},
            "2024-06-04": ["a", "b", "c", "d"],
            "2024-06-05": ["d", "c", "b", "a"],
        },
    }


@pytest.fixture
def learning_goal() -> dict[str, Any]:
    """Time-based goal that has overshot its target."""
    return {
        const.DATA_ITEM_ID: "goal-1",
        const.DATA_ITEM_KIND: const.ITEM_KIND_GOAL,
        const.DATA_ITEM_NAME: "Learn React",
        const.DATA_GOAL_TARGET_AMOUNT: 100,
        const.DATA_GOAL_UNIT: "minutes",
        const.DATA_GOAL_ENTRIES: {
            "2024-06-01": {const.DATA_ENTRY_VALUE: 75, const.DATA_ENTRY_NOTES: ""},
            "2024-06-02": {const.DATA_ENTRY_VALUE: 50},
        },
    }


@pytest.fixture
def project() -> dict[str, Any]:
    """Project with half of its milestones completed."""
    return {
        const.DATA_ITEM_ID: "project-1",
        const.DATA_ITEM_KIND: const.ITEM_KIND_PROJECT,
        const.DATA_ITEM_NAME: "Portfolio site",
        const.DATA_PROJECT_MILESTONES: [
            {
                "id": "m1",
                "name": "Design",
                const.DATA_MILESTONE_STATUS: "completed",
                const.DATA_MILESTONE_DUE_DATE: "2024-05-20",
            },
            {
                "id": "m2",
                "name": "Build",
                const.DATA_MILESTONE_STATUS: "Done",
                const.DATA_MILESTONE_DUE_DATE: "2024-06-01",
            },
            {
                "id": "m3",
                "name": "Deploy",
                const.DATA_MILESTONE_STATUS: "In Progress",
                const.DATA_MILESTONE_DUE_DATE: "2024-06-10",
            },
            {
                "id": "m4",
                "name": "Launch post",
                const.DATA_MILESTONE_STATUS: "todo",
            },
        ],
    }


@pytest.fixture
def meal_log() -> dict[str, Any]:
    """Meal log with one complete day and one partial day."""
    return {
        const.DATA_ITEM_ID: "meals-1",
        const.DATA_ITEM_KIND: const.ITEM_KIND_MEAL_DAY,
        const.DATA_MEAL_ENTRIES: {
            "2024-06-04": {
                "breakfast": {
                    const.DATA_MEAL_SLOT_LOGGED: True,
                    const.DATA_MEAL_SLOT_CATEGORY: "Healthy",
                    "details": "Oatmeal",
                },
                "lunch": {
                    const.DATA_MEAL_SLOT_LOGGED: True,
                    const.DATA_MEAL_SLOT_CATEGORY: "healthy",
                },
                "dinner": {
                    const.DATA_MEAL_SLOT_LOGGED: True,
                    const.DATA_MEAL_SLOT_CATEGORY: "Comfort",
                },
                "snack": {const.DATA_MEAL_SLOT_LOGGED: False},
            },
            "2024-06-05": {
                "breakfast": {
                    const.DATA_MEAL_SLOT_LOGGED: True,
                    const.DATA_MEAL_SLOT_CATEGORY: "Healthy",
                },
                "lunch": {
                    const.DATA_MEAL_SLOT_LOGGED: False,
                    const.DATA_MEAL_SLOT_CATEGORY: "Junk",
                },
            },
        },
    }


@pytest.fixture
def snapshot(
    habit: dict[str, Any],
    routine: dict[str, Any],
    learning_goal: dict[str, Any],
    project: dict[str, Any],
    meal_log: dict[str, Any],
) -> dict[str, Any]:
    """Full tracker snapshot with one item per category."""
    return {
        const.SNAPSHOT_HABITS: [habit],
        const.SNAPSHOT_ROUTINES: [routine],
        const.SNAPSHOT_LEARNING_GOALS: [learning_goal],
        const.SNAPSHOT_PROJECTS: [project],
        const.SNAPSHOT_MEAL_LOGS: [meal_log],
    }
