# File: const.py
"""Constants for the Tracker Analytics engine.

This file centralizes data keys, item kinds, category identifiers, defaults
and the achievement rule table for consistency across the engines. Every
tunable number lives here so it can be overridden through configuration
without touching the algorithms.
"""

import logging
from typing import Final

# ------------------------------------------------------------------------------------------------
# General
# ------------------------------------------------------------------------------------------------
# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Tracked Item Kinds
# ------------------------------------------------------------------------------------------------
ITEM_KIND_HABIT = "habit"
ITEM_KIND_ROUTINE = "routine"
ITEM_KIND_GOAL = "goal"
ITEM_KIND_PROJECT = "project"
ITEM_KIND_MEAL_DAY = "meal_day"

# ------------------------------------------------------------------------------------------------
# Categories (one aggregate per category)
# ------------------------------------------------------------------------------------------------
CATEGORY_HABITS = "habits"
CATEGORY_LEARNING = "learning"
CATEGORY_PROJECTS = "projects"
CATEGORY_ROUTINES = "routines"
CATEGORY_MEALS = "meals"

# Evaluation and display order
CATEGORY_ORDER: Final = (
    CATEGORY_HABITS,
    CATEGORY_LEARNING,
    CATEGORY_PROJECTS,
    CATEGORY_ROUTINES,
    CATEGORY_MEALS,
)

CATEGORY_KIND_MAP: Final[dict[str, str]] = {
    CATEGORY_HABITS: ITEM_KIND_HABIT,
    CATEGORY_LEARNING: ITEM_KIND_GOAL,
    CATEGORY_PROJECTS: ITEM_KIND_PROJECT,
    CATEGORY_ROUTINES: ITEM_KIND_ROUTINE,
    CATEGORY_MEALS: ITEM_KIND_MEAL_DAY,
}

CATEGORY_LABELS: Final[dict[str, str]] = {
    CATEGORY_HABITS: "Daily Tasks",
    CATEGORY_LEARNING: "Learning",
    CATEGORY_PROJECTS: "Projects",
    CATEGORY_ROUTINES: "Routines",
    CATEGORY_MEALS: "Meals",
}

# ------------------------------------------------------------------------------------------------
# Snapshot Keys (input bundle for a full report)
# ------------------------------------------------------------------------------------------------
SNAPSHOT_HABITS = "habits"
SNAPSHOT_ROUTINES = "routines"
SNAPSHOT_LEARNING_GOALS = "learning_goals"
SNAPSHOT_PROJECTS = "projects"
SNAPSHOT_MEAL_LOGS = "meal_logs"

CATEGORY_SNAPSHOT_MAP: Final[dict[str, str]] = {
    CATEGORY_HABITS: SNAPSHOT_HABITS,
    CATEGORY_LEARNING: SNAPSHOT_LEARNING_GOALS,
    CATEGORY_PROJECTS: SNAPSHOT_PROJECTS,
    CATEGORY_ROUTINES: SNAPSHOT_ROUTINES,
    CATEGORY_MEALS: SNAPSHOT_MEAL_LOGS,
}

# ------------------------------------------------------------------------------------------------
# Item Data Keys
# ------------------------------------------------------------------------------------------------
DATA_ITEM_ID = "id"
DATA_ITEM_KIND = "kind"
DATA_ITEM_NAME = "name"

# Habit
DATA_HABIT_COMPLETIONS = "completions"

# Routine
DATA_ROUTINE_SUBTASKS = "subtasks"
DATA_ROUTINE_COMPLETIONS = "completions"
DATA_SUBTASK_ID = "id"
DATA_SUBTASK_NAME = "name"

# Learning goal
DATA_GOAL_TARGET_AMOUNT = "target_amount"
DATA_GOAL_UNIT = "unit"
DATA_GOAL_ENTRIES = "entries"
DATA_ENTRY_VALUE = "value"
DATA_ENTRY_NOTES = "notes"

# Project
DATA_PROJECT_MILESTONES = "milestones"
DATA_MILESTONE_STATUS = "status"
DATA_MILESTONE_DUE_DATE = "due_date"

# Meal log
DATA_MEAL_ENTRIES = "entries"
DATA_MEAL_SLOT_LOGGED = "logged"
DATA_MEAL_SLOT_CATEGORY = "category"

# Time block (external scheduling feature)
DATA_TIME_BLOCK_ID = "id"
DATA_TIME_BLOCK_DAY = "day"
DATA_TIME_BLOCK_START_TIME = "start_time"
DATA_TIME_BLOCK_END_TIME = "end_time"
DATA_TIME_BLOCK_TASK_NAME = "task_name"
DATA_TIME_BLOCK_IS_COMPLETED = "is_completed"
DATA_TIME_BLOCK_LINKED_GOAL_ID = "linked_goal_id"

# ------------------------------------------------------------------------------------------------
# Completion Status
# ------------------------------------------------------------------------------------------------
COMPLETION_STATUS_COMPLETE = "complete"
COMPLETION_STATUS_PARTIAL = "partial"
COMPLETION_STATUS_INCOMPLETE = "incomplete"

# ------------------------------------------------------------------------------------------------
# Milestone Status
# ------------------------------------------------------------------------------------------------
MILESTONE_STATUS_TODO = "todo"
MILESTONE_STATUS_IN_PROGRESS = "in-progress"
MILESTONE_STATUS_COMPLETED = "completed"
MILESTONE_STATUS_DELAYED = "delayed"

# Quick-cycle order used by the milestone status toggle
MILESTONE_STATUS_CYCLE: Final = (
    MILESTONE_STATUS_TODO,
    MILESTONE_STATUS_IN_PROGRESS,
    MILESTONE_STATUS_COMPLETED,
    MILESTONE_STATUS_DELAYED,
)

DEFAULT_NEXT_UP_MILESTONE_LIMIT = 3

# ------------------------------------------------------------------------------------------------
# Meals
# ------------------------------------------------------------------------------------------------
MEAL_SLOT_BREAKFAST = "breakfast"
MEAL_SLOT_LUNCH = "lunch"
MEAL_SLOT_DINNER = "dinner"

# Snack and other slots are optional and never required for a complete day
DEFAULT_REQUIRED_MEAL_SLOTS: Final = (
    MEAL_SLOT_BREAKFAST,
    MEAL_SLOT_LUNCH,
    MEAL_SLOT_DINNER,
)

TALLY_NO_DATA = "No data"

# ------------------------------------------------------------------------------------------------
# Time-Block Sync
# ------------------------------------------------------------------------------------------------
TIME_BASED_UNITS: Final = ("minute", "minutes", "hour", "hours")
SYNC_NOTE_TEMPLATE = "+{minutes}min from time block: {task_name}"

# ------------------------------------------------------------------------------------------------
# Windows & Calendar
# ------------------------------------------------------------------------------------------------
WEEK_START_SUNDAY = 0
WEEK_START_MONDAY = 1

DEFAULT_WINDOW_DAYS = 7
DEFAULT_WEEK_START = WEEK_START_MONDAY

# ------------------------------------------------------------------------------------------------
# Achievements
# ------------------------------------------------------------------------------------------------
DATA_RULE_CATEGORY = "category"
DATA_RULE_THRESHOLD = "threshold"
DATA_RULE_TITLE = "title"
DATA_RULE_SUBTITLE = "subtitle"

DEFAULT_THRESHOLD_HABITS = 70
DEFAULT_THRESHOLD_LEARNING = 50
DEFAULT_THRESHOLD_PROJECTS = 50
DEFAULT_THRESHOLD_ROUTINES = 80
DEFAULT_THRESHOLD_MEALS = 70

# Templates are formatted with {percentage}
DEFAULT_ACHIEVEMENT_RULES: Final = (
    {
        DATA_RULE_CATEGORY: CATEGORY_HABITS,
        DATA_RULE_THRESHOLD: DEFAULT_THRESHOLD_HABITS,
        DATA_RULE_TITLE: "Consistent: {percentage}% habits",
        DATA_RULE_SUBTITLE: "Good job!",
    },
    {
        DATA_RULE_CATEGORY: CATEGORY_LEARNING,
        DATA_RULE_THRESHOLD: DEFAULT_THRESHOLD_LEARNING,
        DATA_RULE_TITLE: "{percentage}% learning goal",
        DATA_RULE_SUBTITLE: "Keep going!",
    },
    {
        DATA_RULE_CATEGORY: CATEGORY_PROJECTS,
        DATA_RULE_THRESHOLD: DEFAULT_THRESHOLD_PROJECTS,
        DATA_RULE_TITLE: "Project momentum",
        DATA_RULE_SUBTITLE: "Milestones being completed",
    },
    {
        DATA_RULE_CATEGORY: CATEGORY_ROUTINES,
        DATA_RULE_THRESHOLD: DEFAULT_THRESHOLD_ROUTINES,
        DATA_RULE_TITLE: "Routine adherence",
        DATA_RULE_SUBTITLE: "{percentage}%",
    },
    {
        DATA_RULE_CATEGORY: CATEGORY_MEALS,
        DATA_RULE_THRESHOLD: DEFAULT_THRESHOLD_MEALS,
        DATA_RULE_TITLE: "Healthy days",
        DATA_RULE_SUBTITLE: "{percentage}% complete",
    },
)

ACHIEVEMENT_PLACEHOLDER_TITLE = "No recent achievements"
ACHIEVEMENT_PLACEHOLDER_SUBTITLE = "Start logging to see achievements"

TREND_NO_CHANGE = "+0%"

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_WINDOW_DAYS = "window_days"
CONF_WEEK_START = "week_start"
CONF_REQUIRED_MEAL_SLOTS = "required_meal_slots"
CONF_ACHIEVEMENT_RULES = "achievement_rules"
CONF_THRESHOLD_OVERRIDES = "threshold_overrides"
