# File: const.py
"""Constants for the hostelduty fairness engines.

This file centralizes data keys, task categories, difficulty bands, default
scoring weights, reason texts and insight thresholds so the engines and
helpers share a single source of truth.
"""

import logging
from typing import Final

# ------------------------------------------------------------------------------------------------
# General
# ------------------------------------------------------------------------------------------------
# Logger
LOGGER = logging.getLogger(__package__)

# Default float precision for score and point rounding
DATA_FLOAT_PRECISION = 2

# ------------------------------------------------------------------------------------------------
# Task Keys
# ------------------------------------------------------------------------------------------------
DATA_TASK_ID = "id"
DATA_TASK_SPACE_ID = "space_id"
DATA_TASK_TITLE = "title"
DATA_TASK_CATEGORY = "category"
DATA_TASK_DIFFICULTY = "difficulty"
DATA_TASK_STATUS = "status"
DATA_TASK_ASSIGNED_TO = "assigned_to"
DATA_TASK_DUE_DATE = "due_date"
DATA_TASK_CREATED_AT = "created_at"

# Task Statuses
TASK_STATUS_TODO = "todo"
TASK_STATUS_IN_PROGRESS = "in_progress"
TASK_STATUS_PENDING_VERIFICATION = "pending_verification"
TASK_STATUS_DONE = "done"

# ------------------------------------------------------------------------------------------------
# Task Categories
# ------------------------------------------------------------------------------------------------
CATEGORY_WASHROOM = "washroom"
CATEGORY_SWEEPING = "sweeping"
CATEGORY_KITCHEN = "kitchen"
CATEGORY_TRASH = "trash"
CATEGORY_DUSTING = "dusting"
CATEGORY_LAUNDRY = "laundry"
CATEGORY_DISHES = "dishes"
CATEGORY_OTHER = "other"

TASK_CATEGORIES: Final[tuple[str, ...]] = (
    CATEGORY_WASHROOM,
    CATEGORY_SWEEPING,
    CATEGORY_KITCHEN,
    CATEGORY_TRASH,
    CATEGORY_DUSTING,
    CATEGORY_LAUNDRY,
    CATEGORY_DISHES,
    CATEGORY_OTHER,
)

TASK_CATEGORY_LABELS: Final[dict[str, str]] = {
    CATEGORY_WASHROOM: "Washroom",
    CATEGORY_SWEEPING: "Sweeping",
    CATEGORY_KITCHEN: "Kitchen",
    CATEGORY_TRASH: "Trash",
    CATEGORY_DUSTING: "Dusting",
    CATEGORY_LAUNDRY: "Laundry",
    CATEGORY_DISHES: "Dishes",
    CATEGORY_OTHER: "Other",
}

# ------------------------------------------------------------------------------------------------
# Difficulty Bands
# ------------------------------------------------------------------------------------------------
DIFFICULTY_MIN = 1
DIFFICULTY_MAX = 10

# Upper bounds (inclusive) of the easy and medium bands; anything above is hard
DIFFICULTY_EASY_MAX = 3
DIFFICULTY_MEDIUM_MAX = 6

DIFFICULTY_BAND_EASY = "easy"
DIFFICULTY_BAND_MEDIUM = "medium"
DIFFICULTY_BAND_HARD = "hard"

DIFFICULTY_BAND_LABELS: Final[dict[str, str]] = {
    DIFFICULTY_BAND_EASY: "Easy",
    DIFFICULTY_BAND_MEDIUM: "Medium",
    DIFFICULTY_BAND_HARD: "Hard",
}

# ------------------------------------------------------------------------------------------------
# Fairness Stats Keys
# ------------------------------------------------------------------------------------------------
DATA_STATS_USER_ID = "user_id"
DATA_STATS_SPACE_ID = "space_id"
DATA_STATS_TOTAL_POINTS = "total_points"
DATA_STATS_TASKS_COMPLETED = "tasks_completed"
DATA_STATS_EASY_TASKS = "easy_tasks"
DATA_STATS_MEDIUM_TASKS = "medium_tasks"
DATA_STATS_HARD_TASKS = "hard_tasks"
DATA_STATS_AVG_DIFFICULTY = "avg_difficulty"
DATA_STATS_LAST_TASK_DATE = "last_task_date"

# Member Keys (space_members rows)
DATA_MEMBER_USER_ID = "user_id"
DATA_MEMBER_SPACE_ID = "space_id"
DATA_MEMBER_POINTS = "points"
DATA_MEMBER_ROLE = "role"
DATA_MEMBER_USERNAME = "username"

DEFAULT_MEMBER_NAME = "Member"

# ------------------------------------------------------------------------------------------------
# Fairness Context / Preferences
# ------------------------------------------------------------------------------------------------
CONTEXT_USER_ID = "user_id"
CONTEXT_RECENT_TASKS = "recent_tasks"
CONTEXT_STATS = "stats"
CONTEXT_PREFERENCES = "preferences"

PREF_PREFERRED_CATEGORIES = "preferred_categories"
PREF_AVOIDED_CATEGORIES = "avoided_categories"

# Keys of the client-side stored preference payload
PREF_STORED_PREFERRED = "preferred"
PREF_STORED_AVOIDED = "avoided"
PREF_STORAGE_KEY_TEMPLATE = "prefs_{space_id}_{user_id}"

# Size of the recent task window handed to the scorer
RECENT_TASK_WINDOW = 10

# Number of recommendations shown by the compact widget
DEFAULT_WIDGET_RECOMMENDATIONS = 3

# ------------------------------------------------------------------------------------------------
# Scoring Factors
# ------------------------------------------------------------------------------------------------
# Also the keys of a recommendation's "factors" breakdown
FACTOR_WORKLOAD = "workload"
FACTOR_ROTATION = "rotation"
FACTOR_REPETITION = "repetition"
FACTOR_PREFERENCE = "preference"

# Tie-break order for task-specific reason selection (first wins)
REASON_FACTOR_PRIORITY: Final[tuple[str, ...]] = (
    FACTOR_ROTATION,
    FACTOR_REPETITION,
    FACTOR_PREFERENCE,
)

# ------------------------------------------------------------------------------------------------
# Reason Texts
# ------------------------------------------------------------------------------------------------
REASON_WORKLOAD = "Balances your workload"
REASON_ROTATION = "Nice change of pace"
REASON_REPETITION = "You haven't done this in a while"
REASON_PREFERENCE = "Matches your preference"
REASON_GETTING_STARTED = "Great way to get started"
REASON_AVAILABLE = "Available for you"

FACTOR_REASONS: Final[dict[str, str]] = {
    FACTOR_WORKLOAD: REASON_WORKLOAD,
    FACTOR_ROTATION: REASON_ROTATION,
    FACTOR_REPETITION: REASON_REPETITION,
    FACTOR_PREFERENCE: REASON_PREFERENCE,
}

# ------------------------------------------------------------------------------------------------
# Scoring Weights
# ------------------------------------------------------------------------------------------------
CONF_WEIGHT_BASE = "base"
CONF_WEIGHT_WORKLOAD_MAX = "workload_max"
CONF_WEIGHT_WORKLOAD_SCALE = "workload_scale"
CONF_WEIGHT_ROTATION_BONUS = "rotation_bonus"
CONF_WEIGHT_REPETITION_PENALTY = "repetition_penalty"
CONF_WEIGHT_PREFERENCE_BONUS = "preference_bonus"
CONF_WEIGHT_AVOIDANCE_PENALTY = "avoidance_penalty"

DEFAULT_WEIGHT_BASE = 50.0
DEFAULT_WEIGHT_WORKLOAD_MAX = 20.0
# Point deficit at which the workload push reaches half its maximum
DEFAULT_WEIGHT_WORKLOAD_SCALE = 40.0
DEFAULT_WEIGHT_ROTATION_BONUS = 15.0
DEFAULT_WEIGHT_REPETITION_PENALTY = 10.0
DEFAULT_WEIGHT_PREFERENCE_BONUS = 5.0
DEFAULT_WEIGHT_AVOIDANCE_PENALTY = 5.0

SCORE_MIN = 0.0
SCORE_MAX = 100.0

# ------------------------------------------------------------------------------------------------
# Fairness Score
# ------------------------------------------------------------------------------------------------
FAIRNESS_SCORE_PERFECT = 100
FAIRNESS_DEVIATION_FACTOR = 50
FAIRNESS_POINTS_WEIGHT = 0.6
FAIRNESS_DIFFICULTY_WEIGHT = 0.4

# ------------------------------------------------------------------------------------------------
# Insights
# ------------------------------------------------------------------------------------------------
INSIGHT_TYPE_PREDICTION = "prediction"
INSIGHT_TYPE_ANOMALY = "anomaly"
INSIGHT_TYPE_SUGGESTION = "suggestion"

INSIGHT_ACTION_CREATE_TASK = "create_task"
INSIGHT_ACTION_REMIND_USER = "remind_user"

INSIGHT_TYPE = "type"
INSIGHT_TITLE = "title"
INSIGHT_DESCRIPTION = "description"

# A category is "due" once its gap exceeds the usual gap by this factor
INSIGHT_CATEGORY_OVERDUE_FACTOR = 1.2
INSIGHT_FALLING_BEHIND_RATIO = 0.7
INSIGHT_INACTIVITY_DAYS = 7

INSIGHT_CONFIDENCE_PREDICTION = 0.8
INSIGHT_CONFIDENCE_FALLING_BEHIND = 0.9
INSIGHT_CONFIDENCE_INACTIVITY = 0.7
