"""Type definitions for hostelduty data structures.

TypedDict is used for structures whose keys are fixed at design time (tasks,
stats rows, recommendation output). The engines receive these as plain dicts
straight from the data layer, so nothing here is enforced at runtime: the
engines still use .get() defaults and normalize bad values themselves.

IMPORTANT: This file must only import from typing. Engines and helpers import
it under TYPE_CHECKING.
"""

from typing import Any, Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

TaskId = str  # UUID string
UserId = str  # UUID string
SpaceId = str  # UUID string
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"

TaskCategory = Literal[
    "washroom",
    "sweeping",
    "kitchen",
    "trash",
    "dusting",
    "laundry",
    "dishes",
    "other",
]
TaskStatus = Literal["todo", "in_progress", "pending_verification", "done"]
DifficultyBand = Literal["easy", "medium", "hard"]


# =============================================================================
# Tasks and Members
# =============================================================================


class TaskData(TypedDict):
    """A chore row as delivered by the task store.

    Only unassigned tasks with status "todo" are scoring candidates.
    """

    id: TaskId
    space_id: SpaceId
    title: str
    category: TaskCategory
    difficulty: int  # 1-10, also the points awarded
    status: TaskStatus
    assigned_to: UserId | None
    due_date: NotRequired[ISODatetime | None]
    created_at: NotRequired[ISODatetime]


class MemberData(TypedDict):
    """A space_members row."""

    user_id: UserId
    space_id: SpaceId
    points: float
    role: NotRequired[str]
    username: NotRequired[str | None]


# =============================================================================
# Fairness Inputs
# =============================================================================


class FairnessStats(TypedDict):
    """Per-user, per-space snapshot derived from task history."""

    user_id: UserId
    space_id: SpaceId
    total_points: float
    tasks_completed: int
    easy_tasks: int  # difficulty <= 3
    medium_tasks: int  # difficulty 4-6
    hard_tasks: int  # difficulty > 6
    avg_difficulty: float
    last_task_date: ISODatetime | None


class Preferences(TypedDict):
    """Category preferences chosen by the user."""

    preferred_categories: list[TaskCategory]
    avoided_categories: list[TaskCategory]


class FairnessContext(TypedDict):
    """Everything the scorer knows about the requesting user."""

    user_id: UserId
    recent_tasks: list[TaskData]  # <= 10, most recent first
    stats: FairnessStats
    preferences: NotRequired[Preferences | None]


# =============================================================================
# Outputs
# =============================================================================


class TaskRecommendation(TypedDict):
    """One scored candidate.

    task is the very object passed in; consumers read task["id"] to claim it.
    """

    task: TaskData
    score: float  # 0-100
    reason: str
    factors: dict[str, float]


class LeaderboardEntry(TypedDict):
    """A ranked member row."""

    user_id: UserId
    username: str
    points: float
    tasks_completed: int
    rank: int


class Insight(TypedDict):
    """A space-level observation surfaced to members."""

    type: Literal["prediction", "anomaly", "suggestion"]
    title: str
    description: str
    confidence: float  # 0-1
    action: Literal["create_task", "remind_user"]
    related_user_id: NotRequired[UserId]
    metadata: NotRequired[dict[str, Any]]
