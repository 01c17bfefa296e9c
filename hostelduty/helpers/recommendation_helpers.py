# File: helpers/recommendation_helpers.py
"""Assemble a fairness context from raw rows and rank open tasks.

The "pick a task" page and the "recommended for you" widget both fetch the
same four things (open tasks, the user's completed tasks, space members and
stored preferences) and turn them into scorer input the same way. This module
is that shared step, so the views only do I/O and rendering.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.fairness_engine import FairnessEngine, FairnessWeights
from ..engines.statistics_engine import StatisticsEngine
from .preference_helpers import parse_stored_preferences

if TYPE_CHECKING:
    from ..type_defs import (
        FairnessContext,
        MemberData,
        TaskData,
        TaskRecommendation,
    )


def build_fairness_context(
    user_id: str,
    space_id: str,
    completed_tasks: Sequence[TaskData],
    members: Sequence[MemberData],
    stored_preferences: str | Mapping[str, Any] | None = None,
) -> FairnessContext:
    """Build the scorer context for one user.

    Args:
        user_id: The requesting user
        space_id: The current space
        completed_tasks: The user's done tasks in the space, newest first
        members: space_members rows; the user's row supplies their points
        stored_preferences: Raw stored preference payload, if any
    """
    member = next(
        (m for m in members if m.get(const.DATA_MEMBER_USER_ID) == user_id), None
    )
    total_points = member.get(const.DATA_MEMBER_POINTS) if member else 0.0

    context: FairnessContext = {
        "user_id": user_id,
        "recent_tasks": list(completed_tasks[: const.RECENT_TASK_WINDOW]),
        "stats": StatisticsEngine.build_user_stats(
            user_id, space_id, completed_tasks, total_points=total_points or 0.0
        ),
    }
    preferences = parse_stored_preferences(stored_preferences)
    if preferences is not None:
        context["preferences"] = preferences
    return context


def recommend_for_user(
    open_tasks: Sequence[TaskData],
    completed_tasks: Sequence[TaskData],
    members: Sequence[MemberData],
    user_id: str,
    space_id: str,
    stored_preferences: str | Mapping[str, Any] | None = None,
    limit: int | None = None,
    weights: FairnessWeights | None = None,
) -> list[TaskRecommendation]:
    """Rank the space's open tasks for user_id.

    Args:
        open_tasks: Unassigned "todo" tasks of the space, newest first
        completed_tasks: The user's done tasks in the space, newest first
        members: space_members rows of the space
        user_id: The requesting user
        space_id: The current space
        stored_preferences: Raw stored preference payload, if any
        limit: Keep only the top N recommendations (the widget shows 3)
        weights: Scoring weights override

    Returns:
        Recommendations, top pick first.
    """
    if not open_tasks:
        return []

    context = build_fairness_context(
        user_id, space_id, completed_tasks, members, stored_preferences
    )
    roster = StatisticsEngine.build_roster_stats(members)
    recommendations = FairnessEngine.calculate_task_recommendations(
        open_tasks, context, roster, weights
    )

    const.LOGGER.debug(
        "Ranked %d open tasks for user %s in space %s",
        len(recommendations),
        user_id,
        space_id,
    )
    if limit is not None:
        return recommendations[: max(limit, 0)]
    return recommendations
