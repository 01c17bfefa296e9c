# File: __init__.py
"""Fairness engines for shared-living duty management.

Members of a hostel or flat share chores and earn points for them. This
package ranks open chores for a member so the workload stays balanced, and
derives the stats, leaderboards and insights around that ranking. It performs
no I/O: callers fetch rows from their data layer and pass them in.
"""

from .engines import (
    FairnessConfigError,
    FairnessEngine,
    FairnessWeights,
    InsightsEngine,
    StatisticsEngine,
    auto_assign_tasks,
    calculate_fairness_score,
    calculate_task_recommendations,
)
from .helpers.recommendation_helpers import recommend_for_user

__version__ = "0.1.0"

__all__ = [
    "FairnessConfigError",
    "FairnessEngine",
    "FairnessWeights",
    "InsightsEngine",
    "StatisticsEngine",
    "auto_assign_tasks",
    "calculate_fairness_score",
    "calculate_task_recommendations",
    "recommend_for_user",
]
