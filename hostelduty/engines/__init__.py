"""Engine modules for hostelduty.

Contains specialized computation engines:
- fairness_engine: Task recommendations, fairness score, auto-assignment
- statistics_engine: Fairness stats derivation and leaderboard ranking
- insights_engine: Category predictions and member activity insights
"""

from .fairness_engine import (
    DEFAULT_WEIGHTS,
    FairnessConfigError,
    FairnessEngine,
    FairnessWeights,
    auto_assign_tasks,
    calculate_fairness_score,
    calculate_task_recommendations,
)
from .insights_engine import InsightsEngine
from .statistics_engine import StatisticsEngine

__all__ = [
    "DEFAULT_WEIGHTS",
    "FairnessConfigError",
    "FairnessEngine",
    "FairnessWeights",
    "InsightsEngine",
    "StatisticsEngine",
    "auto_assign_tasks",
    "calculate_fairness_score",
    "calculate_task_recommendations",
]
