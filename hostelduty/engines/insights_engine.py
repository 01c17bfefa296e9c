"""Insights Engine - Pure logic for space-level observations.

This engine inspects a space's task history and roster and produces insights:
- Predictions: a category that is usually done every N days is overdue
- Anomalies: a member whose points are well below the space average
- Suggestions: a member who has not completed anything for a week

PURITY REQUIREMENT: All data, including the reference time, comes in as
arguments. Persisting or delivering insights is the caller's job.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import dt_days_between, dt_days_since, dt_now_utc, dt_parse
from ..utils.math_utils import safe_average
from .statistics_engine import StatisticsEngine

if TYPE_CHECKING:
    from ..type_defs import Insight, MemberData, TaskData


def _format_number(value: float) -> str:
    """Format a point value without a trailing .0 for whole numbers."""
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


class InsightsEngine:
    """Pure logic engine for space insights.

    All methods are static - no instance state.
    """

    @staticmethod
    def _done_tasks_newest_first(tasks: Sequence[TaskData]) -> list[TaskData]:
        """Return done tasks ordered by created_at, newest first.

        Tasks without a parsable created_at sort last, in input order.
        """
        done = [
            task
            for task in tasks
            if task.get(const.DATA_TASK_STATUS) == const.TASK_STATUS_DONE
        ]
        dated = []
        undated = []
        for task in done:
            created = dt_parse(task.get(const.DATA_TASK_CREATED_AT))
            if created is None:
                undated.append(task)
            else:
                dated.append((created, task))
        dated.sort(key=lambda item: item[0], reverse=True)
        return [task for _, task in dated] + undated

    # =========================================================================
    # CATEGORY FREQUENCY
    # =========================================================================

    @staticmethod
    def analyze_category_frequency(
        tasks: Sequence[TaskData],
    ) -> dict[str, dict[str, Any]]:
        """Return the average gap in days between done tasks of each category.

        Only categories with at least two dated completions appear.

        Returns:
            {category: {"gaps": [days, ...] newest first, "avg_days": float,
                        "last_done": datetime}}
        """
        by_category: dict[str, list[datetime]] = {}
        for task in InsightsEngine._done_tasks_newest_first(tasks):
            created = dt_parse(task.get(const.DATA_TASK_CREATED_AT))
            if created is None:
                continue
            category = StatisticsEngine.normalize_category(
                task.get(const.DATA_TASK_CATEGORY)
            )
            by_category.setdefault(category, []).append(created)

        frequency: dict[str, dict[str, Any]] = {}
        for category in const.TASK_CATEGORIES:
            dates = by_category.get(category, [])
            if len(dates) < 2:
                continue
            gaps = [
                dt_days_between(newer, older)
                for newer, older in zip(dates, dates[1:], strict=False)
            ]
            frequency[category] = {
                "gaps": gaps,
                "avg_days": safe_average(gaps),
                "last_done": dates[0],
            }
        return frequency

    @staticmethod
    def predict_category_needs(
        tasks: Sequence[TaskData], now: datetime | None = None
    ) -> list[Insight]:
        """Flag categories whose last completion is overdue by their usual gap."""
        now = now or dt_now_utc()
        insights: list[Insight] = []
        for category, freq in InsightsEngine.analyze_category_frequency(tasks).items():
            avg_days = freq["avg_days"]
            if avg_days <= 0:
                # Completions logged at the same instant carry no rhythm
                continue
            days_since = dt_days_between(now, freq["last_done"])
            if days_since > avg_days * const.INSIGHT_CATEGORY_OVERDUE_FACTOR:
                label = const.TASK_CATEGORY_LABELS[category]
                insights.append(
                    {
                        "type": const.INSIGHT_TYPE_PREDICTION,
                        "title": f"{label} might be needed",
                        "description": (
                            f"Usually done every {round(avg_days)} days. "
                            f"Last done {round(days_since)} days ago."
                        ),
                        "confidence": const.INSIGHT_CONFIDENCE_PREDICTION,
                        "action": const.INSIGHT_ACTION_CREATE_TASK,
                        "metadata": {"category": category},
                    }
                )
        return insights

    # =========================================================================
    # MEMBER ACTIVITY
    # =========================================================================

    @staticmethod
    def detect_member_issues(
        tasks: Sequence[TaskData],
        members: Sequence[MemberData],
        now: datetime | None = None,
    ) -> list[Insight]:
        """Flag members falling behind on points or inactive for a week.

        Points are computed from completed task difficulties, not the stored
        member totals, so manual adjustments do not hide missing work.
        """
        if not members:
            return []

        now = now or dt_now_utc()
        history = InsightsEngine._done_tasks_newest_first(tasks)
        member_stats = StatisticsEngine.build_member_stats(history, members)
        avg_points = safe_average(s["total_points"] for s in member_stats)

        insights: list[Insight] = []
        for member, stats in zip(members, member_stats, strict=True):
            name = StatisticsEngine.member_name(member)
            user_id = stats["user_id"]

            if stats["total_points"] < avg_points * const.INSIGHT_FALLING_BEHIND_RATIO:
                insights.append(
                    {
                        "type": const.INSIGHT_TYPE_ANOMALY,
                        "title": f"{name} is falling behind",
                        "description": (
                            "Points are significantly below average "
                            f"({_format_number(stats['total_points'])} vs "
                            f"{round(avg_points)})."
                        ),
                        "confidence": const.INSIGHT_CONFIDENCE_FALLING_BEHIND,
                        "related_user_id": user_id,
                        "action": const.INSIGHT_ACTION_REMIND_USER,
                    }
                )

            days_inactive = dt_days_since(stats["last_task_date"], now)
            if (
                days_inactive is not None
                and days_inactive > const.INSIGHT_INACTIVITY_DAYS
            ):
                insights.append(
                    {
                        "type": const.INSIGHT_TYPE_SUGGESTION,
                        "title": f"Remind {name} to help out",
                        "description": (
                            f"Hasn't completed a task in {round(days_inactive)} days."
                        ),
                        "confidence": const.INSIGHT_CONFIDENCE_INACTIVITY,
                        "related_user_id": user_id,
                        "action": const.INSIGHT_ACTION_REMIND_USER,
                    }
                )
        return insights

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    @staticmethod
    def analyze_space(
        tasks: Sequence[TaskData],
        members: Sequence[MemberData],
        now: datetime | None = None,
    ) -> list[Insight]:
        """Return category predictions followed by member insights."""
        now = now or dt_now_utc()
        return InsightsEngine.predict_category_needs(
            tasks, now
        ) + InsightsEngine.detect_member_issues(tasks, members, now)

    @staticmethod
    def generate_reminder_message(insight: Mapping[str, Any]) -> str:
        """Format the nudge text sent for an insight."""
        title = insight.get(const.INSIGHT_TITLE, "")
        description = insight.get(const.INSIGHT_DESCRIPTION, "")
        insight_type = insight.get(const.INSIGHT_TYPE)
        if insight_type == const.INSIGHT_TYPE_PREDICTION:
            return (
                f"Hey! It looks like {title}. {description} "
                "Want to create a task for it?"
            )
        if insight_type == const.INSIGHT_TYPE_ANOMALY:
            return f"{title}. {description} A gentle nudge might help!"
        return str(description)
