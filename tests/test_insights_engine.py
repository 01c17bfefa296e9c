"""Tests for InsightsEngine - category predictions and member activity.

All tests pin the reference time, either explicitly through ``now`` or with
freezegun for the default-clock path.
"""

from __future__ import annotations

from datetime import UTC, datetime

from freezegun import freeze_time
import pytest

from hostelduty import const
from hostelduty.engines.insights_engine import InsightsEngine
from tests.helpers import build_done_task, build_member, build_task

NOW = datetime(2026, 1, 20, 12, 0, tzinfo=UTC)


@pytest.fixture
def kitchen_history():
    """Kitchen every 3 days until Jan 7, trash daily until Jan 19, one laundry."""
    return [
        build_done_task("tr2", const.CATEGORY_TRASH, 2, created_at="2026-01-19T12:00:00Z"),
        build_done_task("tr1", const.CATEGORY_TRASH, 2, created_at="2026-01-18T12:00:00Z"),
        build_done_task("k3", const.CATEGORY_KITCHEN, 5, created_at="2026-01-07T12:00:00Z"),
        build_done_task("l1", const.CATEGORY_LAUNDRY, 4, created_at="2026-01-05T12:00:00Z"),
        build_done_task("k2", const.CATEGORY_KITCHEN, 5, created_at="2026-01-04T12:00:00Z"),
        build_done_task("k1", const.CATEGORY_KITCHEN, 5, created_at="2026-01-01T12:00:00Z"),
        build_task("open", const.CATEGORY_KITCHEN, 5, created_at="2026-01-20T08:00:00Z"),
    ]


@pytest.fixture
def roster_history():
    """Member a is busy, b went quiet 15 days ago, c never did anything."""
    tasks = [
        build_done_task("a1", difficulty=10, assigned_to="a", created_at="2026-01-19T12:00:00Z"),
        build_done_task("a2", difficulty=10, assigned_to="a", created_at="2026-01-18T12:00:00Z"),
        build_done_task("b1", difficulty=8, assigned_to="b", created_at="2026-01-05T12:00:00Z"),
    ]
    members = [
        build_member("a", 20, "asha"),
        build_member("b", 8, "ben"),
        build_member("c", 0, "chen"),
    ]
    return tasks, members


# =============================================================================
# TEST: CATEGORY FREQUENCY
# =============================================================================


class TestCategoryFrequency:
    """Average completion gaps per category."""

    def test_gaps_per_category(self, kitchen_history) -> None:
        """Categories with two or more completions report their gaps."""
        frequency = InsightsEngine.analyze_category_frequency(kitchen_history)

        assert set(frequency) == {const.CATEGORY_KITCHEN, const.CATEGORY_TRASH}
        assert frequency[const.CATEGORY_KITCHEN]["gaps"] == [3.0, 3.0]
        assert frequency[const.CATEGORY_KITCHEN]["avg_days"] == 3.0
        assert frequency[const.CATEGORY_KITCHEN]["last_done"] == datetime(
            2026, 1, 7, 12, 0, tzinfo=UTC
        )
        assert frequency[const.CATEGORY_TRASH]["avg_days"] == 1.0

    def test_input_order_does_not_matter(self, kitchen_history) -> None:
        """History is re-sorted by created_at before gaps are measured."""
        frequency = InsightsEngine.analyze_category_frequency(
            list(reversed(kitchen_history))
        )

        assert frequency[const.CATEGORY_KITCHEN]["gaps"] == [3.0, 3.0]

    def test_undated_tasks_ignored(self) -> None:
        """Rows without a usable created_at carry no rhythm."""
        tasks = [
            build_done_task("k1", const.CATEGORY_KITCHEN, created_at=None),
            build_done_task("k2", const.CATEGORY_KITCHEN, created_at="not a date"),
            build_done_task("k3", const.CATEGORY_KITCHEN, created_at="2026-01-01T12:00:00Z"),
        ]

        assert InsightsEngine.analyze_category_frequency(tasks) == {}


# =============================================================================
# TEST: PREDICTIONS
# =============================================================================


class TestPredictions:
    """Overdue category predictions."""

    def test_overdue_category_predicted(self, kitchen_history) -> None:
        """Kitchen is 13 days past a 3-day rhythm; trash is on schedule."""
        insights = InsightsEngine.predict_category_needs(kitchen_history, NOW)

        assert len(insights) == 1
        insight = insights[0]
        assert insight["type"] == const.INSIGHT_TYPE_PREDICTION
        assert insight["title"] == "Kitchen might be needed"
        assert insight["description"] == (
            "Usually done every 3 days. Last done 13 days ago."
        )
        assert insight["confidence"] == const.INSIGHT_CONFIDENCE_PREDICTION
        assert insight["action"] == const.INSIGHT_ACTION_CREATE_TASK
        assert insight["metadata"] == {"category": const.CATEGORY_KITCHEN}

    def test_simultaneous_completions_skipped(self) -> None:
        """A zero average gap never produces a prediction."""
        tasks = [
            build_done_task("k1", const.CATEGORY_KITCHEN, created_at="2026-01-01T12:00:00Z"),
            build_done_task("k2", const.CATEGORY_KITCHEN, created_at="2026-01-01T12:00:00Z"),
        ]

        assert InsightsEngine.predict_category_needs(tasks, NOW) == []

    @freeze_time("2026-01-20 12:00:00", tz_offset=0)
    def test_defaults_to_current_time(self, kitchen_history) -> None:
        """Without now, the current UTC time is the reference."""
        insights = InsightsEngine.predict_category_needs(kitchen_history)

        assert [i["metadata"]["category"] for i in insights] == [
            const.CATEGORY_KITCHEN
        ]


# =============================================================================
# TEST: MEMBER ISSUES
# =============================================================================


class TestMemberIssues:
    """Falling-behind anomalies and inactivity suggestions."""

    def test_falling_behind_and_inactive(self, roster_history) -> None:
        """Chen has no points; Ben has been idle for 15 days."""
        tasks, members = roster_history

        insights = InsightsEngine.detect_member_issues(tasks, members, NOW)

        assert [(i["type"], i["related_user_id"]) for i in insights] == [
            (const.INSIGHT_TYPE_SUGGESTION, "b"),
            (const.INSIGHT_TYPE_ANOMALY, "c"),
        ]
        suggestion, anomaly = insights
        assert suggestion["title"] == "Remind ben to help out"
        assert suggestion["description"] == "Hasn't completed a task in 15 days."
        assert suggestion["confidence"] == const.INSIGHT_CONFIDENCE_INACTIVITY
        assert anomaly["title"] == "chen is falling behind"
        assert anomaly["description"] == (
            "Points are significantly below average (0 vs 9)."
        )
        assert anomaly["confidence"] == const.INSIGHT_CONFIDENCE_FALLING_BEHIND
        assert anomaly["action"] == const.INSIGHT_ACTION_REMIND_USER

    def test_points_come_from_history(self, roster_history) -> None:
        """Stored member points do not hide missing work."""
        tasks, members = roster_history
        members[2] = build_member("c", 500, "chen")

        insights = InsightsEngine.detect_member_issues(tasks, members, NOW)

        assert any(
            i["type"] == const.INSIGHT_TYPE_ANOMALY and i["related_user_id"] == "c"
            for i in insights
        )

    def test_balanced_space_is_quiet(self) -> None:
        """Everyone active and even means no insights."""
        tasks = [
            build_done_task("a1", difficulty=5, assigned_to="a", created_at="2026-01-19T12:00:00Z"),
            build_done_task("b1", difficulty=5, assigned_to="b", created_at="2026-01-18T12:00:00Z"),
        ]
        members = [build_member("a"), build_member("b")]

        assert InsightsEngine.detect_member_issues(tasks, members, NOW) == []

    def test_no_members(self, roster_history) -> None:
        """An empty roster yields nothing."""
        tasks, _ = roster_history

        assert InsightsEngine.detect_member_issues(tasks, [], NOW) == []


# =============================================================================
# TEST: ENTRY POINTS
# =============================================================================


class TestAnalyzeSpace:
    """Combined analysis and reminder text."""

    def test_predictions_come_first(self, kitchen_history, roster_history) -> None:
        """Category predictions precede member insights."""
        tasks, members = roster_history

        insights = InsightsEngine.analyze_space(kitchen_history + tasks, members, NOW)

        assert insights[0]["type"] == const.INSIGHT_TYPE_PREDICTION
        assert {i["type"] for i in insights[1:]} <= {
            const.INSIGHT_TYPE_ANOMALY,
            const.INSIGHT_TYPE_SUGGESTION,
        }

    def test_reminder_for_prediction(self) -> None:
        """Predictions ask whether to create a task."""
        message = InsightsEngine.generate_reminder_message(
            {
                "type": const.INSIGHT_TYPE_PREDICTION,
                "title": "Kitchen might be needed",
                "description": "Usually done every 3 days. Last done 13 days ago.",
            }
        )

        assert message == (
            "Hey! It looks like Kitchen might be needed. Usually done every 3 days. "
            "Last done 13 days ago. Want to create a task for it?"
        )

    def test_reminder_for_anomaly(self) -> None:
        """Anomalies get a gentle nudge."""
        message = InsightsEngine.generate_reminder_message(
            {
                "type": const.INSIGHT_TYPE_ANOMALY,
                "title": "chen is falling behind",
                "description": "Points are significantly below average (0 vs 9).",
            }
        )

        assert message == (
            "chen is falling behind. Points are significantly below average "
            "(0 vs 9). A gentle nudge might help!"
        )

    def test_reminder_for_suggestion(self) -> None:
        """Anything else sends its description."""
        message = InsightsEngine.generate_reminder_message(
            {
                "type": const.INSIGHT_TYPE_SUGGESTION,
                "title": "Remind ben to help out",
                "description": "Hasn't completed a task in 15 days.",
            }
        )

        assert message == "Hasn't completed a task in 15 days."
