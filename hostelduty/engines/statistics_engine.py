"""Statistics Engine - Fairness stats derivation from task history.

This engine turns raw task and membership rows into the snapshots the other
engines consume:
- Category and difficulty normalization (closed category set, 1-10 scale)
- Per-user FairnessStats from completed tasks
- Points-only roster stats from space_members rows
- Leaderboard ranking

Design Principles:
    - Stateless: operates only on passed data structures
    - Total: malformed rows degrade to neutral values instead of raising
    - Order preserving: callers hand history newest-first and it stays that way
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.math_utils import coerce_number, round_points, safe_average

if TYPE_CHECKING:
    from ..type_defs import FairnessStats, LeaderboardEntry, MemberData, TaskData


class StatisticsEngine:
    """Pure logic engine for fairness statistics.

    All methods are static - no instance state.

    Example:
        done = [t for t in history if t["status"] == "done"]
        stats = StatisticsEngine.build_user_stats("u-1", "space-1", done)
        roster = StatisticsEngine.build_roster_stats(members)
    """

    # =========================================================================
    # NORMALIZATION
    # =========================================================================

    @staticmethod
    def normalize_category(category: Any) -> str:
        """Return category if it is a known task category, else "other".

        Matching is case-insensitive and ignores surrounding whitespace.
        """
        if isinstance(category, str):
            candidate = category.strip().lower()
            if candidate in const.TASK_CATEGORIES:
                return candidate
        if category is not None:
            const.LOGGER.debug(
                "Unknown task category %r, treating as '%s'",
                category,
                const.CATEGORY_OTHER,
            )
        return const.CATEGORY_OTHER

    @staticmethod
    def difficulty_value(task: Mapping[str, Any]) -> float | None:
        """Return the task difficulty clamped to 1-10, or None if unusable."""
        value = coerce_number(task.get(const.DATA_TASK_DIFFICULTY), default=None)
        if value is None:
            return None
        return max(float(const.DIFFICULTY_MIN), min(value, float(const.DIFFICULTY_MAX)))

    @staticmethod
    def difficulty_band(difficulty: float | None) -> str | None:
        """Map a difficulty to its band.

        Examples:
            difficulty_band(3) → "easy"
            difficulty_band(4) → "medium"
            difficulty_band(7) → "hard"
            difficulty_band(None) → None
        """
        if difficulty is None:
            return None
        if difficulty <= const.DIFFICULTY_EASY_MAX:
            return const.DIFFICULTY_BAND_EASY
        if difficulty <= const.DIFFICULTY_MEDIUM_MAX:
            return const.DIFFICULTY_BAND_MEDIUM
        return const.DIFFICULTY_BAND_HARD

    @staticmethod
    def task_band(task: Mapping[str, Any]) -> str | None:
        """Return the difficulty band of a task row."""
        return StatisticsEngine.difficulty_band(StatisticsEngine.difficulty_value(task))

    @staticmethod
    def difficulty_label(difficulty: float | None) -> str | None:
        """Return the display label ("Easy"/"Medium"/"Hard") for a difficulty."""
        band = StatisticsEngine.difficulty_band(difficulty)
        return const.DIFFICULTY_BAND_LABELS.get(band) if band else None

    @staticmethod
    def member_name(member: Mapping[str, Any]) -> str:
        """Return a display name for a member row.

        Accepts either a flat username or an embedded profile object, as the
        membership store returns both shapes depending on the query.
        """
        username = member.get(const.DATA_MEMBER_USERNAME)
        if not username:
            profile = member.get("profile")
            if isinstance(profile, Mapping):
                username = profile.get(const.DATA_MEMBER_USERNAME)
        return str(username) if username else const.DEFAULT_MEMBER_NAME

    # =========================================================================
    # STATS DERIVATION
    # =========================================================================

    @staticmethod
    def build_user_stats(
        user_id: str,
        space_id: str,
        completed_tasks: Sequence[TaskData],
        total_points: float | None = None,
    ) -> FairnessStats:
        """Build a FairnessStats snapshot from a user's completed tasks.

        Args:
            user_id: The user the stats belong to
            space_id: The space the tasks belong to
            completed_tasks: Done tasks assigned to the user, newest first
            total_points: Authoritative point total from the membership row.
                When None, the sum of task difficulties is used instead.

        Returns:
            FairnessStats with band counts, average difficulty and the
            creation date of the newest task as last_task_date.
        """
        difficulties = [
            d
            for d in (StatisticsEngine.difficulty_value(t) for t in completed_tasks)
            if d is not None
        ]
        bands = Counter(StatisticsEngine.difficulty_band(d) for d in difficulties)

        if total_points is None:
            points = sum(difficulties)
        else:
            points = coerce_number(total_points) or 0.0

        last_task_date = None
        if completed_tasks:
            last_task_date = completed_tasks[0].get(const.DATA_TASK_CREATED_AT)

        return {
            "user_id": user_id,
            "space_id": space_id,
            "total_points": round_points(points),
            "tasks_completed": len(completed_tasks),
            "easy_tasks": bands[const.DIFFICULTY_BAND_EASY],
            "medium_tasks": bands[const.DIFFICULTY_BAND_MEDIUM],
            "hard_tasks": bands[const.DIFFICULTY_BAND_HARD],
            "avg_difficulty": round_points(safe_average(difficulties)),
            "last_task_date": last_task_date,
        }

    @staticmethod
    def build_roster_stats(members: Iterable[MemberData]) -> list[FairnessStats]:
        """Build one points-only stats row per space member.

        This is what the recommendation views feed the scorer as the roster:
        only total_points matters for the workload comparison.
        """
        return [
            {
                "user_id": member.get(const.DATA_MEMBER_USER_ID, ""),
                "space_id": member.get(const.DATA_MEMBER_SPACE_ID, ""),
                "total_points": coerce_number(member.get(const.DATA_MEMBER_POINTS))
                or 0.0,
                "tasks_completed": 0,
                "easy_tasks": 0,
                "medium_tasks": 0,
                "hard_tasks": 0,
                "avg_difficulty": 0.0,
                "last_task_date": None,
            }
            for member in members
        ]

    @staticmethod
    def completed_tasks_for(
        tasks: Iterable[TaskData], user_id: str
    ) -> list[TaskData]:
        """Return the done tasks assigned to user_id, preserving input order."""
        return [
            task
            for task in tasks
            if task.get(const.DATA_TASK_ASSIGNED_TO) == user_id
            and task.get(const.DATA_TASK_STATUS) == const.TASK_STATUS_DONE
        ]

    @staticmethod
    def build_member_stats(
        tasks: Sequence[TaskData], members: Iterable[MemberData]
    ) -> list[FairnessStats]:
        """Build full stats for every member from the space's task list.

        Points are derived from completed task difficulties rather than the
        stored member total, so this reflects work actually done.
        """
        return [
            StatisticsEngine.build_user_stats(
                member.get(const.DATA_MEMBER_USER_ID, ""),
                member.get(const.DATA_MEMBER_SPACE_ID, ""),
                StatisticsEngine.completed_tasks_for(
                    tasks, member.get(const.DATA_MEMBER_USER_ID, "")
                ),
            )
            for member in members
        ]

    # =========================================================================
    # LEADERBOARD
    # =========================================================================

    @staticmethod
    def build_leaderboard(
        members: Sequence[MemberData],
        completed_tasks: Iterable[TaskData] = (),
    ) -> list[LeaderboardEntry]:
        """Rank members by points.

        Ordering is points descending, then tasks completed descending, then
        input order. Members tied on both share a rank and the following rank
        is skipped (1, 1, 3).
        """
        done_counts = Counter(
            task.get(const.DATA_TASK_ASSIGNED_TO)
            for task in completed_tasks
            if task.get(const.DATA_TASK_STATUS) == const.TASK_STATUS_DONE
        )

        rows = [
            {
                "user_id": member.get(const.DATA_MEMBER_USER_ID, ""),
                "username": StatisticsEngine.member_name(member),
                "points": coerce_number(member.get(const.DATA_MEMBER_POINTS)) or 0.0,
                "tasks_completed": done_counts[member.get(const.DATA_MEMBER_USER_ID)],
            }
            for member in members
        ]
        rows.sort(key=lambda row: (-row["points"], -row["tasks_completed"]))

        leaderboard: list[LeaderboardEntry] = []
        previous: tuple[float, int] | None = None
        rank = 0
        for position, row in enumerate(rows, start=1):
            key = (row["points"], row["tasks_completed"])
            if key != previous:
                rank = position
                previous = key
            leaderboard.append(
                {
                    "user_id": row["user_id"],
                    "username": row["username"],
                    "points": row["points"],
                    "tasks_completed": row["tasks_completed"],
                    "rank": rank,
                }
            )
        return leaderboard
