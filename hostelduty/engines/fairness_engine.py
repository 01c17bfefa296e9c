"""Fairness Engine - Pure logic for task recommendations and fair assignment.

This engine provides stateless, pure Python functions for:
- Ranking open tasks for one member (workload balance, difficulty rotation,
  category repetition, category preferences)
- Picking the human-readable reason shown next to each recommendation
- Scoring how fairly a member's workload compares to the space
- Distributing a batch of tasks across members

ARCHITECTURE: This is a pure logic engine. It never fetches or writes data and
never reads session or client storage; everything arrives as arguments. It is
safe to call on every page render: identical inputs give identical outputs.

Score scale:
    Every factor is expressed in points on one 0-100 scale around a base of
    50, so the UI can render the score directly as a match percentage and
    scores stay comparable whether or not optional factors are active.

    factor       range (defaults)   applies to
    ----------   ----------------   ------------------------------------
    workload     -20 .. +20 (open)  every candidate equally
    rotation       0 .. +15         candidates that change difficulty band
    repetition   -10 .. 0           candidates repeating the last category
    preference    -5 .. +5          preferred / avoided categories
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

import voluptuous as vol

from .. import const
from ..utils.math_utils import clamp, coerce_number, round_points, safe_average
from .statistics_engine import StatisticsEngine

if TYPE_CHECKING:
    from ..type_defs import (
        FairnessContext,
        FairnessStats,
        TaskData,
        TaskRecommendation,
    )


# =============================================================================
# CONFIGURATION
# =============================================================================


class FairnessConfigError(ValueError):
    """Raised when scoring weight options fail validation.

    Attributes:
        key: The option key that failed, or None if the error is not tied to
             a single key
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        """Initialize FairnessConfigError.

        Args:
            message: Human readable validation message
            key: Offending option key, if known
        """
        self.key = key
        super().__init__(
            f"Invalid fairness weight '{key}': {message}" if key else message
        )


def _validate_preference_secondary(data: dict[str, float]) -> dict[str, float]:
    """Reject preference weights large enough to override fairness factors."""
    ceiling = min(
        data[const.CONF_WEIGHT_ROTATION_BONUS],
        data[const.CONF_WEIGHT_REPETITION_PENALTY],
    )
    for key in (
        const.CONF_WEIGHT_PREFERENCE_BONUS,
        const.CONF_WEIGHT_AVOIDANCE_PENALTY,
    ):
        if data[key] > ceiling:
            raise vol.Invalid(
                f"must not exceed rotation and repetition weights ({ceiling})",
                path=[key],
            )
    return data


_NON_NEGATIVE = vol.All(vol.Coerce(float), vol.Range(min=0))

WEIGHTS_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Optional(
                const.CONF_WEIGHT_BASE, default=const.DEFAULT_WEIGHT_BASE
            ): vol.All(
                vol.Coerce(float), vol.Range(min=const.SCORE_MIN, max=const.SCORE_MAX)
            ),
            vol.Optional(
                const.CONF_WEIGHT_WORKLOAD_MAX,
                default=const.DEFAULT_WEIGHT_WORKLOAD_MAX,
            ): _NON_NEGATIVE,
            vol.Optional(
                const.CONF_WEIGHT_WORKLOAD_SCALE,
                default=const.DEFAULT_WEIGHT_WORKLOAD_SCALE,
            ): vol.All(vol.Coerce(float), vol.Range(min=0, min_included=False)),
            vol.Optional(
                const.CONF_WEIGHT_ROTATION_BONUS,
                default=const.DEFAULT_WEIGHT_ROTATION_BONUS,
            ): _NON_NEGATIVE,
            vol.Optional(
                const.CONF_WEIGHT_REPETITION_PENALTY,
                default=const.DEFAULT_WEIGHT_REPETITION_PENALTY,
            ): _NON_NEGATIVE,
            vol.Optional(
                const.CONF_WEIGHT_PREFERENCE_BONUS,
                default=const.DEFAULT_WEIGHT_PREFERENCE_BONUS,
            ): _NON_NEGATIVE,
            vol.Optional(
                const.CONF_WEIGHT_AVOIDANCE_PENALTY,
                default=const.DEFAULT_WEIGHT_AVOIDANCE_PENALTY,
            ): _NON_NEGATIVE,
        }
    ),
    _validate_preference_secondary,
)


@dataclass(frozen=True)
class FairnessWeights:
    """Tunable weights of the recommendation score.

    Attributes:
        base: Score every candidate starts from
        workload_max: Largest workload push (positive or negative)
        workload_scale: Point deficit that yields half of workload_max
        rotation_bonus: Bonus for switching difficulty band after hard/easy
        repetition_penalty: Penalty for repeating the last category
        preference_bonus: Bonus for a preferred category
        avoidance_penalty: Penalty for an avoided category
    """

    base: float = const.DEFAULT_WEIGHT_BASE
    workload_max: float = const.DEFAULT_WEIGHT_WORKLOAD_MAX
    workload_scale: float = const.DEFAULT_WEIGHT_WORKLOAD_SCALE
    rotation_bonus: float = const.DEFAULT_WEIGHT_ROTATION_BONUS
    repetition_penalty: float = const.DEFAULT_WEIGHT_REPETITION_PENALTY
    preference_bonus: float = const.DEFAULT_WEIGHT_PREFERENCE_BONUS
    avoidance_penalty: float = const.DEFAULT_WEIGHT_AVOIDANCE_PENALTY

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> FairnessWeights:
        """Build weights from an options mapping, filling in defaults.

        Raises:
            FairnessConfigError: If a value is not a number, is out of range,
                an unknown key is present, or preference weights exceed the
                rotation/repetition weights.
        """
        if not options:
            return cls()
        try:
            data = WEIGHTS_SCHEMA(dict(options))
        except vol.Invalid as err:
            key = str(err.path[0]) if err.path else None
            raise FairnessConfigError(err.msg, key=key) from err
        return cls(**data)

    def as_dict(self) -> dict[str, float]:
        """Return the weights keyed by their option names."""
        return asdict(self)


DEFAULT_WEIGHTS = FairnessWeights()


# =============================================================================
# FAIRNESS ENGINE
# =============================================================================


class FairnessEngine:
    """Pure logic engine for fairness scoring.

    All methods are static - no instance state.
    """

    # =========================================================================
    # FACTORS
    # =========================================================================

    @staticmethod
    def roster_average_points(all_stats: Iterable[Mapping[str, Any]]) -> float | None:
        """Return the mean total_points of the roster, or None if it is empty."""
        points = [
            coerce_number(stats.get(const.DATA_STATS_TOTAL_POINTS)) or 0.0
            for stats in all_stats
        ]
        if not points:
            return None
        return safe_average(points)

    @staticmethod
    def workload_adjustment(
        stats: Mapping[str, Any],
        all_stats: Iterable[Mapping[str, Any]],
        weights: FairnessWeights = DEFAULT_WEIGHTS,
    ) -> float:
        """Return the uniform catch-up push for a user.

        Positive when the user is below the roster average, negative when
        above. The push grows with the distance from average and approaches
        +/- workload_max without reaching it, so a larger deficit always
        pushes harder.
        """
        average = FairnessEngine.roster_average_points(all_stats)
        if average is None:
            const.LOGGER.debug("Empty roster stats, workload factor is neutral")
            return 0.0
        user_points = coerce_number(stats.get(const.DATA_STATS_TOTAL_POINTS)) or 0.0
        deficit = average - user_points
        return (
            weights.workload_max * deficit / (abs(deficit) + weights.workload_scale)
        )

    @staticmethod
    def rotation_adjustment(
        last_band: str | None,
        candidate_band: str | None,
        weights: FairnessWeights = DEFAULT_WEIGHTS,
    ) -> float:
        """Return the difficulty-rotation bonus for a candidate.

        After a hard task, easy and medium candidates get relief. After an
        easy task, medium and hard candidates get a push.
        """
        if last_band is None or candidate_band is None:
            return 0.0
        if last_band == const.DIFFICULTY_BAND_HARD and candidate_band in (
            const.DIFFICULTY_BAND_EASY,
            const.DIFFICULTY_BAND_MEDIUM,
        ):
            return weights.rotation_bonus
        if last_band == const.DIFFICULTY_BAND_EASY and candidate_band in (
            const.DIFFICULTY_BAND_MEDIUM,
            const.DIFFICULTY_BAND_HARD,
        ):
            return weights.rotation_bonus
        return 0.0

    @staticmethod
    def preference_adjustment(
        category: str,
        preferred: frozenset[str],
        avoided: frozenset[str],
        weights: FairnessWeights = DEFAULT_WEIGHTS,
    ) -> float:
        """Return the preference nudge for a candidate category."""
        adjustment = 0.0
        if category in preferred:
            adjustment += weights.preference_bonus
        if category in avoided:
            adjustment -= weights.avoidance_penalty
        return adjustment

    @staticmethod
    def preference_sets(
        preferences: Mapping[str, Any] | None,
    ) -> tuple[frozenset[str], frozenset[str]]:
        """Return (preferred, avoided) category sets, ignoring unknown entries."""
        if not isinstance(preferences, Mapping):
            return frozenset(), frozenset()

        def _known(values: Any) -> frozenset[str]:
            if not isinstance(values, (list, tuple, set, frozenset)):
                return frozenset()
            return frozenset(
                value.strip().lower()
                for value in values
                if isinstance(value, str)
                and value.strip().lower() in const.TASK_CATEGORIES
            )

        return (
            _known(preferences.get(const.PREF_PREFERRED_CATEGORIES)),
            _known(preferences.get(const.PREF_AVOIDED_CATEGORIES)),
        )

    # =========================================================================
    # REASON SELECTION
    # =========================================================================

    @staticmethod
    def select_reason(credits: Mapping[str, float], has_history: bool) -> str:
        """Pick the reason text for one task from its positive factor credits.

        Task-specific factors are compared first: the largest credit wins and
        equal credits fall back to REASON_FACTOR_PRIORITY order. Workload is
        the same for every candidate, so it only explains a task when nothing
        task-specific contributed.
        """
        best_factor: str | None = None
        best_credit = 0.0
        for factor in const.REASON_FACTOR_PRIORITY:
            credit = credits.get(factor, 0.0)
            if credit > best_credit:
                best_factor = factor
                best_credit = credit

        if best_factor is not None:
            return const.FACTOR_REASONS[best_factor]
        if credits.get(const.FACTOR_WORKLOAD, 0.0) > 0:
            return const.REASON_WORKLOAD
        if not has_history:
            return const.REASON_GETTING_STARTED
        return const.REASON_AVAILABLE

    # =========================================================================
    # RECOMMENDATIONS
    # =========================================================================

    @staticmethod
    def _neutral_recommendation(
        task: TaskData, weights: FairnessWeights
    ) -> TaskRecommendation:
        """Return an unscored recommendation at the base score."""
        return {
            "task": task,
            "score": round_points(clamp(weights.base, const.SCORE_MIN, const.SCORE_MAX)),
            "reason": const.REASON_AVAILABLE,
            "factors": {
                const.FACTOR_WORKLOAD: 0.0,
                const.FACTOR_ROTATION: 0.0,
                const.FACTOR_REPETITION: 0.0,
                const.FACTOR_PREFERENCE: 0.0,
            },
        }

    @staticmethod
    def calculate_task_recommendations(
        tasks: Sequence[TaskData],
        context: FairnessContext | Mapping[str, Any] | None,
        all_stats: Sequence[FairnessStats],
        weights: FairnessWeights | None = None,
    ) -> list[TaskRecommendation]:
        """Rank open tasks for one member.

        Args:
            tasks: Open, unassigned tasks of one space, newest first. Not
                re-filtered here.
            context: The member's user_id, recent completed tasks (newest
                first), stats snapshot and optional preferences
            all_stats: One stats row per space member, including the caller
            weights: Scoring weights. Defaults to DEFAULT_WEIGHTS.

        Returns:
            One recommendation per task, highest score first. Equal scores
            keep input order. Each task object is returned as-is.
        """
        if not tasks:
            return []

        weights = weights or DEFAULT_WEIGHTS
        context = context if isinstance(context, Mapping) else {}

        if not context.get(const.CONTEXT_USER_ID):
            const.LOGGER.debug(
                "No user_id in fairness context, returning %d tasks unranked",
                len(tasks),
            )
            return [
                FairnessEngine._neutral_recommendation(task, weights) for task in tasks
            ]

        stats = context.get(const.CONTEXT_STATS)
        if not isinstance(stats, Mapping):
            stats = {}
        recent_tasks = [
            task
            for task in (context.get(const.CONTEXT_RECENT_TASKS) or [])
            if isinstance(task, Mapping)
        ][: const.RECENT_TASK_WINDOW]
        preferred, avoided = FairnessEngine.preference_sets(
            context.get(const.CONTEXT_PREFERENCES)
        )

        workload = FairnessEngine.workload_adjustment(stats, all_stats or [], weights)

        has_history = bool(recent_tasks)
        last_band: str | None = None
        last_category: str | None = None
        recent_categories: set[str] = set()
        if has_history:
            last_task = recent_tasks[0]
            last_band = StatisticsEngine.task_band(last_task)
            last_category = StatisticsEngine.normalize_category(
                last_task.get(const.DATA_TASK_CATEGORY)
            )
            recent_categories = {
                StatisticsEngine.normalize_category(t.get(const.DATA_TASK_CATEGORY))
                for t in recent_tasks
            }

        categories = [
            StatisticsEngine.normalize_category(task.get(const.DATA_TASK_CATEGORY))
            for task in tasks
        ]
        # Repeating a category is only penalized when something else is on offer
        has_alternative = last_category is not None and any(
            category != last_category for category in categories
        )

        # Sorted on the unrounded score; rounding is for display only
        scored: list[tuple[float, TaskRecommendation]] = []
        for task, category in zip(tasks, categories, strict=True):
            rotation = FairnessEngine.rotation_adjustment(
                last_band, StatisticsEngine.task_band(task), weights
            )
            repetition = (
                -weights.repetition_penalty
                if has_alternative and category == last_category
                else 0.0
            )
            preference = FairnessEngine.preference_adjustment(
                category, preferred, avoided, weights
            )

            raw_score = clamp(
                weights.base + workload + rotation + repetition + preference,
                const.SCORE_MIN,
                const.SCORE_MAX,
            )
            credits = {
                const.FACTOR_WORKLOAD: max(workload, 0.0),
                const.FACTOR_ROTATION: rotation,
                const.FACTOR_REPETITION: (
                    weights.repetition_penalty
                    if has_history and category not in recent_categories
                    else 0.0
                ),
                const.FACTOR_PREFERENCE: max(preference, 0.0),
            }

            scored.append(
                (
                    raw_score,
                    {
                        "task": task,
                        "score": round_points(raw_score),
                        "reason": FairnessEngine.select_reason(credits, has_history),
                        "factors": {
                            const.FACTOR_WORKLOAD: round_points(workload),
                            const.FACTOR_ROTATION: round_points(rotation),
                            const.FACTOR_REPETITION: round_points(repetition),
                            const.FACTOR_PREFERENCE: round_points(preference),
                        },
                    },
                )
            )

        # list.sort is stable, so equal scores keep the caller's newest-first order
        scored.sort(key=lambda item: -item[0])
        return [rec for _, rec in scored]

    # =========================================================================
    # FAIRNESS SCORE
    # =========================================================================

    @staticmethod
    def calculate_fairness_score(
        user_stats: Mapping[str, Any], all_stats: Sequence[Mapping[str, Any]]
    ) -> int:
        """Rate how evenly a user's workload matches the space, 0-100.

        100 means the user sits exactly on the space averages for both points
        and difficulty. Points deviation weighs 60%, difficulty deviation 40%.
        A space with one member or fewer is always perfectly fair.
        """
        if len(all_stats) <= 1:
            return const.FAIRNESS_SCORE_PERFECT

        avg_points = safe_average(
            coerce_number(s.get(const.DATA_STATS_TOTAL_POINTS)) or 0.0
            for s in all_stats
        )
        avg_difficulty = safe_average(
            coerce_number(s.get(const.DATA_STATS_AVG_DIFFICULTY)) or 0.0
            for s in all_stats
        )
        user_points = coerce_number(user_stats.get(const.DATA_STATS_TOTAL_POINTS)) or 0.0
        user_difficulty = (
            coerce_number(user_stats.get(const.DATA_STATS_AVG_DIFFICULTY)) or 0.0
        )

        points_deviation = abs(user_points - avg_points) / (avg_points or 1)
        points_score = max(
            0.0,
            const.FAIRNESS_SCORE_PERFECT
            - points_deviation * const.FAIRNESS_DEVIATION_FACTOR,
        )

        difficulty_deviation = abs(user_difficulty - avg_difficulty) / (
            avg_difficulty or 1
        )
        difficulty_score = max(
            0.0,
            const.FAIRNESS_SCORE_PERFECT
            - difficulty_deviation * const.FAIRNESS_DEVIATION_FACTOR,
        )

        return round(
            points_score * const.FAIRNESS_POINTS_WEIGHT
            + difficulty_score * const.FAIRNESS_DIFFICULTY_WEIGHT
        )

    # =========================================================================
    # AUTO ASSIGNMENT
    # =========================================================================

    @staticmethod
    def auto_assign_tasks(
        tasks: Sequence[TaskData], members_stats: Sequence[Mapping[str, Any]]
    ) -> dict[str, str]:
        """Distribute tasks across members, hardest tasks to lowest scorers.

        Members are ordered by points ascending and tasks by difficulty
        descending (both stable), then tasks are dealt round-robin. Rows without
        a task id or user id are skipped.

        Returns:
            Mapping of task id to user id. Empty if there are no members.
        """
        members = sorted(
            (s for s in members_stats if s.get(const.DATA_STATS_USER_ID)),
            key=lambda s: coerce_number(s.get(const.DATA_STATS_TOTAL_POINTS)) or 0.0,
        )
        if not members:
            const.LOGGER.debug("No members to assign %d tasks to", len(tasks))
            return {}

        ordered_tasks = sorted(
            (t for t in tasks if t.get(const.DATA_TASK_ID)),
            key=lambda t: -(StatisticsEngine.difficulty_value(t) or 0.0),
        )
        if len(ordered_tasks) < len(tasks):
            const.LOGGER.debug(
                "Skipping %d tasks without an id", len(tasks) - len(ordered_tasks)
            )

        return {
            task[const.DATA_TASK_ID]: members[index % len(members)][
                const.DATA_STATS_USER_ID
            ]
            for index, task in enumerate(ordered_tasks)
        }


# Module-level entry points for callers that don't need the class
calculate_task_recommendations = FairnessEngine.calculate_task_recommendations
calculate_fairness_score = FairnessEngine.calculate_fairness_score
auto_assign_tasks = FairnessEngine.auto_assign_tasks
