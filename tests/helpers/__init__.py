"""Test helpers for hostelduty tests.

This module re-exports all helpers for convenient imports:

    from tests.helpers import (
        # Scenarios
        HostelScenario, load_scenario,

        # Row factories
        build_task, build_done_task, build_stats, build_member, build_context,
        SPACE_ID, USER_ID,
    )

See individual modules for full documentation:
- scenarios.py: YAML scenario loading
- factories.py: Task, stats, member and context row builders
"""

from tests.helpers.factories import (
    SPACE_ID,
    USER_ID,
    build_context,
    build_done_task,
    build_member,
    build_stats,
    build_task,
)
from tests.helpers.scenarios import HostelScenario, load_scenario

__all__ = [
    "SPACE_ID",
    "USER_ID",
    "HostelScenario",
    "build_context",
    "build_done_task",
    "build_member",
    "build_stats",
    "build_task",
    "load_scenario",
]
