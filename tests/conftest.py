"""Shared fixtures for hostelduty tests."""

import logging

import pytest

from hostelduty import const
from tests.helpers import HostelScenario, load_scenario


@pytest.fixture
def hostel_scenario() -> HostelScenario:
    """Three-member space loaded from tests/scenarios/scenario_hostel.yaml."""
    return load_scenario("scenario_hostel.yaml")


@pytest.fixture
def package_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture everything the package logger emits."""
    caplog.set_level(logging.DEBUG, logger=const.LOGGER.name)
    return caplog
