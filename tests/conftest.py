"""Gemeinsame Fixtures: Beispiel-Problem und -Stundenplan."""

import pytest

from config.defaults import sample_problem, sample_schedule


@pytest.fixture
def problem():
    return sample_problem()


@pytest.fixture
def schedule():
    return sample_schedule()
