"""Shared pytest fixtures for test modules."""

import pytest

from ladder import RankCutoffs
from tests.helpers import NOW


@pytest.fixture
def cutoffs() -> RankCutoffs:
    return RankCutoffs(grandmaster=200, challenger=500)


@pytest.fixture
def now() -> int:
    return NOW
