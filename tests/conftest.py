"""
Pytest fixtures for the player bot reset test suite.

Provides policies, in-memory host collaborators and a clean run log
for every test.
"""

import pytest

from bot_reset.config.policy_config import PolicyConfig
from bot_reset.data_models import DiceRoller
from bot_reset.observability.run_log import DEFAULT_MAX_EVENTS, reset_run_log
from tests.helpers import FakeIdentity, FakeMutator, FakeWorld


# =============================================================================
# GLOBAL STATE
# =============================================================================


@pytest.fixture(autouse=True)
def clean_run_log():
    """Every test starts with an empty, unpaused run log."""
    log = reset_run_log()
    log.resume()
    log.set_max_events(DEFAULT_MAX_EVENTS)
    yield log
    log.set_max_events(DEFAULT_MAX_EVENTS)
    log.reset()


@pytest.fixture
def seeded_dice():
    """Provide a seeded DiceRoller for reproducible tests."""
    DiceRoller.clear_roll_log()
    DiceRoller.set_seed(42)
    yield DiceRoller()
    DiceRoller.clear_roll_log()


# =============================================================================
# POLICY FIXTURES
# =============================================================================


@pytest.fixture
def default_policy():
    """Reset at 80 to level 1 with a guaranteed roll."""
    return PolicyConfig(max_level=80, reset_to_level=1, reset_chance_percent=100)


@pytest.fixture
def timed_policy():
    """Max-level resets gated behind a day played at level."""
    return PolicyConfig(
        max_level=80,
        reset_to_level=1,
        reset_chance_percent=100,
        restrict_by_played_time=True,
        min_time_played_seconds=86400,
        scan_interval_seconds=60,
    )


@pytest.fixture
def skip_policy():
    """Skip bots from 20 straight to 30."""
    return PolicyConfig(max_level=80, skip_from_level=20, skip_to_level=30)


# =============================================================================
# HOST FIXTURES
# =============================================================================


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def mutator():
    return FakeMutator()


@pytest.fixture
def world():
    return FakeWorld()
