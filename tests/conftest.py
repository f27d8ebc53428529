"""
Root test configuration and fixtures for the spinfood project.

- unit/: Fast, isolated tests per package module
- integration/: Full pipeline runs including the CP-SAT model
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from spinfood.config import ConfigLoader  # noqa: E402

from tests.factories import PARTY_LOCATION  # noqa: E402

# Short solver budget keeps the suite fast; the cohort models solve in milliseconds
TEST_CONFIG = {
    "solver.time_limit.seconds": 5.0,
    "solver.num_workers": 1,
    "solver.random_seed": 0,
}


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Reset the ConfigLoader singleton and drop CONFIG_* overrides from the environment."""
    for key in list(os.environ):
        if key.startswith("CONFIG_"):
            monkeypatch.delenv(key)
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()


@pytest.fixture
def config() -> ConfigLoader:
    """ConfigLoader with test solver settings and schema defaults otherwise."""
    return ConfigLoader(values=dict(TEST_CONFIG))


@pytest.fixture
def party_location():
    return PARTY_LOCATION
