"""
Shared fixtures for the luckyfive test suites.
"""
import numpy as np
import pytest

from luckyfive.infrastructure.config import EngineParams
from luckyfive.infrastructure.logging.logger import LoggerManager


@pytest.fixture
def synthetic_history():
    """200 uniformly random 5-of-80 draws, oldest first."""
    rng = np.random.default_rng(2024)
    return [tuple(int(n) for n in rng.choice(80, size=5, replace=False) + 1) for _ in range(200)]


@pytest.fixture
def fast_params():
    """Small search budget so engine tests stay quick."""
    return EngineParams(
        num_predictions=5,
        cands_mult=3,
        hill_iter=10,
        generations=5,
        seed=42,
    )


@pytest.fixture
def reset_logging():
    yield
    LoggerManager.reset()
