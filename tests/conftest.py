"""Pytest configuration and shared fixtures."""

import pytest
import random
import sys
from pathlib import Path

import numpy as np

# Add the source directory to the Python path
src_dir = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_dir))


@pytest.fixture(autouse=True)
def set_random_seeds():
    """Seed both random number generators, so every test is reproducible."""
    np.random.seed(42)
    random.seed(42)
    yield


@pytest.fixture
def default_config():
    """Provide a Config holding the default parameters."""
    from evodriver.run.config import Config
    return Config()


@pytest.fixture
def small_config():
    """A Config for a small population of small networks."""
    from evodriver.run.config import Config
    config = Config()
    config.population_size        = 6
    config.topology               = "2, 3, 1"
    config.max_number_generations = 3
    return config
