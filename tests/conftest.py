"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

import numpy as np
from loguru import logger

# Add the project root to the Python path (for the 'examples' package)
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))


@pytest.fixture
def rng():
    """A seeded random generator, for reproducible random decisions."""
    return np.random.default_rng(42)


@pytest.fixture
def config():
    """A default configuration, with small populations."""
    from evochase.run.config import Config
    config = Config()
    config.runners_population_size = 6
    config.catchers_population_size = 4
    config.structure = (4, 3, 2)
    return config


@pytest.fixture
def log_messages():
    """Collect the messages logged through loguru during a test."""
    messages = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{level}|{message}")
    yield messages
    logger.remove(handler_id)
