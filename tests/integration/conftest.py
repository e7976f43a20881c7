"""
Shared fixtures for integration tests.
"""

from itertools import count

import pytest

from evochase.run.config import Config


@pytest.fixture(autouse=True)
def reset_individual_ids():
    """Reset the Individual ID generator, so that IDs start from 0 in each test."""
    from evochase.phenotype.individual import Individual
    Individual._id_generator = count(0)
    yield


@pytest.fixture
def pursuit_config(tmp_path):
    """A small pursuit game configuration, writing into a temporary folder."""
    config = Config()
    config.runners_population_size  = 8
    config.catchers_population_size = 4
    config.structure                = "4, 5, 2"
    config.max_number_generations   = 3
    config.round_time               = 3.0
    config.time_based_scoring       = True
    config.output_folder            = str(tmp_path / 'results')
    config.run_name                 = 'pursuit'
    config.seed                     = 42
    return config
