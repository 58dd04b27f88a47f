import numpy as np
import pytest

from config import SimConfig
from bug.genome import Genome
from world.environment import Environment


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def cfg():
    # quiet world: no ambient food, no seed bugs, dt exactly representable
    return SimConfig(
        tick_duration=0.25,
        seed=42,
        initial_bugs=0,
        food_target=0,
        food_clump_rate=0.0,
    )


@pytest.fixture
def env(cfg):
    return Environment(cfg)


@pytest.fixture
def still_genome():
    return Genome.still()


@pytest.fixture
def seeker_genome():
    """Starter wiring without baby charging: drives straight at visible food."""
    genes = Genome.starter().genes.copy()
    genes[203] = 0.0  # l2 bias of the baby-charging output
    return Genome(genes)
