import math

import pytest

from config import ConfigError, SimConfig


def test_defaults_are_valid():
    cfg = SimConfig()
    assert cfg.validate() is cfg


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


@pytest.mark.parametrize("overrides", [
    {"world_width": 0.0},
    {"world_height": -5.0},
    {"tick_duration": 0.0},
    {"initial_bugs": -1},
    {"max_population": -1},
    {"movement_cost": -0.1},
    {"heat_dissipation": -1.0},
    {"mutation_rate": 1.5},
    {"crossover_bias": -0.1},
    {"birth_size_fraction": 0.0},
    {"vision_half_arc": 4.0},
    {"reproduction_mode": "budding"},
    {"cell_size": 0.0},
    {"food_energy_range": (5.0, 1.0)},
    {"food_energy_range": (0.0, 1.0)},
    {"food_clump_size_range": (-1, 3)},
    {"food_clump_spread_range": (10.0, 5.0)},
])
def test_invalid_values_rejected(overrides):
    with pytest.raises(ConfigError):
        SimConfig(**overrides).validate()


def test_boundary_values_accepted():
    SimConfig(
        mutation_rate=0.0,
        crossover_bias=1.0,
        birth_size_fraction=1.0,
        vision_half_arc=math.pi,
        reproduction_mode="sexual",
        max_population=0,
    ).validate()
