"""
Simulation tuning knobs.

Module-level values are the defaults; ``SimConfig`` bundles them so an
environment can be built with its own validated copy.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional, Tuple

# Population controls
START_POP = 25
MAX_POP = 1200

# World
WORLD_W, WORLD_H = 2000.0, 2000.0
TICK_SECONDS = 0.1

# Runtime pacing
SIM_SPEED = 2  # simulation sub-steps per rendered frame
SCREEN_W, SCREEN_H = 980, 720

# Metabolism
BASAL_METABOLIC_RATE = 0.1  # energy per size per second
MOVEMENT_COST = 0.01        # energy per size per unit distance
ROTATION_COST = 0.01        # energy per size per radian
GROWTH_RATE = 0.05          # size per second
GROWTH_COST = 10.0          # energy per unit size grown
HEAT_PER_ENERGY = 1.0
HEAT_DISSIPATION = 0.1      # fraction of heat lost per second

# Eating + reproduction
EAT_RADIUS_PER_SIZE = 20.0
REPRO_COST = 1.0
BIRTH_SIZE_FRACTION = 0.5
REPRODUCTION_MODE = "asexual"
COMPATIBILITY_THRESHOLD = 0.6

# Vision
VISION_HALF_ARC = math.pi * 0.75

# Food field
FOOD_TARGET_PELLETS = 520
FOOD_CLUMP_RATE = 1.3  # clumps per second
FOOD_ENERGY_RANGE = (0.5, 8.0)
FOOD_CLUMP_SIZE_RANGE = (4, 16)
FOOD_CLUMP_SPREAD_RANGE = (18.0, 60.0)

# Mutation
MUT_RATE = 0.05
MUT_MAGNITUDE = 0.2
CROSSOVER_BIAS = 0.5

REPRODUCTION_MODES = ("asexual", "sexual")


class ConfigError(ValueError):
    """Raised when simulation constants are out of their valid range."""


@dataclass
class SimConfig:
    world_width: float = WORLD_W
    world_height: float = WORLD_H
    tick_duration: float = TICK_SECONDS
    seed: Optional[int] = None

    initial_bugs: int = START_POP
    max_population: int = MAX_POP

    basal_metabolic_rate: float = BASAL_METABOLIC_RATE
    movement_cost: float = MOVEMENT_COST
    rotation_cost: float = ROTATION_COST
    growth_rate: float = GROWTH_RATE
    growth_cost: float = GROWTH_COST
    heat_per_energy: float = HEAT_PER_ENERGY
    heat_dissipation: float = HEAT_DISSIPATION

    eat_radius_per_size: float = EAT_RADIUS_PER_SIZE
    reproduction_cost: float = REPRO_COST
    birth_size_fraction: float = BIRTH_SIZE_FRACTION
    reproduction_mode: str = REPRODUCTION_MODE
    compatibility_threshold: float = COMPATIBILITY_THRESHOLD

    vision_half_arc: float = VISION_HALF_ARC
    cell_size: Optional[float] = None  # defaults to the largest possible vision range

    food_target: int = FOOD_TARGET_PELLETS
    food_clump_rate: float = FOOD_CLUMP_RATE
    food_energy_range: Tuple[float, float] = FOOD_ENERGY_RANGE
    food_clump_size_range: Tuple[int, int] = FOOD_CLUMP_SIZE_RANGE
    food_clump_spread_range: Tuple[float, float] = FOOD_CLUMP_SPREAD_RANGE

    mutation_rate: float = MUT_RATE
    mutation_magnitude: float = MUT_MAGNITUDE
    crossover_bias: float = CROSSOVER_BIAS

    def validate(self) -> "SimConfig":
        """Raise ConfigError on the first invalid value, otherwise return self."""
        if self.world_width <= 0 or self.world_height <= 0:
            raise ConfigError(f"world bounds must be positive, got {self.world_width}x{self.world_height}")
        if self.tick_duration <= 0:
            raise ConfigError(f"tick_duration must be positive, got {self.tick_duration}")
        if self.initial_bugs < 0 or self.max_population < 0 or self.food_target < 0:
            raise ConfigError("population and food counts must be non-negative")

        non_negative = (
            "basal_metabolic_rate",
            "movement_cost",
            "rotation_cost",
            "growth_rate",
            "growth_cost",
            "heat_per_energy",
            "heat_dissipation",
            "eat_radius_per_size",
            "reproduction_cost",
            "compatibility_threshold",
            "food_clump_rate",
            "mutation_magnitude",
        )
        for name in non_negative:
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be non-negative, got {getattr(self, name)}")

        for name in ("mutation_rate", "crossover_bias"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {value}")

        if not 0.0 < self.birth_size_fraction <= 1.0:
            raise ConfigError(f"birth_size_fraction must be within (0, 1], got {self.birth_size_fraction}")
        if not 0.0 < self.vision_half_arc <= math.pi:
            raise ConfigError(f"vision_half_arc must be within (0, pi], got {self.vision_half_arc}")
        if self.reproduction_mode not in REPRODUCTION_MODES:
            raise ConfigError(f"reproduction_mode must be one of {REPRODUCTION_MODES}, got {self.reproduction_mode!r}")
        if self.cell_size is not None and self.cell_size <= 0:
            raise ConfigError(f"cell_size must be positive, got {self.cell_size}")

        lo, hi = self.food_energy_range
        if lo <= 0 or hi < lo:
            raise ConfigError(f"food_energy_range must satisfy 0 < lo <= hi, got {self.food_energy_range}")
        n_lo, n_hi = self.food_clump_size_range
        if n_lo < 0 or n_hi < n_lo:
            raise ConfigError(f"food_clump_size_range must satisfy 0 <= lo <= hi, got {self.food_clump_size_range}")
        s_lo, s_hi = self.food_clump_spread_range
        if s_lo < 0 or s_hi < s_lo:
            raise ConfigError(f"food_clump_spread_range must satisfy 0 <= lo <= hi, got {self.food_clump_spread_range}")
        return self
