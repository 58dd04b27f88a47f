"""
bugsim module: world/presets.py

Ready-made environments. Both start from one hand-wired starter bug in the
centre plus random seed bugs, and rely on food sources rather than ambient
clumps to keep the world fed.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Optional

from config import SimConfig
from bug.genome import Genome
from world.environment import Environment
from world.food import FoodSource

FOOD_SCATTER = 1024
MIN_SOURCE_ENERGY = 0.05


def _seeded(config: Optional[SimConfig], seed: Optional[int]) -> SimConfig:
    cfg = config if config is not None else SimConfig()
    return replace(cfg, seed=seed if seed is not None else cfg.seed, food_target=0)


def _finish(env: Environment, initial_food: int) -> Environment:
    cfg = env.config
    env.scatter_food(initial_food)
    env.spawn_bug(cfg.world_width / 2, cfg.world_height / 2, genome=Genome.starter())
    env.populate(max(0, cfg.initial_bugs - 1))
    return env


def less_food_further_from_center(seed: Optional[int] = None, config: Optional[SimConfig] = None) -> Environment:
    """
    Nested square sources around the centre: each ring is twice as wide,
    spawns food with twice the max energy, and spawns four times less often.
    """
    cfg = _seeded(config, seed)
    cx, cy = cfg.world_width / 2, cfg.world_height / 2
    base = min(cfg.world_width, cfg.world_height) / 8

    sources = [
        FoodSource(
            x=cx,
            y=cy,
            shape="rect",
            size=(base * 2 ** i, base * 2 ** i),
            energy_range=(MIN_SOURCE_ENERGY, float(2 ** i)),
            spawn_interval=float(4 ** i),
        )
        for i in range(4)
    ]
    return _finish(Environment(cfg, food_sources=sources), initial_food=FOOD_SCATTER)


def one_big_circle(seed: Optional[int] = None, config: Optional[SimConfig] = None) -> Environment:
    """A single wide circular source dropping rich food every few seconds."""
    cfg = _seeded(config, seed)
    sources = [
        FoodSource(
            x=cfg.world_width / 2,
            y=cfg.world_height / 2,
            shape="circle",
            radius=min(cfg.world_width, cfg.world_height) / 2,
            energy_range=(MIN_SOURCE_ENERGY, 16.0),
            spawn_interval=0.5,
        )
    ]
    return _finish(Environment(cfg, food_sources=sources), initial_food=FOOD_SCATTER)


PRESETS = {
    "less_food_further_from_center": less_food_further_from_center,
    "one_big_circle": one_big_circle,
}
