"""
bugsim module: world/food.py

Food system:
- Food units are points with an energy value; radius follows energy
- Ambient spawning tops the field up toward a target with gaussian clumps ("grass patches")
- Food sources drop new food inside their shape at a fixed interval
- Eating removes energy; food left at zero energy is gone
"""

from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Dict, List, Optional, Tuple

import numpy as np

from world.physics import wrap_coord


@dataclass
class Food:
    id: int
    x: float
    y: float
    energy: float

    @property
    def radius(self) -> float:
        return math.sqrt(max(0.0, self.energy) / math.pi)

    @property
    def depleted(self) -> bool:
        return self.energy <= 0.0


@dataclass(frozen=True)
class FoodSnapshot:
    id: int
    x: float
    y: float
    energy: float
    radius: float


@dataclass
class FoodSource:
    """
    Generates food around itself over time.

    shape:
      - "rect": uniform inside a box of ``size`` (width, height) centred on (x, y)
      - "circle": uniform radius/angle inside ``radius`` around (x, y)
    """
    x: float
    y: float
    shape: str = "rect"
    size: Tuple[float, float] = (200.0, 200.0)
    radius: float = 100.0
    energy_range: Tuple[float, float] = (0.1, 1.0)
    spawn_interval: float = 1.0  # seconds
    elapsed: float = 0.0

    def __post_init__(self) -> None:
        if self.shape not in ("rect", "circle"):
            raise ValueError(f"unknown food source shape {self.shape!r}")
        if self.spawn_interval <= 0:
            raise ValueError(f"spawn_interval must be positive, got {self.spawn_interval}")
        lo, hi = self.energy_range
        if lo <= 0 or hi < lo:
            raise ValueError(f"energy_range must satisfy 0 < lo <= hi, got {self.energy_range}")

    def proceed(self, dt: float, rng: np.random.Generator) -> List[Tuple[float, float, float]]:
        """Return (x, y, energy) for every food unit due since the last call."""
        self.elapsed += dt
        n = int(self.elapsed // self.spawn_interval)
        self.elapsed -= n * self.spawn_interval

        out: List[Tuple[float, float, float]] = []
        for _ in range(n):
            if self.shape == "rect":
                w, h = self.size
                px = rng.uniform(self.x - w / 2, self.x + w / 2)
                py = rng.uniform(self.y - h / 2, self.y + h / 2)
            else:
                r = rng.uniform(0.0, self.radius)
                a = rng.uniform(0.0, 2 * math.pi)
                px = self.x + math.cos(a) * r
                py = self.y + math.sin(a) * r
            out.append((px, py, float(rng.uniform(*self.energy_range))))
        return out


def spawn_clump(
    cx: float,
    cy: float,
    n: int,
    spread: float,
    energy_range: Tuple[float, float],
    rng: np.random.Generator,
) -> List[Tuple[float, float, float]]:
    """
    Gaussian scatter around (cx, cy) to form natural clumps.
    spread is std-dev in world units.
    """
    xs = rng.normal(cx, spread, n)
    ys = rng.normal(cy, spread, n)
    es = rng.uniform(energy_range[0], energy_range[1], n)
    return [(float(x), float(y), float(e)) for x, y, e in zip(xs, ys, es)]


class FoodField:
    def __init__(
        self,
        w: float,
        h: float,
        target: int = 0,
        clump_rate: float = 0.0,
        energy_range: Tuple[float, float] = (0.5, 8.0),
        clump_size_range: Tuple[int, int] = (4, 16),
        clump_spread_range: Tuple[float, float] = (18.0, 60.0),
        sources: Optional[List[FoodSource]] = None,
    ):
        self.w = w
        self.h = h
        self.items: Dict[int, Food] = {}
        self.next_id = 0

        # spawn tuning
        self.target = target
        self.clump_rate = clump_rate  # clumps per second (approx)
        self.energy_range = energy_range
        self.clump_size_range = clump_size_range
        self.clump_spread_range = clump_spread_range
        self.sources: List[FoodSource] = list(sources or [])

        self.spawn_accum = 0.0

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items.values())

    def get(self, food_id: int) -> Optional[Food]:
        return self.items.get(food_id)

    def add(self, x: float, y: float, energy: float) -> Food:
        if not energy > 0:
            raise ValueError(f"food energy must be positive, got {energy}")
        food = Food(id=self.next_id, x=wrap_coord(x, self.w), y=wrap_coord(y, self.h), energy=energy)
        self.items[food.id] = food
        self.next_id += 1
        return food

    def remove(self, food_id: int) -> None:
        self.items.pop(food_id, None)

    def take(self, food: Food, amount: float) -> float:
        """
        Remove up to ``amount`` energy from ``food``; empty food is dropped
        from the field. Returns the energy taken.
        """
        taken = max(0.0, min(amount, food.energy))
        food.energy -= taken
        if food.depleted:
            self.remove(food.id)
        return taken

    def update(self, dt: float, rng: np.random.Generator) -> int:
        """Run food sources and ambient clump spawning; returns how many units were added."""
        before = self.next_id

        for source in self.sources:
            for x, y, e in source.proceed(dt, rng):
                self.add(x, y, e)

        # replenish toward target with clumps
        deficit = self.target - len(self.items)
        if deficit > 0 and self.clump_rate > 0:
            self.spawn_accum += dt * self.clump_rate
            while self.spawn_accum >= 1.0 and deficit > 0:
                self.spawn_accum -= 1.0
                self._spawn_random_clump(rng)
                deficit = self.target - len(self.items)

        return self.next_id - before

    def _spawn_random_clump(self, rng: np.random.Generator) -> None:
        cx = rng.uniform(0.0, self.w)
        cy = rng.uniform(0.0, self.h)
        n = int(rng.integers(self.clump_size_range[0], self.clump_size_range[1] + 1))
        spread = rng.uniform(*self.clump_spread_range)

        for x, y, e in spawn_clump(cx, cy, n, spread, self.energy_range, rng):
            self.add(x, y, e)

    def snapshot(self) -> List[FoodSnapshot]:
        return [
            FoodSnapshot(id=f.id, x=f.x, y=f.y, energy=f.energy, radius=f.radius)
            for f in sorted(self.items.values(), key=lambda f: f.id)
        ]
