"""
bugsim module: world/environment.py

Environment: owns every bug, the food field and the spatial grids, and
advances the whole population one tick at a time.

Tick order (every bug senses the same pre-tick state):
  sense -> think -> act -> metabolize -> consume -> reproduce -> cull -> spawn food

Births and deaths are collected during the tick and applied afterwards, so
no bug ever sees another bug's half-updated state.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from config import SimConfig
from bug.bug import Bug, BugSnapshot
from bug.genome import Genome
from bug.phenotype import MAX_VISION_RANGE
from evolution.reproduction import breed
from neural.brain import BrainLog, SensorVector, rotation_signal
from world.food import Food, FoodField, FoodSnapshot, FoodSource
from world.physics import apply_actuators, drain_energy, metabolize, torus_delta, wrap_coord
from world.spatial import GridEntry, SpatialGrid, direction_signal, proximity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickReport:
    tick: int
    time: float
    births: int
    deaths: int
    eaten: float
    food_spawned: int


@dataclass
class Perception:
    """What one bug sensed at the start of the tick."""
    bug: Bug
    sensors: SensorVector
    partner: Optional[Bug] = None  # nearest visible bug, a mating candidate


class Environment:
    def __init__(
        self,
        config: Optional[SimConfig] = None,
        food_sources: Optional[Sequence[FoodSource]] = None,
    ):
        self.config = (config if config is not None else SimConfig()).validate()
        cfg = self.config

        self.rng = np.random.default_rng(cfg.seed)
        self._bugs: Dict[int, Bug] = {}
        self.next_bug_id = 0

        self.food_field = FoodField(
            cfg.world_width,
            cfg.world_height,
            target=cfg.food_target,
            clump_rate=cfg.food_clump_rate,
            energy_range=cfg.food_energy_range,
            clump_size_range=cfg.food_clump_size_range,
            clump_spread_range=cfg.food_clump_spread_range,
            sources=list(food_sources or []),
        )

        cell = cfg.cell_size if cfg.cell_size is not None else MAX_VISION_RANGE
        self.bug_grid = SpatialGrid(cfg.world_width, cfg.world_height, cell)
        self.food_grid = SpatialGrid(cfg.world_width, cfg.world_height, cell)

        self.tick = 0
        self.time = 0.0
        self.births = 0
        self.deaths = 0
        self.eaten = 0.0

    @classmethod
    def generate(cls, config: Optional[SimConfig] = None, food_sources: Optional[Sequence[FoodSource]] = None) -> "Environment":
        """Environment seeded with ``initial_bugs`` random bugs and ``food_target`` food units."""
        env = cls(config, food_sources)
        env.scatter_food(env.config.food_target)
        env.populate(env.config.initial_bugs)
        return env

    # ---- seeding + interactive tools ----

    def _take_bug_id(self) -> int:
        bug_id = self.next_bug_id
        self.next_bug_id += 1
        return bug_id

    def populate(self, count: int, genome: Optional[Genome] = None) -> List[int]:
        """Spawn ``count`` bugs at random positions; random genomes unless one is given."""
        cfg = self.config
        return [
            self.spawn_bug(
                float(self.rng.uniform(0.0, cfg.world_width)),
                float(self.rng.uniform(0.0, cfg.world_height)),
                genome=genome,
            )
            for _ in range(count)
        ]

    def scatter_food(self, count: int) -> None:
        cfg = self.config
        for _ in range(count):
            self.spawn_food(
                float(self.rng.uniform(0.0, cfg.world_width)),
                float(self.rng.uniform(0.0, cfg.world_height)),
            )

    def spawn_bug(
        self,
        x: float,
        y: float,
        genome: Optional[Genome] = None,
        rotation: Optional[float] = None,
        energy: Optional[float] = None,
    ) -> int:
        """
        Place a full-size bug. Missing genome/rotation are drawn from the
        environment's random source; energy defaults to full capacity.
        """
        cfg = self.config
        if genome is None:
            genome = Genome.random(self.rng)
        if rotation is None:
            rotation = float(self.rng.uniform(0.0, 2 * math.pi))
        bug = Bug.create(
            self._take_bug_id(),
            genome,
            wrap_coord(x, cfg.world_width),
            wrap_coord(y, cfg.world_height),
            rotation=rotation,
            energy=energy,
            vision_half_arc=cfg.vision_half_arc,
        )
        self._bugs[bug.id] = bug
        return bug.id

    def spawn_food(self, x: float, y: float, energy: Optional[float] = None) -> int:
        if energy is None:
            energy = float(self.rng.uniform(*self.config.food_energy_range))
        return self.food_field.add(x, y, energy).id

    def distance(self, x1: float, y1: float, x2: float, y2: float) -> float:
        """Shortest distance between two points on the wrapped world."""
        cfg = self.config
        return math.hypot(torus_delta(x1, x2, cfg.world_width), torus_delta(y1, y2, cfg.world_height))

    def bug_at(self, x: float, y: float, reach: float) -> Optional[int]:
        """Id of the bug nearest to (x, y) within ``reach``, lower id on ties."""
        best, best_d = None, reach
        for b in self._ordered_bugs():
            d = self.distance(x, y, b.x, b.y)
            if d < best_d or (best is None and d <= best_d):
                best, best_d = b.id, d
        return best

    def nuke(self, x: float, y: float, radius: float) -> Tuple[int, int]:
        """Remove every bug and food unit within ``radius``. Returns (bugs, food) removed."""
        bug_ids = [b.id for b in self._bugs.values() if self.distance(x, y, b.x, b.y) <= radius]
        food_ids = [f.id for f in self.food_field if self.distance(x, y, f.x, f.y) <= radius]
        for bug_id in bug_ids:
            del self._bugs[bug_id]
        for food_id in food_ids:
            self.food_field.remove(food_id)

        logger.info("nuke at (%.1f, %.1f) r=%.1f removed %d bugs, %d food", x, y, radius, len(bug_ids), len(food_ids))
        return len(bug_ids), len(food_ids)

    # ---- read-only accessors ----

    def __len__(self) -> int:
        return len(self._bugs)

    @property
    def food_count(self) -> int:
        return len(self.food_field)

    def bugs(self) -> List[BugSnapshot]:
        return [b.snapshot() for b in self._ordered_bugs()]

    def food(self) -> List[FoodSnapshot]:
        return self.food_field.snapshot()

    def bug(self, bug_id: int) -> BugSnapshot:
        return self._bugs[bug_id].snapshot()

    def get(self, bug_id: int) -> Bug:
        """Live, mutable bug; for tools and tests that need to poke at state."""
        return self._bugs[bug_id]

    def brain_log(self, bug_id: int) -> Optional[BrainLog]:
        """Most recent sensor/actuator pair, or None before the bug's first tick."""
        return self._bugs[bug_id].last_brain_log

    def stats(self) -> dict:
        pop = len(self._bugs)
        return {
            "tick": self.tick,
            "time": self.time,
            "population": pop,
            "food": len(self.food_field),
            "births": self.births,
            "deaths": self.deaths,
            "eaten": self.eaten,
            "avg_energy": sum(b.energy for b in self._bugs.values()) / pop if pop else 0.0,
        }

    # ---- tick ----

    def _ordered_bugs(self) -> List[Bug]:
        return sorted(self._bugs.values(), key=lambda b: b.id)

    def _rebuild_grids(self) -> None:
        self.bug_grid.rebuild(GridEntry(b.id, b.x, b.y, b) for b in self._bugs.values())
        self.food_grid.rebuild(GridEntry(f.id, f.x, f.y, f) for f in self.food_field)

    def _sense(self, bug: Bug) -> Perception:
        food_hit = self.food_grid.nearest(
            bug.x, bug.y, bug.vision_range, heading=bug.rotation, half_arc=bug.vision_half_arc,
            accept=lambda e: not e.item.depleted,
        )
        bug_hit = self.bug_grid.nearest(
            bug.x, bug.y, bug.vision_range, heading=bug.rotation, half_arc=bug.vision_half_arc, exclude_id=bug.id
        )

        sensors = SensorVector(rotation=rotation_signal(bug.rotation))
        if food_hit is not None:
            sensors = sensors._replace(
                food_proximity=proximity(food_hit.distance, bug.vision_range),
                food_direction=direction_signal(food_hit.direction),
            )
        partner = None
        if bug_hit is not None:
            partner = bug_hit.entry.item
            sensors = sensors._replace(
                bug_proximity=proximity(bug_hit.distance, bug.vision_range),
                bug_direction=direction_signal(bug_hit.direction),
                bug_color=partner.color.signal,
            )
        return Perception(bug=bug, sensors=sensors, partner=partner)

    def _consume(self) -> float:
        cfg = self.config
        food_items = self.food_field.items

        def edible(e: GridEntry) -> bool:
            return e.id in food_items and not e.item.depleted

        total = 0.0
        for bug in self._ordered_bugs():
            room = bug.energy_capacity - bug.energy
            if bug.energy <= 0.0 or room <= 0.0:
                continue
            hit = self.food_grid.nearest(bug.x, bug.y, bug.size * cfg.eat_radius_per_size, accept=edible)
            if hit is None:
                continue
            food: Food = hit.entry.item
            taken = self.food_field.take(food, room)
            bug.energy += taken
            total += taken
        return total

    def _reproduce(self, perceptions: List[Perception]) -> List[Bug]:
        cfg = self.config
        children: List[Bug] = []
        for p in perceptions:
            parent = p.bug
            capacity = parent.baby_charge_capacity
            if capacity <= 0.0 or parent.baby_charge < capacity:
                continue
            if len(self._bugs) + len(children) >= cfg.max_population:
                continue

            genome = breed(
                parent.genome,
                self.rng,
                cfg.mutation_rate,
                cfg.mutation_magnitude,
                partner=p.partner.genome if p.partner is not None else None,
                mode=cfg.reproduction_mode,
                bias=cfg.crossover_bias,
                compatibility_threshold=cfg.compatibility_threshold,
            )
            child = Bug.create(
                self._take_bug_id(),
                genome,
                parent.x,
                parent.y,
                rotation=float(self.rng.uniform(0.0, 2 * math.pi)),
                energy=parent.baby_charge,
                size_fraction=cfg.birth_size_fraction,
                vision_half_arc=cfg.vision_half_arc,
            )
            parent.baby_charge = 0.0
            drain_energy(parent, cfg.reproduction_cost)
            children.append(child)
            logger.debug("bug %d gave birth to %d", parent.id, child.id)
        return children

    def step(self, speed: float = 1.0) -> TickReport:
        """Advance exactly one tick of ``tick_duration * speed`` seconds."""
        if speed <= 0:
            raise ValueError(f"speed multiplier must be positive, got {speed}")
        cfg = self.config
        dt = cfg.tick_duration * speed

        # sense
        self._rebuild_grids()
        perceptions = [self._sense(bug) for bug in self._ordered_bugs()]

        # think
        for p in perceptions:
            p.bug.last_brain_log = p.bug.brain.evaluate_verbose(p.sensors)

        # act + metabolize; each bug only touches its own state
        for p in perceptions:
            actuators = p.bug.last_brain_log.actuators
            spent = apply_actuators(p.bug, actuators, dt, cfg)
            metabolize(p.bug, actuators, dt, cfg, spent)

        eaten = self._consume()
        children = self._reproduce(perceptions)

        # cull, then admit newborns
        dead = [b for b in self._ordered_bugs() if b.death_cause() is not None]
        for b in dead:
            logger.debug("bug %d died (%s) at age %.1f", b.id, b.death_cause(), b.age)
            del self._bugs[b.id]
        for child in children:
            self._bugs[child.id] = child

        spawned = self.food_field.update(dt, self.rng)

        self.tick += 1
        self.time += dt
        self.births += len(children)
        self.deaths += len(dead)
        self.eaten += eaten
        return TickReport(
            tick=self.tick,
            time=self.time,
            births=len(children),
            deaths=len(dead),
            eaten=eaten,
            food_spawned=spawned,
        )

    def run(self, ticks: int, speed: float = 1.0) -> List[TickReport]:
        return [self.step(speed) for _ in range(ticks)]
