"""
bugsim module: bug/bug.py

Bug container: genome + cached phenotype/brain + mutable runtime state.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import math

import numpy as np

from bug.genome import Genome
from bug.phenotype import Color, Phenotype
from neural.brain import Brain, BrainLog

ENERGY_CAPACITY_PER_SIZE = 100.0
HEAT_CAPACITY_PER_SIZE = 100.0

DEATH_STARVATION = "starvation"
DEATH_AGE = "age"
DEATH_HEAT = "heat"


@dataclass(frozen=True, eq=False)
class BugSnapshot:
    """Read-only copy of a bug's state for callers outside the tick."""
    id: int
    x: float
    y: float
    rotation: float
    size: float
    max_size: float
    energy: float
    energy_capacity: float
    age: float
    max_age: float
    baby_charge: float
    baby_charge_capacity: float
    heat: float
    heat_capacity: float
    vision_range: float
    vision_half_arc: float
    color: Color
    genome: np.ndarray  # read-only view; the genome itself is immutable


@dataclass(eq=False)
class Bug:
    id: int
    genome: Genome
    phenotype: Phenotype
    brain: Brain
    x: float
    y: float
    rotation: float
    size: float
    energy: float
    vision_half_arc: float = math.pi
    age: float = 0.0
    baby_charge: float = 0.0
    heat: float = 0.0
    last_brain_log: Optional[BrainLog] = None

    @staticmethod
    def create(
        bug_id: int,
        genome: Genome,
        x: float,
        y: float,
        rotation: float = 0.0,
        energy: Optional[float] = None,
        size_fraction: float = 1.0,
        vision_half_arc: float = math.pi,
    ) -> "Bug":
        """
        Decode phenotype and brain once. ``energy`` defaults to full capacity
        and is capped at capacity otherwise.
        """
        phenotype = Phenotype.decode(genome)
        bug = Bug(
            id=bug_id,
            genome=genome,
            phenotype=phenotype,
            brain=Brain.decode(genome),
            x=x,
            y=y,
            rotation=rotation % (2 * math.pi),
            size=phenotype.max_size * size_fraction,
            energy=0.0,
            vision_half_arc=vision_half_arc,
        )
        cap = bug.energy_capacity
        bug.energy = cap if energy is None else max(0.0, min(cap, energy))
        return bug

    @property
    def pos(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def energy_capacity(self) -> float:
        return self.size * ENERGY_CAPACITY_PER_SIZE

    @property
    def heat_capacity(self) -> float:
        return self.size * HEAT_CAPACITY_PER_SIZE

    @property
    def baby_charge_capacity(self) -> float:
        return self.size * self.phenotype.baby_charge_per_size

    @property
    def vision_range(self) -> float:
        return self.phenotype.vision_range

    @property
    def color(self) -> Color:
        return self.phenotype.color

    def death_cause(self) -> Optional[str]:
        if self.energy <= 0.0:
            return DEATH_STARVATION
        if self.age >= self.phenotype.max_age:
            return DEATH_AGE
        if self.heat >= self.heat_capacity:
            return DEATH_HEAT
        return None

    def snapshot(self) -> BugSnapshot:
        return BugSnapshot(
            id=self.id,
            x=self.x,
            y=self.y,
            rotation=self.rotation,
            size=self.size,
            max_size=self.phenotype.max_size,
            energy=self.energy,
            energy_capacity=self.energy_capacity,
            age=self.age,
            max_age=self.phenotype.max_age,
            baby_charge=self.baby_charge,
            baby_charge_capacity=self.baby_charge_capacity,
            heat=self.heat,
            heat_capacity=self.heat_capacity,
            vision_range=self.vision_range,
            vision_half_arc=self.vision_half_arc,
            color=self.color,
            genome=self.genome.genes,
        )
