"""
bugsim module: bug/phenotype.py

Body traits decoded from the non-brain genome slots.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

from bug.genome import Genome

MAX_AGE_SCALE = 600.0        # seconds
MAX_SIZE_SCALE = 2.0
BABY_CHARGE_SCALE = 50.0     # energy per unit size
VISION_SCALE = 100.0         # world units

# Three genome-driven channels; alpha is fixed and never reaches the brain.
COLOR_CHANNELS = 3

# Largest vision range any genome can decode to (gene upper bound is 1.0).
MAX_VISION_RANGE = VISION_SCALE


@dataclass(frozen=True)
class Color:
    r: float
    g: float
    b: float
    a: float = 1.0

    @property
    def signal(self) -> float:
        """Scalar fed to the brain's color sensor, in [0, 1]."""
        return (self.r + self.g + self.b) / COLOR_CHANNELS

    def rgb255(self) -> Tuple[int, int, int]:
        return (int(self.r * 255), int(self.g * 255), int(self.b * 255))


@dataclass(frozen=True)
class Phenotype:
    max_age: float
    max_size: float
    baby_charge_per_size: float
    vision_range: float
    color: Color

    @staticmethod
    def decode(genome: Genome) -> "Phenotype":
        r, g, b = (min(1.0, max(0.0, float(c))) for c in genome.slot("color"))
        return Phenotype(
            max_age=abs(float(genome.slot("max_age")[0])) * MAX_AGE_SCALE,
            max_size=abs(float(genome.slot("max_size")[0])) * MAX_SIZE_SCALE,
            baby_charge_per_size=abs(float(genome.slot("baby_charge")[0])) * BABY_CHARGE_SCALE,
            vision_range=abs(float(genome.slot("vision")[0])) * VISION_SCALE,
            color=Color(r=r, g=g, b=b),
        )
