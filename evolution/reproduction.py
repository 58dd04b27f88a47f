"""
Live reproduction helpers: pick the child genome for a parent that is ready to breed.
"""

from __future__ import annotations
from typing import Optional

import numpy as np

from bug.genome import Genome
from evolution.crossover import crossover
from evolution.mutate import mutate
from evolution.selection import is_compatible

ASEXUAL = "asexual"
SEXUAL = "sexual"


def breed(
    parent: Genome,
    rng: np.random.Generator,
    rate: float,
    magnitude: float,
    partner: Optional[Genome] = None,
    mode: str = ASEXUAL,
    bias: float = 0.5,
    compatibility_threshold: float = 0.6,
) -> Genome:
    """
    Asexual: mutate(parent).
    Sexual: mutate(crossover(parent, partner)) when a compatible partner was seen,
    otherwise fall back to asexual.
    """
    if mode == SEXUAL and partner is not None and is_compatible(parent, partner, compatibility_threshold):
        return mutate(crossover(parent, partner, rng, bias=bias), rate, magnitude, rng)
    return mutate(parent, rate, magnitude, rng)
