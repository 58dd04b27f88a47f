"""
bugsim module: evolution/selection.py

Partner selection helpers.
"""

from __future__ import annotations

import numpy as np

from bug.genome import Genome


def genetic_distance(a: Genome, b: Genome) -> float:
    return float(np.mean(np.abs(a.genes - b.genes)))


def is_compatible(a: Genome, b: Genome, threshold: float) -> bool:
    return genetic_distance(a, b) <= threshold
