"""
bugsim module: evolution/crossover.py

Uniform crossover: every gene index comes from exactly one parent.
"""

from __future__ import annotations

import numpy as np

from bug.genome import GENOME_LENGTH, Genome


def crossover(parent_a: Genome, parent_b: Genome, rng: np.random.Generator, bias: float = 0.5) -> Genome:
    """Take each gene from ``parent_a`` with probability ``bias``, else from ``parent_b``."""
    from_a = rng.random(GENOME_LENGTH) < bias
    return Genome(np.where(from_a, parent_a.genes, parent_b.genes))
