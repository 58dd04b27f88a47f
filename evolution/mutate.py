"""
bugsim module: evolution/mutate.py

Mutation operator for fixed-length genomes.
"""

from __future__ import annotations

import numpy as np

from bug.genome import GENE_HIGH, GENE_LOW, GENOME_LENGTH, Genome


def mutate(genome: Genome, rate: float, magnitude: float, rng: np.random.Generator) -> Genome:
    """
    Return a mutated copy of ``genome``.

    - Each gene is picked independently with probability ``rate``.
    - Picked genes move by a uniform offset in [-magnitude, magnitude].
    - Every gene is clipped back into its slot's valid range.
    """
    picked = rng.random(GENOME_LENGTH) < rate
    offsets = rng.uniform(-magnitude, magnitude, GENOME_LENGTH)
    genes = np.where(picked, genome.genes + offsets, genome.genes)
    return Genome(np.clip(genes, GENE_LOW, GENE_HIGH))
