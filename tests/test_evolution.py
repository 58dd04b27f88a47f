import numpy as np
import pytest

from bug.genome import GENE_HIGH, GENE_LOW, GENOME_LENGTH, Genome
from evolution.crossover import crossover
from evolution.mutate import mutate
from evolution.reproduction import ASEXUAL, SEXUAL, breed
from evolution.selection import genetic_distance, is_compatible


@pytest.mark.parametrize("seed", [0, 1, 2])
@pytest.mark.parametrize("rate,magnitude", [(0.05, 0.2), (1.0, 0.5), (1.0, 10.0), (0.5, 100.0)])
def test_mutate_stays_in_bounds(seed, rate, magnitude):
    rng = np.random.default_rng(seed)
    g = Genome.random(rng)
    for _ in range(5):
        g = mutate(g, rate, magnitude, rng)
        assert np.all(g.genes >= GENE_LOW)
        assert np.all(g.genes <= GENE_HIGH)


def test_mutate_zero_rate_is_identity(rng):
    g = Genome.random(rng)
    assert mutate(g, 0.0, 1.0, rng) == g


def test_mutate_full_rate_changes_genes(rng):
    g = Genome.random(rng)
    child = mutate(g, 1.0, 0.5, rng)
    assert child != g
    assert g.in_bounds()  # parent untouched


def test_crossover_sources_each_gene_from_one_parent(rng):
    a, b = Genome.random(rng), Genome.random(rng)
    child = crossover(a, b, rng)
    assert len(child) == GENOME_LENGTH
    from_a = child.genes == a.genes
    from_b = child.genes == b.genes
    assert np.all(from_a | from_b)
    assert from_a.any() and from_b.any()


def test_crossover_bias_extremes(rng):
    a, b = Genome.random(rng), Genome.random(rng)
    assert crossover(a, b, rng, bias=1.0) == a
    assert crossover(a, b, rng, bias=0.0) == b


def test_genetic_distance():
    a = Genome(np.zeros(GENOME_LENGTH))
    b = Genome(np.full(GENOME_LENGTH, 0.5))
    assert genetic_distance(a, a) == 0.0
    assert genetic_distance(a, b) == pytest.approx(0.5)
    assert genetic_distance(b, a) == genetic_distance(a, b)
    assert is_compatible(a, b, 0.5)
    assert not is_compatible(a, b, 0.4)


def test_breed_asexual_ignores_partner(rng):
    parent, partner = Genome.still(), Genome.starter()
    assert breed(parent, rng, 0.0, 0.2, partner=partner, mode=ASEXUAL) == parent


def test_breed_sexual_uses_compatible_partner(rng):
    parent = Genome.still()
    partner = Genome.still(max_age=0.8)
    child = breed(parent, rng, 0.0, 0.2, partner=partner, mode=SEXUAL, bias=0.0)
    assert child == partner


def test_breed_sexual_falls_back_without_compatible_partner(rng):
    parent = Genome.still()
    far = Genome(np.where(np.arange(GENOME_LENGTH) < 208, 2.0, 1.0))
    assert breed(parent, rng, 0.0, 0.2, partner=far, mode=SEXUAL, compatibility_threshold=0.1) == parent
    assert breed(parent, rng, 0.0, 0.2, partner=None, mode=SEXUAL) == parent
