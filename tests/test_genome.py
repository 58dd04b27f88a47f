import numpy as np
import pytest

from bug.genome import (
    BRAIN_GENES,
    GENE_HIGH,
    GENE_LOW,
    GENOME_LENGTH,
    SLOTS,
    Genome,
    GenomeError,
    Slot,
    check_slot_layout,
)


def test_slots_cover_genome_without_overlap():
    covered = np.zeros(GENOME_LENGTH, dtype=int)
    for slot in SLOTS.values():
        covered[slot.as_slice()] += 1
    assert covered.tolist() == [1] * GENOME_LENGTH
    assert SLOTS["l2_biases"].stop == BRAIN_GENES


def test_check_slot_layout_rejects_overlap():
    slots = {"a": Slot(0, 10, 0.0, 1.0), "b": Slot(5, 12, 0.0, 1.0)}
    with pytest.raises(ValueError, match="overlaps"):
        check_slot_layout(slots, 16)


def test_check_slot_layout_rejects_out_of_bounds():
    with pytest.raises(ValueError):
        check_slot_layout({"a": Slot(0, 20, 0.0, 1.0)}, 16)
    with pytest.raises(ValueError):
        check_slot_layout({"a": Slot(0, 4, 0.0, 1.0)}, 0)


@pytest.mark.parametrize("length", [0, 255, 257])
def test_wrong_length_fails_fast(length):
    with pytest.raises(GenomeError):
        Genome(np.zeros(length))


def test_genes_are_read_only():
    g = Genome(np.zeros(GENOME_LENGTH))
    with pytest.raises(ValueError):
        g.genes[0] = 1.0


def test_construction_copies_input():
    src = np.zeros(GENOME_LENGTH)
    g = Genome(src)
    src[0] = 5.0
    assert g.genes[0] == 0.0


def test_random_genome_within_slot_ranges(rng):
    for _ in range(20):
        g = Genome.random(rng)
        assert len(g) == GENOME_LENGTH
        assert g.in_bounds()


def test_equality_and_hash():
    a = Genome.still()
    b = Genome.still()
    assert a == b
    assert hash(a) == hash(b)
    assert a != Genome.still(max_age=0.5)


def test_from_slots_fills_named_slots():
    g = Genome.from_slots({"vision": 0.25, "color": (0.1, 0.2, 0.3)}, fill=0.7)
    assert g.slot("vision").tolist() == [0.25]
    assert g.slot("color").tolist() == [0.1, 0.2, 0.3]
    assert g.slot("max_age").tolist() == [0.7]


def test_builtin_genomes_in_bounds():
    assert Genome.still().in_bounds()
    assert Genome.starter().in_bounds()
    assert GENE_LOW[0] == -2.0 and GENE_HIGH[0] == 2.0


@pytest.mark.parametrize("index", [0, 208, 255])
@pytest.mark.parametrize("value", [np.nan, np.inf, -np.inf])
def test_non_finite_genes_fail_fast(index, value):
    genes = Genome.still().genes.copy()
    genes[index] = value
    with pytest.raises(GenomeError, match="finite"):
        Genome(genes)
