"""
bugsim module: bug/genome.py

Fixed-length genome for bugs.

Design goals:
- 256 float genes in a read-only numpy buffer (immutable after creation)
- Named, non-overlapping slot ranges shared by the brain and phenotype decoders
- Every slot declares the valid range its genes are drawn from and clipped into
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Sequence, Tuple, Union

import numpy as np

GENOME_LENGTH = 256


class GenomeError(ValueError):
    """A genome (or genome slice) of the wrong length or with non-finite genes was handed to a decoder."""


@dataclass(frozen=True)
class Slot:
    start: int
    stop: int
    low: float
    high: float

    @property
    def size(self) -> int:
        return self.stop - self.start

    def as_slice(self) -> slice:
        return slice(self.start, self.stop)


# Brain region: layer-1 is 8 rows x 16 inputs, layer-2 is 8 rows x 8 hidden.
SLOTS: Dict[str, Slot] = {
    "l1_weights": Slot(0, 128, -2.0, 2.0),
    "l2_weights": Slot(128, 192, -2.0, 2.0),
    "l1_biases": Slot(192, 200, -2.0, 2.0),
    "l2_biases": Slot(200, 208, -2.0, 2.0),
    "max_age": Slot(208, 209, 0.05, 1.0),
    "max_size": Slot(209, 210, 0.05, 1.0),
    "baby_charge": Slot(210, 211, 0.05, 1.0),
    "vision": Slot(211, 212, 0.05, 1.0),
    "color": Slot(212, 215, 0.0, 1.0),
    "reserved": Slot(215, 256, 0.0, 1.0),
}

BRAIN_GENES = 208


def check_slot_layout(slots: Mapping[str, Slot], length: int) -> None:
    """
    Raise ValueError if any slot is empty, out of bounds, inverted or overlaps another.
    """
    if length <= 0:
        raise ValueError(f"genome length must be positive, got {length}")
    ordered = sorted(slots.items(), key=lambda kv: kv[1].start)
    prev_name, prev_stop = None, 0
    for name, slot in ordered:
        if slot.size <= 0:
            raise ValueError(f"slot {name!r} is empty")
        if slot.start < 0 or slot.stop > length:
            raise ValueError(f"slot {name!r} [{slot.start}, {slot.stop}) does not fit a genome of {length}")
        if slot.start < prev_stop:
            raise ValueError(f"slot {name!r} overlaps slot {prev_name!r}")
        if slot.high < slot.low:
            raise ValueError(f"slot {name!r} has an inverted range")
        prev_name, prev_stop = name, slot.stop


def _bounds(slots: Mapping[str, Slot], length: int) -> Tuple[np.ndarray, np.ndarray]:
    low = np.zeros(length)
    high = np.zeros(length)
    for slot in slots.values():
        low[slot.as_slice()] = slot.low
        high[slot.as_slice()] = slot.high
    low.setflags(write=False)
    high.setflags(write=False)
    return low, high


check_slot_layout(SLOTS, GENOME_LENGTH)
GENE_LOW, GENE_HIGH = _bounds(SLOTS, GENOME_LENGTH)


GenesLike = Union["Genome", Sequence[float], np.ndarray]


@dataclass(frozen=True, eq=False)
class Genome:
    """
    Immutable gene buffer. Construct from any float sequence of length GENOME_LENGTH.
    """
    genes: np.ndarray

    def __post_init__(self) -> None:
        arr = np.array(self.genes, dtype=np.float64)
        if arr.shape != (GENOME_LENGTH,):
            raise GenomeError(f"genome must hold exactly {GENOME_LENGTH} genes, got shape {arr.shape}")
        if not np.all(np.isfinite(arr)):
            bad = np.flatnonzero(~np.isfinite(arr)).tolist()
            raise GenomeError(f"genome genes must be finite, got nan/inf at {bad}")
        arr.setflags(write=False)
        object.__setattr__(self, "genes", arr)

    def __len__(self) -> int:
        return GENOME_LENGTH

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Genome):
            return NotImplemented
        return bool(np.array_equal(self.genes, other.genes))

    def __hash__(self) -> int:
        return hash(self.genes.tobytes())

    def slot(self, name: str) -> np.ndarray:
        return self.genes[SLOTS[name].as_slice()]

    def in_bounds(self) -> bool:
        return bool(np.all((self.genes >= GENE_LOW) & (self.genes <= GENE_HIGH)))

    def to_list(self) -> list:
        return self.genes.tolist()

    @staticmethod
    def random(rng: np.random.Generator) -> "Genome":
        return Genome(rng.uniform(GENE_LOW, GENE_HIGH))

    @staticmethod
    def from_slots(values: Mapping[str, Union[float, Iterable[float]]], fill: float = 0.0) -> "Genome":
        """
        Build a genome from per-slot values; unnamed genes take ``fill``.
        A scalar value fills its whole slot.
        """
        genes = np.full(GENOME_LENGTH, fill, dtype=np.float64)
        for name, value in values.items():
            slot = SLOTS[name]
            genes[slot.as_slice()] = value
        return Genome(genes)

    @staticmethod
    def still(max_age: float = 1.0, max_size: float = 0.5, vision: float = 1.0) -> "Genome":
        """
        All-zero brain (no movement, no turning, no baby charging) with the given traits.
        """
        return Genome.from_slots({
            "max_age": max_age,
            "max_size": max_size,
            "baby_charge": 1.0,
            "vision": vision,
            "color": (0.5, 0.5, 0.5),
            "reserved": 0.0,
        })

    @staticmethod
    def starter() -> "Genome":
        """
        Starter genome: a hand-wired food seeker.

        Hidden 0 follows the food direction sensor, hidden 1 is a constant
        drive. Outputs: cruise forward, turn toward food, charge babies slowly.
        """
        l1w = np.zeros((8, 16))
        l1w[0, 2] = 2.0   # food direction -> steering neuron
        l1b = np.zeros(8)
        l1b[1] = 2.0      # constant drive neuron

        l2w = np.zeros((8, 8))
        l2w[0, 1] = 2.0   # drive -> velocity
        l2w[1, 0] = 2.0   # steering -> desired rotation
        l2w[2, 1] = 2.0   # drive -> rotation velocity
        l2b = np.zeros(8)
        l2b[3] = 0.5      # slow baby charging

        return Genome.from_slots({
            "l1_weights": l1w.ravel(),
            "l2_weights": l2w.ravel(),
            "l1_biases": l1b,
            "l2_biases": l2b,
            "max_age": 1.0,
            "max_size": 0.5,
            "baby_charge": 0.5,
            "vision": 1.0,
            "color": (0.35, 0.8, 0.45),
        }, fill=0.5)
