import math

import numpy as np
import pytest

from bug.genome import BRAIN_GENES, Genome, GenomeError
from neural.brain import (
    INPUT_WIDTH,
    ActuatorVector,
    Brain,
    SensorVector,
    rotation_signal,
)


def test_decode_layout_matches_gene_indices():
    brain = Brain.decode(np.arange(256, dtype=float))
    assert brain.w1.shape == (8, INPUT_WIDTH)
    assert brain.w1[1, 3] == 16 * 1 + 3
    assert brain.w2[2, 5] == 128 + 8 * 2 + 5
    assert brain.b1[0] == 192
    assert brain.b2[7] == 207


def test_decode_rejects_short_genes():
    with pytest.raises(GenomeError):
        Brain.decode(np.zeros(BRAIN_GENES - 1))


def test_decode_deterministic(rng):
    g = Genome.random(rng)
    assert Brain.decode(g) == Brain.decode(g)
    assert Brain.decode(g) == Brain.decode(Genome(g.to_list()))


def test_evaluate_is_pure(rng):
    g = Genome.random(rng)
    a, b = Brain.decode(g), Brain.decode(Genome(g.genes))
    sensors = SensorVector(rotation=0.3, food_proximity=0.8, food_direction=-0.2, bug_color=0.5)
    first = a.evaluate(sensors)
    assert a.evaluate(sensors) == first
    assert b.evaluate(sensors) == first


def test_zero_brain_outputs_nothing():
    act = Brain.decode(Genome.still()).evaluate(SensorVector(food_proximity=1.0))
    assert act == ActuatorVector(0.0, 0.0, 0.0, 0.0)


def test_actuator_ranges():
    out = np.array([-0.5, 0.5, -0.5, -0.25, 0.9, 0.9, 0.9, 0.9])
    act = ActuatorVector.from_activations(out)
    assert act.velocity == 0.0
    assert act.desired_rotation == pytest.approx(math.pi / 2)
    assert act.rotation_velocity == pytest.approx(math.pi)
    assert act.baby_charging_rate == pytest.approx(0.25)


def test_evaluate_verbose_records_activations():
    brain = Brain.decode(Genome.starter())
    sensors = SensorVector(food_direction=0.5)
    log = brain.evaluate_verbose(sensors)
    inputs, hidden, outputs = log.activations
    assert log.sensors == sensors
    assert log.actuators == brain.evaluate(sensors)
    assert inputs.shape == (16,) and hidden.shape == (8,) and outputs.shape == (8,)
    assert inputs[2] == 0.5
    assert not outputs.flags.writeable


def test_rotation_signal_range():
    assert rotation_signal(0.0) == -1.0
    assert rotation_signal(math.pi) == pytest.approx(0.0)
    assert rotation_signal(-math.pi / 2) == pytest.approx(0.5)


def test_decode_rejects_non_finite_brain_genes():
    genes = np.zeros(BRAIN_GENES)
    genes[130] = np.nan
    with pytest.raises(GenomeError):
        Brain.decode(genes)
