"""
bugsim module: neural/brain.py

A small genome-decoded neural network:
- 16 input slots, 6 of them fed by sensors (the rest stay at zero)
- one hidden layer of 8 tanh neurons
- 8 outputs, the first 4 mapped to physical actuator ranges
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import NamedTuple, Sequence, Tuple, Union
import math

import numpy as np

from bug.genome import BRAIN_GENES, SLOTS, Genome, GenomeError

INPUT_WIDTH = 16
HIDDEN_WIDTH = 8
OUTPUT_WIDTH = 8
SENSOR_COUNT = 6
ACTUATOR_COUNT = 4

MAX_VELOCITY = 10.0                  # world units per second
MAX_ROTATION_VELOCITY = 2 * math.pi  # radians per second
MAX_BABY_CHARGE_RATE = 1.0           # energy per second


def _tanh(x: np.ndarray) -> np.ndarray:
    # stable tanh for typical magnitudes
    return np.tanh(np.clip(x, -20.0, 20.0))


def rotation_signal(rotation: float) -> float:
    """Map a heading in [0, 2pi) onto [-1, 1)."""
    return (rotation % (2 * math.pi)) / math.pi - 1.0


class SensorVector(NamedTuple):
    rotation: float = 0.0
    food_proximity: float = 0.0
    food_direction: float = 0.0
    bug_proximity: float = 0.0
    bug_direction: float = 0.0
    bug_color: float = 0.0

    def as_input(self) -> np.ndarray:
        x = np.zeros(INPUT_WIDTH)
        x[:SENSOR_COUNT] = self
        return x


class ActuatorVector(NamedTuple):
    velocity: float
    desired_rotation: float   # radians relative to heading, [-pi, pi]
    rotation_velocity: float  # radians per second, >= 0
    baby_charging_rate: float # energy per second, >= 0

    @staticmethod
    def from_activations(out: np.ndarray) -> "ActuatorVector":
        return ActuatorVector(
            velocity=max(0.0, float(out[0])) * MAX_VELOCITY,
            desired_rotation=float(out[1]) * math.pi,
            rotation_velocity=abs(float(out[2])) * MAX_ROTATION_VELOCITY,
            baby_charging_rate=abs(float(out[3])) * MAX_BABY_CHARGE_RATE,
        )


@dataclass(frozen=True, eq=False)
class BrainLog:
    """Most recent evaluation of one brain, kept for introspection."""
    sensors: SensorVector
    actuators: ActuatorVector
    activations: Tuple[np.ndarray, np.ndarray, np.ndarray]  # input, hidden, output


@dataclass(frozen=True, eq=False)
class Brain:
    w1: np.ndarray  # (HIDDEN_WIDTH, INPUT_WIDTH)
    b1: np.ndarray  # (HIDDEN_WIDTH,)
    w2: np.ndarray  # (OUTPUT_WIDTH, HIDDEN_WIDTH)
    b2: np.ndarray  # (OUTPUT_WIDTH,)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Brain):
            return NotImplemented
        return all(
            np.array_equal(a, b)
            for a, b in zip((self.w1, self.b1, self.w2, self.b2), (other.w1, other.b1, other.w2, other.b2))
        )

    __hash__ = None

    @staticmethod
    def decode(genes: Union[Genome, Sequence[float], np.ndarray]) -> "Brain":
        """
        Extract both layers from the first 208 genes.
        Anything shorter, or holding nan/inf, is a caller bug and raises GenomeError.
        """
        arr = genes.genes if isinstance(genes, Genome) else np.asarray(genes, dtype=np.float64)
        if arr.ndim != 1 or arr.shape[0] < BRAIN_GENES:
            raise GenomeError(f"brain needs at least {BRAIN_GENES} genes, got shape {arr.shape}")
        if not np.all(np.isfinite(arr[:BRAIN_GENES])):
            raise GenomeError("brain genes must be finite")

        def part(name: str, shape) -> np.ndarray:
            p = np.array(arr[SLOTS[name].as_slice()], dtype=np.float64).reshape(shape)
            p.setflags(write=False)
            return p

        return Brain(
            w1=part("l1_weights", (HIDDEN_WIDTH, INPUT_WIDTH)),
            b1=part("l1_biases", (HIDDEN_WIDTH,)),
            w2=part("l2_weights", (OUTPUT_WIDTH, HIDDEN_WIDTH)),
            b2=part("l2_biases", (OUTPUT_WIDTH,)),
        )

    def forward(self, x: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        hidden = _tanh(self.w1 @ x + self.b1)
        out = _tanh(self.w2 @ hidden + self.b2)
        return hidden, out

    def evaluate(self, sensors: SensorVector) -> ActuatorVector:
        _, out = self.forward(sensors.as_input())
        return ActuatorVector.from_activations(out)

    def evaluate_verbose(self, sensors: SensorVector) -> BrainLog:
        x = sensors.as_input()
        hidden, out = self.forward(x)
        for a in (x, hidden, out):
            a.setflags(write=False)
        return BrainLog(
            sensors=sensors,
            actuators=ActuatorVector.from_activations(out),
            activations=(x, hidden, out),
        )
