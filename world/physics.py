"""
bugsim module: world/physics.py

Top-down 2D kinematics and metabolism for bugs:
- turning is rate-limited toward the brain's desired heading
- movement is along the heading, wrapped on a toroidal world
- apply_actuators returns the energy spent so metabolism can turn it into heat
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING

from config import SimConfig

if TYPE_CHECKING:
    from bug.bug import Bug
    from neural.brain import ActuatorVector

TURN_DEADBAND = 1e-3  # radians


def wrap_angle(a: float) -> float:
    """Wrap into [-pi, pi]."""
    while a > math.pi:
        a -= 2 * math.pi
    while a < -math.pi:
        a += 2 * math.pi
    return a


def wrap_coord(v: float, extent: float) -> float:
    """Wrap into [0, extent)."""
    w = v % extent
    # float modulo can round a tiny negative up to extent
    return 0.0 if w >= extent else w


def torus_delta(a: float, b: float, extent: float) -> float:
    """Shortest signed offset from a to b on a ring of length ``extent``."""
    d = (b - a) % extent
    if d > extent / 2:
        d -= extent
    return d


def transfer_amount(amount: float, source: float, dst: float, capacity: float) -> float:
    """
    How much of ``amount`` can move from ``source`` into ``dst`` without
    overdrawing the source or overfilling ``capacity``.
    """
    return max(0.0, min(amount, source, capacity - dst))


def drain_energy(bug: "Bug", amount: float) -> float:
    """Take up to ``amount`` energy from the bug; returns what was actually taken."""
    taken = max(0.0, min(bug.energy, amount))
    bug.energy -= taken
    return taken


def apply_actuators(bug: "Bug", act: "ActuatorVector", dt: float, cfg: SimConfig) -> float:
    """
    Turn, then move along the new heading.

    Returns:
        energy spent on turning + moving this tick
    """
    spent = 0.0

    desired = wrap_angle(act.desired_rotation)
    if abs(desired) > TURN_DEADBAND:
        step = math.copysign(min(abs(desired), act.rotation_velocity * dt), desired)
        bug.rotation = (bug.rotation + step) % (2 * math.pi)
        spent += drain_energy(bug, abs(step) * cfg.rotation_cost * bug.size)

    distance = act.velocity * dt
    if distance > 0.0:
        bug.x = wrap_coord(bug.x + math.cos(bug.rotation) * distance, cfg.world_width)
        bug.y = wrap_coord(bug.y + math.sin(bug.rotation) * distance, cfg.world_height)
        spent += drain_energy(bug, distance * cfg.movement_cost * bug.size)

    return spent


def metabolize(bug: "Bug", act: "ActuatorVector", dt: float, cfg: SimConfig, spent: float = 0.0) -> None:
    """
    Basal drain, growth, heat, aging and baby charging for one tick.
    ``spent`` is the energy already used by apply_actuators.
    """
    spent += drain_energy(bug, cfg.basal_metabolic_rate * bug.size * dt)

    max_size = bug.phenotype.max_size
    if bug.size < max_size and cfg.growth_rate > 0.0:
        grow = min(cfg.growth_rate * dt, max_size - bug.size)
        cost = grow * cfg.growth_cost
        if bug.energy >= cost:
            spent += drain_energy(bug, cost)
            bug.size += grow

    # Newtonian cooling, then heat from work done this tick
    bug.heat *= max(0.0, 1.0 - cfg.heat_dissipation * dt)
    bug.heat += spent * cfg.heat_per_energy

    bug.age += dt

    moved = transfer_amount(act.baby_charging_rate * dt, bug.energy, bug.baby_charge, bug.baby_charge_capacity)
    bug.energy -= moved
    bug.baby_charge += moved
