import math

import pytest

from world.food import FoodField, FoodSource, spawn_clump


def test_add_wraps_and_assigns_ids():
    field = FoodField(100.0, 100.0)
    a = field.add(-10.0, 150.0, 2.0)
    b = field.add(5.0, 5.0, 1.0)
    assert (a.id, b.id) == (0, 1)
    assert (a.x, a.y) == (90.0, 50.0)
    assert len(field) == 2


@pytest.mark.parametrize("energy", [-1.0, 0.0, float("nan")])
def test_add_rejects_non_positive_energy(energy):
    field = FoodField(100.0, 100.0)
    with pytest.raises(ValueError):
        field.add(1.0, 1.0, energy)
    assert len(field) == 0


def test_take_leaves_leftover_on_food():
    field = FoodField(100.0, 100.0)
    food = field.add(1.0, 1.0, 10.0)
    assert field.take(food, 4.0) == 4.0
    assert food.energy == 6.0
    assert field.get(food.id) is food


def test_take_removes_emptied_food():
    field = FoodField(100.0, 100.0)
    food = field.add(1.0, 1.0, 3.0)
    assert field.take(food, 10.0) == 3.0
    assert field.get(food.id) is None
    assert len(field) == 0


def test_radius_follows_energy():
    field = FoodField(100.0, 100.0)
    food = field.add(1.0, 1.0, math.pi * 4)
    assert food.radius == pytest.approx(2.0)
    assert field.snapshot()[0].radius == pytest.approx(2.0)


def test_rect_source_spawns_on_interval(rng):
    src = FoodSource(50.0, 50.0, shape="rect", size=(20.0, 10.0), energy_range=(1.0, 2.0), spawn_interval=1.0)
    first = src.proceed(2.5, rng)
    assert len(first) == 2
    assert src.elapsed == pytest.approx(0.5)
    assert len(src.proceed(0.5, rng)) == 1
    for x, y, e in first:
        assert 40.0 <= x <= 60.0
        assert 45.0 <= y <= 55.0
        assert 1.0 <= e <= 2.0


def test_circle_source_stays_inside_radius(rng):
    src = FoodSource(0.0, 0.0, shape="circle", radius=30.0, spawn_interval=0.1)
    spawned = src.proceed(5.0, rng)
    assert len(spawned) >= 49
    assert all(math.hypot(x, y) <= 30.0 for x, y, _ in spawned)


def test_source_validation():
    with pytest.raises(ValueError):
        FoodSource(0.0, 0.0, shape="hexagon")
    with pytest.raises(ValueError):
        FoodSource(0.0, 0.0, spawn_interval=0.0)


def test_spawn_clump(rng):
    clump = spawn_clump(10.0, 10.0, 12, 5.0, (0.5, 1.5), rng)
    assert len(clump) == 12
    assert all(0.5 <= e <= 1.5 for _, _, e in clump)


def test_update_tops_up_toward_target(rng):
    field = FoodField(500.0, 500.0, target=40, clump_rate=1.0, clump_size_range=(4, 8))
    total = 0
    for _ in range(20):
        total += field.update(1.0, rng)
    assert total == len(field)
    assert 40 <= len(field) < 48


def test_update_runs_sources(rng):
    field = FoodField(500.0, 500.0, sources=[FoodSource(250.0, 250.0, spawn_interval=0.5)])
    assert field.update(1.0, rng) == 2
    assert len(field) == 2


def test_source_rejects_zero_energy_floor():
    with pytest.raises(ValueError):
        FoodSource(0.0, 0.0, energy_range=(0.0, 1.0))


def test_sources_never_spawn_empty_food(rng):
    field = FoodField(500.0, 500.0, sources=[FoodSource(250.0, 250.0, spawn_interval=0.01)])
    field.update(5.0, rng)
    assert len(field) > 0
    assert all(f.energy > 0.0 for f in field)


def test_take_drops_food_left_at_zero():
    field = FoodField(100.0, 100.0)
    food = field.add(1.0, 1.0, 2.0)
    food.energy = 0.0
    assert field.take(food, 1.0) == 0.0
    assert field.get(food.id) is None
