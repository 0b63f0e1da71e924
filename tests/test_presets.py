"""Tests for scene presets."""

import numpy as np
import pytest
from gravity_system.physics.bodies import BodyRegistry
from gravity_system.presets import RandomField


def test_random_field():
    """Test random field preset."""
    preset = RandomField(planet_count=20, ship_count=30, seed=42)
    registry = BodyRegistry()
    preset.generate(registry)

    assert registry.planet_count == 20
    assert registry.ship_count == 30
    assert preset.name == "random_field"
    assert preset.planar

    planets = registry.snapshot_planets()
    ships = registry.snapshot_ships()
    for records in (planets, ships):
        assert np.all(records["position"][:, :2] >= -10.0)
        assert np.all(records["position"][:, :2] <= 10.0)
        assert np.allclose(records["position"][:, 2], 0.0)
    assert np.all((planets["mass"] >= 0.1) & (planets["mass"] <= 0.5))
    assert np.allclose(ships["mass"], 1.0)


def test_ship_velocities_are_unit_and_planar():
    registry = BodyRegistry()
    RandomField(planet_count=1, ship_count=25, seed=3).generate(registry)
    velocities = np.array([ship.velocity for ship in registry.ships])

    assert np.allclose(np.linalg.norm(velocities, axis=1), 1.0, atol=1e-6)
    assert np.allclose(velocities[:, 2], 0.0)


def test_volume_spawn():
    registry = BodyRegistry()
    RandomField(planet_count=5, ship_count=25, seed=3, limit_z=(-2.0, 2.0)).generate(registry)
    velocities = np.array([ship.velocity for ship in registry.ships])
    positions = registry.snapshot_ships()["position"]

    assert np.allclose(np.linalg.norm(velocities, axis=1), 1.0, atol=1e-6)
    assert np.all(np.abs(positions[:, 2]) <= 2.0)
    assert not np.allclose(positions[:, 2], 0.0)


def test_preset_reproducibility():
    """Test that presets are reproducible with same seed."""
    first, second = BodyRegistry(), BodyRegistry()
    RandomField(planet_count=10, ship_count=10, seed=42).generate(first)
    RandomField(planet_count=10, ship_count=10, seed=42).generate(second)

    assert np.array_equal(first.snapshot_planets(), second.snapshot_planets())
    assert np.array_equal(first.snapshot_ships(), second.snapshot_ships())


def test_invalid_ranges():
    with pytest.raises(ValueError):
        RandomField(limit_x=(5.0, -5.0))
    with pytest.raises(ValueError):
        RandomField(planet_mass_range=(1.0, 0.5))
    with pytest.raises(ValueError):
        RandomField(ship_count=-1)
