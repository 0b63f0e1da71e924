"""Tests for transfer buffer lifecycle."""

import numpy as np
import pytest
from gravity_system.backends.base import CapacityError
from gravity_system.backends.numpy_backend import NumPyBackend
from gravity_system.physics.bodies import BodyRegistry
from gravity_system.physics.buffers import TransferBuffers, records_to_floats


def _registry(ships: int, planets: int) -> BodyRegistry:
    registry = BodyRegistry()
    for i in range(planets):
        registry.register_planet([float(i), 1.0, 0.0], 0.1 * (i + 1))
    for i in range(ships):
        registry.register_ship([float(i), -1.0, 0.0], 1.0, [1.0, 0.0, 0.0])
    return registry


def test_records_to_floats():
    registry = _registry(2, 0)
    rows = records_to_floats(registry.snapshot_ships())
    assert rows.shape == (2, 4)
    assert rows.dtype == np.float32
    assert np.allclose(rows[1], [1.0, -1.0, 0.0, 1.0])


def test_ensure_capacity_first_use():
    """No buffers yet counts as capacity zero."""
    device = NumPyBackend()
    buffers = TransferBuffers(device)

    assert not buffers.is_allocated
    assert buffers.ensure_capacity(3, 2)
    assert buffers.ship_capacity == 3
    assert buffers.planet_capacity == 2
    assert buffers.ship_buffer.count == 3
    assert buffers.force_buffer.count == 3
    assert buffers.planet_buffer.count == 2
    assert device.stats.allocations == 3


def test_ensure_capacity_is_idempotent():
    device = NumPyBackend()
    buffers = TransferBuffers(device)
    buffers.ensure_capacity(3, 2)
    ship_buffer = buffers.ship_buffer

    assert not buffers.ensure_capacity(3, 2)
    assert buffers.ship_buffer is ship_buffer
    assert device.stats.allocations == 3
    assert device.stats.releases == 0


def test_ensure_capacity_zero_counts():
    device = NumPyBackend()
    buffers = TransferBuffers(device)
    assert not buffers.ensure_capacity(0, 0)
    assert device.stats.allocations == 0


def test_ship_resize_keeps_planet_buffer():
    """Changing the ship count leaves planet buffer and contents alone."""
    device = NumPyBackend()
    buffers = TransferBuffers(device)
    registry = _registry(3, 2)
    buffers.ensure_capacity(3, 2)
    buffers.upload(registry.snapshot_ships(), registry.snapshot_planets())
    planet_buffer = buffers.planet_buffer

    assert buffers.ensure_capacity(5, 2)

    assert buffers.planet_buffer is planet_buffer
    assert buffers.ship_buffer.count == 5
    assert buffers.force_buffer.count == 5
    assert device.stats.allocations == 5
    assert device.stats.releases == 2

    planets = np.zeros((2, 4), dtype=np.float32)
    device.read(buffers.planet_buffer, planets)
    assert np.allclose(planets, records_to_floats(registry.snapshot_planets()))


def test_failed_allocation_releases_everything(failing_backend):
    """A failed resize never leaves a half-released set of buffers."""
    device = failing_backend(fail_after=4)
    buffers = TransferBuffers(device)
    buffers.ensure_capacity(3, 2)

    with pytest.raises(CapacityError):
        buffers.ensure_capacity(6, 2)

    assert not buffers.is_allocated
    assert buffers.ship_capacity == 0
    assert buffers.planet_capacity == 0
    assert device.stats.live_buffers == 0


def test_failed_first_allocation(failing_backend):
    device = failing_backend(fail_after=0)
    buffers = TransferBuffers(device)
    with pytest.raises(CapacityError):
        buffers.ensure_capacity(1, 1)
    assert not buffers.is_allocated


def test_upload_requires_matching_capacity():
    device = NumPyBackend()
    buffers = TransferBuffers(device)
    registry = _registry(3, 2)
    buffers.ensure_capacity(2, 2)
    with pytest.raises(ValueError):
        buffers.upload(registry.snapshot_ships(), registry.snapshot_planets())


def test_download_without_ships():
    buffers = TransferBuffers(NumPyBackend())
    forces = buffers.download()
    assert forces.shape == (0, 3)


def test_download_returns_copy():
    device = NumPyBackend()
    buffers = TransferBuffers(device)
    buffers.ensure_capacity(2, 1)
    device.write(buffers.force_buffer, np.ones((2, 3), dtype=np.float32))

    first = buffers.download()
    first[:] = 7.0
    second = buffers.download()

    assert np.allclose(second, 1.0)


def test_release_is_safe_to_repeat():
    device = NumPyBackend()
    buffers = TransferBuffers(device)
    buffers.release()
    buffers.ensure_capacity(2, 2)
    buffers.release()
    buffers.release()

    assert not buffers.is_allocated
    assert device.stats.releases == 3
    assert device.stats.live_buffers == 0


def test_verbose_messages(capsys):
    buffers = TransferBuffers(NumPyBackend(), verbose=True)
    buffers.ensure_capacity(1, 1)
    buffers.release()
    out = capsys.readouterr().out
    assert "[Buffers] allocated ships=1 planets=1" in out
    assert "[Buffers] released 3 buffers" in out
