"""Tests for the simulator controller."""

import numpy as np
import pytest
from gravity_system.backends.numpy_backend import NumPyBackend
from gravity_system.physics.simulator import Simulator
from gravity_system.presets import RandomField


def test_simulator_basic():
    """Test basic simulator operation."""
    device = NumPyBackend()
    sim = Simulator(device, dt=0.01)
    sim.populate(RandomField(planet_count=4, ship_count=10, seed=1))

    for _ in range(10):
        sim.step()

    ship_pos, ship_vel, planet_pos, planet_mass, t, steps = sim.get_state()
    assert ship_pos.shape == (10, 3)
    assert ship_vel.shape == (10, 3)
    assert planet_pos.shape == (4, 3)
    assert planet_mass.shape == (4,)
    assert np.isclose(t, 0.1)
    assert steps == 10
    assert sim.last_forces.shape == (10, 3)
    assert device.stats.allocations == 3
    sim.close()


def test_ship_falls_toward_planet():
    sim = Simulator(NumPyBackend(), dt=0.1)
    sim.registry.register_planet([0.0, 0.0, 0.0], 1.0)
    ship = sim.registry.register_ship([5.0, 0.0, 0.0], 1.0, [0.0, 0.0, 0.0])

    sim.step()

    assert np.allclose(ship.velocity, [-0.1 / 25.0, 0.0, 0.0], rtol=1e-5)
    assert ship.position[0] < 5.0
    assert np.allclose(ship.heading, [-1.0, 0.0, 0.0])


def test_pause_and_resume():
    sim = Simulator(NumPyBackend())
    sim.populate(RandomField(planet_count=2, ship_count=2, seed=0))
    sim.pause()
    sim.run(5)
    assert sim.step_count == 0

    sim.resume()
    sim.run_steps(3)
    assert sim.step_count == 3


def test_set_timestep_validation():
    sim = Simulator(NumPyBackend())
    sim.set_timestep(0.05)
    assert sim.dt == 0.05
    with pytest.raises(ValueError):
        sim.set_timestep(0.0)
    with pytest.raises(ValueError):
        Simulator(NumPyBackend(), dt=-1.0)


def test_empty_scene_steps():
    """With no planets, ships coast and nothing is dispatched."""
    device = NumPyBackend()
    sim = Simulator(device, dt=1.0)
    ship = sim.registry.register_ship([0.0, 0.0, 0.0], 1.0, [1.0, 0.0, 0.0])

    sim.step()

    assert np.allclose(ship.position, [1.0, 0.0, 0.0])
    assert device.stats.dispatches == 0


def test_profiling_and_callback():
    sim = Simulator(NumPyBackend())
    sim.populate(RandomField(planet_count=3, ship_count=3, seed=2))
    seen = []
    sim.on_step_callback = lambda s: seen.append(s.step_count)
    sim.set_profiling(True)

    sim.run(2)

    timing = sim.get_timing()
    assert timing["forces_ms"] is not None
    assert timing["integrator_ms"] is not None
    assert seen == [1, 2]


def test_debug_output(capsys):
    sim = Simulator(NumPyBackend())
    sim.populate(RandomField(planet_count=3, ship_count=3, seed=2))
    sim.debug = True
    sim.debug_interval = 2
    sim.run(2)
    assert "[Diag] step=2" in capsys.readouterr().out


def test_context_manager_releases():
    device = NumPyBackend()
    with Simulator(device) as sim:
        sim.populate(RandomField(planet_count=2, ship_count=5, seed=4))
        sim.step()
        assert device.stats.live_buffers == 3
    assert device.stats.live_buffers == 0


def test_debug_interval_must_be_positive():
    sim = Simulator(NumPyBackend())
    sim.debug_interval = 5
    assert sim.debug_interval == 5
    with pytest.raises(ValueError):
        sim.debug_interval = 0
