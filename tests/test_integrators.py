"""Tests for ship integrators."""

import numpy as np
import pytest
from gravity_system.physics.bodies import Ship
from gravity_system.physics.integrators.euler import EulerShipIntegrator


def test_euler_integrator():
    """Velocity takes the force, then position moves with the new velocity."""
    integrator = EulerShipIntegrator()
    ship = Ship([0.0, 0.0, 0.0], 1.0, [1.0, 0.0, 0.0])

    integrator.step(ship, np.array([0.0, 2.0, 0.0]), 0.5)

    assert np.allclose(ship.velocity, [1.0, 1.0, 0.0])
    assert np.allclose(ship.position, [0.5, 0.5, 0.0])
    assert np.allclose(ship.heading, np.array([1.0, 1.0, 0.0]) / np.sqrt(2.0))
    assert integrator.name == "euler"
    assert integrator.order == 1


def test_force_is_an_acceleration():
    """Ship mass does not scale the response."""
    integrator = EulerShipIntegrator()
    light = Ship([0.0, 0.0, 0.0], 1.0, [0.0, 0.0, 0.0])
    heavy = Ship([0.0, 0.0, 0.0], 50.0, [0.0, 0.0, 0.0])
    force = np.array([0.3, -0.1, 0.0])

    integrator.step(light, force, 0.1)
    integrator.step(heavy, force, 0.1)

    assert np.allclose(light.velocity, heavy.velocity)
    assert np.allclose(light.position, heavy.position)


def test_heading_kept_when_stopped():
    integrator = EulerShipIntegrator()
    ship = Ship([0.0, 0.0, 0.0], 1.0, [1.0, 0.0, 0.0])

    integrator.step(ship, np.array([-2.0, 0.0, 0.0]), 0.5)

    assert np.allclose(ship.velocity, 0.0)
    assert np.allclose(ship.heading, [1.0, 0.0, 0.0])


def test_integrate_requires_one_force_per_ship():
    integrator = EulerShipIntegrator()
    ships = [Ship([0.0, 0.0, 0.0], 1.0, [1.0, 0.0, 0.0]) for _ in range(2)]
    with pytest.raises(ValueError):
        integrator.integrate(ships, np.zeros((3, 3)), 0.1)

    integrator.integrate(ships, np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]), 1.0)
    assert np.allclose(ships[0].velocity, [2.0, 0.0, 0.0])
    assert np.allclose(ships[1].velocity, [1.0, 1.0, 0.0])
