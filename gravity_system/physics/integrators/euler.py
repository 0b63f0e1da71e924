"""Euler method ship integrator (baseline, O(h) accuracy)."""

import numpy as np
from gravity_system.physics.integrators.base import ShipIntegrator


class EulerShipIntegrator(ShipIntegrator):
    """Euler method - simple first-order integrator.

    Velocity picks up the force first, then the position moves with the new
    velocity, and the heading turns to face along it.
    """

    @property
    def name(self) -> str:
        return "euler"

    @property
    def order(self) -> int:
        return 1

    def step(self, ship, force: np.ndarray, dt: float) -> None:
        """Euler step: v_new = v + f*dt, r_new = r + v_new*dt."""
        dt = np.float32(dt)
        ship.velocity = ship.velocity + np.asarray(force, dtype=np.float32) * dt
        ship.position = ship.position + ship.velocity * dt

        speed = float(np.linalg.norm(ship.velocity))
        if speed > 0.0:
            ship.heading = ship.velocity / np.float32(speed)
