"""Abstract base class for ship motion integrators."""

from abc import ABC, abstractmethod
from typing import Sequence
import numpy as np


class ShipIntegrator(ABC):
    """Consumes one gravity force per ship per step.

    Forces are accelerations: integrators must not divide them by the ship's
    mass. A force is stale once consumed; the next step overwrites it.
    """

    @abstractmethod
    def step(self, ship, force: np.ndarray, dt: float) -> None:
        """Advance one ship by ``dt`` under ``force``.

        Args:
            ship: Ship to update in place
            force: (3,) acceleration for this step
            dt: Time step
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this integrator."""
        pass

    @property
    @abstractmethod
    def order(self) -> int:
        """Return the order of accuracy (e.g., 1 for Euler)."""
        pass

    def integrate(self, ships: Sequence, forces: np.ndarray, dt: float) -> None:
        """Advance every ship with its index-aligned force.

        Raises:
            ValueError: If the number of forces differs from the number of ships
        """
        if len(ships) != len(forces):
            raise ValueError(f"Got {len(forces)} forces for {len(ships)} ships")
        for ship, force in zip(ships, forces):
            self.step(ship, force, dt)
