"""Planets, ships and the registry that snapshots them each step."""

from dataclasses import dataclass
from typing import List, Sequence, Tuple
import numpy as np

# GPU record layout shared by ships and planets: 3 x float32 position + float32 mass
BODY_RECORD_DTYPE = np.dtype([("position", np.float32, (3,)), ("mass", np.float32)])
BODY_RECORD_SIZE = BODY_RECORD_DTYPE.itemsize


def as_vector3(value, name: str = "vector") -> np.ndarray:
    """Convert ``value`` to a finite float32 3-vector (copied).

    Raises:
        ValueError: If the value is not three finite numbers
    """
    vec = np.array(value, dtype=np.float32).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {np.shape(value)}")
    if not np.all(np.isfinite(vec)):
        raise ValueError(f"{name} must be finite, got {vec.tolist()}")
    return vec


def _as_mass(value) -> float:
    mass = float(np.float32(value))
    if not np.isfinite(mass):
        raise ValueError(f"mass must be finite, got {value}")
    return mass


class Planet:
    """Source of gravity. Position and mass are fixed once spawned."""

    def __init__(self, position, mass: float):
        self._position = as_vector3(position, "position")
        self._position.flags.writeable = False
        self._mass = _as_mass(mass)

    @property
    def position(self) -> np.ndarray:
        return self._position

    @property
    def mass(self) -> float:
        return self._mass

    def __repr__(self) -> str:
        return f"Planet(position={self._position.tolist()}, mass={self._mass:.4f})"


class Ship:
    """Mobile agent pulled by the planets.

    ``gravity_force`` is written by the force pipeline once per step and read
    by the motion integrator; ``position``, ``velocity`` and ``heading`` are
    owned by the integrator.
    """

    def __init__(self, position, mass: float, velocity):
        self.position = as_vector3(position, "position")
        self.mass = _as_mass(mass)
        self.velocity = as_vector3(velocity, "velocity")
        self.gravity_force = np.zeros(3, dtype=np.float32)

        speed = float(np.linalg.norm(self.velocity))
        if speed > 0.0:
            self.heading = self.velocity / np.float32(speed)
        else:
            self.heading = np.array([0.0, 1.0, 0.0], dtype=np.float32)

    def __repr__(self) -> str:
        return (
            f"Ship(position={self.position.tolist()}, velocity={self.velocity.tolist()}, "
            f"mass={self.mass:.4f})"
        )


def pack_records(bodies: Sequence) -> np.ndarray:
    """Copy body positions and masses into a read-only record array."""
    records = np.zeros(len(bodies), dtype=BODY_RECORD_DTYPE)
    if bodies:
        records["position"] = np.stack([body.position for body in bodies])
        records["mass"] = [body.mass for body in bodies]
    records.flags.writeable = False
    return records


@dataclass(frozen=True)
class Snapshot:
    """Ship and planet records captured at the start of a step.

    Index ``i`` of ``ships`` corresponds to index ``i`` of the step's force output.
    """
    ships: np.ndarray
    planets: np.ndarray

    @property
    def ship_count(self) -> int:
        return len(self.ships)

    @property
    def planet_count(self) -> int:
        return len(self.planets)

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to compute (no ships or no planets)."""
        return self.ship_count == 0 or self.planet_count == 0


class BodyRegistry:
    """Live set of planets and ships.

    Not thread-safe: the caller must not register bodies while a step is in
    flight.
    """

    def __init__(self):
        self._planets: List[Planet] = []
        self._ships: List[Ship] = []

    def register_planet(self, position, mass: float) -> Planet:
        """Add a planet.

        Args:
            position: 3-vector
            mass: Planet mass

        Returns:
            The new Planet
        """
        planet = Planet(position, mass)
        self._planets.append(planet)
        return planet

    def register_ship(self, position, mass: float, initial_velocity) -> Ship:
        """Add a ship.

        Args:
            position: 3-vector
            mass: Ship mass (carried in the record, not used by the force law)
            initial_velocity: 3-vector

        Returns:
            The new Ship
        """
        ship = Ship(position, mass, initial_velocity)
        self._ships.append(ship)
        return ship

    @property
    def planets(self) -> Tuple[Planet, ...]:
        return tuple(self._planets)

    @property
    def ships(self) -> Tuple[Ship, ...]:
        return tuple(self._ships)

    @property
    def planet_count(self) -> int:
        return len(self._planets)

    @property
    def ship_count(self) -> int:
        return len(self._ships)

    def snapshot_planets(self) -> np.ndarray:
        return pack_records(self._planets)

    def snapshot_ships(self) -> np.ndarray:
        return pack_records(self._ships)

    def snapshot(self) -> Snapshot:
        """Capture ships and planets together."""
        return Snapshot(ships=self.snapshot_ships(), planets=self.snapshot_planets())

    def clear(self):
        """Drop every body (scene setup only)."""
        self._planets.clear()
        self._ships.clear()
