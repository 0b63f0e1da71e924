"""Random field preset: planets and ships scattered over a rectangle."""

from typing import Optional, Tuple
import numpy as np
from gravity_system.presets.base import Preset

Range = Tuple[float, float]


def _check_range(value, label: str) -> Range:
    low, high = (float(v) for v in value)
    if low > high:
        raise ValueError(f"{label} must be (min, max) with min <= max, got {value}")
    return low, high


class RandomField(Preset):
    """Uniformly scattered planets and ships.

    Planets get a mass drawn from ``planet_mass_range``. Ships start in the
    same spawn range with a random unit velocity: in the x-y plane when
    ``limit_z`` is degenerate, otherwise on the unit sphere.
    """

    def __init__(
        self,
        planet_count: int = 50,
        ship_count: int = 50,
        seed: Optional[int] = None,
        limit_x: Range = (-10.0, 10.0),
        limit_y: Range = (-10.0, 10.0),
        limit_z: Range = (0.0, 0.0),
        planet_mass_range: Range = (0.1, 0.5),
        ship_mass: float = 1.0,
    ):
        """Initialize random field preset.

        Args:
            planet_count: Number of planets
            ship_count: Number of ships
            seed: Random seed
            limit_x: Spawn range (min, max) along x
            limit_y: Spawn range (min, max) along y
            limit_z: Spawn range (min, max) along z; (0, 0) keeps the scene planar
            planet_mass_range: Planet mass range (min, max)
            ship_mass: Mass given to every ship
        """
        super().__init__(seed)
        if planet_count < 0 or ship_count < 0:
            raise ValueError(f"Counts must be non-negative, got planets={planet_count}, ships={ship_count}")
        self.planet_count = int(planet_count)
        self.ship_count = int(ship_count)
        self.limit_x = _check_range(limit_x, "limit_x")
        self.limit_y = _check_range(limit_y, "limit_y")
        self.limit_z = _check_range(limit_z, "limit_z")
        self.planet_mass_range = _check_range(planet_mass_range, "planet_mass_range")
        self.ship_mass = float(ship_mass)

    @property
    def name(self) -> str:
        return "random_field"

    @property
    def planar(self) -> bool:
        return self.limit_z[0] == self.limit_z[1]

    def _spawn_positions(self, n: int, rng: np.random.Generator) -> np.ndarray:
        lows = [self.limit_x[0], self.limit_y[0], self.limit_z[0]]
        highs = [self.limit_x[1], self.limit_y[1], self.limit_z[1]]
        return rng.uniform(lows, highs, size=(n, 3))

    def _unit_directions(self, n: int, rng: np.random.Generator) -> np.ndarray:
        if self.planar:
            angles = rng.uniform(0.0, 2.0 * np.pi, n)
            return np.stack([np.cos(angles), np.sin(angles), np.zeros(n)], axis=1)
        directions = rng.normal(size=(n, 3))
        return directions / np.linalg.norm(directions, axis=1, keepdims=True)

    def generate(self, registry) -> None:
        """Spawn planets, then ships."""
        rng = np.random.default_rng(self.seed)

        planet_positions = self._spawn_positions(self.planet_count, rng)
        planet_masses = rng.uniform(*self.planet_mass_range, size=self.planet_count)
        for position, mass in zip(planet_positions, planet_masses):
            registry.register_planet(position, mass)

        ship_positions = self._spawn_positions(self.ship_count, rng)
        ship_velocities = self._unit_directions(self.ship_count, rng)
        for position, velocity in zip(ship_positions, ship_velocities):
            registry.register_ship(position, self.ship_mass, velocity)
