"""NumPy backend implementation."""

from typing import Any, Dict
import numpy as np
from gravity_system.backends.base import (
    ComputeDevice,
    DeviceBuffer,
    MIN_DISTANCE_SQ,
    THREAD_GROUP_SIZE,
)


def accumulate_gravity_block(ship_positions: np.ndarray, planets: np.ndarray) -> np.ndarray:
    """Sum planet pulls on a block of ships.

    Args:
        ship_positions: (k, 3) float32 ship positions
        planets: (p, 4) float32 planet records (x, y, z, mass)

    Returns:
        (k, 3) float32 forces, magnitude mass / distance^2 toward each planet
    """
    # r_diff: (1,p,3) - (k,1,3) -> (k,p,3)
    r_diff = planets[np.newaxis, :, :3] - ship_positions[:, np.newaxis, :]
    r_sq = np.maximum(np.sum(r_diff * r_diff, axis=2), np.float32(MIN_DISTANCE_SQ))
    scale = planets[np.newaxis, :, 3] / (r_sq * np.sqrt(r_sq))
    return np.sum(r_diff * scale[:, :, np.newaxis], axis=1, dtype=np.float32)


class NumPyBackend(ComputeDevice):
    """NumPy-based device (reference, always available).

    Work groups run one after another on the host; each group is vectorized
    over its ships and all planets.
    """

    def __init__(self, group_size: int = THREAD_GROUP_SIZE):
        super().__init__(group_size)

    @property
    def name(self) -> str:
        return "numpy"

    @property
    def device(self) -> str:
        return "cpu"

    def _allocate(self, count: int, width: int) -> np.ndarray:
        return np.zeros((count, width), dtype=np.float32)

    def _free(self, native: Any) -> None:
        pass

    def _write(self, buffer: DeviceBuffer, host: np.ndarray) -> None:
        buffer.native[: host.shape[0]] = host

    def _read(self, buffer: DeviceBuffer, host: np.ndarray) -> None:
        host[...] = buffer.native[: host.shape[0]]

    def _launch(
        self,
        kernel: str,
        groups_x: int,
        group_size: int,
        buffers: Dict[str, DeviceBuffer],
        ints: Dict[str, int],
    ) -> None:
        ships = buffers["Ships"].native
        planets = buffers["Planets"].native[: ints["PlanetCount"]]
        out_forces = buffers["OutForces"].native
        for start, stop in self.group_ranges(groups_x, ints["ShipCount"], group_size):
            out_forces[start:stop] = accumulate_gravity_block(ships[start:stop, :3], planets)
