"""Host staging arrays and device buffers for the force pipeline."""

from typing import List, Optional
import numpy as np
from numpy.lib import recfunctions
from gravity_system.backends.base import ComputeDevice, DeviceBuffer, CapacityError, FLOAT_SIZE
from gravity_system.physics.bodies import BODY_RECORD_SIZE

FORCE_RECORD_SIZE = 3 * FLOAT_SIZE


def records_to_floats(records: np.ndarray) -> np.ndarray:
    """Flatten body records to (n, 4) float32 rows: x, y, z, mass."""
    return recfunctions.structured_to_unstructured(records, dtype=np.float32).reshape(-1, 4)


class TransferBuffers:
    """Ship, planet and force buffers mirrored between host and device.

    Capacities track the registry's counts. A count of zero holds no buffer.
    """

    def __init__(self, device: ComputeDevice, verbose: bool = False):
        """Initialize empty buffers.

        Args:
            device: Compute device that owns the storage
            verbose: Print a line on every (re)allocation and release
        """
        self.device = device
        self.verbose = verbose

        self._ship_buffer: Optional[DeviceBuffer] = None
        self._planet_buffer: Optional[DeviceBuffer] = None
        self._force_buffer: Optional[DeviceBuffer] = None
        self._ship_capacity = 0
        self._planet_capacity = 0
        self._forces_host = np.zeros((0, 3), dtype=np.float32)

    @property
    def ship_capacity(self) -> int:
        return self._ship_capacity

    @property
    def planet_capacity(self) -> int:
        return self._planet_capacity

    @property
    def ship_buffer(self) -> Optional[DeviceBuffer]:
        return self._ship_buffer

    @property
    def planet_buffer(self) -> Optional[DeviceBuffer]:
        return self._planet_buffer

    @property
    def force_buffer(self) -> Optional[DeviceBuffer]:
        return self._force_buffer

    @property
    def is_allocated(self) -> bool:
        return any(b is not None for b in (self._ship_buffer, self._planet_buffer, self._force_buffer))

    def ensure_capacity(self, ship_count: int, planet_count: int) -> bool:
        """Resize buffers to the given counts.

        Only slots whose count changed are reallocated; an unchanged planet
        count keeps the planet buffer and its contents. If any allocation
        fails, every buffer is released and the error propagates.

        Args:
            ship_count: Number of ships
            planet_count: Number of planets

        Returns:
            True if any buffer was reallocated

        Raises:
            CapacityError: If the device cannot allocate a buffer
        """
        if ship_count < 0 or planet_count < 0:
            raise ValueError(f"Counts must be non-negative, got ships={ship_count}, planets={planet_count}")

        ships_changed = ship_count != self._ship_capacity
        planets_changed = planet_count != self._planet_capacity
        if not ships_changed and not planets_changed:
            return False

        if ships_changed:
            self.device.release_buffer(self._ship_buffer)
            self.device.release_buffer(self._force_buffer)
            self._ship_buffer = None
            self._force_buffer = None
            self._ship_capacity = 0
            self._forces_host = np.zeros((0, 3), dtype=np.float32)
        if planets_changed:
            self.device.release_buffer(self._planet_buffer)
            self._planet_buffer = None
            self._planet_capacity = 0

        try:
            if ships_changed and ship_count > 0:
                self._ship_buffer = self.device.create_buffer(ship_count, BODY_RECORD_SIZE)
                self._force_buffer = self.device.create_buffer(ship_count, FORCE_RECORD_SIZE)
            if planets_changed and planet_count > 0:
                self._planet_buffer = self.device.create_buffer(planet_count, BODY_RECORD_SIZE)
        except CapacityError:
            self.release()
            raise

        if ships_changed:
            self._ship_capacity = ship_count
            self._forces_host = np.zeros((ship_count, 3), dtype=np.float32)
        if planets_changed:
            self._planet_capacity = planet_count

        if self.verbose:
            print(
                f"[Buffers] allocated ships={self._ship_capacity} planets={self._planet_capacity} "
                f"on {self.device.name}:{self.device.device}"
            )
        return True

    def upload(self, ship_snapshot: np.ndarray, planet_snapshot: np.ndarray):
        """Write snapshot records to the device.

        Slots with a zero count are skipped.

        Raises:
            ValueError: If snapshot lengths differ from the allocated capacities
        """
        if len(ship_snapshot) != self._ship_capacity or len(planet_snapshot) != self._planet_capacity:
            raise ValueError(
                f"Snapshot sizes (ships={len(ship_snapshot)}, planets={len(planet_snapshot)}) "
                f"do not match capacities (ships={self._ship_capacity}, planets={self._planet_capacity}); "
                "call ensure_capacity first"
            )
        if self._ship_capacity > 0:
            self.device.write(self._ship_buffer, records_to_floats(ship_snapshot))
        if self._planet_capacity > 0:
            self.device.write(self._planet_buffer, records_to_floats(planet_snapshot))

    def download(self) -> np.ndarray:
        """Read forces back from the device.

        Returns:
            (ship_count, 3) float32 array in uploaded ship order (a fresh copy)
        """
        if self._ship_capacity == 0:
            return np.zeros((0, 3), dtype=np.float32)
        self.device.read(self._force_buffer, self._forces_host)
        return self._forces_host.copy()

    def release(self):
        """Free all device buffers. Safe to call when nothing is allocated."""
        released: List[DeviceBuffer] = [
            b for b in (self._ship_buffer, self._planet_buffer, self._force_buffer) if b is not None
        ]
        for buffer in released:
            self.device.release_buffer(buffer)
        self._ship_buffer = None
        self._planet_buffer = None
        self._force_buffer = None
        self._ship_capacity = 0
        self._planet_capacity = 0
        self._forces_host = np.zeros((0, 3), dtype=np.float32)

        if self.verbose and released:
            print(f"[Buffers] released {len(released)} buffers on {self.device.name}:{self.device.device}")
