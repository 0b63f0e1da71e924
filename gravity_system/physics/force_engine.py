"""Parallel ship-planet force summation.

Every step runs upload -> dispatch -> synchronize -> download on one compute
device. Each work item owns one ship and sums the pull of every planet:

    force_i = sum_j  mass_j * d_ij / max(|d_ij|^2, MIN_DISTANCE_SQ)^(3/2)

with ``d_ij`` pointing from ship ``i`` to planet ``j``. The ship's own mass is
not a factor and no gravitational constant is applied, so the result is an
acceleration in "planet mass / squared distance" units.
"""

import math
from typing import Optional
import numpy as np
from gravity_system.backends.base import ComputeDevice, DispatchError, ACCUMULATE_GRAVITY
from gravity_system.physics.bodies import BodyRegistry, Snapshot
from gravity_system.physics.buffers import TransferBuffers


class ForceEngine:
    """Owns the transfer buffers and launches the gravity kernel.

    Construct one per scene and call ``release`` (or use it as a context
    manager) when the scene is torn down.
    """

    def __init__(self, device: ComputeDevice, group_size: Optional[int] = None, verbose: bool = False):
        """Initialize the engine.

        Args:
            device: Compute device to run on
            group_size: Ships per work group (default: the device's group size)
            verbose: Print buffer (re)allocation messages
        """
        if group_size is None:
            group_size = device.group_size
        if group_size <= 0:
            raise ValueError(f"group_size must be positive, got {group_size}")
        self.device = device
        self._group_size = int(group_size)
        self.kernel = device.find_kernel(ACCUMULATE_GRAVITY)
        self.buffers = TransferBuffers(device, verbose=verbose)

        self.steps = 0
        self.last_groups = 0

    @property
    def group_size(self) -> int:
        return self._group_size

    @property
    def dispatches(self) -> int:
        return self.device.stats.dispatches

    def work_groups(self, ship_count: int) -> int:
        """Number of groups needed to cover ``ship_count`` ships."""
        return math.ceil(ship_count / self.group_size)

    def dispatch(self, buffers: TransferBuffers, ship_count: int, planet_count: int) -> int:
        """Bind buffers and counts and launch the kernel.

        Returns once the launch is recorded; the caller synchronizes before
        reading results.

        Returns:
            Number of work groups launched
        """
        self.device.set_buffer(self.kernel, "Ships", buffers.ship_buffer)
        self.device.set_buffer(self.kernel, "Planets", buffers.planet_buffer)
        self.device.set_buffer(self.kernel, "OutForces", buffers.force_buffer)
        self.device.set_int("ShipCount", ship_count)
        self.device.set_int("PlanetCount", planet_count)

        groups = self.work_groups(ship_count)
        self.device.dispatch(self.kernel, groups, 1, 1, group_size=self._group_size)
        self.last_groups = groups
        return groups

    def compute(self, snapshot: Snapshot) -> np.ndarray:
        """Run one step on a snapshot.

        With no ships or no planets nothing is uploaded or dispatched and the
        buffers are left as they are.

        Args:
            snapshot: Ship and planet records for this step

        Returns:
            (ship_count, 3) float32 forces, index-aligned with ``snapshot.ships``

        Raises:
            CapacityError: If buffers cannot be allocated
            DispatchError: If the kernel cannot be launched
        """
        ship_count = snapshot.ship_count
        planet_count = snapshot.planet_count
        if snapshot.is_empty:
            self.last_groups = 0
            return np.zeros((ship_count, 3), dtype=np.float32)

        self.buffers.ensure_capacity(ship_count, planet_count)
        self.buffers.upload(snapshot.ships, snapshot.planets)
        self.dispatch(self.buffers, ship_count, planet_count)
        self.device.synchronize()
        forces = self.buffers.download()

        self.steps += 1
        return forces

    def step(self, registry: BodyRegistry) -> np.ndarray:
        """Snapshot the registry, compute forces and hand them to the ships.

        Ships are updated only after the whole force array is available, so a
        failed step leaves every ship's previous force in place.

        Returns:
            The forces delivered this step

        Raises:
            DispatchError: If ships were registered while the step was running
        """
        ships = registry.ships
        forces = self.compute(registry.snapshot())
        if len(forces) != len(ships):
            raise DispatchError(
                f"Ship count changed during step: {len(ships)} ships, {len(forces)} forces"
            )
        for ship, force in zip(ships, forces):
            ship.gravity_force = force.copy()
        return forces

    def release(self):
        """Free all device buffers. Safe to call more than once."""
        self.buffers.release()

    def __enter__(self) -> "ForceEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.release()
        return None
