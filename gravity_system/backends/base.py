"""Abstract base class for compute devices.

A compute device mirrors the shape of a GPU compute API: linear buffers of
fixed-stride float32 records, buffer and integer bindings keyed by name, and a
dispatch call that launches a grid of work groups. Only the first grid
dimension is used; the other two are fixed at 1.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple
import numpy as np

THREAD_GROUP_SIZE = 64
FLOAT_SIZE = 4

# Floor on squared ship-planet distance; keeps coincident bodies finite.
MIN_DISTANCE_SQ = 1e-6

ACCUMULATE_GRAVITY = "accumulate_gravity"


class CapacityError(RuntimeError):
    """Raised when a device buffer cannot be allocated."""


class DispatchError(RuntimeError):
    """Raised when a kernel cannot be launched with the current bindings."""


@dataclass
class DeviceStats:
    """Allocation and launch counters for a device."""
    allocations: int = 0
    releases: int = 0
    dispatches: int = 0

    @property
    def live_buffers(self) -> int:
        return self.allocations - self.releases


class DeviceBuffer:
    """Handle to a device-resident array of ``count`` records of ``stride`` bytes."""

    def __init__(self, count: int, stride: int, native: Any):
        self.count = count
        self.stride = stride
        self.native = native
        self.released = False

    @property
    def width(self) -> int:
        """Number of float32 lanes per record."""
        return self.stride // FLOAT_SIZE

    @property
    def nbytes(self) -> int:
        return self.count * self.stride

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"DeviceBuffer(count={self.count}, stride={self.stride}, {state})"


class ComputeDevice(ABC):
    """Abstract interface for parallel compute devices.

    This allows the force pipeline to run on different execution engines
    (NumPy, CuPy, PyTorch, JAX) through one buffer/bind/dispatch API.
    Subclasses provide storage and the ``accumulate_gravity`` kernel; the base
    class owns validation, bindings and the statistics counters.
    """

    kernels: Tuple[str, ...] = (ACCUMULATE_GRAVITY,)
    kernel_buffers: Tuple[str, ...] = ("Ships", "Planets", "OutForces")
    kernel_ints: Tuple[str, ...] = ("ShipCount", "PlanetCount")

    # Backend exceptions that mean "out of device memory".
    allocation_errors: Tuple[type, ...] = (MemoryError,)

    def __init__(self, group_size: int = THREAD_GROUP_SIZE):
        """Initialize device state.

        Args:
            group_size: Number of work items (ships) per work group
        """
        if group_size <= 0:
            raise ValueError(f"group_size must be positive, got {group_size}")
        self.group_size = int(group_size)
        self.stats = DeviceStats()
        self._buffer_bindings: Dict[Tuple[int, str], DeviceBuffer] = {}
        self._int_bindings: Dict[str, int] = {}

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this backend."""
        pass

    @property
    @abstractmethod
    def device(self) -> str:
        """Return the device type (e.g., 'cpu', 'cuda:0')."""
        pass

    @property
    def accelerated(self) -> bool:
        """True when kernels run on a GPU rather than the host CPU."""
        return False

    # ----- Buffers -----

    def create_buffer(self, count: int, stride: int) -> DeviceBuffer:
        """Allocate a zero-filled buffer of ``count`` records.

        Args:
            count: Number of records (must be positive)
            stride: Record size in bytes (positive multiple of 4)

        Returns:
            DeviceBuffer handle

        Raises:
            CapacityError: If the size is invalid or the device is out of memory
        """
        if count <= 0:
            raise CapacityError(f"Invalid buffer count {count}; must be positive")
        if stride <= 0 or stride % FLOAT_SIZE:
            raise CapacityError(f"Invalid buffer stride {stride}; must be a positive multiple of {FLOAT_SIZE}")
        try:
            native = self._allocate(count, stride // FLOAT_SIZE)
        except self.allocation_errors as exc:
            raise CapacityError(
                f"Failed to allocate {count * stride} bytes on {self.device}: {exc}"
            ) from exc
        self.stats.allocations += 1
        return DeviceBuffer(count, stride, native)

    def release_buffer(self, buffer: DeviceBuffer) -> None:
        """Free a buffer. Releasing an already-released buffer is a no-op."""
        if buffer is None or buffer.released:
            return
        self._free(buffer.native)
        buffer.native = None
        buffer.released = True
        self.stats.releases += 1
        self._buffer_bindings = {
            key: bound for key, bound in self._buffer_bindings.items() if bound is not buffer
        }

    def write(self, buffer: DeviceBuffer, host: np.ndarray) -> None:
        """Copy host rows ``(n, width)`` into the first ``n`` records of ``buffer``."""
        host = self._check_host(buffer, host)
        self._write(buffer, host)

    def read(self, buffer: DeviceBuffer, host: np.ndarray) -> None:
        """Copy the first ``len(host)`` records of ``buffer`` into ``host`` in place."""
        self._check_host(buffer, host)
        if host.dtype != np.float32 or not host.flags.c_contiguous or not host.flags.writeable:
            raise ValueError("read() needs a writable C-contiguous float32 host array")
        self._read(buffer, host)

    def _check_host(self, buffer: DeviceBuffer, host: np.ndarray) -> np.ndarray:
        if buffer is None or buffer.released:
            raise ValueError("Buffer has been released")
        host = np.ascontiguousarray(host, dtype=np.float32)
        if host.ndim != 2 or host.shape[1] != buffer.width:
            raise ValueError(f"Host array shape {host.shape} does not match record width {buffer.width}")
        if host.shape[0] > buffer.count:
            raise ValueError(f"Host array has {host.shape[0]} records, buffer holds {buffer.count}")
        return host

    # ----- Kernel bindings and dispatch -----

    def find_kernel(self, name: str) -> int:
        """Return the index of a kernel by name."""
        try:
            return self.kernels.index(name)
        except ValueError:
            raise DispatchError(f"Unknown kernel '{name}'. Available: {list(self.kernels)}") from None

    def set_buffer(self, kernel: int, name: str, buffer: DeviceBuffer) -> None:
        """Bind ``buffer`` to the kernel's buffer slot ``name``."""
        self._kernel_name(kernel)
        if name not in self.kernel_buffers:
            raise DispatchError(f"Unknown buffer binding '{name}'. Expected one of {list(self.kernel_buffers)}")
        if buffer is None or buffer.released:
            raise DispatchError(f"Cannot bind released buffer to '{name}'")
        self._buffer_bindings[(kernel, name)] = buffer

    def set_int(self, name: str, value: int) -> None:
        """Set an integer scalar shared by all kernels."""
        if name not in self.kernel_ints:
            raise DispatchError(f"Unknown integer binding '{name}'. Expected one of {list(self.kernel_ints)}")
        self._int_bindings[name] = int(value)

    def dispatch(
        self,
        kernel: int,
        groups_x: int,
        groups_y: int = 1,
        groups_z: int = 1,
        group_size: Optional[int] = None,
    ) -> None:
        """Launch ``groups_x`` work groups of ``group_size`` items.

        ``group_size`` defaults to the device's own group size.

        Recording the launch does not imply completion; call ``synchronize``
        before reading results back.

        Raises:
            DispatchError: On unknown kernels, missing bindings or bad group counts
        """
        kernel_name = self._kernel_name(kernel)
        if groups_x < 1 or groups_y != 1 or groups_z != 1:
            raise DispatchError(
                f"Invalid group counts ({groups_x}, {groups_y}, {groups_z}); "
                "x must be >= 1 and y, z must be 1"
            )
        if group_size is None:
            group_size = self.group_size
        if group_size < 1:
            raise DispatchError(f"Invalid group size {group_size}; must be positive")

        buffers = {}
        for slot in self.kernel_buffers:
            bound = self._buffer_bindings.get((kernel, slot))
            if bound is None or bound.released:
                raise DispatchError(f"Buffer '{slot}' is not bound for kernel '{kernel_name}'")
            buffers[slot] = bound
        ints = {}
        for slot in self.kernel_ints:
            if slot not in self._int_bindings:
                raise DispatchError(f"Integer '{slot}' is not set")
            ints[slot] = self._int_bindings[slot]

        ship_count, planet_count = ints["ShipCount"], ints["PlanetCount"]
        if ship_count > buffers["Ships"].count or ship_count > buffers["OutForces"].count:
            raise DispatchError(f"ShipCount {ship_count} exceeds bound ship/force buffer capacity")
        if planet_count > buffers["Planets"].count:
            raise DispatchError(f"PlanetCount {planet_count} exceeds bound planet buffer capacity")

        self._launch(kernel_name, groups_x, group_size, buffers, ints)
        self.stats.dispatches += 1

    def synchronize(self) -> None:
        """Block until every recorded launch has completed."""
        pass

    def group_ranges(
        self, groups_x: int, item_count: int, group_size: Optional[int] = None
    ) -> Iterator[Tuple[int, int]]:
        """Yield the ``[start, stop)`` item range each work group owns.

        Items at or beyond ``item_count`` in the last group are guarded out, so
        a partial group never touches slots past the end of the output.
        """
        size = self.group_size if group_size is None else group_size
        for group in range(groups_x):
            start = group * size
            stop = min(start + size, item_count)
            if start < stop:
                yield start, stop

    def _kernel_name(self, kernel: int) -> str:
        if not 0 <= kernel < len(self.kernels):
            raise DispatchError(f"Unknown kernel index {kernel}")
        return self.kernels[kernel]

    # ----- Backend hooks -----

    @abstractmethod
    def _allocate(self, count: int, width: int) -> Any:
        """Allocate zeroed native storage of shape (count, width) float32."""
        pass

    @abstractmethod
    def _free(self, native: Any) -> None:
        """Free native storage."""
        pass

    @abstractmethod
    def _write(self, buffer: DeviceBuffer, host: np.ndarray) -> None:
        """Upload host rows into the start of the buffer."""
        pass

    @abstractmethod
    def _read(self, buffer: DeviceBuffer, host: np.ndarray) -> None:
        """Download the start of the buffer into host rows."""
        pass

    @abstractmethod
    def _launch(
        self,
        kernel: str,
        groups_x: int,
        group_size: int,
        buffers: Dict[str, DeviceBuffer],
        ints: Dict[str, int],
    ) -> None:
        """Run ``kernel`` over ``groups_x`` work groups of ``group_size`` items."""
        pass
