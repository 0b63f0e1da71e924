"""CuPy backend implementation (optional, CUDA-only)."""

from typing import Any, Dict
import numpy as np
from gravity_system.backends.base import (
    ComputeDevice,
    DeviceBuffer,
    MIN_DISTANCE_SQ,
    THREAD_GROUP_SIZE,
)

try:
    import cupy as cp
    CUPY_AVAILABLE = True
except ImportError:
    CUPY_AVAILABLE = False


# One thread per ship; records are {float3 position, float mass} = 16 bytes.
_KERNEL_SOURCE = r'''
#define MIN_DISTANCE_SQ %(min_distance_sq)rf

struct BodyRecord {
    float x;
    float y;
    float z;
    float mass;
};

extern "C" __global__
void accumulate_gravity(const BodyRecord* ships, const BodyRecord* planets,
                        float* out_forces, const int ship_count, const int planet_count)
{
    const int i = blockIdx.x * blockDim.x + threadIdx.x;
    if (i >= ship_count) {
        return;
    }

    const BodyRecord ship = ships[i];
    float fx = 0.0f;
    float fy = 0.0f;
    float fz = 0.0f;

    for (int j = 0; j < planet_count; ++j) {
        const BodyRecord planet = planets[j];
        const float dx = planet.x - ship.x;
        const float dy = planet.y - ship.y;
        const float dz = planet.z - ship.z;
        const float r_sq = fmaxf(dx * dx + dy * dy + dz * dz, MIN_DISTANCE_SQ);
        const float inv_r = rsqrtf(r_sq);
        const float scale = planet.mass * inv_r * inv_r * inv_r;
        fx += scale * dx;
        fy += scale * dy;
        fz += scale * dz;
    }

    out_forces[3 * i + 0] = fx;
    out_forces[3 * i + 1] = fy;
    out_forces[3 * i + 2] = fz;
}
''' % {"min_distance_sq": MIN_DISTANCE_SQ}


class CuPyBackend(ComputeDevice):
    """CuPy-based device (CUDA GPU only).

    The kernel is compiled once per device as a ``RawKernel`` and launched
    with ``blockDim.x == group_size``.
    """

    def __init__(self, device: int = 0, group_size: int = THREAD_GROUP_SIZE):
        """Initialize CuPy backend.

        Args:
            device: CUDA device ID
            group_size: Threads per block
        """
        if not CUPY_AVAILABLE:
            raise ImportError("CuPy not available. Install with: pip install cupy")
        super().__init__(group_size)

        self._device = device
        cp.cuda.Device(device).use()
        self._kernel = cp.RawKernel(_KERNEL_SOURCE, "accumulate_gravity")
        self.allocation_errors = (MemoryError, cp.cuda.memory.OutOfMemoryError)

    @property
    def name(self) -> str:
        return "cupy"

    @property
    def device(self) -> str:
        return f"cuda:{self._device}"

    @property
    def accelerated(self) -> bool:
        return True

    def _allocate(self, count: int, width: int) -> Any:
        with cp.cuda.Device(self._device):
            return cp.zeros((count, width), dtype=cp.float32)

    def _free(self, native: Any) -> None:
        # Memory returns to CuPy's pool once the last reference is dropped.
        del native

    def _write(self, buffer: DeviceBuffer, host: np.ndarray) -> None:
        buffer.native[: host.shape[0]].set(host)

    def _read(self, buffer: DeviceBuffer, host: np.ndarray) -> None:
        host[...] = buffer.native[: host.shape[0]].get()

    def _launch(
        self,
        kernel: str,
        groups_x: int,
        group_size: int,
        buffers: Dict[str, DeviceBuffer],
        ints: Dict[str, int],
    ) -> None:
        with cp.cuda.Device(self._device):
            self._kernel(
                (groups_x, 1, 1),
                (group_size, 1, 1),
                (
                    buffers["Ships"].native,
                    buffers["Planets"].native,
                    buffers["OutForces"].native,
                    np.int32(ints["ShipCount"]),
                    np.int32(ints["PlanetCount"]),
                ),
            )

    def synchronize(self) -> None:
        cp.cuda.Device(self._device).synchronize()
