"""JAX backend implementation (optional, GPU support)."""

from typing import Any, Dict
import numpy as np
from gravity_system.backends.base import (
    ComputeDevice,
    DeviceBuffer,
    MIN_DISTANCE_SQ,
    THREAD_GROUP_SIZE,
)

try:
    import jax
    import jax.numpy as jnp
    JAX_AVAILABLE = True
except ImportError:
    JAX_AVAILABLE = False

# JAX JIT-compiled group kernel (module-level so it compiles once per block shape)
_jax_block_jit = None


def _get_jax_block_jit():
    """Lazy compile the JAX per-group force kernel."""
    global _jax_block_jit
    if _jax_block_jit is not None:
        return _jax_block_jit

    @jax.jit
    def _accumulate_gravity_block(ship_positions: Any, planets: Any) -> Any:
        r_diff = planets[None, :, :3] - ship_positions[:, None, :]
        r_sq = jnp.maximum(jnp.sum(r_diff * r_diff, axis=2), MIN_DISTANCE_SQ)
        scale = planets[None, :, 3] / (r_sq * jnp.sqrt(r_sq))
        return jnp.sum(r_diff * scale[:, :, None], axis=1)

    _jax_block_jit = _accumulate_gravity_block
    return _jax_block_jit


class JAXBackend(ComputeDevice):
    """JAX-based device with GPU support.

    JAX arrays are immutable, so writes and launches rebind ``buffer.native``
    to the updated array instead of mutating it in place.
    """

    def __init__(self, device: str = None, group_size: int = THREAD_GROUP_SIZE):
        """Initialize JAX backend.

        Args:
            device: Device string (e.g., 'cpu', 'gpu'). Auto-selects if None.
            group_size: Ships per work group
        """
        if not JAX_AVAILABLE:
            raise ImportError("JAX not available. Install with: pip install jax jaxlib")
        super().__init__(group_size)

        self._device = jax.devices(device)[0] if device else jax.devices()[0]
        self._pending = None
        self.allocation_errors = (MemoryError, jax.errors.JaxRuntimeError)

    @property
    def name(self) -> str:
        return "jax"

    @property
    def device(self) -> str:
        return str(self._device)

    @property
    def accelerated(self) -> bool:
        return self._device.platform in ("gpu", "cuda", "rocm", "tpu")

    def _allocate(self, count: int, width: int) -> Any:
        return jax.device_put(jnp.zeros((count, width), dtype=jnp.float32), self._device)

    def _free(self, native: Any) -> None:
        if native is self._pending:
            self._pending = None
        native.delete()

    def _write(self, buffer: DeviceBuffer, host: np.ndarray) -> None:
        rows = jax.device_put(host, self._device)
        buffer.native = buffer.native.at[: host.shape[0]].set(rows)

    def _read(self, buffer: DeviceBuffer, host: np.ndarray) -> None:
        host[...] = np.asarray(buffer.native[: host.shape[0]])

    def _launch(
        self,
        kernel: str,
        groups_x: int,
        group_size: int,
        buffers: Dict[str, DeviceBuffer],
        ints: Dict[str, int],
    ) -> None:
        block_fn = _get_jax_block_jit()
        ships = buffers["Ships"].native
        planets = buffers["Planets"].native[: ints["PlanetCount"]]
        out_forces = buffers["OutForces"].native
        for start, stop in self.group_ranges(groups_x, ints["ShipCount"], group_size):
            out_forces = out_forces.at[start:stop].set(block_fn(ships[start:stop, :3], planets))
        buffers["OutForces"].native = out_forces
        self._pending = out_forces

    def synchronize(self) -> None:
        if self._pending is not None:
            self._pending.block_until_ready()
            self._pending = None
