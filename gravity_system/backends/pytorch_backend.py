"""PyTorch backend implementation (optional, GPU support)."""

from typing import Any, Dict
import numpy as np
from gravity_system.backends.base import (
    ComputeDevice,
    DeviceBuffer,
    MIN_DISTANCE_SQ,
    THREAD_GROUP_SIZE,
)

try:
    import torch
    TORCH_AVAILABLE = True
except ImportError:
    TORCH_AVAILABLE = False


def _accumulate_gravity_block(ship_positions, planets):
    """Tensor version of the per-group force sum (see numpy_backend)."""
    r_diff = planets[None, :, :3] - ship_positions[:, None, :]
    r_sq = torch.clamp(torch.sum(r_diff * r_diff, dim=2), min=MIN_DISTANCE_SQ)
    scale = planets[None, :, 3] / (r_sq * torch.sqrt(r_sq))
    return torch.sum(r_diff * scale.unsqueeze(2), dim=1)


class PyTorchBackend(ComputeDevice):
    """PyTorch-based device with CUDA/MPS support."""

    def __init__(self, device: str = None, group_size: int = THREAD_GROUP_SIZE):
        """Initialize PyTorch backend.

        Args:
            device: Device string (e.g., 'cpu', 'cuda:0', 'mps'). Auto-selects if None.
            group_size: Ships per work group
        """
        if not TORCH_AVAILABLE:
            raise ImportError("PyTorch not available. Install with: pip install torch")
        super().__init__(group_size)

        if device is None:
            if torch.cuda.is_available():
                self._device = torch.device('cuda')
            elif torch.backends.mps.is_available():
                self._device = torch.device('mps')
            else:
                self._device = torch.device('cpu')
        else:
            self._device = torch.device(device)

        self.allocation_errors = (MemoryError, torch.cuda.OutOfMemoryError)

    @property
    def name(self) -> str:
        return "pytorch"

    @property
    def device(self) -> str:
        return str(self._device)

    @property
    def accelerated(self) -> bool:
        return self._device.type in ("cuda", "mps")

    def _allocate(self, count: int, width: int) -> Any:
        return torch.zeros((count, width), dtype=torch.float32, device=self._device)

    def _free(self, native: Any) -> None:
        del native

    def _write(self, buffer: DeviceBuffer, host: np.ndarray) -> None:
        buffer.native[: host.shape[0]].copy_(torch.from_numpy(host.copy()))

    def _read(self, buffer: DeviceBuffer, host: np.ndarray) -> None:
        host[...] = buffer.native[: host.shape[0]].cpu().numpy()

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
        with torch.no_grad():
            for start, stop in self.group_ranges(groups_x, ints["ShipCount"], group_size):
                out_forces[start:stop] = _accumulate_gravity_block(ships[start:stop, :3], planets)

    def synchronize(self) -> None:
        if self._device.type == "cuda":
            torch.cuda.synchronize(self._device)
        elif self._device.type == "mps":
            torch.mps.synchronize()
