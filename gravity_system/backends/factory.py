"""Backend factory for creating and managing compute devices."""

from typing import List, Optional
from gravity_system.backends.base import ComputeDevice, THREAD_GROUP_SIZE
from gravity_system.backends.numpy_backend import NumPyBackend
from gravity_system.backends.cupy_backend import CuPyBackend, CUPY_AVAILABLE
from gravity_system.backends.jax_backend import JAXBackend, JAX_AVAILABLE
from gravity_system.backends.pytorch_backend import PyTorchBackend, TORCH_AVAILABLE

# Optional backends, keyed by CLI name; None when the library is not installed
_OPTIONAL_BACKENDS = {
    "cupy": CuPyBackend if CUPY_AVAILABLE else None,
    "jax": JAXBackend if JAX_AVAILABLE else None,
    "pytorch": PyTorchBackend if TORCH_AVAILABLE else None,
}

_INSTALL_HINTS = {
    "cupy": "pip install cupy",
    "jax": "pip install jax jaxlib",
    "pytorch": "pip install torch",
}

# Auto-selection order when a GPU is preferred
_GPU_PREFERENCE = ("cupy", "jax", "pytorch")


def list_available_backends() -> List[str]:
    """List all available backends.

    Returns:
        List of backend names that can be instantiated
    """
    backends = ["numpy"]  # Always available
    for name in ("jax", "pytorch", "cupy"):
        if _OPTIONAL_BACKENDS[name] is not None:
            backends.append(name)
    return backends


def get_backend(
    name: Optional[str] = None,
    prefer_gpu: bool = True,
    group_size: int = THREAD_GROUP_SIZE,
) -> ComputeDevice:
    """Get a compute device instance.

    Args:
        name: Backend name ('numpy', 'jax', 'pytorch', 'cupy'). If None, auto-selects.
        prefer_gpu: If True and name is None, prefer an accelerated device over the CPU.
        group_size: Ships per work group

    Returns:
        ComputeDevice instance

    Raises:
        ValueError: If requested backend is not available
    """
    if name is None:
        if prefer_gpu:
            for candidate in _GPU_PREFERENCE:
                backend_class = _OPTIONAL_BACKENDS[candidate]
                if backend_class is None:
                    continue
                try:
                    device = backend_class(group_size=group_size)
                except Exception as exc:
                    print(f"[Backend] {candidate} unavailable: {exc}")
                    continue
                if device.accelerated:
                    print(f"[Backend] Using {device.name} on {device.device}")
                    return device

        # Fallback to NumPy
        return NumPyBackend(group_size=group_size)

    name_lower = name.lower()

    if name_lower == "numpy":
        return NumPyBackend(group_size=group_size)
    if name_lower in _OPTIONAL_BACKENDS:
        backend_class = _OPTIONAL_BACKENDS[name_lower]
        if backend_class is None:
            raise ValueError(
                f"{name_lower} backend not available. Install with: {_INSTALL_HINTS[name_lower]}"
            )
        return backend_class(group_size=group_size)

    available = list_available_backends()
    raise ValueError(f"Unknown backend '{name}'. Available: {available}")
