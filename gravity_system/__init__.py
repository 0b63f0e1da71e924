"""
Gravity System - planet-on-ship gravity computed on a parallel compute device.

Features:
- Multiple compute backends (NumPy, CuPy, PyTorch, JAX) behind one
  buffer/bind/dispatch device API
- Work-group partitioned force kernel with explicit buffer lifecycle
- Euler ship integrator consuming one force per ship per step
- Random-field scene preset, 2D rendering and a CLI
"""

__version__ = "0.1.0"

from gravity_system.physics.simulator import Simulator
from gravity_system.physics.force_engine import ForceEngine
from gravity_system.physics.bodies import BodyRegistry
from gravity_system.backends.base import CapacityError, DispatchError
from gravity_system.backends.factory import get_backend, list_available_backends

__all__ = [
    "Simulator",
    "ForceEngine",
    "BodyRegistry",
    "CapacityError",
    "DispatchError",
    "get_backend",
    "list_available_backends",
]
