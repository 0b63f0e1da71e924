"""Compute device abstractions for the gravity pipeline."""

from gravity_system.backends.base import (
    ComputeDevice,
    DeviceBuffer,
    CapacityError,
    DispatchError,
    THREAD_GROUP_SIZE,
)
from gravity_system.backends.factory import get_backend, list_available_backends

__all__ = [
    "ComputeDevice",
    "DeviceBuffer",
    "CapacityError",
    "DispatchError",
    "THREAD_GROUP_SIZE",
    "get_backend",
    "list_available_backends",
]
