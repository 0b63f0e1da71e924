"""Shared test fixtures."""

import pytest
from gravity_system.backends.numpy_backend import NumPyBackend


class FailingBackend(NumPyBackend):
    """NumPy device that runs out of memory after ``fail_after`` allocations."""

    def __init__(self, fail_after: int):
        super().__init__()
        self.fail_after = fail_after
        self.calls = 0

    def _allocate(self, count, width):
        self.calls += 1
        if self.calls > self.fail_after:
            raise MemoryError("out of device memory")
        return super()._allocate(count, width)


@pytest.fixture
def failing_backend():
    """Factory for devices that fail after a given number of allocations."""
    return FailingBackend
