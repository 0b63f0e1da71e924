"""Physics engine for ship-planet gravity."""

from gravity_system.physics.bodies import BodyRegistry, Planet, Ship, Snapshot
from gravity_system.physics.buffers import TransferBuffers
from gravity_system.physics.force_engine import ForceEngine
from gravity_system.physics.simulator import Simulator

__all__ = [
    "BodyRegistry",
    "Planet",
    "Ship",
    "Snapshot",
    "TransferBuffers",
    "ForceEngine",
    "Simulator",
]
