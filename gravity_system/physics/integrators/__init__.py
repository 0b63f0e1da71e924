"""Motion integrators that consume the per-step gravity forces."""

from gravity_system.physics.integrators.base import ShipIntegrator
from gravity_system.physics.integrators.euler import EulerShipIntegrator

__all__ = ["ShipIntegrator", "EulerShipIntegrator"]
