"""Main simulator controller."""

from typing import Callable, Optional
import time
import numpy as np
from gravity_system.backends.base import ComputeDevice
from gravity_system.physics.bodies import BodyRegistry
from gravity_system.physics.force_engine import ForceEngine
from gravity_system.physics.integrators.base import ShipIntegrator
from gravity_system.physics.integrators.euler import EulerShipIntegrator


class Simulator:
    """Main simulation controller.

    Owns the body registry, one force engine and the ship integrator, and
    runs them in order each step: forces first, then motion.
    """

    def __init__(
        self,
        device: ComputeDevice,
        integrator: Optional[ShipIntegrator] = None,
        dt: float = 1.0 / 60.0,
        verbose: bool = False,
    ):
        """Initialize simulator.

        Args:
            device: Compute device for the force engine
            integrator: Ship integrator to use (default: Euler)
            dt: Time step
            verbose: Print buffer allocation messages
        """
        self.device = device
        self.integrator = integrator or EulerShipIntegrator()
        self.registry = BodyRegistry()
        self.engine = ForceEngine(device, verbose=verbose)
        self.set_timestep(dt)

        self.time = 0.0
        self.step_count = 0
        self.paused = False
        self.last_forces = np.zeros((0, 3), dtype=np.float32)

        # Profiling: last step timing (ms)
        self._last_forces_ms: Optional[float] = None
        self._last_integrator_ms: Optional[float] = None
        self._profile: bool = False

        # Callbacks
        self.on_step_callback: Optional[Callable] = None
        self.debug: bool = False
        self._debug_interval: int = 60

    @property
    def debug_interval(self) -> int:
        """Steps between [Diag] lines when ``debug`` is on."""
        return self._debug_interval

    @debug_interval.setter
    def debug_interval(self, interval: int):
        if interval < 1:
            raise ValueError(f"debug_interval must be at least 1, got {interval}")
        self._debug_interval = int(interval)

    def populate(self, preset) -> None:
        """Spawn planets and ships from a preset into the registry."""
        preset.generate(self.registry)
        self.time = 0.0
        self.step_count = 0

    def set_profiling(self, enabled: bool = True):
        """Enable or disable step timing (forces ms, integrator ms)."""
        self._profile = enabled

    def get_timing(self) -> dict:
        """Return last step timing in ms: forces_ms, integrator_ms."""
        return {
            "forces_ms": self._last_forces_ms,
            "integrator_ms": self._last_integrator_ms,
        }

    def step(self):
        """Perform one simulation step."""
        if self.paused:
            return

        if self._profile:
            t0 = time.perf_counter()
        forces = self.engine.step(self.registry)
        if self._profile:
            t1 = time.perf_counter()
        self.integrator.integrate(self.registry.ships, forces, self.dt)
        if self._profile:
            t2 = time.perf_counter()
            self._last_forces_ms = (t1 - t0) * 1000.0
            self._last_integrator_ms = (t2 - t1) * 1000.0

        self.last_forces = forces
        self.time += self.dt
        self.step_count += 1

        if self.debug and (self.step_count % self.debug_interval == 0):
            self._log_step()

        if self.on_step_callback:
            self.on_step_callback(self)

    def _log_step(self):
        """Log mean force and speed."""
        mean_force = float(np.mean(np.linalg.norm(self.last_forces, axis=1))) if len(self.last_forces) else 0.0
        mean_speed = self.get_mean_speed()
        print(
            f"[Diag] step={self.step_count} t={self.time:.3f} "
            f"mean|F|={mean_force:.4f} mean|v|={mean_speed:.4f} groups={self.engine.last_groups}"
        )

    def run_steps(self, k: int):
        """Run k simulation steps, stopping early if paused."""
        for _ in range(k):
            if self.paused:
                return
            self.step()

    def run(self, n_steps: int):
        """Run simulation for specified number of steps.

        Args:
            n_steps: Number of steps to run
        """
        for _ in range(n_steps):
            self.step()

    def pause(self):
        """Pause simulation."""
        self.paused = True

    def resume(self):
        """Resume simulation."""
        self.paused = False

    def set_timestep(self, dt: float):
        """Set time step.

        Args:
            dt: New time step (must be positive)
        """
        if not dt > 0:
            raise ValueError(f"dt must be positive, got {dt}")
        self.dt = float(dt)

    def set_integrator(self, integrator: ShipIntegrator):
        """Set integrator."""
        self.integrator = integrator

    def get_state(self):
        """Get current simulation state.

        Returns:
            Tuple of (ship_positions, ship_velocities, planet_positions,
            planet_masses, time, step_count); arrays are (n, 3) / (n,) float32
        """
        ships = self.registry.snapshot_ships()
        planets = self.registry.snapshot_planets()
        velocities = np.zeros((self.registry.ship_count, 3), dtype=np.float32)
        for i, ship in enumerate(self.registry.ships):
            velocities[i] = ship.velocity
        return (
            np.array(ships["position"]),
            velocities,
            np.array(planets["position"]),
            np.array(planets["mass"]),
            self.time,
            self.step_count,
        )

    def get_headings(self) -> np.ndarray:
        """Ship headings as an (n, 3) array."""
        headings = np.zeros((self.registry.ship_count, 3), dtype=np.float32)
        for i, ship in enumerate(self.registry.ships):
            headings[i] = ship.heading
        return headings

    def get_mean_speed(self) -> float:
        """Mean ship speed (0 with no ships)."""
        ships = self.registry.ships
        if not ships:
            return 0.0
        return float(np.mean([np.linalg.norm(ship.velocity) for ship in ships]))

    def close(self):
        """Release device buffers."""
        self.engine.release()

    def __enter__(self) -> "Simulator":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return None
