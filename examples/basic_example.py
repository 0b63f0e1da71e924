"""Basic example of using the gravity system."""

from gravity_system import Simulator, get_backend
from gravity_system.presets import RandomField


def main():
    """Run a small random field of planets and ships."""
    # Get backend (NumPy is always available)
    backend = get_backend("numpy")

    preset = RandomField(planet_count=50, ship_count=200, seed=42)

    with Simulator(backend, dt=1.0 / 60.0, verbose=True) as sim:
        sim.populate(preset)

        print("Running simulation...")
        for step in range(600):
            sim.step()
            if step % 100 == 0:
                print(f"Step {step}: Time={sim.time:.2f}, mean speed={sim.get_mean_speed():.4f}")

        print(f"Kernel launches: {backend.stats.dispatches}, buffers allocated: {backend.stats.allocations}")
    print("Simulation complete!")


if __name__ == "__main__":
    main()
