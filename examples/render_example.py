"""Render ships drifting through random planets in a matplotlib window."""

from gravity_system import Simulator, get_backend
from gravity_system.presets import RandomField
from gravity_system.render import RenderManager


def main():
    backend = get_backend(prefer_gpu=True)
    preset = RandomField(planet_count=20, ship_count=100, seed=7)
    manager = RenderManager(render_every=2, limit_x=preset.limit_x, limit_y=preset.limit_y)

    with Simulator(backend, dt=1.0 / 60.0) as sim:
        sim.populate(preset)
        for _ in range(1200):
            sim.step()
            manager.render(sim)

    manager.close()


if __name__ == "__main__":
    main()
