"""CLI main entry point."""

import argparse
from dataclasses import replace
from typing import List, Optional
import numpy as np
from gravity_system.backends.factory import get_backend, list_available_backends
from gravity_system.physics.simulator import Simulator
from gravity_system.presets import RandomField
from gravity_system.utils.config import Config, load_config

# argparse dest -> Config field, for values that override the config file
_OVERRIDES = {
    'planets': 'planet_count',
    'ships': 'ship_count',
    'steps': 'steps',
    'dt': 'dt',
    'backend': 'backend',
    'group_size': 'group_size',
    'seed': 'seed',
    'render_every': 'render_every',
    'debug_every': 'debug_every',
}


def build_config(args) -> Config:
    """Merge the optional config file with command-line overrides."""
    config = load_config(args.config) if args.config else Config()
    overrides = {
        field: getattr(args, dest)
        for dest, field in _OVERRIDES.items()
        if getattr(args, dest) is not None
    }
    if args.render:
        overrides['render'] = True
    if args.gpu is not None:
        overrides['prefer_gpu'] = args.gpu
    return replace(config, **overrides)


def run_simulation(config: Config, verbose: bool = False) -> Simulator:
    """Run a simulation.

    Returns:
        The simulator after its last step (buffers already released)
    """
    backend = get_backend(config.backend, prefer_gpu=config.prefer_gpu, group_size=config.group_size)

    preset = RandomField(
        planet_count=config.planet_count,
        ship_count=config.ship_count,
        seed=config.seed,
        limit_x=config.limit_x,
        limit_y=config.limit_y,
        limit_z=config.limit_z,
        planet_mass_range=config.planet_mass_range,
        ship_mass=config.ship_mass,
    )

    renderer = None
    if config.render:
        from gravity_system.render.manager import RenderManager
        renderer = RenderManager(config.render_every, limit_x=config.limit_x, limit_y=config.limit_y)

    with Simulator(backend, dt=config.dt, verbose=verbose) as sim:
        sim.populate(preset)

        print(f"Running simulation: {config.planet_count} planets, {config.ship_count} ships")
        print(f"Backend: {backend.name} ({backend.device}), group size: {backend.group_size}, dt: {config.dt:.4f}")
        print(f"{'Step':<8} {'Time':<10} {'mean|F|':<12} {'mean|v|':<12} {'groups':<8}")
        print("-" * 52)

        try:
            for step in range(config.steps):
                sim.step()

                if renderer:
                    renderer.render(sim)

                if step % config.debug_every == 0:
                    forces = sim.last_forces
                    mean_force = float(np.mean(np.linalg.norm(forces, axis=1))) if len(forces) else 0.0
                    print(
                        f"{sim.step_count:<8} {sim.time:<10.3f} {mean_force:<12.4f} "
                        f"{sim.get_mean_speed():<12.4f} {sim.engine.last_groups:<8}"
                    )
        finally:
            if renderer:
                renderer.close()

    print("Simulation complete!")
    return sim


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Gravity System - ship/planet gravity on a compute device")

    parser.add_argument('--config', type=str, default=None,
                        help='Config file (.json or .yaml); command-line values override it')

    # Scene
    parser.add_argument('--planets', type=int, default=None,
                        help='Number of planets (default: 50)')
    parser.add_argument('--ships', type=int, default=None,
                        help='Number of ships (default: 50)')

    # Simulation parameters
    parser.add_argument('--steps', type=int, default=None,
                        help='Number of simulation steps (default: 600)')
    parser.add_argument('--dt', type=float, default=None,
                        help='Time step (default: 1/60)')
    parser.add_argument('--debug-every', type=int, default=None,
                        help='Print a progress row every N steps (default: 60)')

    # Backend
    parser.add_argument('--backend', type=str, default=None,
                        choices=['numpy', 'jax', 'pytorch', 'cupy'],
                        help='Compute backend (auto-select if not specified)')
    parser.add_argument('--gpu', action=argparse.BooleanOptionalAction, default=None,
                        help='Prefer (or with --no-gpu, skip) GPU backends when auto-selecting')
    parser.add_argument('--group-size', type=int, default=None,
                        help='Ships per work group (default: 64)')
    parser.add_argument('--verbose', action='store_true',
                        help='Print buffer allocation messages')

    # Rendering
    parser.add_argument('--render', action='store_true',
                        help='Enable real-time rendering')
    parser.add_argument('--render-every', type=int, default=None,
                        help='Render every N steps')

    # Reproducibility
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')

    # Info
    parser.add_argument('--list-backends', action='store_true',
                        help='List available backends and exit')
    return parser


def main(argv: Optional[List[str]] = None):
    """CLI entry point."""
    args = create_parser().parse_args(argv)

    if args.list_backends:
        backends = list_available_backends()
        print("Available backends:")
        for backend in backends:
            print(f"  - {backend}")
        return

    run_simulation(build_config(args), verbose=args.verbose)


if __name__ == '__main__':
    main()
