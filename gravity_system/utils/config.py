"""Configuration management."""

import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional, Tuple


@dataclass
class Config:
    """Simulation configuration."""
    # Scene
    planet_count: int = 50
    ship_count: int = 50
    limit_x: Tuple[float, float] = (-10.0, 10.0)
    limit_y: Tuple[float, float] = (-10.0, 10.0)
    limit_z: Tuple[float, float] = (0.0, 0.0)
    planet_mass_range: Tuple[float, float] = (0.1, 0.5)
    ship_mass: float = 1.0

    # Simulation parameters
    dt: float = 1.0 / 60.0
    steps: int = 600
    backend: Optional[str] = None
    prefer_gpu: bool = True
    group_size: int = 64

    # Rendering / output
    render: bool = False
    render_every: int = 1
    debug_every: int = 60

    # Reproducibility
    seed: Optional[int] = None

    def __post_init__(self):
        # JSON and YAML hand ranges back as lists
        for name in ("limit_x", "limit_y", "limit_z", "planet_mass_range"):
            setattr(self, name, tuple(float(v) for v in getattr(self, name)))
        if self.dt <= 0:
            raise ValueError(f"dt must be positive, got {self.dt}")
        if self.group_size <= 0:
            raise ValueError(f"group_size must be positive, got {self.group_size}")
        for name in ("render_every", "debug_every"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Build a Config, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        return cls(**data)


def _is_yaml(path: Path) -> bool:
    return path.suffix in ('.yaml', '.yml')


def load_config(config_path: str) -> Config:
    """Load configuration from file.

    Args:
        config_path: Path to config file (.json or .yaml)

    Returns:
        Config object
    """
    config_path = Path(config_path)

    with open(config_path, 'r') as f:
        if _is_yaml(config_path):
            try:
                import yaml
            except ImportError:
                raise ImportError("YAML support requires PyYAML. Install with: pip install pyyaml")
            data = yaml.safe_load(f) or {}
        else:
            data = json.load(f)

    return Config.from_dict(data)


def save_config(config: Config, output_path: str):
    """Save configuration to file.

    Args:
        config: Config object
        output_path: Output file path (.json or .yaml)
    """
    output_path = Path(output_path)
    data = asdict(config)
    for key, value in data.items():
        if isinstance(value, tuple):
            data[key] = list(value)

    with open(output_path, 'w') as f:
        if _is_yaml(output_path):
            try:
                import yaml
            except ImportError:
                raise ImportError("YAML support requires PyYAML. Install with: pip install pyyaml")
            yaml.safe_dump(data, f, default_flow_style=False)
        else:
            json.dump(data, f, indent=2)
