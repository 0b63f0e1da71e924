"""Base class for scene presets."""

from abc import ABC, abstractmethod
from typing import Optional


class Preset(ABC):
    """Abstract base class for scene presets."""

    def __init__(self, seed: Optional[int] = None):
        """Initialize preset.

        Args:
            seed: Random seed for reproducibility
        """
        self.seed = seed

    @abstractmethod
    def generate(self, registry) -> None:
        """Register the scene's planets and ships.

        Args:
            registry: BodyRegistry to populate
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this preset."""
        pass
