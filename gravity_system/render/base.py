"""Base renderer interface."""

from abc import ABC, abstractmethod
import numpy as np


class Renderer(ABC):
    """Abstract base class for renderers."""

    @abstractmethod
    def render(
        self,
        ship_positions: np.ndarray,
        ship_headings: np.ndarray,
        planet_positions: np.ndarray,
        planet_masses: np.ndarray,
    ):
        """Render current frame.

        Args:
            ship_positions: Ship positions (n, 3)
            ship_headings: Unit ship headings (n, 3)
            planet_positions: Planet positions (m, 3)
            planet_masses: Planet masses (m,), used for sizing
        """
        pass

    @abstractmethod
    def capture_frame(self) -> np.ndarray:
        """Capture current frame as image array.

        Returns:
            Image array (H, W, 3) uint8
        """
        pass

    @abstractmethod
    def clear(self):
        """Clear the renderer."""
        pass

    @abstractmethod
    def close(self):
        """Close the renderer."""
        pass
