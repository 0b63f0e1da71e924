"""2D top-down renderer using matplotlib."""

from typing import Optional, Tuple
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from gravity_system.render.base import Renderer


class Renderer2D(Renderer):
    """Planets as discs sized by mass, ships as arrows along their heading.

    The view is fixed to the spawn rectangle (plus a margin) so ships can be
    seen leaving it.
    """

    def __init__(
        self,
        limit_x: Tuple[float, float] = (-10.0, 10.0),
        limit_y: Tuple[float, float] = (-10.0, 10.0),
        figsize: Tuple[int, int] = (8, 8),
        dpi: int = 100,
        margin: float = 0.25,
        interactive: bool = True,
    ):
        """Initialize 2D renderer.

        Args:
            limit_x: Scene x range (min, max)
            limit_y: Scene y range (min, max)
            figsize: Figure size (width, height)
            dpi: Dots per inch
            margin: Extra view space as a fraction of the scene size
            interactive: Open a window and pump GUI events on each frame
        """
        self.limit_x = limit_x
        self.limit_y = limit_y
        self.figsize = figsize
        self.dpi = dpi
        self.margin = margin
        self.interactive = interactive

        self.fig: Optional[Figure] = None
        self.ax = None
        self.planet_scatter = None
        self.ship_arrows = None
        self.initialized = False

    def _initialize(self):
        """Initialize plot if not already done."""
        if self.initialized:
            return
        self.fig, self.ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        self._setup_axes()
        if self.interactive:
            plt.show(block=False)
            plt.pause(0.1)
        self.initialized = True

    def _setup_axes(self):
        width = self.limit_x[1] - self.limit_x[0]
        height = self.limit_y[1] - self.limit_y[0]
        pad = self.margin * max(width, height, 1.0)
        self.ax.set_xlim(self.limit_x[0] - pad, self.limit_x[1] + pad)
        self.ax.set_ylim(self.limit_y[0] - pad, self.limit_y[1] + pad)
        self.ax.set_aspect('equal')
        self.ax.set_xlabel('X')
        self.ax.set_ylabel('Y')
        self.ax.set_title('Ships and Planets')
        self.ax.grid(True, alpha=0.3)

    def render(
        self,
        ship_positions: np.ndarray,
        ship_headings: np.ndarray,
        planet_positions: np.ndarray,
        planet_masses: np.ndarray,
    ):
        """Render current frame."""
        self._initialize()

        ship_positions = np.asarray(ship_positions)
        ship_headings = np.asarray(ship_headings)
        planet_positions = np.asarray(planet_positions)
        planet_masses = np.asarray(planet_masses).reshape(-1)

        # Planets never move: draw them once
        if self.planet_scatter is None and len(planet_positions):
            sizes = 400.0 * planet_masses
            self.planet_scatter = self.ax.scatter(
                planet_positions[:, 0], planet_positions[:, 1],
                s=sizes, c='tab:orange', alpha=0.8, edgecolors='black', linewidths=0.5,
            )

        if self.ship_arrows is None:
            if len(ship_positions):
                self.ship_arrows = self.ax.quiver(
                    ship_positions[:, 0], ship_positions[:, 1],
                    ship_headings[:, 0], ship_headings[:, 1],
                    color='tab:blue', angles='xy', scale_units='xy', scale=2.0, width=0.004,
                )
        else:
            self.ship_arrows.set_offsets(ship_positions[:, :2])
            self.ship_arrows.set_UVC(ship_headings[:, 0], ship_headings[:, 1])

        if self.interactive:
            self.fig.canvas.draw_idle()
            plt.pause(0.001)

    def capture_frame(self) -> np.ndarray:
        """Capture current frame as image array."""
        if self.fig is None:
            raise RuntimeError("Renderer not initialized. Call render() first.")

        self.fig.canvas.draw()
        rgba = np.asarray(self.fig.canvas.buffer_rgba())
        return np.ascontiguousarray(rgba[:, :, :3])

    def clear(self):
        """Clear the renderer."""
        if self.ax is not None:
            self.ax.clear()
            self._setup_axes()
        self.planet_scatter = None
        self.ship_arrows = None

    def close(self):
        """Close the renderer."""
        if self.fig is not None:
            plt.close(self.fig)
            self.fig = None
            self.ax = None
            self.planet_scatter = None
            self.ship_arrows = None
            self.initialized = False
