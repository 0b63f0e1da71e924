"""Render manager tying a renderer to a running simulator."""

from typing import Optional
import numpy as np
from gravity_system.render.base import Renderer
from gravity_system.render.renderer_2d import Renderer2D


class RenderManager:
    """Draws the simulator's state every ``render_every`` steps."""

    def __init__(self, render_every: int = 1, renderer: Optional[Renderer] = None, **renderer_kwargs):
        """Initialize render manager.

        Args:
            render_every: Draw a frame every N simulation steps
            renderer: Renderer to drive (default: a new Renderer2D)
            **renderer_kwargs: Additional arguments for the default renderer
        """
        if render_every < 1:
            raise ValueError(f"render_every must be at least 1, got {render_every}")
        self.render_every = int(render_every)
        self.renderer: Optional[Renderer] = renderer or Renderer2D(**renderer_kwargs)
        self.frames = 0

    def render(self, simulator) -> bool:
        """Render the simulator's current state if this step is due.

        Args:
            simulator: Simulator to read ship and planet state from

        Returns:
            True if a frame was drawn
        """
        if self.renderer is None:
            raise RuntimeError("Renderer not initialized")
        if simulator.step_count % self.render_every != 0:
            return False

        ship_pos, _, planet_pos, planet_mass, _, _ = simulator.get_state()
        self.renderer.render(ship_pos, simulator.get_headings(), planet_pos, planet_mass)
        self.frames += 1
        return True

    def capture_frame(self) -> np.ndarray:
        """Capture current frame."""
        if self.renderer is None:
            raise RuntimeError("Renderer not initialized")
        return self.renderer.capture_frame()

    def close(self):
        """Close renderer."""
        if self.renderer is not None:
            self.renderer.close()
            self.renderer = None
