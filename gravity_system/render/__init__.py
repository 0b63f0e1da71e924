"""Rendering for the ship/planet scene."""

from gravity_system.render.base import Renderer
from gravity_system.render.renderer_2d import Renderer2D
from gravity_system.render.manager import RenderManager

__all__ = ["Renderer", "Renderer2D", "RenderManager"]
