"""Scene presets that populate a body registry."""

from gravity_system.presets.base import Preset
from gravity_system.presets.random_field import RandomField

__all__ = ["Preset", "RandomField"]
