"""Desktop pygame front end."""

from .window import SimulatorWindow, WindowConfig

__all__ = ["SimulatorWindow", "WindowConfig"]
