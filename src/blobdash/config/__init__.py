"""Configuration for BLOBDASH."""

from .settings import (
    Settings,
    DisplaySettings,
    PhysicsSettings,
    ObstacleSettings,
    DifficultySettings,
    get_settings,
)

__all__ = [
    "Settings",
    "DisplaySettings",
    "PhysicsSettings",
    "ObstacleSettings",
    "DifficultySettings",
    "get_settings",
]
