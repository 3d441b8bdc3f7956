"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Every gameplay balance constant lives here so it can be tuned without
touching the simulation code.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DisplaySettings(BaseSettings):
    """Play field and window settings."""

    model_config = SettingsConfigDict(env_prefix="BLOBDASH_DISPLAY__", extra="ignore")

    # Play field (logical pixels)
    field_width: int = Field(default=800, gt=0)
    field_height: int = Field(default=300, gt=0)
    ground_margin: int = Field(default=10, ge=0)

    # Window
    scale: int = Field(default=1, ge=1)
    fps: int = Field(default=60, gt=0)
    title: str = "BLOBDASH"
    fullscreen: bool = False

    @property
    def ground_y(self) -> float:
        """Y coordinate of the ground line (screen space, grows downward)."""
        return float(self.field_height - self.ground_margin)


class PhysicsSettings(BaseSettings):
    """Avatar physics. Units are pixels and seconds."""

    model_config = SettingsConfigDict(env_prefix="BLOBDASH_PHYSICS__", extra="ignore")

    gravity: float = Field(default=1440.0, gt=0)  # px/s^2
    jump_velocity: float = Field(default=-660.0, lt=0)  # upward is negative
    crouch_gravity_boost: float = Field(default=5400.0, ge=0)  # fast fall while crouching

    avatar_x: float = 80.0
    avatar_width: float = Field(default=56.0, gt=0)
    avatar_height: float = Field(default=56.0, gt=0)
    crouch_height: float = Field(default=32.0, gt=0)


class ObstacleSettings(BaseSettings):
    """Obstacle spawning and hit-box tuning."""

    model_config = SettingsConfigDict(env_prefix="BLOBDASH_OBSTACLES__", extra="ignore")

    width: float = Field(default=40.0, gt=0)
    height: float = Field(default=40.0, gt=0)

    # Spawn gap threshold = gap_min + U(0, 1) * gap_range, resampled every check
    gap_min: float = Field(default=300.0, ge=0)
    gap_range: float = Field(default=300.0, ge=0)

    air_probability: float = Field(default=0.25, ge=0.0, le=1.0)
    air_clearance: float = Field(default=40.0, ge=0)  # bottom edge above the ground line

    hitbox_inset: float = Field(default=4.0, ge=0)

    glyphs: list[str] = Field(default=["tree", "mushroom", "pill", "rainbow", "sparkle"])


class DifficultySettings(BaseSettings):
    """Score and speed progression."""

    model_config = SettingsConfigDict(env_prefix="BLOBDASH_DIFFICULTY__", extra="ignore")

    base_speed: float = Field(default=240.0, gt=0)  # px/s
    speed_ramp: float = Field(default=3.0, ge=0)  # px/s gained per second survived
    score_rate: float = Field(default=1.8, gt=0)  # points per second

    # Every milestone_interval points the speed is multiplied
    milestone_interval: float = Field(default=100.0, gt=0)
    milestone_multiplier: float = Field(default=1.05, ge=1.0)

    # Longest frame the simulation will integrate in one tick
    max_delta_ms: float = Field(default=50.0, gt=0)


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="BLOBDASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    # Random seed for reproducible obstacle streams (None = system entropy)
    seed: int | None = None

    # Paths
    data_path: Path = Field(default_factory=lambda: Path.home() / ".blobdash")
    log_file: Path | None = None

    # Fixed simulation step in ms; None integrates the raw frame delta
    fixed_step_ms: float | None = Field(default=None, gt=0)

    # Nested settings
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    physics: PhysicsSettings = Field(default_factory=PhysicsSettings)
    obstacles: ObstacleSettings = Field(default_factory=ObstacleSettings)
    difficulty: DifficultySettings = Field(default_factory=DifficultySettings)

    @property
    def best_score_file(self) -> Path:
        """Where the JSON best-score store keeps its value."""
        return self.data_path / "best_score.json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
