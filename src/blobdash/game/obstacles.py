"""Obstacle pipeline: spawn at randomized gaps, scroll left, cull off-screen."""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from blobdash.config.settings import ObstacleSettings
from blobdash.game.collision import Rect

logger = logging.getLogger(__name__)


class Lane(Enum):
    GROUND = "ground"  # Sits on the ground line, jump over it
    AIR = "air"        # Raised off the ground, crouch under it


@dataclass
class Obstacle:
    x: float  # Left edge
    y: float  # Bottom edge
    width: float
    height: float
    lane: Lane = Lane.GROUND
    glyph: str = "tree"  # Cosmetic only

    @property
    def trailing_edge(self) -> float:
        return self.x + self.width

    @property
    def bounds(self) -> Rect:
        return Rect(
            left=self.x,
            top=self.y - self.height,
            right=self.x + self.width,
            bottom=self.y,
        )


def advance(obstacles: List[Obstacle], distance: float) -> None:
    """Shift every live obstacle left by distance."""
    for obs in obstacles:
        obs.x -= distance


def cull(obstacles: List[Obstacle]) -> List[Obstacle]:
    """Drop obstacles whose trailing edge is past the left boundary.

    Mutates the list in place and returns the removed obstacles.
    """
    removed = [o for o in obstacles if o.trailing_edge < 0]
    if removed:
        obstacles[:] = [o for o in obstacles if o.trailing_edge >= 0]
    return removed


class ObstacleSpawner:
    """Decides when and what to spawn.

    The gap threshold is drawn again on every check, not once per obstacle,
    so a long gap needs several consecutive lucky draws to be skipped.
    """

    def __init__(
        self,
        settings: ObstacleSettings,
        field_width: float,
        ground_y: float,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings
        self.field_width = field_width
        self.ground_y = ground_y
        self.rng = rng or random.Random()

    def gap_threshold(self) -> float:
        return self.settings.gap_min + self.rng.random() * self.settings.gap_range

    def should_spawn(self, obstacles: List[Obstacle]) -> bool:
        if not obstacles:
            return True
        last = obstacles[-1]
        return self.field_width - last.x > self.gap_threshold()

    def make_obstacle(self) -> Obstacle:
        s = self.settings
        lane = Lane.AIR if self.rng.random() < s.air_probability else Lane.GROUND
        y = self.ground_y - s.air_clearance if lane == Lane.AIR else self.ground_y
        glyph = self.rng.choice(s.glyphs) if s.glyphs else ""

        return Obstacle(
            x=float(self.field_width),
            y=y,
            width=s.width,
            height=s.height,
            lane=lane,
            glyph=glyph,
        )

    def spawn(self, obstacles: List[Obstacle]) -> Optional[Obstacle]:
        """Run one spawn check; append and return the new obstacle if any."""
        if not self.should_spawn(obstacles):
            return None

        obstacle = self.make_obstacle()
        obstacles.append(obstacle)
        logger.debug(f"Spawned {obstacle.lane.value} obstacle '{obstacle.glyph}'")
        return obstacle
