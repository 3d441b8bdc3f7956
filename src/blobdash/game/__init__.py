"""Game simulation: avatar, obstacles, collisions and the run loop.

Nothing in this package draws or reads devices.
"""

from .avatar import Avatar, AvatarInput, AvatarPhysics
from .collision import Rect, collides, first_collision
from .obstacles import Lane, Obstacle, ObstacleSpawner, advance, cull
from .run import RunController, RunSnapshot, RunState, StepResult, max_scroll_per_step, step

__all__ = [
    "Avatar",
    "AvatarInput",
    "AvatarPhysics",
    "Rect",
    "collides",
    "first_collision",
    "Lane",
    "Obstacle",
    "ObstacleSpawner",
    "advance",
    "cull",
    "RunController",
    "RunSnapshot",
    "RunState",
    "StepResult",
    "max_scroll_per_step",
    "step",
]
