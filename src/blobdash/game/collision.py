"""Axis-aligned hit-box tests between the avatar and obstacles."""

from dataclasses import dataclass
from typing import Iterable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from blobdash.game.avatar import Avatar
    from blobdash.game.obstacles import Obstacle


@dataclass(frozen=True)
class Rect:
    """Rectangle in screen space (y grows downward)."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def inset(self, amount: float) -> "Rect":
        """Shrink by amount on every side."""
        return Rect(
            left=self.left + amount,
            top=self.top + amount,
            right=self.right - amount,
            bottom=self.bottom - amount,
        )

    def overlaps(self, other: "Rect") -> bool:
        """Strict overlap: rectangles sharing only an edge or corner do not overlap."""
        return (
            self.right > other.left
            and self.left < other.right
            and self.bottom > other.top
            and self.top < other.bottom
        )


def collides(avatar: "Avatar", obstacle: "Obstacle", inset: float = 0.0) -> bool:
    """Check the avatar against one obstacle's (shrunk) hit-box."""
    return avatar.bounds.overlaps(obstacle.bounds.inset(inset))


def first_collision(
    avatar: "Avatar",
    obstacles: Iterable["Obstacle"],
    inset: float = 0.0,
) -> Optional["Obstacle"]:
    """Return the first obstacle hit in iteration order, or None."""
    for obstacle in obstacles:
        if collides(avatar, obstacle, inset):
            return obstacle
    return None
