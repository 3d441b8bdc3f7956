"""Avatar physics: gravity, jumping and crouching on a fixed ground line."""

from dataclasses import dataclass

from blobdash.config.settings import PhysicsSettings
from blobdash.game.collision import Rect


@dataclass
class AvatarInput:
    """Input flags sampled for one tick."""
    jump: bool = False    # Jump requested this tick
    crouch: bool = False  # Crouch currently held


@dataclass
class Avatar:
    """The blob.

    ``y`` is the bottom edge of the avatar so the ground invariant reads
    directly as ``y <= ground_y``. Crouching shrinks the height while the
    bottom edge stays put.
    """

    x: float
    y: float
    ground_y: float
    width: float
    standing_height: float
    crouch_height: float
    vy: float = 0.0
    airborne: bool = False
    crouching: bool = False

    @classmethod
    def spawn(cls, physics: PhysicsSettings, ground_y: float) -> "Avatar":
        """Create a grounded avatar at the start position."""
        return cls(
            x=physics.avatar_x,
            y=ground_y,
            ground_y=ground_y,
            width=physics.avatar_width,
            standing_height=physics.avatar_height,
            crouch_height=physics.crouch_height,
        )

    @property
    def height(self) -> float:
        return self.crouch_height if self.crouching else self.standing_height

    @property
    def grounded(self) -> bool:
        return not self.airborne and self.y >= self.ground_y and self.vy == 0.0

    @property
    def bounds(self) -> Rect:
        half = self.width / 2
        return Rect(
            left=self.x - half,
            top=self.y - self.height,
            right=self.x + half,
            bottom=self.y,
        )


class AvatarPhysics:
    """Integrates an avatar under gravity.

    Usage:
        physics = AvatarPhysics(settings.physics)
        physics.update(avatar, dt, AvatarInput(crouch=True))
    """

    def __init__(self, settings: PhysicsSettings):
        self.settings = settings

    def jump(self, avatar: Avatar) -> bool:
        """Launch the avatar. Returns True if the jump took effect.

        Ignored while airborne (no double jump) or crouching.
        """
        if avatar.airborne or avatar.crouching:
            return False

        avatar.vy = self.settings.jump_velocity
        avatar.airborne = True
        return True

    def set_crouch(self, avatar: Avatar, held: bool) -> None:
        avatar.crouching = held

    def update(self, avatar: Avatar, dt: float, controls: AvatarInput) -> Avatar:
        """Advance the avatar by dt seconds.

        Crouch is applied before jump, so a jump requested while crouch is
        held is ignored.
        """
        self.set_crouch(avatar, controls.crouch)
        if controls.jump:
            self.jump(avatar)

        if dt <= 0:
            return avatar

        gravity = self.settings.gravity
        if avatar.crouching and avatar.airborne:
            gravity += self.settings.crouch_gravity_boost

        avatar.vy += gravity * dt
        avatar.y += avatar.vy * dt

        if avatar.y >= avatar.ground_y:
            avatar.y = avatar.ground_y
            avatar.vy = 0.0
            avatar.airborne = False

        return avatar
