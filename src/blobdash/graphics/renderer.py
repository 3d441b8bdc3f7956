"""Draws run snapshots into a numpy frame buffer."""

import math
from typing import Optional

import numpy as np

from blobdash.config.settings import DisplaySettings
from blobdash.game.obstacles import Lane
from blobdash.game.run import RunSnapshot
from blobdash.graphics.primitives import (
    Buffer, Color, dim, draw_ellipse, draw_hline, draw_rect, hsl, new_buffer,
)

SKY_TOP: Color = (24, 10, 48)
SKY_BOTTOM: Color = (70, 20, 90)
GROUND: Color = (30, 18, 40)
GROUND_LINE: Color = (255, 120, 220)

GLYPH_COLORS: dict[str, Color] = {
    "tree": (60, 180, 75),
    "mushroom": (230, 60, 60),
    "pill": (240, 240, 255),
    "rainbow": (255, 170, 0),
    "sparkle": (255, 235, 90),
}
DEFAULT_GLYPH_COLOR: Color = (200, 200, 200)


class GameRenderer:
    """Renders the play field, the blob and the obstacles.

    The blob cycles its hue and wobbles a little every frame while the run
    is live; both freeze on game over.
    """

    def __init__(self, display: DisplaySettings):
        self.display = display
        self._hue = 0.0
        self._t = 0.0
        self._sky = self._build_sky()

    @property
    def width(self) -> int:
        return self.display.field_width

    @property
    def height(self) -> int:
        return self.display.field_height

    def new_buffer(self) -> Buffer:
        return new_buffer(self.width, self.height)

    def _build_sky(self) -> Buffer:
        sky = new_buffer(self.width, self.height)
        ramp = np.linspace(0.0, 1.0, self.height, dtype=np.float32)[:, None]
        for channel in range(3):
            top, bottom = SKY_TOP[channel], SKY_BOTTOM[channel]
            sky[:, :, channel] = (top + (bottom - top) * ramp).astype(np.uint8)
        return sky

    def render(self, snapshot: RunSnapshot, buffer: Optional[Buffer] = None) -> Buffer:
        """Draw a snapshot. Allocates a buffer when none is given."""
        if buffer is None:
            buffer = self.new_buffer()

        np.copyto(buffer, self._sky)

        ground_y = int(self.display.ground_y)
        draw_rect(buffer, 0, ground_y, self.width, self.height - ground_y, GROUND)
        draw_hline(buffer, ground_y, GROUND_LINE, thickness=2)

        for obs in snapshot.obstacles:
            self._render_obstacle(buffer, obs)

        self._render_avatar(buffer, snapshot)

        if snapshot.is_game_over:
            dim(buffer, 0.5)
        else:
            self._t += 0.1
            self._hue = (self._hue + 2) % 360

        return buffer

    def _render_obstacle(self, buffer: Buffer, obs) -> None:
        color = GLYPH_COLORS.get(obs.glyph, DEFAULT_GLYPH_COLOR)
        b = obs.bounds
        draw_rect(buffer, int(b.left), int(b.top), int(b.width), int(b.height), color)
        if obs.lane == Lane.AIR:
            # Outline so raised obstacles read as floating
            draw_rect(buffer, int(b.left), int(b.top), int(b.width), int(b.height),
                      (255, 255, 255), filled=False)

    def _render_avatar(self, buffer: Buffer, snapshot: RunSnapshot) -> None:
        avatar = snapshot.avatar
        wobble = 0.05 * math.sin(self._t * 8)
        rx = avatar.width / 2 * (1 + wobble)
        ry = avatar.height / 2 * (1 - wobble)
        cy = avatar.y - avatar.height / 2

        draw_ellipse(buffer, avatar.x, cy, rx, ry, hsl(self._hue + 120, 1.0, 0.4))
        draw_ellipse(buffer, avatar.x, cy, rx * 0.6, ry * 0.6, hsl(self._hue, 1.0, 0.7))
