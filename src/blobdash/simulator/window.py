"""
Desktop game window using pygame.

Maps the keyboard and mouse to input events on the bus, emits one TICK
per frame and draws the latest run snapshot.
"""

import asyncio
import logging
from dataclasses import dataclass

import pygame

from ..config.settings import DisplaySettings
from ..core.events import EventBus, EventType, Event, tick_event
from ..game.run import RunController
from ..graphics.renderer import GameRenderer

logger = logging.getLogger(__name__)

JUMP_KEYS = (pygame.K_SPACE, pygame.K_w, pygame.K_UP)
CROUCH_KEYS = (pygame.K_s, pygame.K_DOWN)
RESTART_KEYS = (pygame.K_r, pygame.K_RETURN)


@dataclass
class WindowConfig:
    """Window configuration."""
    title: str = "BLOBDASH"
    scale: int = 1
    fps: int = 60
    fullscreen: bool = False

    # Colors
    text_color: tuple[int, int, int] = (255, 255, 255)
    accent_color: tuple[int, int, int] = (255, 120, 220)

    @classmethod
    def from_settings(cls, display: DisplaySettings) -> "WindowConfig":
        return cls(
            title=display.title,
            scale=display.scale,
            fps=display.fps,
            fullscreen=display.fullscreen,
        )


class SimulatorWindow:
    """
    Main game window.

    Keyboard Mapping:
        SPACE / W / UP: Jump (held keeps jumping on landing)
        S / DOWN: Crouch while held
        R / ENTER: Restart
        P: Pause
        D: Toggle debug overlay
        ESC / Q: Exit
        Mouse click: Jump
    """

    def __init__(
        self,
        controller: RunController,
        event_bus: EventBus,
        config: WindowConfig | None = None,
        renderer: GameRenderer | None = None,
    ) -> None:
        self.controller = controller
        self.event_bus = event_bus
        self.config = config or WindowConfig()
        self.renderer = renderer or GameRenderer(controller.settings.display)

        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._big_font: pygame.font.Font | None = None
        self._running = False
        self._frame_count = 0
        self._show_debug = False
        self._buffer = self.renderer.new_buffer()

        logger.info("SimulatorWindow created")

    @property
    def size(self) -> tuple[int, int]:
        return (
            self.renderer.width * self.config.scale,
            self.renderer.height * self.config.scale,
        )

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.config.title)

        flags = pygame.DOUBLEBUF
        if self.config.fullscreen:
            flags |= pygame.FULLSCREEN

        self._screen = pygame.display.set_mode(self.size, flags)
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont(None, 24 * self.config.scale)
        self._big_font = pygame.font.SysFont(None, 48 * self.config.scale)

        logger.info(f"Pygame initialized: {self.size[0]}x{self.size[1]}")

    def _emit(self, event_type: EventType, source: str = "keyboard") -> None:
        self.event_bus.emit(Event(event_type, source=source))

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)

            elif event.type == pygame.KEYUP:
                if event.key in CROUCH_KEYS:
                    self._emit(EventType.CROUCH_RELEASE)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._emit(EventType.JUMP_PRESS, source="mouse")

        # Holding a jump key keeps requesting jumps; they only land when grounded
        pressed = pygame.key.get_pressed()
        if any(pressed[key] for key in JUMP_KEYS):
            self._emit(EventType.JUMP_PRESS)

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        """Handle key press."""
        key = event.key

        if key in (pygame.K_ESCAPE, pygame.K_q):
            self._running = False
        elif key in CROUCH_KEYS:
            self._emit(EventType.CROUCH_PRESS)
        elif key in RESTART_KEYS:
            self._emit(EventType.RESTART)
        elif key == pygame.K_p:
            self._emit(EventType.PAUSE_TOGGLE)
        elif key == pygame.K_d:
            self._show_debug = not self._show_debug

    def _render(self) -> None:
        """Draw the current snapshot and the HUD."""
        if self._screen is None:
            return

        snapshot = self.controller.snapshot()
        self.renderer.render(snapshot, self._buffer)

        surface = pygame.surfarray.make_surface(self._buffer.swapaxes(0, 1))
        if self.config.scale != 1:
            surface = pygame.transform.scale(surface, self.size)
        self._screen.blit(surface, (0, 0))

        pad = 10 * self.config.scale
        hud = self._font.render(
            f"Score: {snapshot.score} | Best: {snapshot.best_score}",
            True, self.config.text_color,
        )
        self._screen.blit(hud, (pad, pad))

        if snapshot.is_game_over:
            self._render_game_over(snapshot.score)

        if self._show_debug:
            self._render_debug(snapshot)

        pygame.display.flip()

    def _render_game_over(self, score: int) -> None:
        w, h = self.size
        title = self._big_font.render("GAME OVER", True, self.config.accent_color)
        hint = self._font.render(f"Score {score} - press R to play again", True, self.config.text_color)
        self._screen.blit(title, title.get_rect(center=(w // 2, h // 2 - title.get_height() // 2)))
        self._screen.blit(hint, hint.get_rect(center=(w // 2, h // 2 + hint.get_height())))

    def _render_debug(self, snapshot) -> None:
        lines = [
            f"FPS: {self._clock.get_fps():.1f}" if self._clock else "FPS: --",
            f"Speed: {snapshot.speed:.1f}",
            f"Obstacles: {len(snapshot.obstacles)}",
            f"Avatar y={snapshot.avatar.y:.1f} vy={snapshot.avatar.vy:.1f}",
        ]
        x = self.size[0] - 260 * self.config.scale
        y = 10 * self.config.scale
        for line in lines:
            text = self._font.render(line, True, self.config.text_color)
            self._screen.blit(text, (x, y))
            y += text.get_height()

    async def run(self) -> None:
        """Main window loop."""
        self._init_pygame()
        self._running = True

        logger.info("Window loop started")

        while self._running:
            self._handle_events()

            # Emit tick event
            if self._clock:
                delta = self._clock.get_time() / 1000.0
                self.event_bus.emit(tick_event(delta, self._frame_count))

            self._render()

            if self._clock:
                self._clock.tick(self.config.fps)

            self._frame_count += 1

            # Yield to other tasks
            await asyncio.sleep(0)

        self.event_bus.emit(Event(EventType.SHUTDOWN, source="window"))
        self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        pygame.quit()
        logger.info("Window closed")

    def stop(self) -> None:
        """Stop the loop."""
        self._running = False
