"""Wires bus events to a run controller and drives it from TICK events."""

import logging
from typing import Callable, List

from blobdash.core.clock import Clock
from blobdash.core.events import Event, EventBus, EventType
from blobdash.game.run import RunController

logger = logging.getLogger(__name__)


class GameSession:
    """Routes input events to the controller and feeds it clock steps.

    TICK events carry the frame delta in seconds (``data["delta"]``). The
    clock turns that into one or more simulation steps; nothing is stepped
    while paused.
    """

    def __init__(self, controller: RunController, event_bus: EventBus, clock: Clock):
        self.controller = controller
        self.event_bus = event_bus
        self.clock = clock
        self.paused = False
        self._crouch_held = False
        self._unsubscribers: List[Callable[[], None]] = []

        self._subscribe(EventType.TICK, self.on_tick)
        self._subscribe(EventType.JUMP_PRESS, self.on_jump)
        self._subscribe(EventType.CROUCH_PRESS, self.on_crouch_press)
        self._subscribe(EventType.CROUCH_RELEASE, self.on_crouch_release)
        self._subscribe(EventType.RESTART, self.on_restart)
        self._subscribe(EventType.PAUSE_TOGGLE, self.on_pause_toggle)

    def _subscribe(self, event_type: EventType, handler) -> None:
        self._unsubscribers.append(self.event_bus.subscribe(event_type, handler))

    def close(self) -> None:
        """Detach from the bus."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def on_tick(self, event: Event) -> None:
        if self.paused or self.controller.is_game_over:
            return

        delta_ms = event.data.get("delta", 0.0) * 1000.0
        for step_ms in self.clock.advance(delta_ms):
            self.controller.tick(step_ms)
            if self.controller.is_game_over:
                break

    def on_jump(self, event: Event) -> None:
        if not self.paused:
            self.controller.request_jump()

    def on_crouch_press(self, event: Event) -> None:
        self._set_crouch(True)

    def on_crouch_release(self, event: Event) -> None:
        self._set_crouch(False)

    def _set_crouch(self, held: bool) -> None:
        # While paused the key state is remembered and applied on resume
        self._crouch_held = held
        if not self.paused:
            self.controller.set_crouch(held)

    def on_restart(self, event: Event) -> None:
        self.paused = False
        self.clock.reset()
        self.controller.set_crouch(self._crouch_held)
        self.controller.reset()

    def on_pause_toggle(self, event: Event) -> None:
        if self.controller.is_game_over:
            return
        self.paused = not self.paused
        self.clock.reset()
        if not self.paused:
            self.controller.set_crouch(self._crouch_held)
        logger.info("Paused" if self.paused else "Resumed")
