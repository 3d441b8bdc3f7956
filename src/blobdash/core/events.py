"""
Event bus system for BLOBDASH.

Synchronous pub/sub between the window, the session and the run
controller. Every event is dispatched the moment it is emitted, so a
handler always sees the run as it was when the event happened.
"""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
import logging
import time

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # Input events
    JUMP_PRESS = auto()
    CROUCH_PRESS = auto()
    CROUCH_RELEASE = auto()
    RESTART = auto()
    PAUSE_TOGGLE = auto()

    # Run events
    RUN_STARTED = auto()
    GAME_OVER = auto()
    BEST_SCORE_CHANGED = auto()
    MILESTONE_REACHED = auto()
    OBSTACLE_SPAWNED = auto()

    # System events
    TICK = auto()  # Frame tick
    SHUTDOWN = auto()
    ERROR = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: Event type (EventType enum or custom string)
        data: Event payload
        source: Component that emitted the event
        timestamp: When event was created
    """
    type: EventType | str
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "system"
    timestamp: float = field(default_factory=time.time)


Handler = Callable[[Event], None]


class EventBus:
    """
    Routes events to the handlers subscribed to their type.

    A failing handler is logged and does not stop delivery to the rest.
    The last ``history_limit`` events are kept for inspection.
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._handlers: dict[EventType | str, list[Handler]] = defaultdict(list)
        self._history: deque[Event] = deque(maxlen=history_limit)

    def subscribe(
        self,
        event_type: EventType | str,
        handler: Handler
    ) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Returns:
            Unsubscribe function (safe to call more than once)
        """
        self._handlers[event_type].append(handler)
        logger.debug(f"Handler subscribed to {event_type}")

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Handler unsubscribed from {event_type}")

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Record the event and call its handlers in subscription order."""
        self._history.append(event)

        # Copy so handlers may unsubscribe while being called
        for handler in list(self._handlers.get(event.type, ())):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in handler for {event.type}: {e}")

    def get_history(
        self,
        event_type: EventType | str | None = None,
        limit: int = 10
    ) -> list[Event]:
        """Get the most recent events, optionally of one type only."""
        history = list(self._history)
        if event_type is not None:
            history = [e for e in history if e.type == event_type]
        return history[-limit:]


def tick_event(delta: float, frame: int) -> Event:
    """Create a frame tick event."""
    return Event(EventType.TICK, data={"delta": delta, "frame": frame})
