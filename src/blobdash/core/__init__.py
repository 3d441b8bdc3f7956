"""Core framework components for BLOBDASH."""

from .state import RunPhase, StateMachine
from .events import EventBus, Event, EventType
from .clock import Clock

__all__ = ["RunPhase", "StateMachine", "EventBus", "Event", "EventType", "Clock"]
