"""
State machine for a single BLOBDASH run.

States:
    RUNNING: Simulation advances every tick
    GAME_OVER: The avatar hit an obstacle; ticks are ignored until reset
"""

from enum import Enum, auto
from typing import Callable
import logging

logger = logging.getLogger(__name__)


class RunPhase(Enum):
    """Run states."""
    RUNNING = auto()
    GAME_OVER = auto()


StateListener = Callable[[RunPhase, RunPhase], None]


class StateMachine:
    """
    Tracks the run phase and enforces valid transitions.

    Listeners are notified on every successful transition; a failing
    listener is logged and does not block the others.
    """

    VALID_TRANSITIONS: list[tuple[RunPhase, RunPhase]] = [
        (RunPhase.RUNNING, RunPhase.GAME_OVER),  # Collision
        (RunPhase.GAME_OVER, RunPhase.RUNNING),  # Restart
    ]

    def __init__(self, initial_state: RunPhase = RunPhase.RUNNING) -> None:
        self._state = initial_state
        self._listeners: list[StateListener] = []
        self._valid_transitions = set(self.VALID_TRANSITIONS)
        logger.debug(f"StateMachine initialized with state: {initial_state.name}")

    @property
    def state(self) -> RunPhase:
        """Get current state."""
        return self._state

    def can_transition(self, to_state: RunPhase) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: RunPhase) -> bool:
        """
        Attempt to transition to a new state.

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"Invalid transition: {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state
        logger.debug(f"State transition: {old_state.name} -> {to_state.name}")
        self._notify(old_state, to_state)
        return True

    def add_listener(self, callback: StateListener) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: StateListener) -> None:
        """Remove a state change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def reset(self) -> None:
        """Force the machine back to RUNNING from any state."""
        old_state = self._state
        self._state = RunPhase.RUNNING
        self._notify(old_state, RunPhase.RUNNING)

    def _notify(self, old_state: RunPhase, new_state: RunPhase) -> None:
        for listener in self._listeners:
            try:
                listener(old_state, new_state)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")
