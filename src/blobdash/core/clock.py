"""
Simulation clock.

Turns raw frame deltas from whatever drives the loop into the time
increments the simulation integrates. Two modes:

- variable: one step per frame, the frame delta clamped to [0, max_delta_ms]
- fixed: deltas are accumulated and released as whole fixed steps, capped
  at max_steps per frame so a long stall cannot trigger a catch-up spiral
"""

import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


class Clock:
    """Converts frame deltas (milliseconds) into simulation steps."""

    def __init__(
        self,
        max_delta_ms: float = 50.0,
        fixed_step_ms: Optional[float] = None,
        max_steps: int = 5,
    ) -> None:
        self.max_delta_ms = max_delta_ms
        self.fixed_step_ms = fixed_step_ms
        self.max_steps = max_steps
        self._accumulator = 0.0
        self._elapsed_ms = 0.0
        self._frames = 0

    @property
    def elapsed_ms(self) -> float:
        """Simulation time released so far."""
        return self._elapsed_ms

    @property
    def frames(self) -> int:
        return self._frames

    def advance(self, delta_ms: float) -> List[float]:
        """Feed one frame delta and get the steps (ms) to simulate.

        Args:
            delta_ms: Wall time since the previous frame in milliseconds.
                Negative values are treated as zero.

        Returns:
            Step sizes in milliseconds, in order. May be empty in fixed mode
            when less than one step has accumulated.
        """
        self._frames += 1
        delta_ms = max(0.0, delta_ms)

        if delta_ms > self.max_delta_ms:
            logger.debug(f"Frame delta {delta_ms:.1f}ms clamped to {self.max_delta_ms:.1f}ms")
            delta_ms = self.max_delta_ms

        if self.fixed_step_ms is None:
            self._elapsed_ms += delta_ms
            return [delta_ms]

        self._accumulator += delta_ms
        steps: List[float] = []
        while self._accumulator >= self.fixed_step_ms and len(steps) < self.max_steps:
            self._accumulator -= self.fixed_step_ms
            steps.append(self.fixed_step_ms)

        if len(steps) == self.max_steps and self._accumulator >= self.fixed_step_ms:
            # Drop the backlog rather than carry it into the next frame
            self._accumulator %= self.fixed_step_ms

        self._elapsed_ms += self.fixed_step_ms * len(steps)
        return steps

    def reset(self) -> None:
        """Forget accumulated time (e.g. after a pause)."""
        self._accumulator = 0.0
        self._elapsed_ms = 0.0
        self._frames = 0
