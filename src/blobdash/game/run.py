"""Run/score controller: the per-tick game loop and its RUNNING/GAME_OVER cycle.

All per-run data lives in one ``RunState`` that the controller owns and
hands to ``step`` explicitly; controllers share nothing with each other.
"""

import logging
import math
import random
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from blobdash.config.settings import Settings, get_settings
from blobdash.core.events import Event, EventBus, EventType
from blobdash.core.state import RunPhase, StateMachine
from blobdash.game.avatar import Avatar, AvatarInput, AvatarPhysics
from blobdash.game.collision import first_collision
from blobdash.game.obstacles import Obstacle, ObstacleSpawner, advance, cull
from blobdash.storage.best_score import BestScoreStore, MemoryBestScoreStore

logger = logging.getLogger(__name__)


@dataclass
class RunState:
    """Everything that belongs to one run."""

    avatar: Avatar
    obstacles: List[Obstacle] = field(default_factory=list)
    score: float = 0.0
    speed: float = 0.0
    next_milestone: float = 0.0
    time_played: float = 0.0  # ms
    crouch_held: bool = False

    @classmethod
    def fresh(cls, settings: Settings) -> "RunState":
        ground_y = settings.display.ground_y
        return cls(
            avatar=Avatar.spawn(settings.physics, ground_y),
            speed=settings.difficulty.base_speed,
            next_milestone=settings.difficulty.milestone_interval,
        )


@dataclass
class StepResult:
    """What happened during one tick."""
    hit: Optional[Obstacle] = None
    spawned: Optional[Obstacle] = None
    milestones: int = 0


@dataclass(frozen=True)
class RunSnapshot:
    """Read-only view of a run for the presentation layer."""

    phase: RunPhase
    score: int
    best_score: int
    speed: float
    avatar: Avatar
    obstacles: Tuple[Obstacle, ...]

    @property
    def is_game_over(self) -> bool:
        return self.phase == RunPhase.GAME_OVER


def max_scroll_per_step(settings: Settings) -> float:
    """Longest distance obstacles may scroll in one step.

    An obstacle overlaps the avatar horizontally over a window as wide as the
    avatar plus the shrunk obstacle hit-box. Scrolling less than that per step
    means no obstacle can pass the avatar without one step landing inside it;
    half the window leaves margin.
    """
    obstacles = settings.obstacles
    window = settings.physics.avatar_width + obstacles.width - 2 * obstacles.hitbox_inset
    return max(1.0, window / 2)


def step(
    state: RunState,
    dt: float,
    controls: AvatarInput,
    physics: AvatarPhysics,
    spawner: ObstacleSpawner,
    settings: Settings,
) -> StepResult:
    """Advance a running game by dt seconds.

    Order: obstacle pipeline, avatar physics, collision. Score and speed
    only move when nothing was hit.
    """
    result = StepResult()

    advance(state.obstacles, state.speed * dt)
    cull(state.obstacles)
    result.spawned = spawner.spawn(state.obstacles)

    physics.update(state.avatar, dt, controls)

    result.hit = first_collision(
        state.avatar, state.obstacles, settings.obstacles.hitbox_inset
    )
    if result.hit is not None:
        return result

    difficulty = settings.difficulty
    state.time_played += dt * 1000.0
    state.score += difficulty.score_rate * dt
    state.speed += difficulty.speed_ramp * dt

    while state.score >= state.next_milestone:
        state.speed *= difficulty.milestone_multiplier
        state.next_milestone += difficulty.milestone_interval
        result.milestones += 1

    return result


class RunController:
    """Drives runs and keeps the best score across them.

    Usage:
        controller = RunController(settings, store=JsonBestScoreStore(path))

        # In update loop:
        snapshot = controller.tick(delta_ms)

        # On input:
        controller.request_jump()
        controller.set_crouch(True)
        controller.reset()  # After game over
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[BestScoreStore] = None,
        rng: Optional[random.Random] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.settings = settings or get_settings()
        self.store = store or MemoryBestScoreStore()
        self.rng = rng or random.Random(self.settings.seed)
        self.event_bus = event_bus

        display = self.settings.display
        self.physics = AvatarPhysics(self.settings.physics)
        self.spawner = ObstacleSpawner(
            self.settings.obstacles,
            field_width=display.field_width,
            ground_y=display.ground_y,
            rng=self.rng,
        )
        self._max_scroll = max_scroll_per_step(self.settings)

        self._machine = StateMachine(RunPhase.RUNNING)
        self._state = RunState.fresh(self.settings)
        self._best_score = self._load_best()
        self._runs = 1

        logger.info(f"Run 1 started (best {self._best_score})")
        self._emit(EventType.RUN_STARTED, {"run": 1, "best_score": self._best_score})

    # Read-only state
    @property
    def state(self) -> RunState:
        return self._state

    @property
    def state_machine(self) -> StateMachine:
        return self._machine

    @property
    def phase(self) -> RunPhase:
        return self._machine.state

    @property
    def is_running(self) -> bool:
        return self.phase == RunPhase.RUNNING

    @property
    def is_game_over(self) -> bool:
        return self.phase == RunPhase.GAME_OVER

    @property
    def score(self) -> int:
        """Current score, floored."""
        return math.floor(self._state.score)

    @property
    def best_score(self) -> int:
        return self._best_score

    @property
    def runs(self) -> int:
        """Number of runs started this session."""
        return self._runs

    # Input
    def request_jump(self) -> bool:
        """Jump now if the avatar is grounded and standing."""
        if not self.is_running:
            return False
        return self.physics.jump(self._state.avatar)

    def set_crouch(self, held: bool) -> None:
        """Track the crouch key. Outside a run it only carries into the next one."""
        self._state.crouch_held = held
        if self.is_running:
            self.physics.set_crouch(self._state.avatar, held)

    def reset(self) -> None:
        """Start a fresh run. The best score and a held crouch are kept."""
        crouch_held = self._state.crouch_held
        self._state = RunState.fresh(self.settings)
        self._state.crouch_held = crouch_held
        self.physics.set_crouch(self._state.avatar, crouch_held)

        if self.is_game_over:
            self._machine.transition(RunPhase.RUNNING)
        else:
            self._machine.reset()

        self._runs += 1
        logger.info(f"Run {self._runs} started (best {self._best_score})")
        self._emit(EventType.RUN_STARTED, {"run": self._runs, "best_score": self._best_score})

    # Loop
    def tick(self, delta_ms: float) -> RunSnapshot:
        """Advance the run by one frame.

        Fast frames are split into substeps so obstacles never scroll more
        than ``max_scroll_per_step`` between two collision checks.

        Args:
            delta_ms: Time since last tick in milliseconds. Clamped to
                [0, max_delta_ms]; ignored entirely after game over.
        """
        if not self.is_running:
            return self.snapshot()

        delta_ms = min(max(0.0, delta_ms), self.settings.difficulty.max_delta_ms)
        dt = delta_ms / 1000.0

        substeps = max(1, math.ceil(self._state.speed * dt / self._max_scroll))
        sub_dt = dt / substeps
        controls = AvatarInput(crouch=self._state.crouch_held)
        milestones = 0

        for _ in range(substeps):
            result = step(self._state, sub_dt, controls, self.physics, self.spawner, self.settings)

            if result.spawned is not None:
                self._emit(EventType.OBSTACLE_SPAWNED, {
                    "lane": result.spawned.lane.value,
                    "glyph": result.spawned.glyph,
                })

            if result.hit is not None:
                self._game_over(result.hit)
                return self.snapshot()

            milestones += result.milestones

        if milestones:
            logger.info(f"Milestone reached at score {self.score}, speed {self._state.speed:.1f}")
            self._emit(EventType.MILESTONE_REACHED, {
                "score": self.score,
                "speed": self._state.speed,
            })

        return self.snapshot()

    def snapshot(self) -> RunSnapshot:
        return RunSnapshot(
            phase=self.phase,
            score=self.score,
            best_score=self._best_score,
            speed=self._state.speed,
            avatar=replace(self._state.avatar),
            obstacles=tuple(replace(o) for o in self._state.obstacles),
        )

    def _game_over(self, obstacle: Obstacle) -> None:
        self._machine.transition(RunPhase.GAME_OVER)

        final = self.score
        new_best = final > self._best_score
        if new_best:
            self._best_score = final
            self._save_best(final)
            self._emit(EventType.BEST_SCORE_CHANGED, {"best_score": final})

        logger.info(
            f"Game over: hit {obstacle.lane.value} '{obstacle.glyph}' "
            f"with score {final} (best {self._best_score})"
        )
        self._emit(EventType.GAME_OVER, {
            "score": final,
            "best_score": self._best_score,
            "new_best": new_best,
        })

    def _load_best(self) -> int:
        try:
            return max(0, int(self.store.load()))
        except Exception as e:
            logger.error(f"Best score unavailable: {e}")
            self._emit(EventType.ERROR, {"operation": "load", "error": str(e)})
            return 0

    def _save_best(self, score: int) -> None:
        try:
            self.store.save(score)
        except Exception as e:
            logger.error(f"Failed to persist best score: {e}")
            self._emit(EventType.ERROR, {"operation": "save", "error": str(e)})

    def _emit(self, event_type: EventType, data: dict) -> None:
        if self.event_bus is not None:
            self.event_bus.emit(Event(type=event_type, data=data, source="run"))
