"""
test_run.py
-----------
The run controller: ticking, game over, best score and restart.
"""

import random

import pytest

from blobdash.core.events import EventType
from blobdash.core.state import RunPhase
from blobdash.game.avatar import AvatarInput
from blobdash.game.obstacles import Lane, Obstacle
from blobdash.game.run import RunController, RunState, max_scroll_per_step, step
from blobdash.storage.best_score import BestScoreStore, MemoryBestScoreStore

FRAME_MS = 1000.0 / 60.0
GROUND_Y = 290.0


def place_obstacle_on_avatar(controller):
    """Put a ground obstacle right on top of the avatar so the next tick hits it."""
    obstacle = Obstacle(x=60.0, y=GROUND_Y, width=40, height=40, lane=Lane.GROUND)
    controller.state.obstacles.append(obstacle)
    return obstacle


def crash(controller, score=None):
    if score is not None:
        controller.state.score = score
    place_obstacle_on_avatar(controller)
    return controller.tick(FRAME_MS)


class BrokenStore(BestScoreStore):
    def load(self):
        raise OSError("disk gone")

    def save(self, score):
        raise OSError("disk gone")


# --- initial state ---

def test_starts_running_with_fresh_state(controller, settings):
    assert controller.phase == RunPhase.RUNNING
    assert controller.score == 0
    assert controller.best_score == 0
    assert controller.runs == 1
    assert controller.state.speed == settings.difficulty.base_speed
    assert controller.state.obstacles == []
    assert controller.state.avatar.grounded


def test_loads_best_score_from_store(settings, rng):
    controller = RunController(settings=settings, store=MemoryBestScoreStore(42), rng=rng)
    assert controller.best_score == 42


def test_failing_store_load_means_no_best(settings, rng):
    controller = RunController(settings=settings, store=BrokenStore(), rng=rng)
    assert controller.best_score == 0


def test_run_started_is_emitted_on_creation(controller, bus):
    started = bus.get_history(EventType.RUN_STARTED)
    assert len(started) == 1
    assert started[0].data == {"run": 1, "best_score": 0}


# --- ticking ---

def test_resting_tick_only_adds_score(controller, settings):
    avatar = controller.state.avatar

    controller.tick(FRAME_MS)

    assert avatar.y == GROUND_Y
    assert avatar.vy == 0.0
    assert controller.phase == RunPhase.RUNNING
    assert controller.state.score == pytest.approx(settings.difficulty.score_rate * FRAME_MS / 1000)


def test_first_tick_spawns_at_right_edge(controller, bus, settings):
    controller.tick(FRAME_MS)

    obstacles = controller.state.obstacles
    assert len(obstacles) == 1
    assert obstacles[0].x == settings.display.field_width
    assert len(bus.get_history(EventType.OBSTACLE_SPAWNED)) == 1


def test_jump_arcs_and_lands(controller, settings):
    assert controller.request_jump() is True
    avatar = controller.state.avatar
    assert avatar.vy == settings.physics.jump_velocity
    assert avatar.airborne

    peak = GROUND_Y
    for _ in range(90):
        controller.tick(FRAME_MS)
        peak = min(peak, controller.state.avatar.y)

    avatar = controller.state.avatar
    assert controller.is_running
    assert peak < GROUND_Y - 100
    assert avatar.y == GROUND_Y
    assert avatar.vy == 0.0
    assert not avatar.airborne


def test_crouch_blocks_jump(controller):
    controller.set_crouch(True)

    assert controller.state.avatar.crouching
    assert controller.request_jump() is False

    controller.set_crouch(False)
    assert controller.request_jump() is True


def test_speed_ramps_with_time(controller, settings):
    controller.tick(FRAME_MS)
    assert controller.state.speed > settings.difficulty.base_speed


def test_milestone_multiplies_speed(controller, bus, settings):
    difficulty = settings.difficulty
    controller.state.score = 99.99
    dt = FRAME_MS / 1000

    controller.tick(FRAME_MS)

    expected = (difficulty.base_speed + difficulty.speed_ramp * dt) * difficulty.milestone_multiplier
    assert controller.state.speed == pytest.approx(expected)
    assert controller.state.next_milestone == 2 * difficulty.milestone_interval
    assert len(bus.get_history(EventType.MILESTONE_REACHED)) == 1


def test_large_delta_is_clamped(controller, settings):
    controller.tick(5000.0)

    max_ms = settings.difficulty.max_delta_ms
    assert controller.state.time_played == pytest.approx(max_ms)
    assert controller.state.score == pytest.approx(settings.difficulty.score_rate * max_ms / 1000)


def test_negative_delta_is_treated_as_zero(controller):
    controller.tick(-10.0)

    assert controller.state.time_played == 0.0
    assert controller.state.score == 0.0
    assert controller.state.avatar.y == GROUND_Y


def test_score_and_speed_never_decrease(controller):
    last_score, last_speed = 0.0, controller.state.speed

    for frame in range(600):
        if frame % 40 == 0:
            controller.request_jump()
        controller.tick(FRAME_MS)
        if controller.is_game_over:
            break
        assert controller.state.score >= last_score
        assert controller.state.speed >= last_speed
        assert controller.state.avatar.y <= GROUND_Y
        last_score, last_speed = controller.state.score, controller.state.speed


def test_snapshot_is_a_copy(controller):
    controller.tick(FRAME_MS)
    snapshot = controller.snapshot()

    snapshot.avatar.y = 0.0
    snapshot.obstacles[0].x = -999.0

    assert controller.state.avatar.y == GROUND_Y
    assert controller.state.obstacles[0].x != -999.0


# --- game over ---

def test_collision_ends_run(controller, bus):
    snapshot = crash(controller)

    assert controller.is_game_over
    assert snapshot.is_game_over
    game_over = bus.get_history(EventType.GAME_OVER)
    assert len(game_over) == 1
    assert game_over[0].data["new_best"] is False


def test_hit_tick_does_not_add_score(controller):
    crash(controller, score=12.5)
    assert controller.state.score == 12.5


def test_new_best_is_saved(controller, store, bus):
    crash(controller, score=150.7)

    assert controller.best_score == 150
    assert store.load() == 150
    assert store.saves == 1
    assert bus.get_history(EventType.BEST_SCORE_CHANGED)[-1].data == {"best_score": 150}
    assert bus.get_history(EventType.GAME_OVER)[-1].data["new_best"] is True


def test_best_score_never_decreases(controller, store):
    crash(controller, score=150.0)
    controller.reset()
    crash(controller, score=10.0)

    assert controller.best_score == 150
    assert store.saves == 1


def test_equal_score_is_not_a_new_best(settings, rng):
    store = MemoryBestScoreStore(30)
    controller = RunController(settings=settings, store=store, rng=rng)

    crash(controller, score=30.4)

    assert controller.best_score == 30
    assert store.saves == 0


def test_failing_store_save_keeps_best_in_memory(settings, rng):
    controller = RunController(settings=settings, store=BrokenStore(), rng=rng)

    crash(controller, score=77.0)

    assert controller.is_game_over
    assert controller.best_score == 77


def test_store_failures_are_reported_on_bus(settings, rng, bus):
    controller = RunController(settings=settings, store=BrokenStore(), rng=rng, event_bus=bus)
    crash(controller, score=12.0)

    errors = bus.get_history(EventType.ERROR)
    assert [e.data["operation"] for e in errors] == ["load", "save"]


def test_ticks_after_game_over_change_nothing(controller):
    crash(controller, score=5.0)
    before = controller.snapshot()
    time_played = controller.state.time_played

    for _ in range(30):
        after = controller.tick(FRAME_MS)

    assert after == before
    assert controller.state.time_played == time_played


def test_input_ignored_after_game_over(controller):
    crash(controller)

    assert controller.request_jump() is False
    controller.set_crouch(True)
    assert not controller.state.avatar.crouching


# --- fast scrolling ---

def test_scroll_limit_is_half_the_overlap_window(settings):
    # avatar 56 wide, shrunk obstacle 32 wide
    assert max_scroll_per_step(settings) == 44.0


@pytest.mark.parametrize("speed,delta_ms", [(2600.0, 50.0), (6000.0, FRAME_MS)])
def test_fast_obstacle_cannot_pass_through_avatar(controller, speed, delta_ms):
    controller.state.speed = speed
    controller.state.obstacles.append(
        Obstacle(x=110.0, y=GROUND_Y, width=40, height=40, lane=Lane.GROUND)
    )

    controller.tick(delta_ms)

    assert controller.is_game_over


def test_split_tick_still_covers_the_whole_delta(controller, settings):
    controller.state.speed = 3000.0

    controller.tick(50.0)

    assert controller.is_running
    assert controller.state.time_played == pytest.approx(50.0)
    assert controller.state.score == pytest.approx(settings.difficulty.score_rate * 0.05)


# --- reset ---

def test_reset_after_game_over_starts_fresh_run(controller, settings, bus):
    crash(controller, score=40.0)

    controller.reset()

    assert controller.phase == RunPhase.RUNNING
    assert controller.score == 0
    assert controller.best_score == 40
    assert controller.runs == 2
    assert controller.state.obstacles == []
    assert controller.state.speed == settings.difficulty.base_speed
    assert bus.get_history(EventType.RUN_STARTED)[-1].data == {"run": 2, "best_score": 40}


def test_reset_while_running(controller):
    controller.tick(FRAME_MS)
    controller.state.score = 20.0

    controller.reset()

    assert controller.is_running
    assert controller.score == 0
    assert controller.runs == 2


def test_crouch_held_through_restart_carries_into_new_run(controller):
    crash(controller)
    controller.set_crouch(True)

    controller.reset()

    assert controller.state.avatar.crouching
    assert controller.request_jump() is False
    controller.tick(FRAME_MS)
    assert controller.state.avatar.crouching


def test_crouch_released_during_game_over_is_not_carried(controller):
    controller.set_crouch(True)
    crash(controller)
    controller.set_crouch(False)

    controller.reset()

    assert not controller.state.avatar.crouching


def test_reset_notifies_state_listeners(controller):
    seen = []
    controller.state_machine.add_listener(lambda old, new: seen.append((old, new)))

    crash(controller)
    controller.reset()

    assert seen == [
        (RunPhase.RUNNING, RunPhase.GAME_OVER),
        (RunPhase.GAME_OVER, RunPhase.RUNNING),
    ]


# --- isolation and determinism ---

def test_controllers_do_not_share_state(settings):
    a = RunController(settings=settings, rng=random.Random(1))
    b = RunController(settings=settings, rng=random.Random(1))

    for _ in range(10):
        a.tick(FRAME_MS)

    assert a.state.score > 0
    assert b.state.score == 0
    assert b.state.obstacles == []


def test_same_seed_same_run(settings):
    def play(seed):
        controller = RunController(settings=settings, rng=random.Random(seed))
        for frame in range(900):
            if frame % 45 == 0:
                controller.request_jump()
            controller.tick(FRAME_MS)
        return controller.snapshot()

    assert play(3) == play(3)


def test_without_bus_nothing_is_emitted(settings, rng):
    controller = RunController(settings=settings, rng=rng)
    crash(controller, score=3.0)
    assert controller.is_game_over


def test_step_is_usable_without_controller(controller, settings):
    state = RunState.fresh(settings)
    dt = FRAME_MS / 1000

    result = step(state, dt, AvatarInput(jump=True), controller.physics, controller.spawner, settings)

    assert result.hit is None
    assert result.spawned is not None
    assert state.avatar.airborne
    assert state.score == pytest.approx(settings.difficulty.score_rate * dt)
