"""
conftest.py
-----------
Shared pytest fixtures for BLOBDASH tests.

Settings are built without reading a .env file so local overrides never
leak into the suite.
"""

import random

import pytest

from blobdash.config.settings import Settings
from blobdash.core.events import EventBus
from blobdash.game.avatar import Avatar, AvatarPhysics
from blobdash.game.run import RunController
from blobdash.storage.best_score import MemoryBestScoreStore


class ScriptedRng:
    """Stand-in random source that replays fixed values.

    Only implements what the obstacle spawner calls.
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.values.pop(0)

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def scripted_rng():
    return ScriptedRng


@pytest.fixture
def settings():
    return Settings(_env_file=None, seed=1234)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def store():
    return MemoryBestScoreStore()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def controller(settings, store, rng, bus):
    return RunController(settings=settings, store=store, rng=rng, event_bus=bus)


@pytest.fixture
def physics(settings):
    return AvatarPhysics(settings.physics)


@pytest.fixture
def avatar(settings):
    return Avatar.spawn(settings.physics, settings.display.ground_y)
