"""Shared test fixtures for gamewidgets."""

import pytest

from gamewidgets.events import EventBus
from gamewidgets.game import LocalGame, Player, StageSpec
from gamewidgets.scheduler import ManualClock
from gamewidgets.surface import RenderSurface
from gamewidgets.widgets import default_registry


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def surface():
    return RenderSurface()


@pytest.fixture
def game(bus):
    """A game with the local player ME, one other player P1 and four steps."""
    return LocalGame(
        bus,
        player=Player(id="ME", name="Me", sid="sid-me"),
        players=[Player(id="P1", name="Alice")],
        sequence=[
            StageSpec("intro"),
            StageSpec("play", ("bid", "reveal")),
            StageSpec("end"),
        ],
        treatment="control",
    )


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def mount(registry, game, bus, surface, clock):
    """Mount a registered widget by name with the shared fixtures."""

    def _mount(name, options=None):
        return registry.append(name, surface.container(), game=game, bus=bus,
                               options=options, surface=surface, scheduler=clock)

    return _mount
