"""Pytest fixtures for all tests."""

import pytest

from communication.bus import EventBus
from config import SimulationConfig
from forest.engine import Simulation
from forest.grid import Grid
from forest.motion import Movement
from forest.persons import Person


class ScriptedMotion:
    """Replays fixed motion vectors, then stands still."""

    def __init__(self, motions):
        self._motions = iter(motions)
        self.drawn = 0

    def next_motion(self):
        self.drawn += 1
        return next(self._motions, (0, 0))


@pytest.fixture
def grid():
    """Create a small test grid."""
    return Grid(width=5, height=4)


@pytest.fixture
def tiny_grid():
    """2x2 grid, the smallest the input layer accepts."""
    return Grid(2, 2)


@pytest.fixture
def person(grid):
    """Create a free-moving person in the middle of the grid."""
    return Person("person_a", grid, x=2, y=1)


@pytest.fixture
def axis_person(grid):
    """Create an axis-constrained person."""
    return Person("person_a", grid, x=2, y=1, movement=Movement.AXIS)


@pytest.fixture
def sim_config():
    """Create test simulation config."""
    return SimulationConfig(width=6, height=5, seed=1234, update_rate=5000, yield_interval=0)


@pytest.fixture
def scripted():
    """Factory for motion sources that replay given vectors."""
    return ScriptedMotion


@pytest.fixture
def simulation(sim_config):
    """Create a seeded simulation."""
    return Simulation(sim_config)


@pytest.fixture
async def bus():
    """Create test event bus."""
    return EventBus(queue_size=10)
