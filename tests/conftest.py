import pytest

from catalog import new_game_state
from economy import update_mission_availability
from game_loop import GameLoop
from persistence import MemoryStore


@pytest.fixture
def state():
    s = new_game_state()
    update_mission_availability(s)
    return s


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def game(store):
    loop = GameLoop(store=store)
    loop.load_game_data()
    yield loop
    loop.timer.stop()
