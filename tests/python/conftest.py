import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from cellclash.sim.core.config import RoomConfig, SimulationConfig, WorldConfig  # noqa: E402
from cellclash.sim.core.room import Room  # noqa: E402


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def empty_config() -> SimulationConfig:
    """A world with nothing in it: no pellets, no viruses, no bots."""
    return SimulationConfig(
        world=WorldConfig(pellet_target=0, virus_count=0),
        room=RoomConfig(default_bots=0),
    )


@pytest.fixture
def empty_room(empty_config: SimulationConfig, clock: FakeClock) -> Room:
    return Room("TEST01", empty_config, bot_count=0, clock=clock)
