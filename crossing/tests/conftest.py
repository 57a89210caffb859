"""
Pytest fixtures for Crossing tests.
"""

import pytest

from ..api.service import APIService
from ..config import GameConfig
from ..engine_core.engine import CrossingEngine
from ..session import SessionManager, VoyageClock


class FakeClock:
    """Manually advanced clock for voyage timing."""

    def __init__(self, t: float = 0.0):
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float):
        self.t += seconds


@pytest.fixture
def engine() -> CrossingEngine:
    """Classic puzzle: 3 monsters, 3 humans, boat for 2."""
    return CrossingEngine.new(num_monsters=3, num_humans=3, boat_capacity=2)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manager(fake_clock) -> SessionManager:
    """Session manager whose voyages take 2 fake seconds."""
    return SessionManager(clock_factory=lambda: VoyageClock(duration=2.0, now=fake_clock))


@pytest.fixture
def service(manager) -> APIService:
    return APIService(session_manager=manager)


@pytest.fixture
def default_config() -> GameConfig:
    return GameConfig()


def cross(engine: CrossingEngine, *avatar_ids: str):
    """Unload the boat, load the given avatars, sail and dock."""
    for avatar_id in engine.snapshot().boat:
        assert engine.disembark(avatar_id).success
    for avatar_id in avatar_ids:
        result = engine.board_boat(avatar_id)
        assert result.success, result.error
    assert engine.launch().success
    return engine.complete_voyage()
