"""
Tests for sessions and voyage timing.
"""

import time

from ..config import GameConfig
from ..engine_core.events import CHANGED, OUTCOME
from ..engine_core.state import GameStatus, Location
from ..session import SessionState, VoyageClock, format_elapsed


class TestSessionLifecycle:
    def test_create_session_with_defaults(self, manager):
        session = manager.create_session()

        assert session.session_id in manager.list_active_sessions()
        assert session.config == GameConfig(num_monsters=3, num_humans=3, boat_capacity=2)
        assert session.engine.game.total_avatars == 6
        assert session.state == SessionState.PLAYING

    def test_end_session(self, manager):
        session = manager.create_session()

        assert manager.end_session(session.session_id)

        assert manager.get_session(session.session_id) is None
        assert session.state == SessionState.ENDED
        assert not manager.end_session(session.session_id)

    def test_restart_builds_a_fresh_game(self, manager):
        session = manager.create_session()
        old_game_id = session.engine.game.game_id
        session.engine.board_boat("human-0")
        session.engine.launch()

        session.restart()

        assert session.engine.game.game_id != old_game_id
        assert session.engine.game.trip_count == 0
        assert not session.engine.is_busy
        assert not session.clock.running

    def test_reconfigure(self, manager):
        session = manager.create_session()

        session.reconfigure(GameConfig(num_monsters=5, num_humans=4, boat_capacity=3))

        assert session.engine.game.num_monsters == 5
        assert session.engine.game.boat.hold.max_capacity == 3
        assert session.config.num_humans == 4

    def test_listeners_follow_the_session_across_restarts(self, manager):
        session = manager.create_session()
        seen = []
        session.subscribe(CHANGED, seen.append)

        session.restart()
        session.engine.board_boat("human-0")

        assert len(seen) == 1

    def test_cleanup_stale_sessions(self, manager):
        old = manager.create_session()
        fresh = manager.create_session()
        old.created_at = time.time() - 7200

        removed = manager.cleanup_stale_sessions(max_age_seconds=3600)

        assert removed == 1
        assert manager.get_session(old.session_id) is None
        assert manager.get_session(fresh.session_id) is fresh


class TestVoyageTiming:
    def test_launch_starts_the_clock(self, manager):
        session = manager.create_session()
        session.engine.board_boat("human-0")

        session.engine.launch()

        assert session.clock.running
        assert session.state == SessionState.SAILING

    def test_advance_waits_for_transit(self, manager, fake_clock):
        session = manager.create_session()
        session.engine.board_boat("human-0")
        session.engine.board_boat("monster-0")
        session.engine.launch()

        fake_clock.advance(1.0)
        assert session.advance() is None
        assert session.engine.is_busy

        fake_clock.advance(1.0)
        result = session.advance()

        assert result.success
        assert not session.engine.is_busy
        assert session.engine.game.boat.location == Location.DESTINATION
        assert not session.clock.running

    def test_advance_reports_outcome(self, fake_clock):
        from ..session import SessionManager

        manager = SessionManager(clock_factory=lambda: VoyageClock(duration=0.5, now=fake_clock))
        session = manager.create_session(GameConfig(num_monsters=2, num_humans=2, boat_capacity=1))
        outcomes = []
        session.subscribe(OUTCOME, outcomes.append)
        session.engine.board_boat("human-0")
        session.engine.launch()

        fake_clock.advance(0.5)
        result = session.advance()

        assert result.outcome.status == GameStatus.LOST
        assert outcomes == [result.outcome]
        assert session.state == SessionState.LOST

    def test_remaining(self, fake_clock):
        clock = VoyageClock(duration=2.0, now=fake_clock)
        assert clock.remaining() == 0.0
        assert not clock.is_due()

        clock.start()
        fake_clock.advance(0.5)

        assert clock.remaining() == 1.5
        assert not clock.is_due()

    def test_elapsed(self, manager, fake_clock):
        session = manager.create_session()
        fake_clock.advance(61.5)
        assert session.elapsed() == "01:01.500"


def test_format_elapsed():
    assert format_elapsed(0) == "00:00.000"
    assert format_elapsed(3.25) == "00:03.250"
    assert format_elapsed(600) == "10:00.000"
