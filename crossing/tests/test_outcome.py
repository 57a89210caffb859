"""
Tests for win and loss evaluation.
"""

from ..engine_core.engine import CrossingEngine
from ..engine_core.outcome import FeastPlan
from ..engine_core.state import GameStatus, Location
from .conftest import cross


class TestBalance:
    """Tests for the balance rule."""

    def test_monsters_alone_never_lose(self):
        """Origin left with 0 humans and 2 monsters is balanced."""
        engine = CrossingEngine.new(num_monsters=2, num_humans=1, boat_capacity=1)

        result = cross(engine, "human-0")

        assert engine.side_counts(Location.ORIGIN) == (0, 2)
        assert engine.is_balanced(Location.ORIGIN)
        assert result.outcome is None
        assert engine.status == GameStatus.ONGOING

    def test_tie_is_balanced(self, engine):
        cross(engine, "human-0", "monster-0")
        assert engine.side_counts(Location.ORIGIN) == (2, 2)
        assert engine.is_balanced(Location.ORIGIN)

    def test_boat_counts_toward_the_side_it_is_docked_at(self, engine):
        engine.board_boat("monster-0")
        engine.board_boat("monster-1")
        assert engine.side_counts(Location.ORIGIN) == (3, 3)
        assert engine.side_counts(Location.DESTINATION) == (0, 0)

    def test_boat_in_river_counts_nowhere(self, engine):
        engine.board_boat("human-0")
        engine.launch()
        assert engine.side_counts(Location.ORIGIN) == (2, 3)
        assert engine.side_counts(Location.DESTINATION) == (0, 0)


class TestLoss:
    def test_origin_outnumbered_after_boat_leaves(self):
        """Origin ends with 1 human and 2 monsters while the boat is away."""
        engine = CrossingEngine.new(num_monsters=2, num_humans=2, boat_capacity=1)

        result = cross(engine, "human-0")

        assert engine.status == GameStatus.LOST
        outcome = result.outcome
        assert outcome.status == GameStatus.LOST
        assert outcome.dock == Location.ORIGIN
        assert (outcome.humans, outcome.monsters) == (1, 2)
        assert outcome.trip_count == 1
        assert outcome.message.startswith("Game Over! The monsters feasted!")
        assert "Boat trips: 1" in outcome.message

    def test_feast_pairs_every_predator_with_prey(self):
        engine = CrossingEngine.new(num_monsters=2, num_humans=2, boat_capacity=1)

        outcome = cross(engine, "human-0").outcome

        assert outcome.feast.predators == ("monster-0", "monster-1")
        assert outcome.feast.prey == ("human-1",)
        assert outcome.feast.targets == {"monster-0": "human-1", "monster-1": "human-1"}

    def test_destination_outnumbered(self):
        engine = CrossingEngine.new(num_monsters=2, num_humans=2, boat_capacity=2)
        cross(engine, "monster-0", "monster-1")
        cross(engine, "monster-1")
        assert engine.status == GameStatus.ONGOING

        engine.disembark("monster-1")
        outcome = cross(engine, "monster-1", "human-0").outcome

        assert engine.status == GameStatus.LOST
        assert outcome.dock == Location.DESTINATION
        assert (outcome.humans, outcome.monsters) == (1, 2)
        # dock first, then the boat
        assert outcome.feast.predators == ("monster-0", "monster-1")
        assert outcome.feast.prey == ("human-0",)


class TestWin:
    def test_everyone_across_wins(self):
        engine = CrossingEngine.new(num_monsters=1, num_humans=1, boat_capacity=2)

        outcome = cross(engine, "human-0", "monster-0").outcome

        assert engine.status == GameStatus.WON
        assert outcome.is_win
        assert outcome.dock is None
        assert outcome.feast is None
        assert outcome.message.startswith("Victory! People safely crossed!")

    def test_win_checked_before_balance(self):
        """Monsters outnumbering humans at the far side still win if all crossed."""
        engine = CrossingEngine.new(num_monsters=2, num_humans=1, boat_capacity=3)

        cross(engine, "human-0", "monster-0", "monster-1")

        assert engine.status == GameStatus.WON

    def test_classic_puzzle_solution(self, engine):
        """3 monsters and 3 humans cross in 11 trips."""
        trips = [
            ("monster-0", "monster-1"),
            ("monster-1",),
            ("monster-1", "monster-2"),
            ("monster-2",),
            ("human-0", "human-1"),
            ("human-1", "monster-1"),
            ("human-1", "human-2"),
            ("monster-0",),
            ("monster-0", "monster-1"),
            ("monster-1",),
        ]
        for passengers in trips:
            cross(engine, *passengers)
            assert engine.status == GameStatus.ONGOING, passengers

        outcome = cross(engine, "monster-1", "monster-2").outcome

        assert outcome.is_win
        assert outcome.trip_count == 11
        assert engine.game.dock_origin.hold.is_empty


class TestEvaluateOutcome:
    def test_idempotent(self):
        engine = CrossingEngine.new(num_monsters=2, num_humans=2, boat_capacity=1)
        first = cross(engine, "human-0").outcome

        assert engine.evaluate_outcome() == first
        assert engine.evaluate_outcome() == first
        assert engine.status == GameStatus.LOST

    def test_idempotent_while_ongoing(self, engine):
        assert engine.evaluate_outcome() is None
        assert engine.evaluate_outcome() is None
        assert engine.status == GameStatus.ONGOING


class TestFeastPlan:
    def test_round_robin(self):
        plan = FeastPlan.pair(["m0", "m1", "m2"], ["h0", "h1"])
        assert plan.targets == {"m0": "h0", "m1": "h1", "m2": "h0"}

    def test_no_prey_no_targets(self):
        assert FeastPlan.pair(["m0"], []).targets == {}
