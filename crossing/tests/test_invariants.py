"""
Property tests over reachable states.

Random walks through legal actions check that:
- Every avatar is in exactly one container, and the total is conserved
- The boat never exceeds capacity and never sails below its minimum crew
- A win only happens with the origin empty and the boat docked at destination
- evaluate_outcome is idempotent
"""

import random

import pytest

from ..engine_core.action import ActionType, RejectionReason
from ..engine_core.action_generator import legal_actions
from ..engine_core.engine import CrossingEngine
from ..engine_core.state import BoatStatus, GameStatus, Location


def random_walk(seed: int, steps: int = 300):
    rng = random.Random(seed)
    engine = CrossingEngine.new(
        num_monsters=rng.randint(1, 4),
        num_humans=rng.randint(1, 4),
        boat_capacity=rng.randint(1, 3),
    )
    for _ in range(steps):
        actions = legal_actions(engine)
        if not actions:
            break
        action = rng.choice(actions)
        aboard = engine.game.boat.hold.count

        result = engine.apply(action)

        yield engine, action, result, aboard


@pytest.mark.parametrize("seed", range(25))
def test_random_walk_keeps_invariants(seed):
    for engine, action, result, aboard in random_walk(seed):
        assert result.success, (action, result.error)
        engine.check_invariants()

        game = engine.game
        assert game.boat.hold.count <= game.boat.hold.max_capacity
        if action.action_type == ActionType.LAUNCH:
            assert aboard >= game.boat.hold.min_capacity

        placed = (
            game.dock_origin.hold.count
            + game.boat.hold.count
            + game.dock_destination.hold.count
        )
        assert placed == game.total_avatars

        if game.status == GameStatus.WON:
            assert game.dock_origin.hold.is_empty
            assert game.boat.location == Location.DESTINATION
            assert game.boat.status == BoatStatus.DOCKED

        if not engine.is_busy:
            first = engine.evaluate_outcome()
            status = engine.status
            assert engine.evaluate_outcome() == first
            assert engine.status == status


@pytest.mark.parametrize("seed", range(10))
def test_legal_actions_are_exactly_the_accepted_ones(seed):
    """Anything not generated as legal is refused."""
    for engine, _, _, _ in random_walk(seed, steps=60):
        legal = {a.describe() for a in legal_actions(engine)}
        snapshot = engine.snapshot()
        for avatar in engine.game.avatars:
            if f"board {avatar.avatar_id}" not in legal:
                assert not engine.board_boat(avatar.avatar_id).success
            if f"disembark {avatar.avatar_id}" not in legal:
                assert not engine.disembark(avatar.avatar_id).success
        if "launch" not in legal:
            assert not engine.launch().success
        assert engine.snapshot() == snapshot


def test_no_actions_after_game_over():
    engine = CrossingEngine.new(num_monsters=1, num_humans=1, boat_capacity=2)
    engine.board_boat("human-0")
    engine.board_boat("monster-0")
    engine.launch()
    engine.complete_voyage()

    assert engine.status == GameStatus.WON
    assert legal_actions(engine) == []


def test_only_completion_while_sailing(engine):
    engine.board_boat("human-0")
    engine.launch()

    actions = legal_actions(engine)

    assert [a.action_type for a in actions] == [ActionType.COMPLETE_VOYAGE]
    assert engine.board_boat("human-1").error_code == RejectionReason.VOYAGE_IN_PROGRESS
