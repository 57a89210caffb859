"""
Tests for game state: holds, docks, the boat and game creation.
"""

from ..engine_core.state import (
    Avatar,
    AvatarKind,
    Boat,
    BoatStatus,
    Game,
    GameStatus,
    Hold,
    Location,
    MountStatus,
    Zone,
    opposite,
)


class TestHold:
    """Tests for the shared passenger capability."""

    def test_add_until_full(self):
        hold = Hold(max_capacity=2)
        assert hold.add(Avatar("human-0", AvatarKind.HUMAN))
        assert hold.add(Avatar("monster-0", AvatarKind.MONSTER))
        assert hold.is_full
        assert not hold.add(Avatar("human-1", AvatarKind.HUMAN))
        assert hold.count == 2

    def test_remove_absent_returns_false(self):
        hold = Hold(max_capacity=2)
        assert not hold.remove(Avatar("human-0", AvatarKind.HUMAN))

    def test_passengers_is_a_copy(self):
        hold = Hold(max_capacity=2)
        hold.add(Avatar("human-0", AvatarKind.HUMAN))
        hold.passengers.clear()
        assert hold.count == 1

    def test_count_kinds(self):
        hold = Hold(max_capacity=3)
        hold.add(Avatar("human-0", AvatarKind.HUMAN))
        hold.add(Avatar("monster-0", AvatarKind.MONSTER))
        hold.add(Avatar("monster-1", AvatarKind.MONSTER))
        assert hold.count_kinds() == (1, 2)

    def test_avatars_compare_by_id(self):
        hold = Hold(max_capacity=1)
        hold.add(Avatar("human-0", AvatarKind.HUMAN))
        assert hold.contains(Avatar("human-0", AvatarKind.HUMAN, Location.DESTINATION))


class TestBoat:
    def test_destination_is_opposite_shore(self):
        boat = Boat(hold=Hold(max_capacity=2, min_capacity=1))
        assert boat.destination() == Location.DESTINATION
        boat.location = Location.DESTINATION
        assert boat.destination() == Location.ORIGIN

    def test_river_resolves_to_origin(self):
        assert opposite(Location.RIVER) == Location.ORIGIN

    def test_can_sail_needs_min_crew(self):
        boat = Boat(hold=Hold(max_capacity=2, min_capacity=1))
        assert not boat.can_sail()
        boat.hold.add(Avatar("monster-0", AvatarKind.MONSTER))
        assert boat.can_sail()


class TestGameCreate:
    def test_everyone_starts_on_origin_dock(self):
        game = Game.create(num_monsters=3, num_humans=2, boat_capacity=2)

        assert game.total_avatars == 5
        assert game.dock_origin.hold.count == 5
        assert game.dock_destination.hold.is_empty
        assert game.boat.hold.is_empty
        assert game.boat.location == Location.ORIGIN
        assert game.boat.status == BoatStatus.DOCKED
        assert game.status == GameStatus.ONGOING
        assert game.trip_count == 0

    def test_avatar_ids_and_order(self):
        game = Game.create(num_monsters=2, num_humans=1, boat_capacity=1)
        assert game.dock_origin.hold.ids() == ["monster-0", "monster-1", "human-0"]

    def test_capacities(self):
        game = Game.create(num_monsters=4, num_humans=4, boat_capacity=3)
        assert game.dock_origin.hold.max_capacity == 8
        assert game.dock_destination.hold.max_capacity == 8
        assert game.boat.hold.max_capacity == 3
        assert game.boat.hold.min_capacity == 1

    def test_each_game_has_its_own_id(self):
        assert Game.create().game_id != Game.create().game_id

    def test_initial_avatar_state(self):
        game = Game.create()
        for avatar in game.avatars:
            assert avatar.location == Location.ORIGIN
            assert avatar.mounted == MountStatus.ON_DOCK
            assert avatar.zone == Zone.ORIGIN_DOCK

    def test_get_dock(self):
        game = Game.create()
        assert game.get_dock(Location.ORIGIN) is game.dock_origin
        assert game.get_dock(Location.DESTINATION) is game.dock_destination
        assert game.get_dock(Location.RIVER) is None
