"""
Game State - Avatars, docks, the boat and the game aggregate.

Design principles:
- One live Game per play session, built explicitly (no singleton)
- Reset means building a new Game, never tearing one down in place
- Docks and the boat share their passenger behavior through a Hold
  (composition), not through a common base class
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol
import uuid


class Location(str, Enum):
    """Where an avatar or the boat is. RIVER means in transit."""
    ORIGIN = "origin"
    DESTINATION = "destination"
    RIVER = "river"


class MountStatus(str, Enum):
    """What an avatar is standing on."""
    ON_DOCK = "on_dock"
    ON_BOAT = "on_boat"


class AvatarKind(str, Enum):
    HUMAN = "human"
    MONSTER = "monster"


class GameStatus(str, Enum):
    ONGOING = "ongoing"
    WON = "won"
    LOST = "lost"


class BoatStatus(str, Enum):
    DOCKED = "docked"
    SAILING = "sailing"


class Zone(str, Enum):
    """Derived container tag for an avatar."""
    ORIGIN_DOCK = "origin_dock"
    BOAT = "boat"
    DESTINATION_DOCK = "destination_dock"
    IN_TRANSIT = "in_transit"


def opposite(location: Location) -> Location:
    """Return the other shore. The river resolves to the origin."""
    if location == Location.ORIGIN:
        return Location.DESTINATION
    return Location.ORIGIN


@dataclass
class Avatar:
    """
    A human or a monster.

    Identity (avatar_id, kind) never changes after creation.
    Location and mount state are only changed by the engine.
    """
    avatar_id: str
    kind: AvatarKind
    location: Location = Location.ORIGIN
    mounted: MountStatus = MountStatus.ON_DOCK

    @property
    def is_human(self) -> bool:
        return self.kind == AvatarKind.HUMAN

    @property
    def zone(self) -> Zone:
        """Container tag derived from location and mount state."""
        if self.location == Location.RIVER:
            return Zone.IN_TRANSIT
        if self.mounted == MountStatus.ON_BOAT:
            return Zone.BOAT
        if self.location == Location.ORIGIN:
            return Zone.ORIGIN_DOCK
        return Zone.DESTINATION_DOCK

    def __hash__(self):
        return hash(self.avatar_id)

    def __eq__(self, other):
        if not isinstance(other, Avatar):
            return False
        return self.avatar_id == other.avatar_id


@dataclass
class Hold:
    """
    A set of avatars with capacity bounds.

    Order is irrelevant to the rules; insertion order is kept only so
    renderers show avatars in a stable order.
    """
    max_capacity: int
    min_capacity: int = 0
    _passengers: list[Avatar] = field(default_factory=list)

    @property
    def passengers(self) -> list[Avatar]:
        """Copy of the current passengers."""
        return list(self._passengers)

    @property
    def count(self) -> int:
        return len(self._passengers)

    @property
    def is_full(self) -> bool:
        return len(self._passengers) >= self.max_capacity

    @property
    def is_empty(self) -> bool:
        return len(self._passengers) == 0

    def add(self, avatar: Avatar) -> bool:
        """Add an avatar. Returns False if the hold is full."""
        if self.is_full:
            return False
        self._passengers.append(avatar)
        return True

    def remove(self, avatar: Avatar) -> bool:
        """Remove an avatar. Returns False if it was not here."""
        if avatar not in self._passengers:
            return False
        self._passengers.remove(avatar)
        return True

    def contains(self, avatar: Avatar) -> bool:
        return avatar in self._passengers

    def count_kinds(self) -> tuple[int, int]:
        """Return (humans, monsters) in this hold."""
        humans = sum(1 for a in self._passengers if a.kind == AvatarKind.HUMAN)
        return humans, len(self._passengers) - humans

    def ids(self) -> list[str]:
        return [a.avatar_id for a in self._passengers]


class Mount(Protocol):
    """Anything avatars can stand on: a dock or the boat."""
    hold: Hold

    @property
    def location(self) -> Location: ...


@dataclass
class Dock:
    """A fixed-side dock. Capacity equals the total avatar count."""
    location: Location
    hold: Hold


@dataclass
class Boat:
    """The boat: movable, with a minimum crew to sail."""
    hold: Hold
    location: Location = Location.ORIGIN
    status: BoatStatus = BoatStatus.DOCKED

    @property
    def is_docked(self) -> bool:
        return self.status == BoatStatus.DOCKED

    def destination(self) -> Location:
        """Shore the boat would sail to from where it is now."""
        return opposite(self.location)

    def can_sail(self) -> bool:
        return self.hold.count >= self.hold.min_capacity


@dataclass
class Game:
    """
    Complete game state for one play-through.

    Created by Game.create() on start or restart; the previous Game is
    simply discarded.
    """
    game_id: str
    num_monsters: int
    num_humans: int
    boat_capacity: int
    avatars: list[Avatar]
    dock_origin: Dock
    dock_destination: Dock
    boat: Boat
    trip_count: int = 0
    status: GameStatus = GameStatus.ONGOING

    @property
    def total_avatars(self) -> int:
        return self.num_monsters + self.num_humans

    @classmethod
    def create(
        cls,
        num_monsters: int = 3,
        num_humans: int = 3,
        boat_capacity: int = 2,
        min_crew: int = 1,
    ) -> Game:
        """Build a fresh game with everyone on the origin dock."""
        total = num_monsters + num_humans
        dock_origin = Dock(Location.ORIGIN, Hold(max_capacity=total))
        dock_destination = Dock(Location.DESTINATION, Hold(max_capacity=total))
        boat = Boat(hold=Hold(max_capacity=boat_capacity, min_capacity=min_crew))

        avatars = [
            Avatar(avatar_id=f"monster-{i}", kind=AvatarKind.MONSTER)
            for i in range(num_monsters)
        ] + [
            Avatar(avatar_id=f"human-{i}", kind=AvatarKind.HUMAN)
            for i in range(num_humans)
        ]
        for avatar in avatars:
            dock_origin.hold.add(avatar)

        return cls(
            game_id=str(uuid.uuid4()),
            num_monsters=num_monsters,
            num_humans=num_humans,
            boat_capacity=boat_capacity,
            avatars=avatars,
            dock_origin=dock_origin,
            dock_destination=dock_destination,
            boat=boat,
        )

    def get_avatar(self, avatar_id: str) -> Avatar | None:
        for avatar in self.avatars:
            if avatar.avatar_id == avatar_id:
                return avatar
        return None

    def get_dock(self, location: Location) -> Dock | None:
        """Dock on the given shore; None for the river."""
        if location == Location.ORIGIN:
            return self.dock_origin
        if location == Location.DESTINATION:
            return self.dock_destination
        return None

    @property
    def mounts(self) -> tuple[Mount, ...]:
        return (self.dock_origin, self.boat, self.dock_destination)
