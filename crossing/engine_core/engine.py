"""
Crossing Engine - The rule engine for the river crossing puzzle.

The engine is the single point of state mutation for one Game.
Presentation layers call commands and read snapshots; they never touch
the Game directly.

Design principles:
- Commands return ActionResult; rule violations never raise
- A voyage is two explicit calls: launch() then complete_voyage()
- While a voyage is in flight (is_busy) every other command is refused
- Terminal games (won or lost) refuse every command
"""

from __future__ import annotations
from dataclasses import dataclass

from ..logger import get_logger
from .action import Action, ActionType, ActionResult, RejectionReason
from .events import EngineEvents, Voyage, CHANGED, VOYAGE_STARTED, OUTCOME
from .outcome import FeastPlan, Outcome
from .state import (
    Avatar,
    AvatarKind,
    BoatStatus,
    Dock,
    Game,
    GameStatus,
    Location,
    MountStatus,
    Zone,
)

logger = get_logger(__name__)


class InvariantViolation(AssertionError):
    """Engine state is corrupt. Never reachable in correct play."""


@dataclass(frozen=True)
class AvatarView:
    avatar_id: str
    kind: AvatarKind
    location: Location
    mounted: MountStatus
    zone: Zone


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only copy of everything a renderer needs."""
    game_id: str
    status: GameStatus
    trip_count: int
    busy: bool
    boat_location: Location
    boat_status: BoatStatus
    boat_capacity: int
    boat_min_crew: int
    origin: tuple[str, ...]
    boat: tuple[str, ...]
    destination: tuple[str, ...]
    avatars: tuple[AvatarView, ...]
    num_monsters: int
    num_humans: int

    def to_dict(self) -> dict:
        return {
            "game_id": self.game_id,
            "status": self.status.value,
            "trip_count": self.trip_count,
            "busy": self.busy,
            "boat": {
                "location": self.boat_location.value,
                "status": self.boat_status.value,
                "capacity": self.boat_capacity,
                "min_crew": self.boat_min_crew,
                "passengers": list(self.boat),
            },
            "origin": list(self.origin),
            "destination": list(self.destination),
            "avatars": [
                {
                    "avatar_id": a.avatar_id,
                    "kind": a.kind.value,
                    "location": a.location.value,
                    "mounted": a.mounted.value,
                    "zone": a.zone.value,
                }
                for a in self.avatars
            ],
        }


class CrossingEngine:
    """
    Rule engine over one Game.

    Usage:
        engine = CrossingEngine.new(num_monsters=3, num_humans=3, boat_capacity=2)
        engine.board_boat("human-0")
        engine.launch()
        # ...presentation layer plays the crossing, then:
        engine.complete_voyage()
    """

    def __init__(self, game: Game, events: EngineEvents | None = None):
        self.game = game
        self.events = events or EngineEvents()
        self._voyage: Voyage | None = None
        self._outcome: Outcome | None = None

    @classmethod
    def new(
        cls,
        num_monsters: int = 3,
        num_humans: int = 3,
        boat_capacity: int = 2,
        min_crew: int = 1,
        events: EngineEvents | None = None,
    ) -> CrossingEngine:
        """Build an engine over a fresh game. This is how a reset happens."""
        game = Game.create(num_monsters, num_humans, boat_capacity, min_crew)
        logger.info(
            "New game %s: %d monsters, %d humans, boat capacity %d",
            game.game_id, num_monsters, num_humans, boat_capacity,
        )
        return cls(game, events=events)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def status(self) -> GameStatus:
        return self.game.status

    @property
    def is_busy(self) -> bool:
        """True while a voyage is in flight."""
        return self._voyage is not None

    @property
    def is_over(self) -> bool:
        return self.game.status != GameStatus.ONGOING

    @property
    def outcome(self) -> Outcome | None:
        return self._outcome

    @property
    def voyage(self) -> Voyage | None:
        return self._voyage

    def get_avatar(self, avatar_id: str) -> Avatar | None:
        return self.game.get_avatar(avatar_id)

    def get_dock(self, location: Location) -> Dock | None:
        return self.game.get_dock(location)

    def snapshot(self) -> GameSnapshot:
        game = self.game
        return GameSnapshot(
            game_id=game.game_id,
            status=game.status,
            trip_count=game.trip_count,
            busy=self.is_busy,
            boat_location=game.boat.location,
            boat_status=game.boat.status,
            boat_capacity=game.boat.hold.max_capacity,
            boat_min_crew=game.boat.hold.min_capacity,
            origin=tuple(game.dock_origin.hold.ids()),
            boat=tuple(game.boat.hold.ids()),
            destination=tuple(game.dock_destination.hold.ids()),
            avatars=tuple(
                AvatarView(a.avatar_id, a.kind, a.location, a.mounted, a.zone)
                for a in game.avatars
            ),
            num_monsters=game.num_monsters,
            num_humans=game.num_humans,
        )

    def side_counts(self, location: Location) -> tuple[int, int]:
        """
        (humans, monsters) standing on one side.

        Counts the dock plus the boat when the boat is docked on that side.
        """
        dock = self.game.get_dock(location)
        if dock is None:
            raise ValueError(f"No dock at {location.value}")
        humans, monsters = dock.hold.count_kinds()
        boat = self.game.boat
        if boat.location == location:
            boat_humans, boat_monsters = boat.hold.count_kinds()
            humans += boat_humans
            monsters += boat_monsters
        return humans, monsters

    def is_balanced(self, location: Location) -> bool:
        """A side is balanced when it has no humans or humans >= monsters."""
        humans, monsters = self.side_counts(location)
        return humans == 0 or humans >= monsters

    # =========================================================================
    # Commands
    # =========================================================================

    def apply(self, action: Action) -> ActionResult:
        """Dispatch an Action to its command."""
        handlers = {
            ActionType.BOARD: lambda: self.board_boat(action.avatar_id),
            ActionType.DISEMBARK: lambda: self.disembark(action.avatar_id),
            ActionType.LAUNCH: self.launch,
            ActionType.COMPLETE_VOYAGE: self.complete_voyage,
        }
        return handlers[action.action_type]()

    def board_boat(self, avatar_id: str) -> ActionResult:
        """Move an avatar from the dock beside the boat onto the boat."""
        rejection = self._check_ready()
        if rejection:
            return self._reject(rejection, f"board {avatar_id}")

        avatar = self.game.get_avatar(avatar_id)
        if avatar is None:
            return self._reject(RejectionReason.UNKNOWN_AVATAR, f"board {avatar_id}")

        mounted = self._mount_state(avatar)
        if mounted != MountStatus.ON_DOCK:
            return self._reject(RejectionReason.NOT_ON_DOCK, f"board {avatar_id}")

        boat = self.game.boat
        dock = self.game.get_dock(boat.location)
        if dock is None or not dock.hold.contains(avatar):
            return self._reject(RejectionReason.WRONG_SHORE, f"board {avatar_id}")
        if boat.hold.is_full:
            return self._reject(RejectionReason.BOAT_FULL, f"board {avatar_id}")

        dock.hold.remove(avatar)
        boat.hold.add(avatar)
        avatar.mounted = MountStatus.ON_BOAT
        avatar.location = boat.location

        return self._accepted([f"{avatar_id} boarded the boat at {boat.location.value}"])

    def disembark(self, avatar_id: str) -> ActionResult:
        """Move an avatar from the boat onto the dock where the boat is."""
        rejection = self._check_ready()
        if rejection:
            return self._reject(rejection, f"disembark {avatar_id}")

        avatar = self.game.get_avatar(avatar_id)
        if avatar is None:
            return self._reject(RejectionReason.UNKNOWN_AVATAR, f"disembark {avatar_id}")

        boat = self.game.boat
        mounted = self._mount_state(avatar)
        if mounted != MountStatus.ON_BOAT or not boat.hold.contains(avatar):
            return self._reject(RejectionReason.NOT_ABOARD, f"disembark {avatar_id}")

        dock = self.game.get_dock(boat.location)
        if dock is None:
            raise self._corrupt(f"boat docked in the river with {avatar_id} aboard")

        boat.hold.remove(avatar)
        dock.hold.add(avatar)
        avatar.mounted = MountStatus.ON_DOCK
        avatar.location = dock.location

        return self._accepted([f"{avatar_id} disembarked at {dock.location.value}"])

    def launch(self) -> ActionResult:
        """
        Start a voyage to the opposite shore.

        The boat and its passengers go into the river and the trip counter
        increments. The voyage only ends when complete_voyage() is called.
        """
        rejection = self._check_ready()
        if rejection:
            return self._reject(rejection, "launch")

        boat = self.game.boat
        if not boat.can_sail():
            return self._reject(RejectionReason.NEEDS_CREW, "launch")

        origin = boat.location
        target = boat.destination()

        boat.status = BoatStatus.SAILING
        boat.location = Location.RIVER
        for avatar in boat.hold.passengers:
            avatar.location = Location.RIVER
        self.game.trip_count += 1

        self._voyage = Voyage(
            origin=origin,
            target=target,
            passengers=tuple(boat.hold.ids()),
            trip_number=self.game.trip_count,
        )
        logger.info(
            "Trip %d: %s -> %s with %s",
            self.game.trip_count, origin.value, target.value, ", ".join(self._voyage.passengers),
        )

        result = self._accepted([f"Boat left {origin.value} for {target.value}"])
        self.events.emit(VOYAGE_STARTED, self._voyage)
        return result

    def complete_voyage(self) -> ActionResult:
        """Dock the boat at the voyage target and evaluate the outcome."""
        if self._voyage is None:
            return self._reject(RejectionReason.NO_VOYAGE, "complete_voyage")

        voyage = self._voyage
        boat = self.game.boat
        boat.status = BoatStatus.DOCKED
        boat.location = voyage.target
        for avatar in boat.hold.passengers:
            avatar.location = voyage.target
        self._voyage = None

        changes = [f"Boat docked at {voyage.target.value}"]
        outcome = self.evaluate_outcome()
        if outcome is not None:
            changes.append(outcome.message)
        return self._accepted(changes, outcome=outcome)

    def evaluate_outcome(self) -> Outcome | None:
        """
        Check win and loss conditions.

        Only runs while the game is ongoing; afterwards it returns the
        outcome already reached, so repeated calls are idempotent.
        """
        if self.game.status != GameStatus.ONGOING:
            return self._outcome

        game = self.game
        boat = game.boat
        if (
            game.dock_origin.hold.is_empty
            and boat.location == Location.DESTINATION
            and game.dock_destination.hold.count + boat.hold.count >= game.total_avatars
        ):
            return self._finish(Outcome(status=GameStatus.WON, trip_count=game.trip_count))

        for location in (Location.ORIGIN, Location.DESTINATION):
            if not self.is_balanced(location):
                return self._finish(self._loss_at(location))

        return None

    def check_invariants(self) -> None:
        """
        Assert conservation and capacity. Raises InvariantViolation.

        Every avatar is in exactly one container and no hold is over capacity.
        """
        game = self.game
        seen: dict[str, str] = {}
        for name, mount in (
            ("origin", game.dock_origin),
            ("boat", game.boat),
            ("destination", game.dock_destination),
        ):
            hold = mount.hold
            if hold.count > hold.max_capacity:
                raise self._corrupt(f"{name} holds {hold.count} > {hold.max_capacity}")
            for avatar_id in hold.ids():
                if avatar_id in seen:
                    raise self._corrupt(f"{avatar_id} is in {seen[avatar_id]} and {name}")
                seen[avatar_id] = name
        if len(seen) != game.total_avatars:
            raise self._corrupt(f"{len(seen)} avatars placed, expected {game.total_avatars}")
        for avatar in game.avatars:
            self._mount_state(avatar)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_ready(self) -> RejectionReason | None:
        if self.game.status != GameStatus.ONGOING:
            return RejectionReason.GAME_OVER
        if self.is_busy:
            return RejectionReason.VOYAGE_IN_PROGRESS
        return None

    def _mount_state(self, avatar: Avatar) -> MountStatus:
        if avatar.mounted not in (MountStatus.ON_DOCK, MountStatus.ON_BOAT):
            raise self._corrupt(f"{avatar.avatar_id} has invalid mount state {avatar.mounted!r}")
        return avatar.mounted

    def _corrupt(self, detail: str) -> InvariantViolation:
        logger.error("Invariant violated in game %s: %s", self.game.game_id, detail)
        return InvariantViolation(detail)

    def _reject(self, reason: RejectionReason, attempted: str) -> ActionResult:
        logger.debug("Rejected %s: %s", attempted, reason.value)
        return ActionResult.failure(reason, snapshot=self.snapshot())

    def _accepted(self, changes: list[str], outcome: Outcome | None = None) -> ActionResult:
        snapshot = self.snapshot()
        self.events.emit(CHANGED, snapshot)
        return ActionResult.ok(snapshot, changes=changes, outcome=outcome)

    def _loss_at(self, location: Location) -> Outcome:
        dock = self.game.get_dock(location)
        riders = list(dock.hold.passengers)
        if self.game.boat.location == location:
            riders.extend(self.game.boat.hold.passengers)
        predators = [a.avatar_id for a in riders if a.kind == AvatarKind.MONSTER]
        prey = [a.avatar_id for a in riders if a.kind == AvatarKind.HUMAN]
        return Outcome(
            status=GameStatus.LOST,
            trip_count=self.game.trip_count,
            dock=location,
            humans=len(prey),
            monsters=len(predators),
            feast=FeastPlan.pair(predators, prey),
        )

    def _finish(self, outcome: Outcome) -> Outcome:
        self.game.status = outcome.status
        self._outcome = outcome
        if outcome.is_win:
            logger.info("Game %s won in %d trips", self.game.game_id, outcome.trip_count)
        else:
            logger.info(
                "Game %s lost at %s: %d monsters, %d humans",
                self.game.game_id, outcome.dock.value, outcome.monsters, outcome.humans,
            )
        self.events.emit(OUTCOME, outcome)
        return outcome


def apply_action(engine: CrossingEngine, action: Action) -> ActionResult:
    """Convenience function to apply an action."""
    return engine.apply(action)
