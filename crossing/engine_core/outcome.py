"""
Outcome - What a finished game looks like to the presentation layer.

A loss carries a FeastPlan: which monsters go after which humans on the
unbalanced side, so a renderer can play the feast without re-deriving
anything from the engine.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .state import GameStatus, Location


WIN_MESSAGE = "Victory! People safely crossed! People thank you. Monsters hate you."
LOSS_MESSAGE = "Game Over! The monsters feasted!"


@dataclass(frozen=True)
class FeastPlan:
    """Predators, prey and the predator -> prey pairing."""
    predators: tuple[str, ...]
    prey: tuple[str, ...]
    targets: dict[str, str] = field(default_factory=dict)

    @classmethod
    def pair(cls, predators: list[str], prey: list[str]) -> FeastPlan:
        """Assign each predator a prey, cycling through the prey list."""
        targets = {}
        if prey:
            for i, predator in enumerate(predators):
                targets[predator] = prey[i % len(prey)]
        return cls(predators=tuple(predators), prey=tuple(prey), targets=targets)


@dataclass(frozen=True)
class Outcome:
    """Terminal result of a game."""
    status: GameStatus
    trip_count: int
    dock: Location | None = None
    humans: int = 0
    monsters: int = 0
    feast: FeastPlan | None = None

    @property
    def is_win(self) -> bool:
        return self.status == GameStatus.WON

    @property
    def message(self) -> str:
        text = WIN_MESSAGE if self.is_win else LOSS_MESSAGE
        return f"{text}\nBoat trips: {self.trip_count}"
