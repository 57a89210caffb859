"""
Action System - Commands, rejection reasons and results.

Actions represent the player intents forwarded by a presentation layer:
1. Board an avatar onto the boat
2. Disembark an avatar onto the dock beside the boat
3. Launch the boat
4. Complete the voyage (scheduled by the presentation layer)

Ordinary gameplay mistakes are never raised; they come back as a failed
ActionResult carrying a RejectionReason.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Commands accepted by the engine."""
    BOARD = "board"
    DISEMBARK = "disembark"
    LAUNCH = "launch"
    COMPLETE_VOYAGE = "complete_voyage"


class RejectionReason(str, Enum):
    """Reason codes for refused commands."""
    GAME_OVER = "GAME_OVER"
    VOYAGE_IN_PROGRESS = "VOYAGE_IN_PROGRESS"
    UNKNOWN_AVATAR = "UNKNOWN_AVATAR"
    WRONG_SHORE = "WRONG_SHORE"
    BOAT_FULL = "BOAT_FULL"
    NOT_ABOARD = "NOT_ABOARD"
    NOT_ON_DOCK = "NOT_ON_DOCK"
    NEEDS_CREW = "NEEDS_CREW"
    NO_VOYAGE = "NO_VOYAGE"

    @property
    def message(self) -> str:
        return REJECTION_MESSAGES[self]


REJECTION_MESSAGES = {
    RejectionReason.GAME_OVER: "The game is over. Restart to play again.",
    RejectionReason.VOYAGE_IN_PROGRESS: "The boat is still crossing the river.",
    RejectionReason.UNKNOWN_AVATAR: "No such avatar.",
    RejectionReason.WRONG_SHORE: "Boat is on the other side!",
    RejectionReason.BOAT_FULL: "Boat is at full capacity!",
    RejectionReason.NOT_ABOARD: "That avatar is not on the boat.",
    RejectionReason.NOT_ON_DOCK: "That avatar is not on a dock.",
    RejectionReason.NEEDS_CREW: "Someone needs to row the boat!",
    RejectionReason.NO_VOYAGE: "The boat is not sailing.",
}


@dataclass(frozen=True)
class Action:
    """
    A command to apply to the engine.

    Only BOARD and DISEMBARK carry an avatar id.
    """
    action_type: ActionType
    avatar_id: str | None = None

    @classmethod
    def board(cls, avatar_id: str) -> Action:
        return cls(ActionType.BOARD, avatar_id)

    @classmethod
    def disembark(cls, avatar_id: str) -> Action:
        return cls(ActionType.DISEMBARK, avatar_id)

    @classmethod
    def launch(cls) -> Action:
        return cls(ActionType.LAUNCH)

    @classmethod
    def complete_voyage(cls) -> Action:
        return cls(ActionType.COMPLETE_VOYAGE)

    def describe(self) -> str:
        if self.avatar_id:
            return f"{self.action_type.value} {self.avatar_id}"
        return self.action_type.value


@dataclass
class ActionResult:
    """
    Result of applying a command.

    Contains:
    - Whether the command was accepted
    - The reason code and message when refused
    - A state snapshot after the command (for renderers)
    - The outcome, when the command ended the game
    """
    success: bool
    error: str | None = None
    error_code: RejectionReason | None = None
    snapshot: Any | None = None  # GameSnapshot
    changes: list[str] = field(default_factory=list)
    outcome: Any | None = None  # Outcome

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def failure(cls, reason: RejectionReason, snapshot: Any | None = None) -> ActionResult:
        """Create a rejection result."""
        return cls(success=False, error=reason.message, error_code=reason, snapshot=snapshot)

    @classmethod
    def ok(
        cls,
        snapshot: Any,
        changes: list[str] | None = None,
        outcome: Any | None = None,
    ) -> ActionResult:
        """Create a success result."""
        return cls(success=True, snapshot=snapshot, changes=changes or [], outcome=outcome)
