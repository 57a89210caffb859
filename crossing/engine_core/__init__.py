"""
Engine Core - Rule engine for the river crossing puzzle.

The engine:
1. Builds a Game (avatars, two docks, a boat)
2. Accepts board / disembark / launch / complete_voyage commands
3. Refuses rule violations with a reason code
4. Evaluates win and loss after every voyage
5. Notifies observers of changes, voyages and outcomes
"""

from .state import (
    Avatar,
    AvatarKind,
    Boat,
    BoatStatus,
    Dock,
    Game,
    GameStatus,
    Hold,
    Location,
    Mount,
    MountStatus,
    Zone,
)
from .action import Action, ActionType, ActionResult, RejectionReason
from .outcome import FeastPlan, Outcome
from .events import EngineEvents, Voyage
from .engine import CrossingEngine, GameSnapshot, InvariantViolation, apply_action
from .action_generator import legal_actions

__all__ = [
    "Avatar",
    "AvatarKind",
    "Boat",
    "BoatStatus",
    "Dock",
    "Game",
    "GameStatus",
    "Hold",
    "Location",
    "Mount",
    "MountStatus",
    "Zone",
    "Action",
    "ActionType",
    "ActionResult",
    "RejectionReason",
    "FeastPlan",
    "Outcome",
    "EngineEvents",
    "Voyage",
    "CrossingEngine",
    "GameSnapshot",
    "InvariantViolation",
    "apply_action",
    "legal_actions",
]
