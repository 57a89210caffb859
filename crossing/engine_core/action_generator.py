"""
Action Generator - Enumerates the commands the engine would accept now.

Used by:
1. Renderers to highlight clickable avatars and the sail button
2. Tests that walk reachable states

Design: generates Action objects that are guaranteed to succeed when
applied to the same engine state.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .action import Action

if TYPE_CHECKING:
    from .engine import CrossingEngine


def legal_actions(engine: CrossingEngine) -> list[Action]:
    """Return every command that would currently be accepted."""
    if engine.is_over:
        return []

    if engine.is_busy:
        return [Action.complete_voyage()]

    game = engine.game
    boat = game.boat
    actions: list[Action] = []

    dock = game.get_dock(boat.location)
    if dock is not None and not boat.hold.is_full:
        actions.extend(Action.board(a.avatar_id) for a in dock.hold.passengers)

    actions.extend(Action.disembark(a.avatar_id) for a in boat.hold.passengers)

    if boat.can_sail():
        actions.append(Action.launch())

    return actions
