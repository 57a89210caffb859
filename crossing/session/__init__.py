"""
Session Module - Manages ephemeral play sessions.

A session represents one player's time at the river:
- Created when the player starts playing
- Holds the live engine and the voyage clock
- Restarting swaps in a fresh engine
- Destroyed when the player leaves

Sessions are EPHEMERAL: no persistence of any kind.
"""

from .manager import SessionManager, Session, SessionState, build_engine
from .voyage import VoyageClock, format_elapsed

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "build_engine",
    "VoyageClock",
    "format_elapsed",
]
