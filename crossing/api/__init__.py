"""
API Module - Browser front end interface.

Exposes the engine via REST API. The front end:
1. Starts a session with a monster count, human count and boat capacity
2. Forwards clicks as board / disembark / launch commands
3. Animates voyages and calls /complete when the boat arrives
4. Renders state updates and the final outcome

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    CommandResponse,
    LegalActionsResponse,
    ErrorResponse,
    # Shared
    AvatarInfo,
    BoatInfo,
    OutcomeInfo,
    VoyageInfo,
    ErrorCode,
    SessionStatus,
    # WebSocket
    Notification,
    NotificationType,
)
from .service import APIService

__all__ = [
    "CreateSessionRequest",
    "SessionResponse",
    "GameStateResponse",
    "CommandResponse",
    "LegalActionsResponse",
    "ErrorResponse",
    "AvatarInfo",
    "BoatInfo",
    "OutcomeInfo",
    "VoyageInfo",
    "ErrorCode",
    "SessionStatus",
    "Notification",
    "NotificationType",
    "APIService",
]
