"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a browser front end and the
engine. Every response has an explicit type for OpenAPI generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has been ended
- VALIDATION_ERROR: Game configuration is invalid
- Rule rejections (WRONG_SHORE, BOAT_FULL, NEEDS_CREW, ...): the command
  was refused; the game state is unchanged
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..config import GameConfig


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    PLAYING = "playing"
    SAILING = "sailing"
    WON = "won"
    LOST = "lost"
    ENDED = "ended"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Rule rejections, one per engine reason code
    GAME_OVER = "GAME_OVER"
    VOYAGE_IN_PROGRESS = "VOYAGE_IN_PROGRESS"
    UNKNOWN_AVATAR = "UNKNOWN_AVATAR"
    WRONG_SHORE = "WRONG_SHORE"
    BOAT_FULL = "BOAT_FULL"
    NOT_ABOARD = "NOT_ABOARD"
    NOT_ON_DOCK = "NOT_ON_DOCK"
    NEEDS_CREW = "NEEDS_CREW"
    NO_VOYAGE = "NO_VOYAGE"


# =============================================================================
# Shared Models
# =============================================================================

class AvatarInfo(BaseModel):
    """One avatar for display."""
    avatar_id: str
    kind: str = Field(description="human or monster")
    location: str = Field(description="origin, destination or river")
    mounted: str = Field(description="on_dock or on_boat")
    zone: str = Field(description="origin_dock, boat, destination_dock or in_transit")

    model_config = {"from_attributes": True}


class BoatInfo(BaseModel):
    """The boat for display."""
    location: str
    status: str = Field(description="docked or sailing")
    capacity: int
    min_crew: int
    passengers: list[str] = Field(default_factory=list)


class FeastInfo(BaseModel):
    """Who eats whom, for the loss animation."""
    predators: list[str] = Field(default_factory=list)
    prey: list[str] = Field(default_factory=list)
    targets: dict[str, str] = Field(default_factory=dict)
    duration_seconds: float = Field(description="Length of the feast animation")


class OutcomeInfo(BaseModel):
    """Terminal result of a game."""
    status: str = Field(description="won or lost")
    trip_count: int
    message: str
    dock: Optional[str] = Field(None, description="Side where the monsters feasted")
    humans: int = 0
    monsters: int = 0
    feast: Optional[FeastInfo] = None


class VoyageInfo(BaseModel):
    """A voyage in flight. Call /complete after duration_seconds."""
    origin: str
    target: str
    passengers: list[str]
    trip_number: int
    duration_seconds: float


class ConfigInfo(BaseModel):
    num_monsters: int
    num_humans: int
    boat_capacity: int


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(GameConfig):
    """Request to start a session. Each count must be an integer >= 1."""


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for rendering."""
    session_id: str
    game_id: str
    status: str = Field(description="ongoing, won or lost")
    session_status: SessionStatus
    trip_count: int
    busy: bool = Field(description="True while a voyage is in flight")
    boat: BoatInfo
    origin: list[str] = Field(default_factory=list)
    destination: list[str] = Field(default_factory=list)
    avatars: list[AvatarInfo] = Field(default_factory=list)
    config: ConfigInfo
    elapsed: str = Field("00:00.000", description="Time since the game started")
    voyage: Optional[VoyageInfo] = None
    outcome: Optional[OutcomeInfo] = None
    api_version: str = "v1"


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    game_id: str
    config: ConfigInfo
    created_at: float = 0.0
    api_version: str = "v1"


class CommandResponse(BaseModel):
    """Response to an accepted command."""
    session_id: str
    success: bool
    changes: list[str] = Field(default_factory=list)
    game_state: GameStateResponse
    voyage: Optional[VoyageInfo] = None
    outcome: Optional[OutcomeInfo] = None
    api_version: str = "v1"


class LegalActionsResponse(BaseModel):
    """Commands the engine would accept right now."""
    session_id: str
    actions: list[str] = Field(default_factory=list, description="e.g. 'board human-0', 'launch'")
    boardable: list[str] = Field(default_factory=list)
    disembarkable: list[str] = Field(default_factory=list)
    can_launch: bool = False
    can_complete: bool = False


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str


# =============================================================================
# WebSocket Messages
# =============================================================================

class NotificationType(str, Enum):
    """Server-to-client WebSocket message types."""
    STATE_UPDATE = "state_update"
    VOYAGE_STARTED = "voyage_started"
    OUTCOME = "outcome"


class Notification(BaseModel):
    """One message pushed to a session's WebSocket clients."""
    type: NotificationType
    payload: dict[str, Any] = Field(default_factory=dict)
