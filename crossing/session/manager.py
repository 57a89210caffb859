"""
Session Manager - Creates and manages play sessions.

LIFECYCLE:
1. Player starts a session with a GameConfig
2. The session builds a CrossingEngine over a fresh Game
3. During play the adapter forwards commands and schedules voyages
4. Restart or reconfigure replaces the engine; the old Game is dropped
5. Ending the session removes it from memory

PERSISTENCE RULES:
- Sessions are in-memory only
- Nothing survives a process restart
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
import time
import uuid

from ..config import GameConfig, MIN_CREW, SESSION_MAX_AGE_SECONDS
from ..engine_core.action import ActionResult, RejectionReason
from ..engine_core.engine import CrossingEngine
from ..engine_core.events import EngineEvents, VOYAGE_STARTED
from ..engine_core.state import GameStatus
from ..logger import get_logger
from .voyage import VoyageClock, format_elapsed

logger = get_logger(__name__)


class SessionState(Enum):
    """State of a play session."""
    PLAYING = "playing"
    SAILING = "sailing"
    WON = "won"
    LOST = "lost"
    ENDED = "ended"


@dataclass
class Session:
    """
    One player's play session.

    Contains:
    - The GameConfig the current game was built from
    - The live CrossingEngine
    - The VoyageClock for the crossing animation
    - Listeners re-attached to every new engine
    """
    session_id: str
    config: GameConfig
    engine: CrossingEngine
    created_at: float
    clock: VoyageClock = field(default_factory=VoyageClock)
    started_at: float = field(default_factory=time.monotonic)
    ended: bool = False

    # (event, handler) pairs kept across restarts
    listeners: list[tuple[str, Callable[..., Any]]] = field(default_factory=list)

    def __post_init__(self):
        self._wire(self.engine.events)

    @property
    def state(self) -> SessionState:
        if self.ended:
            return SessionState.ENDED
        status = self.engine.status
        if status == GameStatus.WON:
            return SessionState.WON
        if status == GameStatus.LOST:
            return SessionState.LOST
        if self.engine.is_busy:
            return SessionState.SAILING
        return SessionState.PLAYING

    def is_active(self) -> bool:
        return not self.ended

    def subscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Listen to engine events on this and every future game."""
        self.listeners.append((event, handler))
        self.engine.events.subscribe(event, handler)

    def restart(self) -> CrossingEngine:
        """Start over with the same configuration."""
        return self.reconfigure(self.config)

    def reconfigure(self, config: GameConfig) -> CrossingEngine:
        """Discard the current game and start a new one from config."""
        self.config = config
        self.engine = build_engine(config)
        self._wire(self.engine.events)
        self.clock.reset()
        self.started_at = self.clock.now()
        logger.info("Session %s started game %s", self.session_id, self.engine.game.game_id)
        return self.engine

    def advance(self) -> ActionResult | None:
        """Complete the voyage if its transit time has elapsed."""
        if self.engine.is_busy and self.clock.is_due():
            return self.complete_voyage()
        return None

    def complete_voyage(self) -> ActionResult:
        """Complete the voyage now, regardless of the clock."""
        result = self.engine.complete_voyage()
        if result.success or result.error_code == RejectionReason.NO_VOYAGE:
            self.clock.reset()
        return result

    def elapsed(self) -> str:
        return format_elapsed(self.clock.now() - self.started_at)

    def _wire(self, events: EngineEvents) -> None:
        events.subscribe(VOYAGE_STARTED, self._on_voyage_started)
        for event, handler in self.listeners:
            events.subscribe(event, handler)

    def _on_voyage_started(self, voyage) -> None:
        self.clock.start()


def build_engine(config: GameConfig) -> CrossingEngine:
    return CrossingEngine.new(
        num_monsters=config.num_monsters,
        num_humans=config.num_humans,
        boat_capacity=config.boat_capacity,
        min_crew=MIN_CREW,
    )


class SessionManager:
    """
    Manages play sessions.

    Responsibilities:
    - Create sessions from a GameConfig
    - Track active sessions
    - Clean up old sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, clock_factory: Callable[[], VoyageClock] = VoyageClock):
        self._sessions: dict[str, Session] = {}
        self._clock_factory = clock_factory

    def create_session(self, config: GameConfig | None = None) -> Session:
        """
        Create a new play session.

        Args:
            config: Game setup (defaults to 3 monsters, 3 humans, 2 seats)

        Returns:
            New Session with a game ready to play
        """
        config = config or GameConfig()
        clock = self._clock_factory()
        session = Session(
            session_id=str(uuid.uuid4()),
            config=config,
            engine=build_engine(config),
            created_at=time.time(),
            clock=clock,
            started_at=clock.now(),
        )
        self._sessions[session.session_id] = session
        logger.info("Created session %s", session.session_id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """Remove a session. Returns False if it did not exist."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.ended = True
        session.engine.events.clear()
        session.listeners.clear()
        logger.info("Ended session %s", session_id)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [sid for sid, session in self._sessions.items() if session.is_active()]

    def cleanup_stale_sessions(self, max_age_seconds: int = SESSION_MAX_AGE_SECONDS) -> int:
        """
        Remove sessions older than max_age.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        stale = [
            sid for sid, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds
        ]
        for session_id in stale:
            self.end_session(session_id)
        return len(stale)
