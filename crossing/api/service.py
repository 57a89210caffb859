"""
API Service - Business logic layer between the API and the engine.

The service:
1. Translates API requests to engine commands
2. Manages sessions
3. Completes voyages whose transit time has elapsed and queues their
   notifications for the WebSocket layer
4. Formats responses for the front end

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..config import FEAST_SECONDS, GameConfig
from ..engine_core.action import Action, ActionType, ActionResult
from ..engine_core.action_generator import legal_actions
from ..engine_core.events import Voyage
from ..engine_core.outcome import Outcome
from ..logger import get_logger
from ..session import Session, SessionManager
from .schemas import (
    AvatarInfo,
    BoatInfo,
    CommandResponse,
    ConfigInfo,
    ErrorCode,
    ErrorResponse,
    FeastInfo,
    GameStateResponse,
    LegalActionsResponse,
    Notification,
    NotificationType,
    OutcomeInfo,
    SessionResponse,
    SessionStatus,
    VoyageInfo,
)

logger = get_logger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        session = service.create_session(GameConfig())
        service.board(session.session_id, "human-0")
        service.launch(session.session_id)
        service.complete_voyage(session.session_id)

    Every lookup returns ErrorResponse when the session does not exist.
    Refused commands also come back as ErrorResponse, carrying the rule
    reason as error_code and the unchanged game state in details.
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Messages for voyages completed by the clock, drained by the transport
    notifications: dict[str, list[Notification]] = field(default_factory=dict)

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_session(self, config: GameConfig | None = None) -> SessionResponse:
        session = self.session_manager.create_session(config)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str) -> bool:
        self.notifications.pop(session_id, None)
        return self.session_manager.end_session(session_id)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def restart(self, session_id: str) -> SessionResponse | ErrorResponse:
        """Start the same configuration over with a fresh game."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        session.restart()
        return self._session_to_response(session)

    def reconfigure(self, session_id: str, config: GameConfig) -> SessionResponse | ErrorResponse:
        """Start a fresh game with new counts."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        session.reconfigure(config)
        return self._session_to_response(session)

    # =========================================================================
    # Game state
    # =========================================================================

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """Current state. Completes a voyage whose transit time has elapsed."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        self._advance(session)
        return self._game_state(session)

    def legal_actions(self, session_id: str) -> LegalActionsResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        self._advance(session)
        actions = legal_actions(session.engine)
        return LegalActionsResponse(
            session_id=session_id,
            actions=[a.describe() for a in actions],
            boardable=[a.avatar_id for a in actions if a.action_type == ActionType.BOARD],
            disembarkable=[a.avatar_id for a in actions if a.action_type == ActionType.DISEMBARK],
            can_launch=any(a.action_type == ActionType.LAUNCH for a in actions),
            can_complete=any(a.action_type == ActionType.COMPLETE_VOYAGE for a in actions),
        )

    # =========================================================================
    # Commands
    # =========================================================================

    def board(self, session_id: str, avatar_id: str) -> CommandResponse | ErrorResponse:
        return self.apply(session_id, Action.board(avatar_id))

    def disembark(self, session_id: str, avatar_id: str) -> CommandResponse | ErrorResponse:
        return self.apply(session_id, Action.disembark(avatar_id))

    def launch(self, session_id: str) -> CommandResponse | ErrorResponse:
        return self.apply(session_id, Action.launch())

    def complete_voyage(self, session_id: str) -> CommandResponse | ErrorResponse:
        return self.apply(session_id, Action.complete_voyage())

    def apply(self, session_id: str, action: Action) -> CommandResponse | ErrorResponse:
        """Apply one command to a session's engine."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        arrival = None
        if action.action_type == ActionType.COMPLETE_VOYAGE:
            result = session.complete_voyage()
        else:
            arrival = self._advance(session)
            result = session.engine.apply(action)

        if not result.success:
            return self._rejection(session, result, arrival)

        voyage = None
        if action.action_type == ActionType.LAUNCH and session.engine.voyage is not None:
            voyage = self._voyage_info(session, session.engine.voyage)

        changes = result.changes
        if arrival is not None:
            changes = arrival.changes + changes

        return CommandResponse(
            session_id=session_id,
            success=True,
            changes=changes,
            game_state=self._game_state(session),
            voyage=voyage,
            outcome=self._outcome_info(result.outcome) if result.outcome else None,
        )

    # =========================================================================
    # Notifications
    # =========================================================================

    def drain_notifications(self, session_id: str) -> list[Notification]:
        """Return and forget the queued messages for a session."""
        return self.notifications.pop(session_id, [])

    def _advance(self, session: Session) -> ActionResult | None:
        """Complete a due voyage and queue what the clients need to hear."""
        arrival = session.advance()
        if arrival is None or not arrival.success:
            return None

        queue = self.notifications.setdefault(session.session_id, [])
        queue.append(Notification(
            type=NotificationType.STATE_UPDATE,
            payload=self._game_state(session).model_dump(mode="json"),
        ))
        if arrival.outcome is not None:
            queue.append(Notification(
                type=NotificationType.OUTCOME,
                payload=self._outcome_info(arrival.outcome).model_dump(mode="json"),
            ))
        logger.debug("Session %s: voyage completed by the clock", session.session_id)
        return arrival

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _rejection(
        self, session: Session, result: ActionResult, arrival: ActionResult | None = None
    ) -> ErrorResponse:
        details = {"game_state": self._game_state(session).model_dump(mode="json")}
        if arrival is not None and arrival.outcome is not None:
            details["outcome"] = self._outcome_info(arrival.outcome).model_dump(mode="json")
        return ErrorResponse(
            error=result.error,
            error_code=ErrorCode(result.error_code.value),
            details=details,
        )

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            game_id=session.engine.game.game_id,
            config=self._config_info(session.config),
            created_at=session.created_at,
        )

    def _config_info(self, config: GameConfig) -> ConfigInfo:
        return ConfigInfo(
            num_monsters=config.num_monsters,
            num_humans=config.num_humans,
            boat_capacity=config.boat_capacity,
        )

    def _voyage_info(self, session: Session, voyage: Voyage) -> VoyageInfo:
        return VoyageInfo(
            origin=voyage.origin.value,
            target=voyage.target.value,
            passengers=list(voyage.passengers),
            trip_number=voyage.trip_number,
            duration_seconds=session.clock.duration,
        )

    def _outcome_info(self, outcome: Outcome) -> OutcomeInfo:
        feast = None
        if outcome.feast is not None:
            feast = FeastInfo(
                predators=list(outcome.feast.predators),
                prey=list(outcome.feast.prey),
                targets=dict(outcome.feast.targets),
                duration_seconds=FEAST_SECONDS,
            )
        return OutcomeInfo(
            status=outcome.status.value,
            trip_count=outcome.trip_count,
            message=outcome.message,
            dock=outcome.dock.value if outcome.dock else None,
            humans=outcome.humans,
            monsters=outcome.monsters,
            feast=feast,
        )

    def _game_state(self, session: Session) -> GameStateResponse:
        engine = session.engine
        snap = engine.snapshot()
        return GameStateResponse(
            session_id=session.session_id,
            game_id=snap.game_id,
            status=snap.status.value,
            session_status=SessionStatus(session.state.value),
            trip_count=snap.trip_count,
            busy=snap.busy,
            boat=BoatInfo(
                location=snap.boat_location.value,
                status=snap.boat_status.value,
                capacity=snap.boat_capacity,
                min_crew=snap.boat_min_crew,
                passengers=list(snap.boat),
            ),
            origin=list(snap.origin),
            destination=list(snap.destination),
            avatars=[
                AvatarInfo(
                    avatar_id=a.avatar_id,
                    kind=a.kind.value,
                    location=a.location.value,
                    mounted=a.mounted.value,
                    zone=a.zone.value,
                )
                for a in snap.avatars
            ],
            config=self._config_info(session.config),
            elapsed=session.elapsed(),
            voyage=self._voyage_info(session, engine.voyage) if engine.voyage else None,
            outcome=self._outcome_info(engine.outcome) if engine.outcome else None,
        )
