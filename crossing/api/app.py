"""
FastAPI Application - REST API for a browser front end.

Endpoints:
    POST   /api/v1/sessions                            Start a session
    GET    /api/v1/sessions                            List sessions
    GET    /api/v1/sessions/{id}                       Get session status
    DELETE /api/v1/sessions/{id}                       End session
    GET    /api/v1/sessions/{id}/state                 Get game state
    GET    /api/v1/sessions/{id}/legal-actions         Commands accepted now
    POST   /api/v1/sessions/{id}/board/{avatar_id}     Board an avatar
    POST   /api/v1/sessions/{id}/disembark/{avatar_id} Disembark an avatar
    POST   /api/v1/sessions/{id}/launch                Launch the boat
    POST   /api/v1/sessions/{id}/complete              Finish the voyage
    POST   /api/v1/sessions/{id}/restart               Same setup, fresh game
    PUT    /api/v1/sessions/{id}/config                New setup, fresh game
    WS     /api/v1/sessions/{id}/ws                    Real-time updates

Voyage Flow:
    1. POST /launch returns a voyage with duration_seconds
    2. The front end animates the crossing
    3. POST /complete docks the boat and evaluates the outcome
       (GET /state also completes a voyage once its time is up)

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Optional, Union
import json

from ..config import ALLOWED_ORIGINS, GameConfig
from ..logger import get_logger

logger = get_logger(__name__)

# WebSocket close code for an unknown session
WS_SESSION_NOT_FOUND = 4404


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI, Body, WebSocket, WebSocketDisconnect
    from fastapi.exceptions import RequestValidationError
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from .. import __version__
    from .service import APIService
    from .schemas import (
        CommandResponse,
        CreateSessionRequest,
        EndSessionResponse,
        ErrorCode,
        ErrorResponse,
        GameStateResponse,
        HealthResponse,
        LegalActionsResponse,
        Notification,
        NotificationType,
        SessionListResponse,
        SessionResponse,
    )

    app = FastAPI(
        title="Crossing Engine API",
        description="""
River crossing puzzle: get every human across without the monsters
ever outnumbering them on either side.

## Voyage Flow

1. `POST /launch` starts a voyage and returns `duration_seconds`
2. Animate the crossing
3. `POST /complete` docks the boat and evaluates win or loss

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `VALIDATION_ERROR` | Invalid monster/human/capacity counts |
| `WRONG_SHORE` | Avatar is on the shore without the boat |
| `BOAT_FULL` | Boat is at full capacity |
| `NEEDS_CREW` | Nobody aboard to row |
| `VOYAGE_IN_PROGRESS` | Wait for the boat to arrive |
| `GAME_OVER` | Restart to play again |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # WebSocket connections
    ws_connections: dict[str, list[WebSocket]] = {}

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_to_json(response: ErrorResponse) -> JSONResponse:
        """Not-found errors are 404, rule rejections are 409."""
        status_code = 404 if response.error_code == ErrorCode.SESSION_NOT_FOUND else 409
        return make_error_response(
            response.error_code, response.error, status_code, response.details
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc: RequestValidationError):
        fields = {}
        for item in exc.errors():
            loc = [str(part) for part in item.get("loc", ()) if part != "body"]
            fields.setdefault(loc[-1] if loc else "body", item.get("msg", "invalid"))
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Invalid game configuration",
            status_code=422,
            details={"fields": fields},
        )

    async def broadcast_to_session(session_id: str, message: dict):
        """Broadcast a message to all WebSocket connections for a session."""
        if session_id in ws_connections:
            dead_connections = []
            for ws in ws_connections[session_id]:
                try:
                    await ws.send_json(message)
                except Exception:
                    dead_connections.append(ws)
            for ws in dead_connections:
                ws_connections[session_id].remove(ws)

    async def notify(session_id: str, notification_type: NotificationType, payload):
        await broadcast_to_session(session_id, Notification(
            type=notification_type,
            payload=payload.model_dump(mode="json"),
        ).model_dump(mode="json"))

    async def flush_notifications(session_id: str):
        """Push what the service queued for voyages completed by the clock."""
        for notification in api_service.drain_notifications(session_id):
            await broadcast_to_session(session_id, notification.model_dump(mode="json"))

    async def close_connections(session_id: str):
        """Close and forget every WebSocket of an ended session."""
        for ws in ws_connections.pop(session_id, []):
            try:
                await ws.close()
            except Exception:
                logger.debug("WebSocket for session %s already closed", session_id)

    async def run_command(session_id: str, response) -> Union[CommandResponse, JSONResponse]:
        """Broadcast an accepted command's notifications, or map the error."""
        await flush_notifications(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)

        await notify(session_id, NotificationType.STATE_UPDATE, response.game_state)
        if response.voyage:
            await notify(session_id, NotificationType.VOYAGE_STARTED, response.voyage)
        if response.outcome:
            await notify(session_id, NotificationType.OUTCOME, response.outcome)
        return response

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={422: {"model": ErrorResponse, "description": "Invalid configuration"}},
        tags=["Sessions"],
        summary="Start a new session",
    )
    async def create_session(
        body: Optional[CreateSessionRequest] = Body(None),
    ) -> SessionResponse:
        """
        Start a session. Omit the body for 3 monsters, 3 humans and 2 seats.
        """
        config = GameConfig(**body.model_dump()) if body else GameConfig()
        return api_service.create_session(config)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        success = api_service.end_session(session_id)
        await close_connections(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    @app.post(
        "/api/v1/sessions/{session_id}/restart",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Restart with the same configuration",
    )
    async def restart(session_id: str) -> Union[SessionResponse, JSONResponse]:
        response = api_service.restart(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        await broadcast_state(session_id)
        return response

    @app.put(
        "/api/v1/sessions/{session_id}/config",
        response_model=SessionResponse,
        responses={
            404: {"model": ErrorResponse},
            422: {"model": ErrorResponse, "description": "Invalid configuration"},
        },
        tags=["Sessions"],
        summary="Start a new game with new counts",
    )
    async def reconfigure(
        session_id: str,
        body: CreateSessionRequest,
    ) -> Union[SessionResponse, JSONResponse]:
        config = GameConfig(**body.model_dump())
        response = api_service.reconfigure(session_id, config)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        await broadcast_state(session_id)
        return response

    # =========================================================================
    # State Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get current game state",
    )
    async def get_game_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.get_game_state(session_id)
        await flush_notifications(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/legal-actions",
        response_model=LegalActionsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Commands the engine would accept now",
    )
    async def get_legal_actions(session_id: str) -> Union[LegalActionsResponse, JSONResponse]:
        response = api_service.legal_actions(session_id)
        await flush_notifications(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_json(response)
        return response

    # =========================================================================
    # Command Endpoints
    # =========================================================================

    command_responses = {
        404: {"model": ErrorResponse, "description": "Session not found"},
        409: {"model": ErrorResponse, "description": "Command refused by the rules"},
    }

    @app.post(
        "/api/v1/sessions/{session_id}/board/{avatar_id}",
        response_model=CommandResponse,
        responses=command_responses,
        tags=["Game"],
        summary="Board an avatar onto the boat",
    )
    async def board(session_id: str, avatar_id: str) -> Union[CommandResponse, JSONResponse]:
        return await run_command(session_id, api_service.board(session_id, avatar_id))

    @app.post(
        "/api/v1/sessions/{session_id}/disembark/{avatar_id}",
        response_model=CommandResponse,
        responses=command_responses,
        tags=["Game"],
        summary="Move an avatar from the boat to the dock",
    )
    async def disembark(session_id: str, avatar_id: str) -> Union[CommandResponse, JSONResponse]:
        return await run_command(session_id, api_service.disembark(session_id, avatar_id))

    @app.post(
        "/api/v1/sessions/{session_id}/launch",
        response_model=CommandResponse,
        responses=command_responses,
        tags=["Game"],
        summary="Launch the boat to the other shore",
    )
    async def launch(session_id: str) -> Union[CommandResponse, JSONResponse]:
        """
        Start a voyage. The response includes `voyage.duration_seconds`;
        call `/complete` once the crossing animation is done.
        """
        return await run_command(session_id, api_service.launch(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/complete",
        response_model=CommandResponse,
        responses=command_responses,
        tags=["Game"],
        summary="Dock the boat and evaluate the outcome",
    )
    async def complete(session_id: str) -> Union[CommandResponse, JSONResponse]:
        return await run_command(session_id, api_service.complete_voyage(session_id))

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    async def broadcast_state(session_id: str):
        response = api_service.get_game_state(session_id)
        await flush_notifications(session_id)
        if not isinstance(response, ErrorResponse):
            await notify(session_id, NotificationType.STATE_UPDATE, response)

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        """
        WebSocket for real-time updates.

        Messages from server:
        - state_update: Game state changed
        - voyage_started: Boat left the shore
        - outcome: Game won or lost

        Messages from client:
        - ping: Keep-alive

        Unknown sessions are refused with close code 4404. The socket is
        closed when its session ends.
        """
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            await websocket.close(code=WS_SESSION_NOT_FOUND)
            return

        await websocket.accept()

        if session_id not in ws_connections:
            ws_connections[session_id] = []
        ws_connections[session_id].append(websocket)

        try:
            await websocket.send_json(Notification(
                type=NotificationType.STATE_UPDATE,
                payload=response.model_dump(mode="json"),
            ).model_dump(mode="json"))
            await flush_notifications(session_id)

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                    if message.get("type") == "ping":
                        await websocket.send_json({"type": "pong"})
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })

        except WebSocketDisconnect:
            pass
        finally:
            if session_id in ws_connections:
                if websocket in ws_connections[session_id]:
                    ws_connections[session_id].remove(websocket)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="crossing-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Crossing Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn crossing.api.app:app
app = create_app()
