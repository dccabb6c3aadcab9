"""
FastAPI Application - REST + WebSocket API for the presentation layer.

Endpoints:
    POST   /api/v1/sessions                      Create session and deal a game
    GET    /api/v1/sessions                      List active sessions
    GET    /api/v1/sessions/{id}                 Get session status
    DELETE /api/v1/sessions/{id}                 End session
    GET    /api/v1/sessions/{id}/state           Get table snapshot
    POST   /api/v1/sessions/{id}/new-game        Deal a fresh game
    POST   /api/v1/sessions/{id}/play            Play a card
    POST   /api/v1/sessions/{id}/select-suit     Declare a suit after an eight
    POST   /api/v1/sessions/{id}/draw            Draw a card
    POST   /api/v1/sessions/{id}/ai-turn         Run a due opponent turn now
    WS     /api/v1/sessions/{id}/ws              Real-time state updates

Opponent Turn Flow:
    1. A human intent hands the turn to the opponent
    2. The response shows session_status=ai_thinking
    3. After EIGHTS_AI_DELAY seconds the opponent acts by itself
       and a state_update is pushed to WebSocket subscribers
    4. Starting a new game before that cancels the pending turn

Illegal moves are not HTTP errors: the response has accepted=false
and the unchanged snapshot.
"""

from typing import Union
import asyncio
import json

from ..config import Settings
from ..logging_config import get_logger, setup_logging
from .. import __version__


logger = get_logger("api")


def create_app(service=None, settings: Settings | None = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, WebSocket, WebSocketDisconnect, Query
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
        from fastapi.encoders import jsonable_encoder
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        PlayCardRequest,
        SelectSuitRequest,
        # Response models
        SessionResponse,
        GameStateResponse,
        ActionResponse,
        ErrorResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Eights Engine API",
        description="""
Crazy Eights against a computer opponent.

## Turn Flow

1. `POST /sessions` deals a game; the human moves first
2. `POST /play`, `/draw`, `/select-suit` submit the human's intents
3. When the turn passes to the opponent it acts after a short delay;
   subscribe to the WebSocket or poll `/state` to see its move

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `VALIDATION_ERROR` | Request body is invalid |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(settings=settings)

    # WebSocket connections
    ws_connections: dict[str, list[WebSocket]] = {}
    # Keeps broadcast tasks referenced until they finish
    broadcast_tasks: set[asyncio.Task] = set()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict | None = None,
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

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Invalid request",
            status_code=422,
            details={"errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return make_error_response(
            ErrorCode.INTERNAL_ERROR,
            "Internal server error",
            status_code=500,
        )

    def respond(response) -> Union[JSONResponse, object]:
        """Turn service-level ErrorResponses into HTTP errors."""
        if isinstance(response, ErrorResponse):
            return make_error_response(
                response.error_code, response.error, status_code=404
            )
        return response

    async def broadcast_to_session(session_id: str, message: dict):
        """Broadcast a message to all WebSocket connections for a session."""
        if session_id in ws_connections:
            dead_connections = []
            for ws in list(ws_connections[session_id]):
                try:
                    await ws.send_json(message)
                except Exception:
                    dead_connections.append(ws)
            for ws in dead_connections:
                if ws in ws_connections.get(session_id, []):
                    ws_connections[session_id].remove(ws)

    async def drop_connections(session_id: str):
        """Close and forget the WebSocket subscribers of an ended session."""
        for ws in ws_connections.pop(session_id, []):
            try:
                await ws.close()
            except Exception:
                logger.debug("WebSocket for session %s already closed", session_id)

    async def sweep_stale_sessions():
        for stale_id in api_service.cleanup_stale_sessions():
            logger.info("Removed stale session %s", stale_id)
            await drop_connections(stale_id)

    def on_state_change(session):
        """Push the new snapshot to subscribers of the session."""
        if session.session_id not in ws_connections:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        payload = api_service.build_game_state(session).model_dump(mode="json")
        task = loop.create_task(broadcast_to_session(session.session_id, {
            "type": "state_update",
            "payload": payload,
        }))
        broadcast_tasks.add(task)
        task.add_done_callback(broadcast_tasks.discard)

    api_service.add_listener(on_state_change)

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(request: CreateSessionRequest) -> SessionResponse:
        """
        Create a new session and deal the first game.

        Sessions older than EIGHTS_SESSION_MAX_AGE are removed first.
        `random_seed` gives a reproducible deal when EIGHTS_ENV=development.
        """
        await sweep_stale_sessions()
        return api_service.create_session(request)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str):
        """Get the current status of a game session."""
        return respond(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: str = Query("user_ended", description="Reason for ending"),
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        await drop_connections(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the table snapshot",
    )
    async def get_game_state(session_id: str):
        """Current snapshot. The opponent's hand is card backs only."""
        return respond(api_service.get_game_state(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/new-game",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Deal a fresh game",
    )
    async def new_game(session_id: str):
        """Discard the current game and deal a new one."""
        return respond(api_service.new_game(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/play",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Play a card",
    )
    async def play_card(session_id: str, request: PlayCardRequest):
        """
        Play a card from your hand.

        Rejected (accepted=false) unless it is your turn and the card
        matches the active suit or rank, or is an eight.
        """
        return respond(api_service.play_card(session_id, request.card_id))

    @app.post(
        "/api/v1/sessions/{session_id}/select-suit",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Declare a suit after an eight",
    )
    async def select_suit(session_id: str, request: SelectSuitRequest):
        """Only accepted while a suit choice is pending."""
        return respond(api_service.select_suit(session_id, request.suit))

    @app.post(
        "/api/v1/sessions/{session_id}/draw",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Draw a card",
    )
    async def draw_card(session_id: str):
        """
        Draw from the deck. Your turn continues after drawing.

        With an empty deck your turn is skipped instead.
        """
        return respond(api_service.draw_card(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/ai-turn",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Run the opponent's turn now",
    )
    async def ai_turn(session_id: str):
        """Skip the opponent's thinking delay."""
        return respond(api_service.run_ai_turn(session_id))

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        """
        WebSocket for real-time updates.

        Messages from server:
        - state_update: Game state changed
        - error: Error occurred

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()

        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            await websocket.send_json({
                "type": "error",
                "payload": response.model_dump(mode="json"),
            })
            await websocket.close()
            return

        ws_connections.setdefault(session_id, []).append(websocket)

        try:
            await websocket.send_json({
                "type": "state_update",
                "payload": response.model_dump(mode="json"),
            })

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })
                    continue
                if isinstance(message, dict) and message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})

        except WebSocketDisconnect:
            logger.debug("WebSocket closed for session %s", session_id)
        finally:
            subscribers = ws_connections.get(session_id, [])
            if websocket in subscribers:
                subscribers.remove(websocket)
            if session_id in ws_connections and not subscribers:
                del ws_connections[session_id]

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
        """Health check endpoint for load balancers."""
        return HealthResponse(version=__version__)

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Eights Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn eights.api.app:app
app = create_app()
