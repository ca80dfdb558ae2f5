"""
FastAPI Application - REST API for game clients.

Endpoints:
    GET    /api/v1/catalog                    Difficulty tiers, goals, events
    POST   /api/v1/sessions                   Create game session
    GET    /api/v1/sessions                   List active sessions
    GET    /api/v1/sessions/{id}              Get session status
    DELETE /api/v1/sessions/{id}              End session
    GET    /api/v1/sessions/{id}/state        Get game state
    GET    /api/v1/sessions/{id}/actions      Legal actions
    POST   /api/v1/sessions/{id}/actions      Apply one action
    GET    /api/v1/sessions/{id}/result       Outcome and lessons
    POST   /api/v1/sessions/{id}/reset        Restart the game
    POST   /api/v1/sessions/{id}/save         Save now
    GET    /api/v1/sessions/{id}/export       Current game as a save document
    POST   /api/v1/sessions/{id}/load         Replace the game with a save document

The service forwards one action at a time to the session's controller.
Games are saved automatically after each month ends.

Run with:
    uvicorn krishicash.api.app:create_app --factory
"""

from typing import Optional, Union

from ..config import Settings


def create_app(service=None, settings: Optional[Settings] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import Body, FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .. import __version__
    from ..persistence.store import FileSaveStore
    from ..session import SessionManager
    from .service import APIService
    from .schemas import (
        # Request models
        ActionRequest,
        CreateSessionRequest,
        LoadGameRequest,
        # Response models
        ActionResponse,
        CatalogResponse,
        EndSessionResponse,
        ErrorResponse,
        GameResultResponse,
        GameStateResponse,
        HealthResponse,
        LegalActionsResponse,
        LoadGameResponse,
        SaveResponse,
        SessionListResponse,
        SessionResponse,
        # Enums
        ErrorCode,
    )

    settings = settings or Settings.from_env()

    app = FastAPI(
        title="KrishiCash API",
        description="""
Farm finance simulation - twelve months of income, expenses, savings,
insurance, loans and life events.

## Game Flow

1. `POST /sessions` to start
2. `GET /sessions/{id}/actions` lists what can be sent next
3. `POST /sessions/{id}/actions` applies one action and returns the new state

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_ACTION` | Action not allowed in this phase, or missing amount |
| `ACTION_REJECTED` | Allowed action whose preconditions failed (state unchanged) |
| `SAVE_FAILED` | Save store could not write the game |
| `VALIDATION_ERROR` | Save document failed validation |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Service instance
    if service is None:
        if settings.save_dir is not None:
            save_dir = settings.save_dir
            manager = SessionManager(
                store_factory=lambda session_id: FileSaveStore(save_dir=save_dir, slot=session_id)
            )
        else:
            manager = SessionManager()
        service = APIService(session_manager=manager, default_seed=settings.seed)
    api_service = service

    # =========================================================================
    # Error helpers
    # =========================================================================

    STATUS_CODES = {
        ErrorCode.SESSION_NOT_FOUND: 404,
        ErrorCode.SESSION_EXISTS: 409,
        ErrorCode.INVALID_ACTION: 400,
        ErrorCode.VALIDATION_ERROR: 422,
        ErrorCode.SAVE_FAILED: 503,
    }

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=STATUS_CODES.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(response):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Catalog
    # =========================================================================

    @app.get(
        "/api/v1/catalog",
        response_model=CatalogResponse,
        tags=["Catalog"],
        summary="Difficulty tiers, goals and events",
    )
    async def get_catalog() -> CatalogResponse:
        return api_service.get_catalog()

    # =========================================================================
    # Session Endpoints
    # =========================================================================
    # Handlers that can touch the save store are plain functions, so they
    # run in the threadpool instead of on the event loop.

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    def create_session(
        body: Optional[CreateSessionRequest] = Body(None),
    ) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new game session.

        Pass `resume=true` with a known `session_id` to continue its saved game.
        """
        return respond(api_service.create_session(body or CreateSessionRequest()))

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
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the current game state",
    )
    async def get_game_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.get_game_state(session_id))

    @app.get(
        "/api/v1/sessions/{session_id}/actions",
        response_model=LegalActionsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="List the actions allowed right now",
    )
    async def get_legal_actions(session_id: str) -> Union[LegalActionsResponse, JSONResponse]:
        return respond(api_service.get_legal_actions(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Action not allowed in this phase"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game"],
        summary="Apply one action",
    )
    def apply_action(
        session_id: str,
        body: ActionRequest,
    ) -> Union[ActionResponse, JSONResponse]:
        """
        Apply one player action.

        A rejected action (e.g. saving more than the balance) returns 200
        with `success=false`, `error_code=ACTION_REJECTED` and the unchanged
        state.
        """
        return respond(api_service.apply_action(session_id, body))

    @app.get(
        "/api/v1/sessions/{session_id}/result",
        response_model=GameResultResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Outcome and lessons",
    )
    async def get_result(session_id: str) -> Union[GameResultResponse, JSONResponse]:
        return respond(api_service.get_result(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/reset",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Restart the game and discard its save",
    )
    def reset_game(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        return respond(api_service.reset_game(session_id))

    # =========================================================================
    # Save Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/save",
        response_model=SaveResponse,
        responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
        tags=["Saves"],
        summary="Save the game now",
    )
    def save_game(session_id: str) -> Union[SaveResponse, JSONResponse]:
        return respond(api_service.save_game(session_id))

    @app.get(
        "/api/v1/sessions/{session_id}/export",
        responses={404: {"model": ErrorResponse}},
        tags=["Saves"],
        summary="Current game as a save document",
    )
    async def export_game(session_id: str):
        return respond(api_service.export_game(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/load",
        response_model=LoadGameResponse,
        responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
        tags=["Saves"],
        summary="Replace the game with a save document",
    )
    async def load_game(
        session_id: str,
        body: LoadGameRequest,
    ) -> Union[LoadGameResponse, JSONResponse]:
        return respond(api_service.load_game(session_id, body))

    # =========================================================================
    # System
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return api_service.health()

    @app.get("/", tags=["System"])
    async def root():
        return {
            "name": "KrishiCash API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
