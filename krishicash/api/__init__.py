"""
API Module - Client interface.

Exposes the engine via REST API. A client:
1. Creates a game session
2. Asks which actions are legal
3. Sends one action at a time and renders the returned state
4. Saves, exports or loads games

Sessions live in memory; games are saved per session after each month.
"""

from .schemas import (
    # Requests
    ActionRequest,
    CreateSessionRequest,
    LoadGameRequest,
    # Responses
    ActionResponse,
    CatalogResponse,
    ErrorResponse,
    GameResultResponse,
    GameStateResponse,
    LegalActionsResponse,
    LoadGameResponse,
    SaveResponse,
    SessionResponse,
    # Enums
    ErrorCode,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "ActionRequest",
    "CreateSessionRequest",
    "LoadGameRequest",
    # Responses
    "ActionResponse",
    "CatalogResponse",
    "ErrorResponse",
    "GameResultResponse",
    "GameStateResponse",
    "LegalActionsResponse",
    "LoadGameResponse",
    "SaveResponse",
    "SessionResponse",
    # Enums
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
