"""
API Module - Presentation-layer interface.

Exposes the engine to a client (web UI, mobile app):
1. Create a session and deal a game
2. Submit intents: play, draw, pick a suit, new game
3. Receive snapshots with the opponent's cards hidden

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    PlayCardRequest,
    SelectSuitRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    ActionResponse,
    ErrorResponse,
    # Shared
    CardInfo,
)
from .service import APIService

__all__ = [
    # Requests
    "CreateSessionRequest",
    "PlayCardRequest",
    "SelectSuitRequest",
    # Responses
    "SessionResponse",
    "GameStateResponse",
    "ActionResponse",
    "ErrorResponse",
    # Shared
    "CardInfo",
    # Service
    "APIService",
]
