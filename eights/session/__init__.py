"""
Session Module - Manages ephemeral game sessions.

A session represents one player's seat at the table:
- Created when the user opens a game
- Holds the current game state
- Runs the opponent's deferred turns
- Destroyed when the user leaves

Sessions are EPHEMERAL: no persistence of any kind.
"""

from .manager import SessionManager, Session, SessionState, PendingAiTurn
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "PendingAiTurn",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
