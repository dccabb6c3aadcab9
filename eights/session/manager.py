"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. User starts a session -> ephemeral session (in-memory only)
2. During the game the GameLoop owns the session's state
3. A new game inside the same session discards the previous state
4. Session ends -> removed from memory, pending opponent turn cancelled

PERSISTENCE RULES:
- NO database, NO files
- Game state never outlives its session
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import random
import time
import uuid

from ..bots import BotPolicy, EightsBot
from ..engine_core.state import GameState, GameStatus
from ..logging_config import get_logger


logger = get_logger("session")


class SessionState(Enum):
    """State of a game session."""
    CREATED = "created"  # Session created, no game dealt yet
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Game completed
    ABANDONED = "abandoned"  # User quit


@dataclass
class PendingAiTurn:
    """
    A scheduled opponent turn.

    Stamped with the session generation at scheduling time. It may only
    be applied while the generation is unchanged.
    """
    generation: int
    handle: Any | None = None  # asyncio.TimerHandle when armed on an event loop
    cancelled: bool = False

    def cancel(self):
        self.cancelled = True
        if self.handle is not None:
            self.handle.cancel()


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - Current game state (replaced, never mutated, on every transition)
    - The opponent bot
    - The generation counter and any pending opponent turn
    """
    session_id: str
    created_at: float

    state: SessionState = SessionState.CREATED
    game_state: GameState = field(default_factory=GameState.initial)

    bot: BotPolicy = field(default_factory=EightsBot)
    rng: random.Random = field(default_factory=random.Random)
    random_seed: int | None = None

    human_player_name: str = "Player"

    # Bumped on every accepted transition
    generation: int = 0
    pending_ai_turn: PendingAiTurn | None = None

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state in {SessionState.CREATED, SessionState.ACTIVE}

    def replace_state(self, new_state: GameState):
        """Swap in a new game state and advance the generation."""
        self.game_state = new_state
        self.generation += 1
        if new_state.status == GameStatus.GAME_OVER:
            self.state = SessionState.GAME_OVER
        elif new_state.status != GameStatus.START:
            self.state = SessionState.ACTIVE

    def cancel_pending_ai_turn(self):
        """Drop the scheduled opponent turn, if any."""
        if self.pending_ai_turn is not None:
            self.pending_ai_turn.cancel()
            self.pending_ai_turn = None


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions
    - Track active sessions
    - Clean up ended and stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        human_player_name: str = "Player",
        random_seed: int | None = None,
        bot: BotPolicy | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            human_player_name: Display name for the human
            random_seed: Seed for reproducible deals
            bot: Opponent policy (EightsBot by default)

        Returns:
            New Session, no game dealt yet
        """
        session_id = str(uuid.uuid4())

        session = Session(
            session_id=session_id,
            created_at=time.time(),
            bot=bot or EightsBot(),
            rng=random.Random(random_seed),
            random_seed=random_seed,
            human_player_name=human_player_name,
        )

        self._sessions[session_id] = session
        logger.info("Created session %s for %s", session_id, human_player_name)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        The session is removed from memory. Returns False if it did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False

        session.cancel_pending_ai_turn()
        if reason == "completed":
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED

        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: float = 3600) -> list[str]:
        """
        Remove sessions older than max_age_seconds.

        Returns the IDs that were removed.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")

        return to_remove
