"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to game loop intents
2. Manages sessions and their game loops
3. Builds client-safe snapshots (opponent cards hidden)

This layer is framework-agnostic (can be used with FastAPI, a CLI, tests).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable

from .schemas import (
    # Requests
    CreateSessionRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    ActionResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    # Enums
    ErrorCode,
    GameStatusName,
    SessionStatus,
    SideName,
    SuitName,
)
from ..config import Settings
from ..engine_core.action import ActionType
from ..engine_core.action_generator import legal_actions
from ..engine_core.cards import Card, Suit
from ..engine_core.state import GameStatus, Side
from ..logging_config import get_logger
from ..session import SessionManager, Session, SessionState, GameLoop, LoopState, TurnResult


logger = get_logger("service")


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        session = service.create_session(CreateSessionRequest())
        response = service.play_card(session.session_id, "HEARTS-7")
        snapshot = service.get_game_state(session.session_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    settings: Settings = field(default_factory=Settings)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    # Called with the session after every accepted transition
    _listeners: list[Callable[[Session], None]] = field(default_factory=list)

    def add_listener(self, listener: Callable[[Session], None]):
        """Register a callback for state changes in any session."""
        self._listeners.append(listener)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """
        Create a new session and deal its first game.

        The client seed is only honored in development.
        """
        seed = request.random_seed
        if seed is not None and not self.settings.allows_client_seed:
            logger.warning("Ignoring client seed outside development (env=%s)", self.settings.env)
            seed = None

        session = self.session_manager.create_session(
            human_player_name=request.human_player_name,
            random_seed=seed,
        )

        game_loop = GameLoop(session, ai_delay=self.settings.ai_delay)
        game_loop.add_listener(self._notify_listeners)
        self._game_loops[session.session_id] = game_loop

        game_loop.new_game()
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """
        Get session status.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """
        Get the current snapshot.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self.build_game_state(session)

    def new_game(self, session_id: str) -> ActionResponse | ErrorResponse:
        """Deal a fresh game in an existing session."""
        return self._run(session_id, lambda loop: loop.new_game())

    def play_card(self, session_id: str, card_id: str) -> ActionResponse | ErrorResponse:
        return self._run(session_id, lambda loop: loop.play_card(card_id))

    def select_suit(self, session_id: str, suit: SuitName) -> ActionResponse | ErrorResponse:
        return self._run(session_id, lambda loop: loop.select_suit(Suit(suit.value)))

    def draw_card(self, session_id: str) -> ActionResponse | ErrorResponse:
        return self._run(session_id, lambda loop: loop.draw_card())

    def run_ai_turn(self, session_id: str) -> ActionResponse | ErrorResponse:
        """Let the opponent act now instead of waiting for its delay."""
        return self._run(session_id, lambda loop: loop.run_ai_turn())

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """
        End a game session.
        """
        self._game_loops.pop(session_id, None)
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """
        List active session IDs.
        """
        return self.session_manager.list_active_sessions()

    def cleanup_stale_sessions(self) -> list[str]:
        """Drop sessions older than the configured maximum age."""
        removed = self.session_manager.cleanup_stale_sessions(self.settings.session_max_age)
        for session_id in removed:
            self._game_loops.pop(session_id, None)
        return removed

    # =========================================================================
    # Snapshot building
    # =========================================================================

    def build_game_state(self, session: Session) -> GameStateResponse:
        """
        Build the client-safe snapshot of a session's game.

        The opponent's hand is reduced to card backs.
        """
        state = session.game_state
        in_play = state.status in (GameStatus.PLAYING, GameStatus.SELECTING_SUIT)

        legal = legal_actions(state) if state.turn == Side.PLAYER else []
        playable_ids = [
            a.payload.card_id for a in legal if a.action_type == ActionType.PLAY_CARD
        ]

        return GameStateResponse(
            session_id=session.session_id,
            generation=session.generation,
            status=GameStatusName(state.status.value),
            session_status=self._session_status(session),
            turn=SideName(state.turn.value),
            winner=SideName(state.winner.value) if state.winner else None,
            message=state.message,
            deck_size=state.deck.count,
            player_hand=[self._card_info(c) for c in state.player_hand.cards],
            opponent_hand=[CardInfo(face_up=False) for _ in state.ai_hand.cards],
            opponent_card_count=state.ai_hand.count,
            discard_top=self._card_info(state.top_card) if state.top_card else None,
            discard_size=state.discard_pile.count,
            active_suit=SuitName(state.active_suit.value) if in_play and state.active_suit else None,
            active_rank=state.active_rank.value if in_play and state.active_rank else None,
            playable_card_ids=playable_ids,
            can_draw=any(a.action_type == ActionType.DRAW_CARD for a in legal),
        )

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _run(
        self,
        session_id: str,
        intent: Callable[[GameLoop], TurnResult],
    ) -> ActionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        game_loop = self._game_loops.get(session_id)
        if not session or not game_loop:
            return self._not_found(session_id)

        result = intent(game_loop)
        return ActionResponse(
            session_id=session_id,
            accepted=result.accepted,
            loop_state=result.loop_state.value,
            message=result.message,
            error=result.errors[0] if result.errors else None,
            error_code=result.error_code,
            changes=result.changes,
            ai_actions=result.ai_actions,
            game_state=self.build_game_state(session),
        )

    def _notify_listeners(self, session: Session):
        for listener in self._listeners:
            listener(session)

    def _session_to_response(self, session: Session) -> SessionResponse:
        """Convert Session to SessionResponse."""
        return SessionResponse(
            session_id=session.session_id,
            status=self._session_status(session),
            human_player_name=session.human_player_name,
            created_at=session.created_at,
            generation=session.generation,
            game_state=self.build_game_state(session),
        )

    def _session_status(self, session: Session) -> SessionStatus:
        """Convert session and loop state to API status."""
        if session.state == SessionState.ABANDONED:
            return SessionStatus.ABANDONED

        game_loop = self._game_loops.get(session.session_id)
        loop_state = game_loop.state if game_loop else LoopState.NOT_STARTED
        mapping = {
            LoopState.NOT_STARTED: SessionStatus.CREATED,
            LoopState.WAITING_HUMAN_ACTION: SessionStatus.YOUR_TURN,
            LoopState.WAITING_SUIT_CHOICE: SessionStatus.CHOOSE_SUIT,
            LoopState.AI_THINKING: SessionStatus.AI_THINKING,
            LoopState.GAME_OVER: SessionStatus.GAME_OVER,
        }
        return mapping.get(loop_state, SessionStatus.CREATED)

    @staticmethod
    def _card_info(card: Card) -> CardInfo:
        return CardInfo(
            face_up=True,
            card_id=card.card_id,
            suit=SuitName(card.suit.value),
            rank=card.rank.value,
            label=card.label,
        )

    @staticmethod
    def _not_found(session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )
