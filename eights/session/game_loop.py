"""
Game Loop - Drives one session's game.

The loop:
1. Human intent arrives (play, draw, pick a suit, new game)
2. Reducer validates and applies it
3. Session state is replaced and the generation advances
4. If the opponent is now to move, its turn is scheduled after a delay
5. When the scheduled turn fires it is applied only if nothing
   superseded it in the meantime

Inside an asyncio event loop the opponent's turn is armed with
call_later. Without one (CLI, tests) the caller runs it with
run_pending_ai_turn() once the delay has elapsed.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, TYPE_CHECKING
import asyncio

from ..config import DEFAULT_AI_DELAY_SECONDS
from ..engine_core.action import Action
from ..engine_core.action_generator import legal_actions
from ..engine_core.cards import Suit
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameStatus, Side
from ..logging_config import get_logger
from .manager import PendingAiTurn

if TYPE_CHECKING:
    from .manager import Session


class LoopState(Enum):
    """State of the game loop, as seen by the presentation layer."""
    NOT_STARTED = "not_started"
    WAITING_HUMAN_ACTION = "waiting_human_action"
    WAITING_SUIT_CHOICE = "waiting_suit_choice"
    AI_THINKING = "ai_thinking"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of processing an intent.

    A rejected intent leaves the game state unchanged.
    """
    accepted: bool
    loop_state: LoopState
    message: str = ""

    changes: list[str] = field(default_factory=list)
    ai_actions: list[str] = field(default_factory=list)

    errors: list[str] = field(default_factory=list)
    error_code: str | None = None

    winner: str | None = None


StateListener = Callable[["Session"], None]


class GameLoop:
    """
    The single owner of a session's game state.

    Usage:
        loop = GameLoop(session, ai_delay=1.5)
        loop.new_game()

        result = loop.play_card("HEARTS-7")
        if result.loop_state == LoopState.AI_THINKING:
            # inside asyncio: fires by itself after ai_delay
            # otherwise:
            pending = session.pending_ai_turn
            time.sleep(loop.ai_delay)
            loop.run_pending_ai_turn(pending)
    """

    def __init__(
        self,
        session: Session,
        ai_delay: float = DEFAULT_AI_DELAY_SECONDS,
        reducer: Reducer | None = None,
    ):
        self.session = session
        self.ai_delay = ai_delay
        self.reducer = reducer or Reducer(rng=session.rng)
        self.listeners: list[StateListener] = []
        self.logger = get_logger("game_loop", session.session_id)

    @property
    def state(self) -> LoopState:
        game_state = self.session.game_state
        if game_state.status == GameStatus.START:
            return LoopState.NOT_STARTED
        if game_state.status == GameStatus.GAME_OVER:
            return LoopState.GAME_OVER
        if game_state.status == GameStatus.SELECTING_SUIT:
            return LoopState.WAITING_SUIT_CHOICE
        if game_state.turn == Side.AI:
            return LoopState.AI_THINKING
        return LoopState.WAITING_HUMAN_ACTION

    def add_listener(self, listener: StateListener):
        """Call listener(session) after every accepted transition."""
        self.listeners.append(listener)

    # =========================================================================
    # Human intents
    # =========================================================================

    def new_game(self) -> TurnResult:
        """Deal a fresh game. Any scheduled opponent turn is cancelled."""
        self.session.cancel_pending_ai_turn()
        return self._dispatch(Action.init_game())

    def play_card(self, card_id: str) -> TurnResult:
        return self._dispatch(Action.play_card(Side.PLAYER, card_id))

    def select_suit(self, suit: Suit) -> TurnResult:
        return self._dispatch(Action.select_suit(suit))

    def draw_card(self) -> TurnResult:
        return self._dispatch(Action.draw_card(Side.PLAYER))

    # =========================================================================
    # Opponent turn
    # =========================================================================

    def run_ai_turn(self) -> TurnResult:
        """
        Let the opponent act now.

        Rejected unless it is the opponent's turn in PLAYING.
        """
        game_state = self.session.game_state
        if game_state.turn != Side.AI or game_state.status != GameStatus.PLAYING:
            return self._rejected("Not the opponent's turn", "NOT_YOUR_TURN")

        self.session.cancel_pending_ai_turn()

        decision = self.session.bot.select_action(game_state, legal_actions(game_state))
        self.logger.debug("Bot decision: %s", decision.explanation)

        result = self._dispatch(decision.action)
        if result.accepted:
            result.ai_actions.append(decision.action.describe())
        return result

    def run_pending_ai_turn(self, pending: PendingAiTurn | None) -> TurnResult:
        """
        Apply a scheduled opponent turn if it is still current.

        A token that was cancelled, replaced or outlived by a newer state
        generation is discarded without touching the state.
        """
        if (
            pending is None
            or pending.cancelled
            or pending is not self.session.pending_ai_turn
            or pending.generation != self.session.generation
        ):
            self.logger.debug("Discarding stale opponent turn")
            return self._rejected("Scheduled opponent turn was superseded", "STALE_TURN")

        return self.run_ai_turn()

    def _schedule_ai_turn(self):
        """Schedule the opponent if it is now to move."""
        self.session.cancel_pending_ai_turn()

        game_state = self.session.game_state
        if game_state.turn != Side.AI or game_state.status != GameStatus.PLAYING:
            return

        pending = PendingAiTurn(generation=self.session.generation)
        self.session.pending_ai_turn = pending

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop: the caller drives the turn
            return
        pending.handle = loop.call_later(self.ai_delay, self.run_pending_ai_turn, pending)

    # =========================================================================
    # Internals
    # =========================================================================

    def _dispatch(self, action: Action) -> TurnResult:
        """Apply an action and, if accepted, replace the session state."""
        result = self.reducer.apply(self.session.game_state, action)

        if not result.success:
            self.logger.debug("Rejected %s: %s", action.describe(), result.error)
            return self._rejected(result.error, result.error_code)

        self.session.replace_state(result.new_state)
        for change in result.state_changes:
            self.logger.info(change)

        self._schedule_ai_turn()
        self._notify()

        game_state = self.session.game_state
        return TurnResult(
            accepted=True,
            loop_state=self.state,
            message=game_state.message,
            changes=list(result.state_changes),
            winner=game_state.winner.value if game_state.winner else None,
        )

    def _rejected(self, error: str, error_code: str | None) -> TurnResult:
        return TurnResult(
            accepted=False,
            loop_state=self.state,
            message=self.session.game_state.message,
            errors=[error],
            error_code=error_code,
        )

    def _notify(self):
        for listener in self.listeners:
            listener(self.session)
