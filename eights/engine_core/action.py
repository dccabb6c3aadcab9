"""
Action System - Actions, payloads, and results.

Actions represent the intents that drive the game:
1. Game setup (deal a fresh game)
2. Playing a card
3. Declaring a suit after a player's eight
4. Drawing a card

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .cards import Suit
from .state import Side


class ActionType(Enum):
    """Types of actions in the system."""
    INIT_GAME = "init_game"
    PLAY_CARD = "play_card"
    SELECT_SUIT = "select_suit"
    DRAW_CARD = "draw_card"


class ErrorCode:
    """Rejection codes carried by failed ActionResults."""
    GAME_NOT_STARTED = "GAME_NOT_STARTED"
    GAME_OVER = "GAME_OVER"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    WRONG_PHASE = "WRONG_PHASE"
    CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
    ILLEGAL_CARD = "ILLEGAL_CARD"
    SUIT_REQUIRED = "SUIT_REQUIRED"
    INVALID_ACTION = "INVALID_ACTION"


@dataclass(frozen=True)
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields; validation happens
    in the reducer.
    """
    side: Side | None = None
    card_id: str | None = None
    # Declared suit: for SELECT_SUIT, and for the opponent's eights
    suit: Suit | None = None


@dataclass(frozen=True)
class Action:
    """
    A complete action to be applied to the game state.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @property
    def side(self) -> Side | None:
        return self.payload.side

    @classmethod
    def init_game(cls) -> Action:
        """Factory for dealing a fresh game."""
        return cls(action_type=ActionType.INIT_GAME)

    @classmethod
    def play_card(cls, side: Side, card_id: str, suit: Suit | None = None) -> Action:
        """Factory for play action. suit is only used by the opponent's eights."""
        return cls(
            action_type=ActionType.PLAY_CARD,
            payload=ActionPayload(side=side, card_id=card_id, suit=suit),
        )

    @classmethod
    def select_suit(cls, suit: Suit, side: Side = Side.PLAYER) -> Action:
        """Factory for declaring a suit after an eight."""
        return cls(
            action_type=ActionType.SELECT_SUIT,
            payload=ActionPayload(side=side, suit=suit),
        )

    @classmethod
    def draw_card(cls, side: Side) -> Action:
        """Factory for draw action."""
        return cls(
            action_type=ActionType.DRAW_CARD,
            payload=ActionPayload(side=side),
        )

    def describe(self) -> str:
        parts = [self.action_type.value]
        if self.payload.side:
            parts.append(self.payload.side.value)
        if self.payload.card_id:
            parts.append(self.payload.card_id)
        if self.payload.suit:
            parts.append(self.payload.suit.value)
        return " ".join(parts)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (if succeeded)
    - Errors (if rejected)
    - Human-readable changes (for logs and UI)
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            state_changes=changes or [],
        )
