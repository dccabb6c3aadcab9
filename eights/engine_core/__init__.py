"""
Engine Core - Crazy Eights rules and state transitions.

The engine is the runtime that:
1. Builds and deals the deck
2. Holds the immutable GameState
3. Decides which moves are legal
4. Applies actions via the reducer
"""

from .cards import Card, Suit, Rank, SUITS, RANKS, SUIT_SYMBOLS, shuffle, create_deck
from .state import GameState, GameStatus, Side, Zone
from .action import Action, ActionType, ActionPayload, ActionResult, ErrorCode
from .rules import is_playable, playable_cards, most_held_suit
from .setup import setup_game, deal_from, HAND_SIZE, DECK_SIZE
from .reducer import Reducer, apply_action
from .action_generator import ActionGenerator, legal_actions

__all__ = [
    "Card",
    "Suit",
    "Rank",
    "SUITS",
    "RANKS",
    "SUIT_SYMBOLS",
    "shuffle",
    "create_deck",
    "GameState",
    "GameStatus",
    "Side",
    "Zone",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "ErrorCode",
    "is_playable",
    "playable_cards",
    "most_held_suit",
    "setup_game",
    "deal_from",
    "HAND_SIZE",
    "DECK_SIZE",
    "Reducer",
    "apply_action",
    "ActionGenerator",
    "legal_actions",
]
