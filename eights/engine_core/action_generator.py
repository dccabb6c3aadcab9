"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. The opponent bot to enumerate possible moves
2. The presentation layer to highlight playable cards

Design: Generates Action objects, not just action types.
This ensures all generated actions are fully specified.
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import Action
from .cards import SUITS
from .rules import playable_cards
from .state import GameState, GameStatus, Side


@dataclass
class ActionGenerator:
    """
    Generates legal actions for the side to move.
    """

    def generate(self, state: GameState) -> list[Action]:
        """
        Generate all legal actions for the side whose turn it is.

        Returns a list of fully-specified Action objects.
        """
        if state.status in (GameStatus.START, GameStatus.GAME_OVER):
            return []

        if state.status == GameStatus.SELECTING_SUIT:
            return [Action.select_suit(suit, side=state.turn) for suit in SUITS]

        actions = self._generate_play_actions(state, state.turn)
        actions.append(Action.draw_card(state.turn))
        return actions

    def _generate_play_actions(self, state: GameState, side: Side) -> list[Action]:
        """One play per playable card, in hand order."""
        actions = []
        for card in playable_cards(state.hand_of(side), state):
            if card.is_eight and side == Side.AI:
                # The opponent declares its suit with the play itself
                actions.extend(
                    Action.play_card(side, card.card_id, suit=suit) for suit in SUITS
                )
            else:
                actions.append(Action.play_card(side, card.card_id))
        return actions


def legal_actions(state: GameState) -> list[Action]:
    """Convenience function to generate legal actions."""
    return ActionGenerator().generate(state)
