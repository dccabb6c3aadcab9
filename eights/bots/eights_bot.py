"""
Eights Bot - The computer opponent.

The policy is deliberately simple and deterministic:
- Play the first playable non-eight card in hand order
- Fall back to the first eight when only eights are playable
- After an eight, declare the suit held most in the remaining hand
- Draw (and pass) when nothing is playable

The bot does NOT:
- Look ahead or track the player's hand
- Randomize between equal moves
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .policy import BotPolicy, BotDecision
from ..engine_core.action import ActionType
from ..engine_core.rules import most_held_suit

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..engine_core.action import Action
    from ..engine_core.cards import Card


@dataclass
class EightsBot(BotPolicy):
    """
    Opponent policy for Crazy Eights.

    Usage:
        bot = EightsBot()
        decision = bot.select_action(state, legal_actions(state))
        result = apply_action(state, decision.action)
    """

    def select_action(
        self,
        state: GameState,
        legal_actions: list[Action],
    ) -> BotDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        plays = [a for a in legal_actions if a.action_type == ActionType.PLAY_CARD]
        if not plays:
            draw = next(
                (a for a in legal_actions if a.action_type == ActionType.DRAW_CARD),
                None,
            )
            if draw is None:
                raise ValueError("Neither a play nor a draw is available")
            return BotDecision(
                action=draw,
                explanation="No playable card, drawing",
                evaluated_actions=len(legal_actions),
            )

        hand = state.hand_of(plays[0].side)
        card = self._choose_card(hand.cards, {a.payload.card_id for a in plays})

        if not card.is_eight:
            action = next(a for a in plays if a.payload.card_id == card.card_id)
            return BotDecision(
                action=action,
                explanation=f"Playing {card.card_id}",
                evaluated_actions=len(legal_actions),
            )

        remaining = [c for c in hand.cards if c != card]
        suit = self.choose_suit(remaining)
        action = next(
            a for a in plays
            if a.payload.card_id == card.card_id and a.payload.suit == suit
        )
        return BotDecision(
            action=action,
            explanation=f"Playing {card.card_id} and declaring {suit.value}",
            evaluated_actions=len(legal_actions),
        )

    def _choose_card(self, hand: tuple[Card, ...], playable_ids: set[str]) -> Card:
        """First playable non-eight in hand order, else the first playable eight."""
        candidates = [c for c in hand if c.card_id in playable_ids]
        for card in candidates:
            if not card.is_eight:
                return card
        return candidates[0]

    def choose_suit(self, remaining: list[Card]):
        """Suit held most after the play; ties by enumeration order."""
        return most_held_suit(remaining)
