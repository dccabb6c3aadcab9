"""
Rules - The single legality predicate and helpers built on it.

Both human input validation and the opponent's candidate filtering
go through is_playable unchanged.
"""

from __future__ import annotations
from collections import Counter
from typing import Iterable

from .cards import Card, Suit, SUITS
from .state import GameState, Zone


def is_playable(card: Card, state: GameState) -> bool:
    """An eight is always playable; otherwise suit or rank must match."""
    if card.is_eight:
        return True
    return card.suit == state.active_suit or card.rank == state.active_rank


def playable_cards(hand: Zone, state: GameState) -> list[Card]:
    """Playable cards of a hand, in hand order."""
    return [card for card in hand.cards if is_playable(card, state)]


def most_held_suit(cards: Iterable[Card]) -> Suit:
    """
    Suit with the highest count among cards.

    Ties go to the suit that comes first in enumeration order
    (HEARTS, DIAMONDS, CLUBS, SPADES). An empty hand yields HEARTS.
    """
    counts = Counter(card.suit for card in cards)
    best = SUITS[0]
    for suit in SUITS:
        if counts[suit] > counts[best]:
            best = suit
    return best
