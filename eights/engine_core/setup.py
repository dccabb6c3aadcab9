"""
Game Setup - Creates the initial dealt state.

This module handles:
- Creating and shuffling the deck (seedable for determinism)
- Dealing both hands from the front of the deck
- Choosing the opening discard
"""

from __future__ import annotations
import random

from .cards import Card, create_deck
from .state import GameState, GameStatus, Side, Zone


HAND_SIZE = 8
DECK_SIZE = 52

START_MESSAGE = "Your turn! Match the suit or rank."


def setup_game(rng: random.Random | None = None) -> GameState:
    """
    Deal a fresh game.

    Args:
        rng: Random source for the shuffle (seed it for reproducible deals)

    Returns:
        GameState in PLAYING with the player to move
    """
    deck = create_deck(rng)
    return deal_from(deck)


def deal_from(cards: list[Card]) -> GameState:
    """
    Deal a game from an already ordered deck.

    The player takes the first eight cards, the opponent the next eight.
    The opening discard is the first remaining card that is not an eight;
    if every remaining card is an eight, the first remaining card is used.
    """
    if len(cards) <= HAND_SIZE * 2:
        raise ValueError(f"Need more than {HAND_SIZE * 2} cards to deal, got {len(cards)}")

    deck = Zone(name="deck", cards=tuple(cards))
    player_cards, deck = deck.take_front(HAND_SIZE)
    ai_cards, deck = deck.take_front(HAND_SIZE)

    first_discard = _opening_discard(deck)
    deck = deck.remove(first_discard)

    return GameState(
        deck=deck,
        player_hand=Zone(name="player_hand", cards=player_cards),
        ai_hand=Zone(name="ai_hand", cards=ai_cards),
        discard_pile=Zone(name="discard_pile", cards=(first_discard,)),
        active_suit=first_discard.suit,
        active_rank=first_discard.rank,
        turn=Side.PLAYER,
        status=GameStatus.PLAYING,
        winner=None,
        message=START_MESSAGE,
    )


def _opening_discard(deck: Zone) -> Card:
    """Eights may not open the discard pile unless nothing else is left."""
    for card in deck.cards:
        if not card.is_eight:
            return card
    return deck.cards[0]
