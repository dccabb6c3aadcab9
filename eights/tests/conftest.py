"""
Pytest fixtures for Eights tests.
"""

import random

import pytest

from ..engine_core.cards import Card, Suit, Rank, ordered_deck
from ..engine_core.setup import setup_game
from ..engine_core.state import GameState, GameStatus, Side, Zone
from ..session import SessionManager, GameLoop


def cards(*card_ids: str) -> tuple[Card, ...]:
    """Cards from ids, e.g. cards("HEARTS-7", "SPADES-K")."""
    return tuple(Card.from_id(card_id) for card_id in card_ids)


def make_state(
    player: tuple[str, ...] = (),
    ai: tuple[str, ...] = (),
    discard: tuple[str, ...] = ("CLUBS-5",),
    deck: tuple[str, ...] | None = None,
    turn: Side = Side.PLAYER,
    status: GameStatus = GameStatus.PLAYING,
    active_suit: Suit | None = None,
    active_rank: Rank | None = None,
) -> GameState:
    """
    Build a PLAYING state with chosen hands.

    When deck is None the deck holds every card not placed elsewhere,
    so the four zones always add up to 52. Active suit/rank default
    to the top discard.
    """
    player_cards = cards(*player)
    ai_cards = cards(*ai)
    discard_cards = cards(*discard)

    if deck is None:
        used = set(player_cards) | set(ai_cards) | set(discard_cards)
        deck_cards = tuple(c for c in ordered_deck() if c not in used)
    else:
        deck_cards = cards(*deck)

    top = discard_cards[0]
    return GameState(
        deck=Zone(name="deck", cards=deck_cards),
        player_hand=Zone(name="player_hand", cards=player_cards),
        ai_hand=Zone(name="ai_hand", cards=ai_cards),
        discard_pile=Zone(name="discard_pile", cards=discard_cards),
        active_suit=active_suit or top.suit,
        active_rank=active_rank or top.rank,
        turn=turn,
        status=status,
    )


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def dealt_state(rng) -> GameState:
    """A freshly dealt game."""
    return setup_game(rng)


@pytest.fixture
def session_manager() -> SessionManager:
    return SessionManager()


@pytest.fixture
def session(session_manager):
    """A session with a seeded deal, not yet started."""
    return session_manager.create_session(human_player_name="Tester", random_seed=42)


@pytest.fixture
def game_loop(session) -> GameLoop:
    """A game loop with a dealt game and no opponent delay."""
    loop = GameLoop(session, ai_delay=0)
    loop.new_game()
    return loop
