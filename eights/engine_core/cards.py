"""
Cards - Suits, ranks, card identity and deck construction.

A standard 52-card deck. Rank order is only used for display and for
building the deck in a fixed order; gameplay compares ranks for equality.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import random


class Suit(Enum):
    """Card suits, in enumeration order."""
    HEARTS = "HEARTS"
    DIAMONDS = "DIAMONDS"
    CLUBS = "CLUBS"
    SPADES = "SPADES"


class Rank(Enum):
    """Card ranks. Values are the short labels used in card ids."""
    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"


SUITS: tuple[Suit, ...] = (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)
RANKS: tuple[Rank, ...] = tuple(Rank)

SUIT_SYMBOLS: dict[Suit, str] = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}


@dataclass(frozen=True)
class Card:
    """
    A playing card. Immutable; identity is suit x rank.
    """
    suit: Suit
    rank: Rank

    @property
    def card_id(self) -> str:
        """Stable identity string, e.g. HEARTS-A or SPADES-10."""
        return f"{self.suit.value}-{self.rank.value}"

    @property
    def is_eight(self) -> bool:
        return self.rank is Rank.EIGHT

    @property
    def label(self) -> str:
        """Short display label, e.g. 10♠."""
        return f"{self.rank.value}{SUIT_SYMBOLS[self.suit]}"

    @classmethod
    def from_id(cls, card_id: str) -> Card:
        """Parse a card id produced by card_id."""
        suit_value, sep, rank_value = card_id.partition("-")
        if not sep:
            raise ValueError(f"Invalid card id: {card_id}")
        return cls(suit=Suit(suit_value), rank=Rank(rank_value))

    def __str__(self) -> str:
        return self.label


_default_rng = random.Random()


def shuffle(cards, rng: random.Random | None = None) -> list:
    """
    Return a uniformly random permutation of cards.

    Fisher-Yates backward pass: for i from the last index down to 1, swap
    element i with an element chosen uniformly from 0..i inclusive.
    The input sequence is left untouched.
    """
    rng = rng or _default_rng
    result = list(cards)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def ordered_deck() -> list[Card]:
    """All 52 cards, suits outer and ranks inner, in enumeration order."""
    return [Card(suit=suit, rank=rank) for suit in SUITS for rank in RANKS]


def create_deck(rng: random.Random | None = None) -> list[Card]:
    """Build a full deck and shuffle it."""
    return shuffle(ordered_deck(), rng)
