"""
Game State - Immutable snapshot of a Crazy Eights game.

Design principles:
- Immutable: every transition returns a new state, stale references
  to an older snapshot are never partially updated
- Complete: the state alone is enough to render the table
- Zones are ordered tuples of cards with copy-on-write helpers
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum

from .cards import Card, Rank, Suit


WELCOME_MESSAGE = "Welcome to Crazy Eights!"


class GameStatus(Enum):
    """High-level game status."""
    START = "START"
    PLAYING = "PLAYING"
    SELECTING_SUIT = "SELECTING_SUIT"
    GAME_OVER = "GAME_OVER"


class Side(Enum):
    """The two sides at the table. Used for turn and winner."""
    PLAYER = "PLAYER"
    AI = "AI"

    @property
    def other(self) -> Side:
        return Side.AI if self is Side.PLAYER else Side.PLAYER


@dataclass(frozen=True)
class Zone:
    """
    An ordered group of cards: deck, hand or discard pile.

    All operations return a new zone.
    """
    name: str
    cards: tuple[Card, ...] = ()

    @property
    def count(self) -> int:
        return len(self.cards)

    @property
    def is_empty(self) -> bool:
        return len(self.cards) == 0

    @property
    def top_card(self) -> Card | None:
        """The front card. For the discard pile this is the most recent play."""
        return self.cards[0] if self.cards else None

    def add(self, card: Card) -> Zone:
        """Return new zone with card appended at the back."""
        return Zone(name=self.name, cards=self.cards + (card,))

    def push_front(self, card: Card) -> Zone:
        """Return new zone with card placed on the front."""
        return Zone(name=self.name, cards=(card,) + self.cards)

    def remove(self, card: Card) -> Zone:
        """Return new zone with card removed."""
        return Zone(name=self.name, cards=tuple(c for c in self.cards if c != card))

    def take_front(self, n: int = 1) -> tuple[tuple[Card, ...], Zone]:
        """Return (first n cards, remaining zone)."""
        return self.cards[:n], Zone(name=self.name, cards=self.cards[n:])

    def take_back(self) -> tuple[Card | None, Zone]:
        """Return (last card, remaining zone)."""
        if not self.cards:
            return None, self
        return self.cards[-1], Zone(name=self.name, cards=self.cards[:-1])

    def find(self, card_id: str) -> Card | None:
        """Find a card by id."""
        for card in self.cards:
            if card.card_id == card_id:
                return card
        return None


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    This is the single source of truth. All changes go through the reducer.
    active_suit and active_rank are only meaningful while the status is
    PLAYING or SELECTING_SUIT.
    """
    deck: Zone = field(default_factory=lambda: Zone(name="deck"))
    player_hand: Zone = field(default_factory=lambda: Zone(name="player_hand"))
    ai_hand: Zone = field(default_factory=lambda: Zone(name="ai_hand"))
    discard_pile: Zone = field(default_factory=lambda: Zone(name="discard_pile"))

    active_suit: Suit | None = None
    active_rank: Rank | None = None

    turn: Side = Side.PLAYER
    status: GameStatus = GameStatus.START
    winner: Side | None = None

    # Human-readable description of the last transition
    message: str = WELCOME_MESSAGE

    @classmethod
    def initial(cls) -> GameState:
        """The pre-deal state."""
        return cls()

    @property
    def top_card(self) -> Card | None:
        return self.discard_pile.top_card

    @property
    def is_over(self) -> bool:
        return self.status == GameStatus.GAME_OVER

    @property
    def total_cards(self) -> int:
        """Cards across all four zones. Always 52 once dealt."""
        return (
            self.deck.count
            + self.player_hand.count
            + self.ai_hand.count
            + self.discard_pile.count
        )

    def hand_of(self, side: Side) -> Zone:
        return self.player_hand if side == Side.PLAYER else self.ai_hand

    def with_hand(self, side: Side, hand: Zone) -> GameState:
        """Return new state with side's hand replaced."""
        if side == Side.PLAYER:
            return self._copy_with(player_hand=hand)
        return self._copy_with(ai_hand=hand)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
