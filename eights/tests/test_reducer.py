"""
Tests for the reducer (state transitions).

Tests:
- Dealing and the opening discard
- Plays, eights and suit selection
- Draw and skip behavior for both sides
- Validation and rejection codes
- Card conservation across a whole game
"""

import random

import pytest

from ..bots import EightsBot
from ..engine_core.action import Action, ErrorCode
from ..engine_core.action_generator import legal_actions
from ..engine_core.cards import Card, Suit, Rank, ordered_deck
from ..engine_core.reducer import Reducer, apply_action
from ..engine_core.setup import setup_game, deal_from, START_MESSAGE
from ..engine_core.state import GameState, GameStatus, Side
from .conftest import make_state


class TestSetup:
    """Tests for dealing a game."""

    def test_dealt_counts(self, dealt_state):
        assert dealt_state.player_hand.count == 8
        assert dealt_state.ai_hand.count == 8
        assert dealt_state.discard_pile.count == 1
        assert dealt_state.deck.count == 35
        assert dealt_state.total_cards == 52

    def test_dealt_status(self, dealt_state):
        assert dealt_state.status == GameStatus.PLAYING
        assert dealt_state.turn == Side.PLAYER
        assert dealt_state.winner is None
        assert dealt_state.message == START_MESSAGE

    def test_active_suit_and_rank_follow_opening_discard(self, dealt_state):
        assert not dealt_state.top_card.is_eight
        assert dealt_state.active_suit == dealt_state.top_card.suit
        assert dealt_state.active_rank == dealt_state.top_card.rank

    def test_same_seed_same_deal(self):
        assert setup_game(random.Random(5)) == setup_game(random.Random(5))

    def test_deal_order(self):
        """Player takes the first eight cards, the opponent the next eight."""
        deck = ordered_deck()
        state = deal_from(deck)

        assert state.player_hand.cards == tuple(deck[:8])
        assert state.ai_hand.cards == tuple(deck[8:16])
        assert state.top_card.card_id == "DIAMONDS-4"
        assert state.deck.cards == tuple(deck[17:])

    def test_opening_discard_skips_eights(self):
        deck = ordered_deck()
        eight = Card.from_id("CLUBS-8")
        rest = [c for c in deck[16:] if c != eight]
        state = deal_from(deck[:16] + [eight] + rest)

        assert state.top_card.card_id == "DIAMONDS-4"
        assert state.deck.top_card == eight
        assert state.total_cards == 52

    def test_opening_discard_falls_back_to_eight(self):
        non_eights = [c for c in ordered_deck() if not c.is_eight][:16]
        eights = [Card.from_id("SPADES-8"), Card.from_id("CLUBS-8")]
        state = deal_from(non_eights + eights)

        assert state.top_card.card_id == "SPADES-8"
        assert state.active_rank == Rank.EIGHT
        assert [c.card_id for c in state.deck.cards] == ["CLUBS-8"]

    def test_too_few_cards(self):
        with pytest.raises(ValueError):
            deal_from(ordered_deck()[:16])


class TestInitGame:
    """Tests for the init action."""

    def test_init_from_start(self):
        result = apply_action(GameState.initial(), Action.init_game(), rng=random.Random(1))
        assert result.success
        assert result.new_state.status == GameStatus.PLAYING
        assert result.new_state.total_cards == 52

    def test_init_replaces_finished_game(self):
        state = make_state(status=GameStatus.GAME_OVER)
        result = apply_action(state, Action.init_game(), rng=random.Random(1))
        assert result.success
        assert result.new_state.winner is None
        assert result.new_state.player_hand.count == 8

    def test_actions_before_deal_rejected(self):
        result = apply_action(GameState.initial(), Action.draw_card(Side.PLAYER))
        assert not result.success
        assert result.error_code == ErrorCode.GAME_NOT_STARTED


class TestPlayCard:
    """Tests for playing cards."""

    def test_matching_play(self):
        state = make_state(player=("CLUBS-9", "HEARTS-2"), ai=("SPADES-3",))
        result = apply_action(state, Action.play_card(Side.PLAYER, "CLUBS-9"))

        assert result.success
        new = result.new_state
        assert new.top_card.card_id == "CLUBS-9"
        assert new.discard_pile.count == 2
        assert [c.card_id for c in new.player_hand.cards] == ["HEARTS-2"]
        assert new.active_suit == Suit.CLUBS
        assert new.active_rank == Rank.NINE
        assert new.turn == Side.AI
        assert new.message == "AI is thinking..."
        assert new.total_cards == 52

    def test_rank_match_changes_suit(self):
        state = make_state(player=("HEARTS-5", "HEARTS-2"), ai=("SPADES-3",))
        result = apply_action(state, Action.play_card(Side.PLAYER, "HEARTS-5"))

        assert result.success
        assert result.new_state.active_suit == Suit.HEARTS
        assert result.new_state.active_rank == Rank.FIVE

    def test_last_card_wins(self):
        state = make_state(player=("CLUBS-9",), ai=("SPADES-3",))
        result = apply_action(state, Action.play_card(Side.PLAYER, "CLUBS-9"))

        assert result.success
        new = result.new_state
        assert new.status == GameStatus.GAME_OVER
        assert new.winner == Side.PLAYER
        assert new.message == "You win!"
        assert new.player_hand.is_empty

    def test_last_eight_wins_without_suit_choice(self):
        state = make_state(player=("HEARTS-8",), ai=("SPADES-3",))
        result = apply_action(state, Action.play_card(Side.PLAYER, "HEARTS-8"))

        assert result.new_state.status == GameStatus.GAME_OVER
        assert result.new_state.winner == Side.PLAYER

    def test_player_eight_asks_for_suit(self):
        state = make_state(player=("HEARTS-8", "SPADES-2"), ai=("SPADES-3",))
        result = apply_action(state, Action.play_card(Side.PLAYER, "HEARTS-8"))

        assert result.success
        new = result.new_state
        assert new.status == GameStatus.SELECTING_SUIT
        assert new.top_card.card_id == "HEARTS-8"
        assert new.turn == Side.PLAYER
        assert new.active_suit == Suit.CLUBS
        assert new.active_rank == Rank.FIVE
        assert new.message == "Choose a new suit!"

    def test_illegal_card_rejected(self):
        state = make_state(player=("HEARTS-2", "CLUBS-9"), ai=("SPADES-3",))
        result = apply_action(state, Action.play_card(Side.PLAYER, "HEARTS-2"))

        assert not result.success
        assert result.new_state is None
        assert result.error_code == ErrorCode.ILLEGAL_CARD

    def test_card_not_in_hand_rejected(self):
        state = make_state(player=("HEARTS-2",), ai=("CLUBS-9",))
        result = apply_action(state, Action.play_card(Side.PLAYER, "CLUBS-9"))

        assert not result.success
        assert result.error_code == ErrorCode.CARD_NOT_IN_HAND

    def test_wrong_turn_rejected(self):
        state = make_state(player=("CLUBS-9",), ai=("CLUBS-3",), turn=Side.PLAYER)
        result = apply_action(state, Action.play_card(Side.AI, "CLUBS-3"))

        assert not result.success
        assert result.error_code == ErrorCode.NOT_YOUR_TURN

    def test_play_after_game_over_rejected(self):
        state = make_state(player=("CLUBS-9",), ai=("CLUBS-3",), status=GameStatus.GAME_OVER)
        result = apply_action(state, Action.play_card(Side.PLAYER, "CLUBS-9"))

        assert not result.success
        assert result.error_code == ErrorCode.GAME_OVER

    def test_rejection_leaves_state_untouched(self):
        state = make_state(player=("HEARTS-2", "CLUBS-9"), ai=("SPADES-3",))
        snapshot = GameState(**{f: getattr(state, f) for f in state.__dataclass_fields__})

        apply_action(state, Action.play_card(Side.PLAYER, "HEARTS-2"))
        apply_action(state, Action.select_suit(Suit.HEARTS))

        assert state == snapshot


class TestOpponentPlay:
    """Tests for the opponent's plays."""

    def test_ai_match(self):
        state = make_state(player=("HEARTS-2",), ai=("CLUBS-3", "SPADES-4"), turn=Side.AI)
        result = apply_action(state, Action.play_card(Side.AI, "CLUBS-3"))

        assert result.success
        new = result.new_state
        assert new.turn == Side.PLAYER
        assert new.active_rank == Rank.THREE
        assert new.message == "AI played 3 of CLUBS. Your turn!"

    def test_ai_eight_declares_suit(self):
        state = make_state(player=("HEARTS-2",), ai=("HEARTS-8", "SPADES-4"), turn=Side.AI)
        result = apply_action(state, Action.play_card(Side.AI, "HEARTS-8", suit=Suit.SPADES))

        assert result.success
        new = result.new_state
        assert new.status == GameStatus.PLAYING
        assert new.active_suit == Suit.SPADES
        assert new.active_rank == Rank.EIGHT
        assert new.turn == Side.PLAYER
        assert new.message == "AI played an 8 and changed suit to SPADES. Your turn!"

    def test_ai_eight_without_suit_rejected(self):
        state = make_state(player=("HEARTS-2",), ai=("HEARTS-8", "SPADES-4"), turn=Side.AI)
        result = apply_action(state, Action.play_card(Side.AI, "HEARTS-8"))

        assert not result.success
        assert result.error_code == ErrorCode.SUIT_REQUIRED

    def test_ai_last_card_wins(self):
        state = make_state(player=("HEARTS-2",), ai=("CLUBS-3",), turn=Side.AI)
        result = apply_action(state, Action.play_card(Side.AI, "CLUBS-3"))

        assert result.new_state.winner == Side.AI
        assert result.new_state.message == "AI wins!"


class TestSelectSuit:
    """Tests for declaring a suit."""

    @pytest.fixture
    def selecting_state(self):
        state = make_state(player=("HEARTS-8", "SPADES-2"), ai=("SPADES-3",))
        return apply_action(state, Action.play_card(Side.PLAYER, "HEARTS-8")).new_state

    def test_select_suit(self, selecting_state):
        result = apply_action(selecting_state, Action.select_suit(Suit.DIAMONDS))

        assert result.success
        new = result.new_state
        assert new.status == GameStatus.PLAYING
        assert new.active_suit == Suit.DIAMONDS
        assert new.active_rank == Rank.EIGHT
        assert new.turn == Side.AI
        assert new.message == "Suit changed to DIAMONDS. AI's turn."

    def test_play_while_selecting_rejected(self, selecting_state):
        result = apply_action(selecting_state, Action.play_card(Side.PLAYER, "SPADES-2"))
        assert result.error_code == ErrorCode.WRONG_PHASE

    def test_draw_while_selecting_rejected(self, selecting_state):
        result = apply_action(selecting_state, Action.draw_card(Side.PLAYER))
        assert result.error_code == ErrorCode.WRONG_PHASE

    def test_select_without_pending_choice_rejected(self):
        state = make_state(player=("SPADES-2",), ai=("SPADES-3",))
        result = apply_action(state, Action.select_suit(Suit.HEARTS))
        assert result.error_code == ErrorCode.WRONG_PHASE


class TestDrawCard:
    """Tests for drawing."""

    def test_player_draw_keeps_turn(self):
        state = make_state(player=("HEARTS-2",), ai=("SPADES-3",))
        expected_card = state.deck.cards[-1]
        result = apply_action(state, Action.draw_card(Side.PLAYER))

        assert result.success
        new = result.new_state
        assert new.deck.count == state.deck.count - 1
        assert new.player_hand.cards[-1] == expected_card
        assert new.turn == Side.PLAYER
        assert new.status == GameStatus.PLAYING
        assert new.message == "You drew a card."
        assert new.total_cards == 52

    def test_draw_allowed_with_playable_card(self):
        state = make_state(player=("CLUBS-9",), ai=("SPADES-3",))
        result = apply_action(state, Action.draw_card(Side.PLAYER))
        assert result.success

    def test_ai_draw_passes_turn(self):
        state = make_state(player=("HEARTS-2",), ai=("SPADES-3",), turn=Side.AI)
        result = apply_action(state, Action.draw_card(Side.AI))

        new = result.new_state
        assert new.ai_hand.count == 2
        assert new.turn == Side.PLAYER
        assert new.message == "AI couldn't play and drew a card. Your turn!"

    def test_player_empty_deck_skips(self):
        state = make_state(player=("HEARTS-2",), ai=("SPADES-3",), deck=())
        result = apply_action(state, Action.draw_card(Side.PLAYER))

        new = result.new_state
        assert new.player_hand.count == 1
        assert new.turn == Side.AI
        assert new.message == "Deck is empty! Skipping turn."

    def test_ai_empty_deck_skips(self):
        state = make_state(player=("HEARTS-2",), ai=("SPADES-3",), deck=(), turn=Side.AI)
        result = apply_action(state, Action.draw_card(Side.AI))

        new = result.new_state
        assert new.ai_hand.count == 1
        assert new.turn == Side.PLAYER
        assert new.message == "AI has no moves and deck is empty. Your turn!"


class TestCardConservation:
    """The four zones always hold the 52 cards."""

    @pytest.mark.parametrize("seed", [1, 7, 42, 99])
    def test_full_game(self, seed):
        rng = random.Random(seed)
        reducer = Reducer(rng=rng)
        bot = EightsBot()
        state = reducer.apply(GameState.initial(), Action.init_game()).new_state

        for _ in range(500):
            if state.is_over:
                break
            actions = legal_actions(state)
            if state.turn == Side.AI:
                action = bot.select_action(state, actions).action
            else:
                action = rng.choice(actions)
            result = reducer.apply(state, action)
            assert result.success, result.error
            state = result.new_state

            assert state.total_cards == 52
            ids = [c.card_id for zone in (state.deck, state.player_hand, state.ai_hand, state.discard_pile)
                   for c in zone.cards]
            assert len(set(ids)) == 52

        if state.is_over:
            assert state.hand_of(state.winner).is_empty
