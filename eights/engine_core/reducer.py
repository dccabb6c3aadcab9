"""
Reducer - Applies actions to game state.

The reducer is the single point of state transition.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying
- Returns ActionResult with success/failure
- Rejected actions leave the input state untouched
"""

from __future__ import annotations
from dataclasses import dataclass, field
import random

from .action import Action, ActionType, ActionResult, ErrorCode
from .cards import Card, Rank
from .rules import is_playable
from .setup import setup_game
from .state import GameState, GameStatus, Side


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless apart from the random source used when dealing.
    """
    rng: random.Random = field(default_factory=random.Random)

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        rejection = self._validate_action(state, action)
        if rejection:
            message, code = rejection
            return ActionResult.failure(message, error_code=code)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=ErrorCode.INVALID_ACTION,
            )

        return handler(state, action)

    def _validate_action(self, state: GameState, action: Action) -> tuple[str, str] | None:
        """
        Validate that an action is legal in the current state.

        Returns (message, error code) if invalid, None if valid.
        """
        if action.action_type == ActionType.INIT_GAME:
            return None

        if state.status == GameStatus.START:
            return "Game not started - deal a game first", ErrorCode.GAME_NOT_STARTED

        if state.status == GameStatus.GAME_OVER:
            return "Game is over - no actions allowed", ErrorCode.GAME_OVER

        side = action.payload.side
        if side is None:
            return "Action has no acting side", ErrorCode.INVALID_ACTION

        if side != state.turn:
            return f"Not {side.value}'s turn", ErrorCode.NOT_YOUR_TURN

        if action.action_type == ActionType.SELECT_SUIT:
            if state.status != GameStatus.SELECTING_SUIT:
                return "No suit choice is pending", ErrorCode.WRONG_PHASE
            if action.payload.suit is None:
                return "No suit given", ErrorCode.SUIT_REQUIRED
            return None

        if state.status != GameStatus.PLAYING:
            return "A suit must be chosen first", ErrorCode.WRONG_PHASE

        if action.action_type == ActionType.PLAY_CARD:
            card = state.hand_of(side).find(action.payload.card_id or "")
            if card is None:
                return f"Card {action.payload.card_id} not in hand", ErrorCode.CARD_NOT_IN_HAND
            if not is_playable(card, state):
                return f"{card.card_id} does not match the active suit or rank", ErrorCode.ILLEGAL_CARD
            if card.is_eight and side == Side.AI and action.payload.suit is None:
                return "The opponent must declare a suit with an eight", ErrorCode.SUIT_REQUIRED

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.INIT_GAME: self._handle_init_game,
            ActionType.PLAY_CARD: self._handle_play_card,
            ActionType.SELECT_SUIT: self._handle_select_suit,
            ActionType.DRAW_CARD: self._handle_draw_card,
        }
        return handlers.get(action_type)

    def _handle_init_game(self, state: GameState, action: Action) -> ActionResult:
        """Deal a fresh game, discarding the previous state entirely."""
        new_state = setup_game(self.rng)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"New game dealt, {new_state.top_card.card_id} opens the discard pile"],
        )

    def _handle_play_card(self, state: GameState, action: Action) -> ActionResult:
        """Handle a play from either side."""
        side = action.payload.side
        hand = state.hand_of(side)
        card = hand.find(action.payload.card_id)

        new_hand = hand.remove(card)
        new_state = state.with_hand(side, new_hand)._copy_with(
            discard_pile=state.discard_pile.push_front(card),
        )
        changes = [f"{side.value} played {card.card_id}"]

        if new_hand.is_empty:
            # Active suit/rank are irrelevant once the game is over
            new_state = new_state._copy_with(
                status=GameStatus.GAME_OVER,
                winner=side,
                message="You win!" if side == Side.PLAYER else "AI wins!",
            )
            changes.append(f"{side.value} wins")
            return ActionResult.success_with_state(new_state, changes=changes)

        if side == Side.PLAYER:
            return self._after_player_play(new_state, card, changes)
        return self._after_ai_play(new_state, card, action, changes)

    def _after_player_play(
        self,
        state: GameState,
        card: Card,
        changes: list[str],
    ) -> ActionResult:
        if card.is_eight:
            # Suit and rank stay as they were until a suit is chosen
            new_state = state._copy_with(
                status=GameStatus.SELECTING_SUIT,
                message="Choose a new suit!",
            )
            changes.append("PLAYER must choose a suit")
            return ActionResult.success_with_state(new_state, changes=changes)

        new_state = state._copy_with(
            active_suit=card.suit,
            active_rank=card.rank,
            turn=Side.AI,
            message="AI is thinking...",
        )
        return ActionResult.success_with_state(new_state, changes=changes)

    def _after_ai_play(
        self,
        state: GameState,
        card: Card,
        action: Action,
        changes: list[str],
    ) -> ActionResult:
        if card.is_eight:
            suit = action.payload.suit
            new_state = state._copy_with(
                active_suit=suit,
                active_rank=Rank.EIGHT,
                turn=Side.PLAYER,
                message=f"AI played an 8 and changed suit to {suit.value}. Your turn!",
            )
            changes.append(f"AI declared {suit.value}")
            return ActionResult.success_with_state(new_state, changes=changes)

        new_state = state._copy_with(
            active_suit=card.suit,
            active_rank=card.rank,
            turn=Side.PLAYER,
            message=f"AI played {card.rank.value} of {card.suit.value}. Your turn!",
        )
        return ActionResult.success_with_state(new_state, changes=changes)

    def _handle_select_suit(self, state: GameState, action: Action) -> ActionResult:
        """Declare the suit that follows the player's eight."""
        suit = action.payload.suit
        new_state = state._copy_with(
            active_suit=suit,
            active_rank=Rank.EIGHT,
            status=GameStatus.PLAYING,
            turn=Side.AI,
            message=f"Suit changed to {suit.value}. AI's turn.",
        )
        return ActionResult.success_with_state(
            new_state,
            changes=[f"PLAYER declared {suit.value}"],
        )

    def _handle_draw_card(self, state: GameState, action: Action) -> ActionResult:
        """
        Handle a draw.

        An empty deck turns the draw into a skip for either side.
        The player keeps the turn after a successful draw, the opponent
        always passes after drawing.
        """
        side = action.payload.side

        if state.deck.is_empty:
            message = (
                "Deck is empty! Skipping turn."
                if side == Side.PLAYER
                else "AI has no moves and deck is empty. Your turn!"
            )
            new_state = state._copy_with(turn=side.other, message=message)
            return ActionResult.success_with_state(
                new_state,
                changes=[f"Deck empty, {side.value} skips"],
            )

        card, new_deck = state.deck.take_back()
        new_state = state.with_hand(side, state.hand_of(side).add(card))._copy_with(deck=new_deck)

        if side == Side.PLAYER:
            new_state = new_state._copy_with(message="You drew a card.")
        else:
            new_state = new_state._copy_with(
                turn=Side.PLAYER,
                message="AI couldn't play and drew a card. Your turn!",
            )

        return ActionResult.success_with_state(
            new_state,
            changes=[f"{side.value} drew a card"],
        )


def apply_action(
    state: GameState,
    action: Action,
    rng: random.Random | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(rng=rng) if rng is not None else Reducer()
    return reducer.apply(state, action)
