"""
Eights CLI - Command-line interface for the engine.

Usage:
    eights play [--seed N] [--delay S]     Play in the terminal
    eights serve [--host H] [--port P]     Run the HTTP API with uvicorn
"""

import argparse
import sys
import time

from .config import Settings
from .engine_core.cards import SUIT_SYMBOLS, Suit
from .engine_core.rules import is_playable
from .engine_core.state import GameStatus
from .logging_config import setup_logging
from .session import SessionManager, GameLoop, LoopState


SUIT_KEYS = {
    "h": Suit.HEARTS,
    "d": Suit.DIAMONDS,
    "c": Suit.CLUBS,
    "s": Suit.SPADES,
}


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Eights - Crazy Eights against the computer",
        prog="eights",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game in the terminal")
    play_parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible deal")
    play_parser.add_argument("--delay", type=float, default=None, help="Opponent thinking time in seconds")
    play_parser.add_argument("--name", default="Player", help="Your display name")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    args = parser.parse_args(argv)

    if args.command == "play":
        cmd_play(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_play(args):
    """Interactive terminal game."""
    settings = Settings.from_env()
    setup_logging("WARNING")

    delay = settings.ai_delay if args.delay is None else args.delay
    session = SessionManager().create_session(
        human_player_name=args.name,
        random_seed=args.seed,
    )
    loop = GameLoop(session, ai_delay=delay)
    loop.new_game()

    while True:
        render(session.game_state)

        if loop.state == LoopState.GAME_OVER:
            if not ask_yes_no("Play again? [y/n] "):
                return
            loop.new_game()
            continue

        if loop.state == LoopState.AI_THINKING:
            pending = session.pending_ai_turn
            time.sleep(delay)
            loop.run_pending_ai_turn(pending)
            continue

        if loop.state == LoopState.WAITING_SUIT_CHOICE:
            choice = prompt("Choose a suit [h]earts [d]iamonds [c]lubs [s]pades, [q]uit: ")
            if choice == "q":
                return
            suit = SUIT_KEYS.get(choice[:1])
            if suit is None:
                print("Unknown suit.")
                continue
            loop.select_suit(suit)
            continue

        choice = prompt("Card number to play, [d]raw, [n]ew game, [q]uit: ")
        if choice == "q":
            return
        if choice == "n":
            loop.new_game()
        elif choice == "d":
            loop.draw_card()
        elif choice.isdigit() and 1 <= int(choice) <= session.game_state.player_hand.count:
            card = session.game_state.player_hand.cards[int(choice) - 1]
            result = loop.play_card(card.card_id)
            if not result.accepted:
                print(f"You can't play {card.label} now.")
        else:
            print("Invalid choice.")


def render(state):
    """Print the table. The opponent's cards are shown face down."""
    print()
    print("-" * 40)
    print(f"AI opponent: {'▮ ' * state.ai_hand.count}({state.ai_hand.count})")
    print(f"Deck: {state.deck.count}")
    if state.top_card:
        line = f"Discard: {state.top_card.label}"
        if state.status != GameStatus.GAME_OVER and state.active_suit:
            line += f"   active suit {SUIT_SYMBOLS[state.active_suit]}"
        print(line)
    hand = []
    for i, card in enumerate(state.player_hand.cards, start=1):
        marker = "*" if state.status == GameStatus.PLAYING and is_playable(card, state) else " "
        hand.append(f"{i}:{card.label}{marker}")
    print("Your hand: " + " ".join(hand))
    print(state.message)


def prompt(text: str) -> str:
    try:
        return input(text).strip().lower()
    except EOFError:
        return "q"


def ask_yes_no(text: str) -> bool:
    return prompt(text).startswith("y")


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("eights.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
