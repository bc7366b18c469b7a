"""
MindMatch CLI - Command-line interface for the engine.

Usage:
    mindmatch play [--pairs N] [--seed S] [--delay MS]   Play in the terminal
    mindmatch deck [--pairs N] [--seed S]                Print a dealt deck
    mindmatch serve [--host H] [--port P]                Run the REST API
"""

import argparse
import random
import sys
import time

from .config import load_config
from .utils.logger import setup_logging, BoardDisplay


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="MindMatch - Card-Matching Memory Game",
        prog="mindmatch",
    )
    parser.add_argument("--config", help="Path to YAML config file")
    parser.add_argument("--log-level", help="Override logging level")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game in the terminal")
    play_parser.add_argument("--pairs", type=int, help="Number of pairs on the board")
    play_parser.add_argument("--seed", type=int, help="Shuffle seed")
    play_parser.add_argument("--delay", type=int, help="Mismatch delay in milliseconds")

    # Deck command
    deck_parser = subparsers.add_parser("deck", help="Print a dealt deck")
    deck_parser.add_argument("--pairs", type=int, help="Number of pairs on the board")
    deck_parser.add_argument("--seed", type=int, help="Shuffle seed")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API with uvicorn")
    serve_parser.add_argument("--host", help="Bind address (default from config)")
    serve_parser.add_argument("--port", type=int, help="Port (default from config)")

    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(args.log_level or config.logging.level)

    if args.command == "play":
        return cmd_play(args, config)
    elif args.command == "deck":
        return cmd_deck(args, config)
    elif args.command == "serve":
        return cmd_serve(args, config)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_deck(args, config):
    """Print a dealt deck, face up."""
    from .engine_core import generate_deck, DEFAULT_SYMBOL_POOL, InvalidConfiguration

    pairs = config.game.pair_count if args.pairs is None else args.pairs
    try:
        deck = generate_deck(DEFAULT_SYMBOL_POOL, pairs, random.Random(args.seed))
    except InvalidConfiguration as e:
        print(f"Error: {e}")
        sys.exit(1)

    for card in deck:
        print(f"{card.id:>2}: {card.symbol}")
    return 0


def cmd_serve(args, config):
    """Serve the REST API."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install 'mindmatch[api]'")
        sys.exit(1)

    from .api.app import create_app

    host = args.host or config.server.host
    port = config.server.port if args.port is None else args.port
    uvicorn.run(create_app(config=config), host=host, port=port)
    return 0


def cmd_play(args, config, input_fn=input):
    """Interactive terminal game."""
    from .engine_core import InvalidConfiguration, InvalidSelection, SelectionOutcome
    from .session import GameSession, ManualScheduler

    delay_ms = config.game.mismatch_delay_ms if args.delay is None else args.delay
    scheduler = ManualScheduler()
    try:
        session = GameSession(
            scheduler=scheduler,
            match_reward=config.game.match_reward,
            mismatch_delay_ms=delay_ms,
            pair_count=config.game.pair_count if args.pairs is None else args.pairs,
        )
        session.on_complete(
            lambda result: print(
                f"\nAll pairs found!\nScore: {result.score}  Moves: {result.moves}"
            )
        )
        session.new_game(seed=args.seed)
    except InvalidConfiguration as e:
        print(f"Error: {e}")
        sys.exit(1)

    display = BoardDisplay()
    print("Select cards by number. 'q' quits.\n")

    while not session.get_state().is_complete:
        display.print_board(session.get_state())
        try:
            raw = input_fn("> ").strip()
        except EOFError:
            break
        if raw.lower() in {"q", "quit", "exit"}:
            break

        try:
            outcome = session.select_card(int(raw))
        except ValueError:
            print(f"Not a card number: {raw}")
            continue
        except InvalidSelection as e:
            print(f"Error: {e}")
            continue

        if outcome == SelectionOutcome.IGNORED:
            print("That card can't be selected right now.")
        elif outcome == SelectionOutcome.MISMATCHED:
            display.print_board(session.get_state())
            print("No match.")
            time.sleep(delay_ms / 1000.0)
            scheduler.advance(delay_ms)
        elif outcome == SelectionOutcome.MATCHED:
            print("Match!")

    if session.get_state().is_complete:
        display.print_board(session.get_state())
    return 0


if __name__ == "__main__":
    main()
