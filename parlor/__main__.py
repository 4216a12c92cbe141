"""Main entry point for the terminal game."""

import argparse
import logging
import sys
from dataclasses import replace
from random import Random

from config import config
from parlor.agents import default_roster
from parlor.console import ConsoleController, ConsoleView, Dealer, startup_prompt
from parlor.game.engine import GameQuit, RoundEngine
from parlor.records import RecordStore

logger = logging.getLogger("parlor")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parlor",
        description="Blackjack against four house personalities.",
    )
    parser.add_argument("--decks", type=int, choices=(1, 2, 4, 6), help="decks in the shoe")
    parser.add_argument("--chips", type=int, help="starting chips for every seat")
    parser.add_argument("--min-bet", type=int, help="table minimum bet")
    parser.add_argument("--upcard", action="store_true", help="show only the first card of NPC hands")
    parser.add_argument("--stats-file", help="where player profiles are stored")
    parser.add_argument("--seed", type=int, help="seed for a reproducible game")
    parser.add_argument(
        "--no-prompt",
        action="store_true",
        help="skip the startup questions and use configured values",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    game = config.game
    overrides = {
        "num_decks": args.decks,
        "starting_chips": args.chips,
        "table_min": args.min_bet,
        "stats_file": args.stats_file,
    }
    game = replace(game, **{k: v for k, v in overrides.items() if v is not None})
    if args.upcard:
        game = replace(game, upcard_mode=True)

    try:
        print("Welcome to Blackjack!")
        if not args.no_prompt:
            game = startup_prompt(game)

        rules = game.to_rules()
        store = RecordStore(game.stats_file)
        dealer = Dealer()
        controller = ConsoleController(store, rules.starting_chips, dealer=dealer)
        engine = RoundEngine(
            default_roster(rules.starting_chips),
            store,
            rules=rules,
            human=controller,
            rng=Random(args.seed) if args.seed is not None else None,
        )
        ConsoleView(engine, upcard_mode=game.upcard_mode, delay=game.delay_seconds, dealer=dealer)
        engine.run()
    except GameQuit:
        print("Quitting...")
        return 0
    except (KeyboardInterrupt, EOFError):
        print("\nGoodbye.")
        return 0
    except OSError as exc:
        logger.error("Unrecoverable I/O error: %s", exc)
        return 1
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
