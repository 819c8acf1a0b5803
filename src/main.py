"""Entry point for a headless Pebblefall session.

Sets up the puzzle engine, feeds it random input on a fixed tick and prints
the final board. Useful for eyeballing chains without a renderer.
"""
from __future__ import annotations

import argparse
import logging
import random

from pebblefall.engine import PuzzleEngine
from pebblefall.events.bus import EVENT_CHAIN_COMPLETE, EVENT_GAME_OVER
from pebblefall.utils.grid_text import format_grid

logger = logging.getLogger("pebblefall.main")

TICK = 1 / 60


def autoplay(engine: PuzzleEngine, *, input_seed: int | None = None, max_ticks: int = 20000) -> int:
    """Drive ``engine`` with random commands until game over; return the ticks used."""
    inputs = random.Random(input_seed)
    engine.start()
    ticks = 0
    while ticks < max_ticks and not engine.is_game_over:
        roll = inputs.random()
        if roll < 0.08:
            engine.move(inputs.choice(["left", "right"]))
        elif roll < 0.12:
            engine.rotate(inputs.choice(["cw", "ccw"]))
        elif roll < 0.14:
            engine.drop()
        engine.tick(TICK)
        ticks += 1
    return ticks


def _log_chain(sender, **payload):
    if payload["depth"] > 1:
        logger.info("chain x%d (+%d)", payload["depth"], payload["score_delta"])


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run a headless Pebblefall game with random input.")
    parser.add_argument("--seed", type=int, default=None, help="seed for the piece generator")
    parser.add_argument("--input-seed", type=int, default=None, help="seed for the random player")
    parser.add_argument("--max-ticks", type=int, default=20000)
    parser.add_argument("-v", "--verbose", action="store_true", help="log every chain step")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    engine = PuzzleEngine(seed=args.seed)
    engine.subscribe(EVENT_CHAIN_COMPLETE, _log_chain)
    engine.subscribe(EVENT_GAME_OVER, lambda sender, **payload: logger.info("game over: %s", payload["reason"]))

    ticks = autoplay(engine, input_seed=args.input_seed, max_ticks=args.max_ticks)
    print(format_grid(engine.grid))
    print(f"score {engine.score} after {ticks} ticks")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
