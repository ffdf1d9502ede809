"""
Cave battle command line.

Usage:
    cave-battle cave.txt              # print the outcome score
    cave-battle cave.txt --json       # full battle report as JSON
    cave-battle - --show < cave.txt   # read stdin, also draw the final cave
    cave-battle cave.txt --verbose    # log every round
"""

import argparse
import logging
import sys
from typing import List, Optional

from battle.engine import score_combat
from battle.errors import MalformedGridError, StalemateError
from battle.parser import load_input, parse_input, render
from runtime.runner import BattleRunner
from .schemas import BattleReport

log = logging.getLogger("cave-battle")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate elves and goblins fighting in a cave")
    parser.add_argument("input", help="Cave file, or '-' for stdin")
    parser.add_argument("--json", action="store_true", help="Print a JSON battle report instead of the score")
    parser.add_argument("--show", action="store_true", help="Print the final cave with hit points")
    parser.add_argument("--verbose", action="store_true", help="Log every round")
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        state = parse_input(load_input(args.input))
    except MalformedGridError as e:
        log.error("Bad cave input: %s", e)
        return 2

    try:
        final = BattleRunner.from_state(state).run()
    except StalemateError as e:
        log.error("%s", e)
        return 1

    if args.show:
        print(render(final, hit_points=True), end="")
    if args.json:
        print(BattleReport.from_state(final).model_dump_json(indent=2))
    else:
        print(score_combat(final))
    return 0

if __name__ == "__main__":
    sys.exit(main())
