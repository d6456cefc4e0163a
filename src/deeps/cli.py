from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import DifficultyTable, GenerationSettings, default_difficulty_table
from .dungeon.factory import generate_floor
from .errors import DeepsError
from .logging_config import configure_logging
from .rng import random_seed
from .serialization import floor_to_json

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    defaults = GenerationSettings.from_env()
    parser = argparse.ArgumentParser(
        prog="deeps-floor",
        description="Generate one floor of The Deeps and print it as ASCII or JSON.",
    )
    parser.add_argument("--level", type=int, default=1, help="Floor level (1-indexed).")
    parser.add_argument("--total-floors", type=int, default=10, help="Number of floors in the dungeon.")
    parser.add_argument("--seed", type=int, default=None, help="Dungeon seed; random when omitted.")
    parser.add_argument("--difficulty", default=defaults.difficulty, help="Difficulty tier (easy, normal, hard).")
    parser.add_argument("--width", type=int, default=defaults.width)
    parser.add_argument("--height", type=int, default=defaults.height)
    parser.add_argument(
        "--difficulty-table",
        type=Path,
        default=None,
        help="Path to a custom difficulty table YAML file.",
    )
    parser.add_argument("--json", action="store_true", help="Print the serialized floor instead of the map.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose debug logging.")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    seed = args.seed if args.seed is not None else random_seed()
    try:
        table = DifficultyTable.from_yaml(args.difficulty_table) if args.difficulty_table else default_difficulty_table()
        floor = generate_floor(
            args.level,
            args.width,
            args.height,
            args.difficulty,
            seed,
            args.total_floors,
            settings=GenerationSettings.from_env(),
            table=table,
        )
    except (DeepsError, FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.json:
        # Sorted keys so runs can be diffed
        print(floor_to_json(floor, indent=2, sort_keys=True))
        return 0

    for line in floor.render_ascii():
        print(line)
    print()
    print(f"seed={seed} level={floor.level}/{args.total_floors} difficulty={args.difficulty}")
    print(f"rooms={len(floor.rooms)} mobs={len(floor.mobs)} items={len(floor.items)}")
    print(f"upStairs={[p.to_dict() for p in floor.up_stairs]} downStairs={[p.to_dict() for p in floor.down_stairs]}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
