# mapgen/__main__.py
# Command line entry point: generate one dungeon and print it as text.

import argparse
import json
import logging
import sys
from typing import List, Optional

import structlog

from mapgen.dungeon import DungeonConfig, DungeonGenerator, load_dungeon_config
from mapgen.errors import MapGenError
from mapgen.grid import Grid
from mapgen.utils import LOG_LEVELS, MapRNG, setup_logging

log = structlog.get_logger(__name__)

DEFAULT_WIDTH = 41
DEFAULT_HEIGHT = 25

WALL_CHAR = "#"
FLOOR_CHAR = "."
CORRIDOR_CHAR = ","
OTHER_CHAR = "?"


def format_grid(grid: Grid, config: DungeonConfig) -> str:
    """One text line per grid row, using the config's tile thresholds."""
    lines = []
    for y in range(grid.height):
        row = []
        for x in range(grid.width):
            value = grid.array[y, x]
            if value >= config.wall_threshold:
                row.append(WALL_CHAR)
            elif value == config.corridor_threshold:
                row.append(CORRIDOR_CHAR)
            elif value == config.floor_threshold:
                row.append(FLOOR_CHAR)
            else:
                row.append(OTHER_CHAR)
        lines.append("".join(row))
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mapgen", description="Generate a room-and-maze dungeon."
    )
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="Grid width.")
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="Grid height.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the RNG.")
    parser.add_argument(
        "--config", default=None, help="YAML or TOML file with dungeon settings."
    )
    parser.add_argument(
        "--metrics", action="store_true", help="Print RNG draw counts after generation."
    )
    parser.add_argument(
        "--log-level", choices=LOG_LEVELS, default="WARNING", help="Logging level"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit log events as JSON lines."
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(
        logging.DEBUG if args.verbose else args.log_level, json_output=args.json_logs
    )

    try:
        config = load_dungeon_config(args.config) if args.config else DungeonConfig()
        grid = Grid(args.width, args.height)
        rng = MapRNG(seed=args.seed, metrics=args.metrics)
        result = DungeonGenerator(config, rng=rng).generate(grid)
    except (MapGenError, FileNotFoundError, ValueError) as e:
        log.error("Dungeon generation failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_grid(grid, config))
    print(
        f"seed={rng.initial_seed} rooms={len(result.rooms)} regions={result.regions} "
        f"dead_ends_removed={result.prune.removed}"
    )
    if args.metrics:
        print(json.dumps(rng.get_metrics(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
