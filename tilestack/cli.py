"""tilestack/cli: compile a world description from the command line.

Usage::

    python -m tilestack.cli worlds/courtyard.yaml
    python -m tilestack.cli worlds/courtyard.yaml -o build/courtyard.json
    python -m tilestack.cli worlds/courtyard.yaml --log-level DEBUG --color
"""

from __future__ import annotations

import argparse
import logging
import sys

import yaml

from tilestack.compiler import compile_world
from tilestack.errors import TileCompileError
from tilestack.log_utils import setup_logging
from tilestack.output import print_error, print_summary, save_compiled
from tilestack.world import load_world

log = logging.getLogger("tilestack.cli")


def main(argv: list[str] | None = None) -> None:
    """Compile one world file and report the result."""
    parser = argparse.ArgumentParser(description="Compile a tile layer stack")
    parser.add_argument("world", help="World YAML/JSON file")
    parser.add_argument(
        "--output", "-o", help="Output file path for the compiled JSON",
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--color", action="store_true", help="Colorize log output",
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    args = parser.parse_args(argv)

    setup_logging(args.log_level, color_logs=args.color, log_file=args.log_file)

    try:
        description = load_world(args.world)
    except (OSError, ValueError, yaml.YAMLError) as e:
        log.error("Could not load %s: %s", args.world, e)
        print_error(str(e))
        sys.exit(1)

    try:
        world = compile_world(description.layers, description.config)
    except TileCompileError as e:
        if not e.recoverable:
            raise
        log.error("%s", e)
        print_error(str(e))
        sys.exit(1)

    print_summary(world, description.name)

    if args.output:
        save_compiled(world, args.output, description.name)
        log.info("Wrote %s", args.output)


if __name__ == "__main__":
    main()
