"""CLI entry point for lah."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lah import __version__
from lah.config import load_config
from lah.listing import read_directory, sort_entries
from lah.table import TERMINAL_TOO_SMALL, render_listing
from lah.terminal import terminal_budget


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lah",
        description="List a directory as a colorized, box-drawn table fitted to the terminal.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("path", nargs="?", default=None, help="Directory to list (default: .)")

    display = p.add_argument_group("display")
    display.add_argument("-g", "--git", action="store_true", default=None, help="Show git status inline")
    display.add_argument(
        "--no-color", dest="color", action="store_false", default=None,
        help="Disable colored output",
    )
    display.add_argument(
        "--margin", type=int, metavar="COLUMNS",
        help="Columns kept free at the right edge of the terminal (default: 10)",
    )

    output = p.add_argument_group("output")
    output.add_argument("--config", dest="config_file", help="Path to a YAML config file")
    output.add_argument("--log-file", help="Write logs to file")
    output.add_argument("-v", "--verbose", action="store_true", default=None, help="Verbose output")

    return p


def _setup_logging(config) -> None:
    level = logging.DEBUG if config.verbose else logging.WARNING
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(message)s", handlers=handlers)


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    config_path = Path(args.config_file) if args.config_file else None
    config = load_config(cli_args=args, config_path=config_path)
    _setup_logging(config)

    try:
        entries = read_directory(config.path, show_git=config.show_git)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    budget = terminal_budget(margin=config.margin, floor=config.min_width)
    lines = render_listing(
        sort_entries(entries),
        budget,
        show_git=config.show_git,
        color=config.color,
        overrides=config.columns,
    )
    if lines is None:
        print(TERMINAL_TOO_SMALL)
        return
    for line in lines:
        print(line)
