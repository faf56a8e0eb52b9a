"""Command-line entry point: `koto [--db PATH] [--memory] ...`."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import Config
from .errors import KotoError
from .log import setup_logger
from .store import MemoryTaskStore, SQLiteTaskStore, TaskStore

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="koto",
        description="koto - terminal ToDo manager with a Pomodoro timer",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"koto {__version__}",
    )
    parser.add_argument(
        "--db",
        type=Path,
        help="Path to the SQLite database (default: ~/.koto/koto.db)",
    )
    parser.add_argument(
        "--memory",
        action="store_true",
        help="Keep todos in memory only; nothing is saved",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level for ~/.koto/koto.log (default: WARNING)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colours",
    )
    return parser


def load_config(args: argparse.Namespace, environ: dict | None = None) -> Config:
    """Environment first, then command-line flags on top."""
    config = Config.from_env(environ)
    if args.db is not None:
        config.db_path = args.db.expanduser()
    if args.log_level:
        config.log_level = args.log_level
    if args.no_color:
        config.use_color = False
    config.memory = args.memory
    return config


def open_store(config: Config) -> TaskStore:
    if config.memory:
        return MemoryTaskStore()
    config.db_path.parent.mkdir(parents=True, exist_ok=True)
    return SQLiteTaskStore(config.db_path)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args)

    try:
        config.ensure_home()
        setup_logger(config.log_level, config.log_file)
        store = open_store(config)
    except (KotoError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info("Using %s", "in-memory store" if config.memory else config.db_path)

    from .tui.app import run

    try:
        run(store, config)
    finally:
        store.close()
    print("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
