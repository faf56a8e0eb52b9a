"""Logging setup.

The TUI owns the terminal, so log records only ever go to a file.
"""

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(log_level: str = "WARNING", log_file: str | Path | None = None) -> None:
    """
    Configure the root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: path of the log file; logging is discarded when None
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)
    if log_file is None:
        handlers: list[logging.Handler] = [logging.NullHandler()]
    else:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(log_path, encoding="utf-8")]

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
