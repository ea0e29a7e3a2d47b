"""Logging configuration for promptenhancer.

Console output goes through rich; an optional file handler mirrors it.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler


DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEBUG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"

PACKAGE_LOGGER = "promptenhancer"


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    debug: bool = False,
    use_rich: bool = True,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Logging level name or number.
        log_file: Optional file path for log output.
        debug: If True, enables DEBUG level and verbose format.
        use_rich: If True, logs to stderr through rich; otherwise a plain handler.

    Returns:
        The configured package logger.
    """
    level = logging.DEBUG if debug else _coerce_level(level)

    root_logger = logging.getLogger(PACKAGE_LOGGER)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(DEBUG_FORMAT if debug else DEFAULT_FORMAT)

    if use_rich:
        console_handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            level=level,
            show_time=True,
            show_path=debug,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=debug,
        )
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)

    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)

        root_logger.info(f"Logging to file: {log_path}")

    # Reduce noise from the HTTP stack
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    if debug:
        root_logger.debug("Debug logging enabled")

    return root_logger
