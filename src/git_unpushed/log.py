"""Logging setup for git-unpushed."""

import logging
import sys
from typing import Literal, TextIO

from colorama import Fore

TRACE = 5
OFF = logging.CRITICAL + 10

LOG_LEVELS_TYPE = Literal["off", "error", "warn", "info", "debug", "trace"]
LOG_LEVELS: dict[str, int] = {
    "off": OFF,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

logging.addLevelName(TRACE, "TRACE")

_LEVEL_COLORS = {
    TRACE: Fore.LIGHTBLACK_EX,
    logging.DEBUG: Fore.BLUE,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.LIGHTRED_EX,
    logging.CRITICAL: Fore.LIGHTRED_EX,
}


class ColorFormatter(logging.Formatter):
    """Formatter that colors the level name."""

    def __init__(self, *, color: bool) -> None:
        super().__init__("%(asctime)s %(levelname)s %(message)s")
        self.color = color

    def formatMessage(self, record: logging.LogRecord) -> str:  # noqa: N802
        if self.color and record.levelno in _LEVEL_COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = (
                _LEVEL_COLORS[record.levelno] + record.levelname + Fore.RESET
            )
        return super().formatMessage(record)


def parse_log_level(name: str) -> int:
    """Return the logging level for a level name."""
    try:
        return LOG_LEVELS[name.lower()]
    except KeyError as e:
        raise ValueError(
            f"log level must be one of {', '.join(LOG_LEVELS)}, got {name!r}"
        ) from e


def resolve_log_level(
    log_level: str | None, *, verbose: bool, missing_head: bool
) -> int:
    """Pick the effective level from the command line flags."""
    if verbose:
        return logging.INFO
    if log_level is None:
        return logging.ERROR if missing_head else logging.WARNING
    return parse_log_level(log_level)


def setup_logging(level: int, stream: TextIO | None = None) -> logging.Logger:
    """Send the package logs to `stream` (stderr by default).

    Replaces handlers installed by an earlier call.
    """
    stream = stream if stream is not None else sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setFormatter(ColorFormatter(color=stream.isatty()))
    logger = logging.getLogger("git_unpushed")
    for old_handler in logger.handlers[:]:
        logger.removeHandler(old_handler)
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
