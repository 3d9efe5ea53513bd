"""
Logging configuration — one call at process start.

Console level precedence:
    --debug / --verbose / --quiet  >  MWZ_LOG_LEVEL  >  WARNING

A log file is added when MWZ_LOG_FILE is set; its level comes from
MWZ_LOG_FILE_LEVEL and defaults to DEBUG so the file keeps everything the
console hides.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "MWZ_LOG_LEVEL"
ENV_FILE = "MWZ_LOG_FILE"
ENV_FILE_LEVEL = "MWZ_LOG_FILE_LEVEL"

# level → (format, datefmt)
_CONSOLE_FORMATS = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_CONSOLE_DEFAULT = ("%(levelname)s: %(message)s", None)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Chatty at INFO: the dev server's request log and the HTTP stack
_NOISY_LOGGERS = ("werkzeug", "urllib3")


def parse_level(level: str | None, default: int = logging.WARNING) -> int:
    """Level name → numeric level. Unknown names give ``default``."""
    if not level:
        return default
    numeric = logging.getLevelName(level.strip().upper())
    return numeric if isinstance(numeric, int) else default


def resolve_level(cli_level: str | None = None) -> int:
    """Console level from the CLI flag, then the environment."""
    if cli_level:
        return parse_level(cli_level)
    return parse_level(os.environ.get(ENV_LEVEL))


def setup_logging(level: str | None = None, log_file: str | None = None) -> int:
    """Configure the root logger. Returns the console level in effect.

    Args:
        level: Level name from a CLI flag; None defers to MWZ_LOG_LEVEL.
        log_file: Log file path; None defers to MWZ_LOG_FILE.
    """
    console_level = resolve_level(level)
    fmt, datefmt = _CONSOLE_FORMATS.get(console_level, _CONSOLE_DEFAULT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    log_file = log_file or os.environ.get(ENV_FILE)
    if log_file:
        file_level = parse_level(os.environ.get(ENV_FILE_LEVEL), default=logging.DEBUG)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)

    if console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return console_level
