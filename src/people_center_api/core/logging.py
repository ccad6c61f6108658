"""Loguru sink configuration for the API server and the CLI.

Plain-text records go to stderr. Records bound with ``json_output=True``
(``logger.bind(json_output=True)``) are also emitted serialized, as the
rate limiter does for rejected clients. With a ``log_dir`` the text stream
is mirrored to ``people-center-api.log``.
"""

import sys
from pathlib import Path

from loguru import logger

LOG_FILE_NAME = "people-center-api.log"

_TEXT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"


def _wants_json(record: dict) -> bool:
    return bool(record["extra"].get("json_output", False))


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Replace every Loguru sink with the application's sinks.

    Safe to call repeatedly; each call starts from a clean slate.

    Args:
        log_level: Minimum level, case-insensitive (``"info"`` works).
        log_dir: Directory for the rotating log file (24 h rotation,
            7 days retention). Created when missing.
    """
    level = log_level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=_TEXT_FORMAT)
    logger.add(sys.stderr, level=level, serialize=True, filter=_wants_json)

    if not log_dir:
        return
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    logger.add(
        directory / LOG_FILE_NAME,
        level=level,
        format=_TEXT_FORMAT,
        rotation="24h",
        retention="7 days",
    )
