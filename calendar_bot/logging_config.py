"""Centralised logging configuration.

Importing this module sets the default logging format/level. Other modules
should simply import `logging` and call `logging.getLogger(__name__)`.
:func:`configure_logging` replaces the defaults with the handlers requested
by the run settings (console and/or rotating file).
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .config import Settings

LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_NAME: str = "calendar-bot.log"
LOG_FILE_MAX_BYTES: int = 1024 * 1024
LOG_FILE_BACKUPS: int = 3

_SECRET_MARKERS = ("key", "secret", "password", "token")

logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

logger = logging.getLogger(__name__)


def _parse_level(name: str) -> int | None:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else None


def configure_logging(settings: "Settings") -> logging.Logger:
    """Install handlers on the root logger according to *settings*."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = []

    if settings.console_log:
        handlers.append(logging.StreamHandler(sys.stderr))

    file_path: str | None = None
    if settings.log_dir:
        try:
            os.makedirs(settings.log_dir, exist_ok=True)
            file_path = os.path.join(settings.log_dir, LOG_FILE_NAME)
            handlers.append(
                logging.handlers.RotatingFileHandler(
                    file_path,
                    maxBytes=LOG_FILE_MAX_BYTES,
                    backupCount=LOG_FILE_BACKUPS,
                    encoding="utf-8",
                )
            )
        except OSError as exc:
            file_path = None
            sys.stderr.write(f"Log directory {settings.log_dir} unusable ({exc}); file logging disabled\n")

    if not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    level = _parse_level(settings.log_level)
    if level is None:
        root.setLevel(logging.INFO)
        logger.warning("Invalid log level %r – defaulting to INFO", settings.log_level)
    else:
        root.setLevel(level)

    if file_path:
        logger.info("File logging enabled: %s", file_path)
    logger.debug("Debug logging is active")
    return root


def public_environment() -> dict[str, str]:
    """Return environment variables whose names do not look like secrets."""
    return {
        name: value
        for name, value in os.environ.items()
        if not any(marker in name.lower() for marker in _SECRET_MARKERS)
    }

__all__ = ["logging", "configure_logging", "public_environment", "LOG_FORMAT"]
