"""Command-line entry point: ``python -m calendar_bot <PRIVATE_KEY_ENV>``."""

from __future__ import annotations

import argparse
import logging
import os
import platform
import signal
import sys
import threading

from . import __version__
from .config import ConfigError, load_identity, load_settings
from .logging_config import configure_logging, public_environment
from .services.discovery import FetchError
from .workflows.event_pipeline import run

logger = logging.getLogger("calendar_bot")


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="calendar-bot",
        description="Publish today's historical calendar events to Nostr relays",
    )
    p.add_argument(
        "private_key_env",
        metavar="ENV_VAR_FOR_PRIVATE_KEY",
        help="Name of the environment variable holding the bot's private key (hex or nsec)",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p.parse_args(argv)


def _install_signal_handlers(stop_event: threading.Event) -> None:
    def _handler(signum, _frame):
        logger.warning("Received signal %s – finishing current event and stopping", signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings(args.private_key_env)
        identity = load_identity(settings.private_key)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    configure_logging(settings)
    logger.info("Bot configured to process events for language %s", settings.language)
    logger.info("Publishing as %s to %d relays", identity.public_key.bech32(), len(settings.relays))

    if settings.debug:
        logger.debug(
            "System information: os=%s arch=%s python=%s cpus=%s cwd=%s key_var=%s",
            platform.system(),
            platform.machine(),
            platform.python_version(),
            os.cpu_count(),
            os.getcwd(),
            settings.private_key_env,
        )
        logger.debug("Environment: %s", public_environment())

    stop_event = threading.Event()
    _install_signal_handlers(stop_event)

    try:
        run(settings, identity=identity, stop_event=stop_event)
    except FetchError:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
