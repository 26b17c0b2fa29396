"""Top-level package for the calendar bot.

This package simply exposes the public run() helper so callers can do
`python -m calendar_bot NSEC_VAR` or `from calendar_bot import run`.
"""

from importlib import metadata as _metadata

try:
    __version__: str = _metadata.version("calendar-bot")
except _metadata.PackageNotFoundError:  # pragma: no cover – running from source
    __version__ = "0.0.0"

from .workflows.event_pipeline import run  # convenience re-export

__all__ = ["run", "__version__"]
