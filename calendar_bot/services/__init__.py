"""Service layer modules grouping business logic by concern.

This module provides convenience re-exports so that callers can simply do for
example `from calendar_bot.services import fetch_events` without having to
know which underlying module provides the symbol.
"""

from .discovery import FetchError, fetch_events  # noqa: F401
from .normalization import normalize_event, parse_tags, parse_url_list  # noqa: F401
from .images import select_picture, media_type_for  # noqa: F401
from .builders import build_text_note, build_picture_event  # noqa: F401
from .publishing import publish_event  # noqa: F401
from .metrics import RunMetrics  # noqa: F401

__all__ = [
    "fetch_events",
    "FetchError",
    "normalize_event",
    "parse_tags",
    "parse_url_list",
    "select_picture",
    "media_type_for",
    "build_text_note",
    "build_picture_event",
    "publish_event",
    "RunMetrics",
]
