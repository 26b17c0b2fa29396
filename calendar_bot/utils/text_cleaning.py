"""Shared helper utilities used across services."""

from __future__ import annotations

import re
from typing import Final

# Leading list-item markers such as "- ", "* ", "• " or "1. "
_LIST_MARKER_RE: Final = re.compile(r"^(?:[-*+•]|\d+[.)])(?:\s+|$)")

# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def strip_wrapping(text: str) -> str:
    """Remove JSON single-item array wrapping (``["…"]``) and stray quotes."""
    cleaned: str = text.strip()

    if cleaned.startswith("["):
        cleaned = cleaned[1:].strip()
    if cleaned.endswith("]"):
        cleaned = cleaned[:-1].strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1]
    return cleaned.strip()


def strip_list_marker(text: str) -> str:
    """Drop a leading markdown-style list marker."""
    return _LIST_MARKER_RE.sub("", text.strip(), count=1).strip()


def clean_url(value: str) -> str:
    """Remove formatting artifacts around a URL or reference string.

    Handles the shapes seen in the calendar API: surrounding whitespace,
    single-item array wrapping (``["https://…"]``) and list prefixes
    (``- https://…``).
    """
    if not value:
        return ""
    return strip_list_marker(strip_wrapping(strip_list_marker(value)))

__all__ = ["strip_wrapping", "strip_list_marker", "clean_url"]
