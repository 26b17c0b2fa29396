"""Decoding of list-valued API fields.

The calendar API has shipped tags, media and references as JSON-array
strings, as bare strings and as real JSON arrays depending on its version.
:func:`decode_string_list` turns any of these into a plain list of strings
without ever discarding the raw value.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional

__all__ = ["EMPTY_ARRAY_TOKENS", "decode_string_list"]

EMPTY_ARRAY_TOKENS = ("", "[]")


def _as_strings(items: List[Any]) -> List[str]:
    return [item if isinstance(item, str) else str(item) for item in items if item is not None]


def decode_string_list(raw: Any) -> Optional[List[str]]:
    """Decode *raw* into a list of strings.

    Returns
    -------
    list[str] | None
        ``[]`` for the empty cases (``None``, ``""``, ``"[]"``), the decoded
        items when *raw* is a list or a JSON array (or JSON string), and
        ``None`` when *raw* is a non-empty string that is not valid JSON so
        the caller can fall back to treating it as a single value.
    """
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return _as_strings(list(raw))

    text = str(raw).strip()
    if text in EMPTY_ARRAY_TOKENS:
        return []

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return None

    if isinstance(parsed, list):
        return _as_strings(parsed)
    if isinstance(parsed, str):
        return [parsed]
    # Numbers, objects, booleans: not a list shape we know about
    return None
