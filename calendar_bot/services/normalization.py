"""Normalization of the loosely-typed tag, media and reference fields."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List

from ..models import NormalizedFields, SourceEvent
from ..utils.json_parsing import decode_string_list
from ..utils.text_cleaning import clean_url, strip_list_marker, strip_wrapping

logger = logging.getLogger(__name__)


def _non_empty(values: Iterable[str]) -> List[str]:
    return [v for v in values if v and v.strip()]


def _fallback_tags(raw: str) -> List[str]:
    """Recover tags from a malformed array-like string such as ``[btc, history]``."""
    text = strip_list_marker(raw)
    if not text.startswith("["):
        return [strip_wrapping(text)]
    inner = text[1:].rstrip()
    if inner.endswith("]"):
        inner = inner[:-1]
    return [part.strip().strip("\"'").strip() for part in inner.split(",")]


def parse_tags(raw: Any) -> List[str]:
    """Return the free-form tags held in *raw*.

    ``None``, ``""`` and ``"[]"`` give an empty list. Anything that is not a
    decodable list is kept rather than dropped, with its brackets, quotes
    and list markers removed.
    """
    decoded = decode_string_list(raw)
    if decoded is None:
        logger.warning("Tags field is not a JSON array, recovering tags from %r", raw)
        decoded = _fallback_tags(str(raw))
    return _non_empty(tag.strip() for tag in decoded)


def parse_url_list(raw: Any) -> List[str]:
    """Return cleaned media/reference URLs held in *raw*."""
    decoded = decode_string_list(raw)
    if decoded is None:
        logger.debug("URL field is not a JSON array, treating it as one entry: %r", raw)
        decoded = [str(raw)]
    return _non_empty(clean_url(item) for item in decoded)


def normalize_event(event: SourceEvent) -> NormalizedFields:
    """Build the normalized tag/media/reference lists for *event*."""
    tags = parse_tags(event.tags)
    tags.extend(_non_empty(h.strip().lstrip("#") for h in event.hashtags))

    normalized = NormalizedFields(
        tags=tags,
        media=parse_url_list(event.media),
        references=parse_url_list(event.references),
    )
    logger.debug(
        "Normalized event %s: %d tags, %d media, %d references",
        event.id,
        len(normalized.tags),
        len(normalized.media),
        len(normalized.references),
    )
    return normalized

__all__ = ["parse_tags", "parse_url_list", "normalize_event"]
