"""Construction of unsigned Nostr messages from calendar records.

Two variants are built for every source event:

* a kind 1 text note carrying the title, description, media and references
  in its content, and
* a kind 20 picture event (NIP-68) when one of the media URLs is a
  supported image.

Builders never sign and never touch the network.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Iterable, List, Optional, Sequence

from ..models import OutgoingMessage, SourceEvent
from .images import select_picture

logger = logging.getLogger(__name__)

KIND_TEXT_NOTE: int = 1
KIND_PICTURE: int = 20

BASELINE_TAGS: tuple[str, ...] = ("bitcoin", "history", "onthisday", "calendar", "btc")

Tag = List[str]


def topic_tags(tags: Iterable[str]) -> List[Tag]:
    """Return ``t`` tags for the baseline topics followed by *tags*.

    Values are lower-cased; blanks and repeats are dropped, first occurrence
    wins.
    """
    seen: set[str] = set()
    out: List[Tag] = []
    for value in (*BASELINE_TAGS, *tags):
        topic = (value or "").strip().lower()
        if not topic or topic in seen:
            continue
        seen.add(topic)
        out.append(["t", topic])
    return out


def url_hash(url: str) -> str:
    """Hex SHA-256 of *url*, used for the ``imeta x`` entry."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


def _paragraph(lines: Sequence[str]) -> str:
    return "\n".join(lines)


def build_text_note(
    event: SourceEvent,
    tags: Sequence[str],
    references: Sequence[str],
    media: Sequence[str] = (),
    created_at: Optional[int] = None,
) -> OutgoingMessage:
    """Build the kind 1 text note for *event*."""
    blocks = [event.title, event.description]
    if media:
        blocks.append(_paragraph(media))
    if references:
        blocks.append(_paragraph(references))
    content = "\n\n".join(blocks)

    note_tags = topic_tags(tags)
    note_tags.append(["d", event.date_tag])

    message = OutgoingMessage(kind=KIND_TEXT_NOTE, content=content, tags=note_tags)
    if created_at is not None:
        message.created_at = created_at
    return message


def build_picture_event(
    event: SourceEvent,
    tags: Sequence[str],
    references: Sequence[str],
    media: Sequence[str],
    created_at: Optional[int] = None,
) -> Optional[OutgoingMessage]:
    """Build the kind 20 picture event for *event*.

    Returns ``None`` when none of *media* is a supported image; that is a
    normal outcome, not an error.
    """
    picture = select_picture(media)
    if picture is None:
        logger.debug("Event %s does not qualify for a picture post", event.id)
        return None
    image_url, media_type = picture

    picture_tags: List[Tag] = [
        ["title", event.title],
        ["imeta", f"url {image_url}"],
        ["imeta", f"x {url_hash(image_url)}"],
    ]
    if event.description:
        picture_tags.append(["summary", event.description])
    picture_tags.append(["m", media_type])
    picture_tags.extend(topic_tags(tags))
    picture_tags.extend(["r", ref] for ref in references if ref)
    picture_tags.append(["d", event.date_tag])

    message = OutgoingMessage(
        kind=KIND_PICTURE,
        content=f"{event.title}\n\n{event.description}",
        tags=picture_tags,
    )
    if created_at is not None:
        message.created_at = created_at
    return message

__all__ = [
    "BASELINE_TAGS",
    "KIND_TEXT_NOTE",
    "KIND_PICTURE",
    "build_text_note",
    "build_picture_event",
    "topic_tags",
    "url_hash",
]
