"""Definition of the source and outcome records used throughout the project."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Union

from nostr.event import Event

from ..utils.datetime_utils import parse_calendar_date

logger = logging.getLogger(__name__)

# Raw API fields arrive as a JSON-array string, a bare string or a list
RawField = Union[str, List[str], None]


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(value)
    return value


@dataclass(slots=True, frozen=True)
class SourceEvent:
    """One "on this day" record as returned by the calendar API."""

    id: int
    date: date
    title: str = ""
    description: str = ""
    tags: RawField = None
    media: RawField = None
    references: RawField = None
    hashtags: tuple = ()
    olas: bool = False

    @property
    def date_tag(self) -> str:
        """The ``YYYY-MM-DD`` identifier used for the ``d`` tag."""
        return self.date.isoformat()

    @classmethod
    def from_api(cls, record: Dict[str, Any]) -> Optional["SourceEvent"]:
        """Build an event from one API record; ``None`` if it has no usable date."""
        event_date = parse_calendar_date(record.get("Date"))
        if event_date is None:
            logger.warning("Dropping API event %s – unparseable date %r", record.get("ID"), record.get("Date"))
            return None

        try:
            event_id = int(record.get("ID") or 0)
        except (TypeError, ValueError):
            event_id = 0

        hashtags = record.get("hashtags") or ()
        if isinstance(hashtags, str):
            hashtags = (hashtags,)

        return cls(
            id=event_id,
            date=event_date,
            title=str(record.get("Title") or "").strip(),
            description=str(record.get("Description") or "").strip(),
            tags=_freeze(record.get("Tags")),
            media=_freeze(record.get("Media")),
            references=_freeze(record.get("References")),
            hashtags=tuple(str(h) for h in hashtags),
            olas=bool(record.get("olas", False)),
        )


@dataclass(slots=True, frozen=True)
class NormalizedFields:
    """Cleaned tag, media and reference lists derived from a :class:`SourceEvent`."""

    tags: List[str] = field(default_factory=list)
    media: List[str] = field(default_factory=list)
    references: List[str] = field(default_factory=list)


@dataclass(slots=True)
class OutgoingMessage:
    """An unsigned Nostr message: kind, tags and content.

    The public key, id and signature are only known once a signing key is
    applied, see :meth:`to_event`.
    """

    kind: int
    content: str
    tags: List[List[str]] = field(default_factory=list)
    created_at: int = field(default_factory=lambda: int(time.time()))

    def to_event(self, public_key: str) -> Event:
        """Return a ``nostr`` event for *public_key*, ready to be signed."""
        return Event(
            public_key=public_key,
            content=self.content,
            created_at=self.created_at,
            kind=self.kind,
            tags=[list(tag) for tag in self.tags],
        )


@dataclass(slots=True)
class RelayOutcome:
    """Result of one publish attempt against one relay."""

    relay: str
    success: bool
    latency: Optional[float] = None
    error: Optional[str] = None

__all__ = ["SourceEvent", "NormalizedFields", "OutgoingMessage", "RelayOutcome", "RawField"]
