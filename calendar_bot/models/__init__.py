"""Domain models used across the project."""

from .event import NormalizedFields, OutgoingMessage, RawField, RelayOutcome, SourceEvent  # noqa: F401

__all__ = ["SourceEvent", "NormalizedFields", "OutgoingMessage", "RelayOutcome", "RawField"]
