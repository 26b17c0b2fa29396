"""Convenience re-exports for network client accessors."""

from .calendar_client import get_session as get_calendar_session  # noqa: F401
from .relay_client import (  # noqa: F401
    RelayConnection,
    RelayError,
    RelayRejectedError,
    connect_relay,
)

__all__ = [
    "get_calendar_session",
    "RelayConnection",
    "RelayError",
    "RelayRejectedError",
    "connect_relay",
]
