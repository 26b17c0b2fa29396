"""Short-lived websocket connections to Nostr relays."""

from __future__ import annotations

import json
import logging
import time

import websocket
from nostr.event import Event
from nostr.message_type import ClientMessageType

logger = logging.getLogger(__name__)


class RelayError(Exception):
    """Base class for relay-side publish failures."""


class RelayRejectedError(RelayError):
    """The relay answered ``OK`` with ``false`` for our event."""


def event_message(event: Event) -> str:
    """Serialise a signed *event* as an ``EVENT`` client message (NIP-01)."""
    return json.dumps(
        [
            ClientMessageType.EVENT,
            {
                "id": event.id,
                "pubkey": event.public_key,
                "created_at": event.created_at,
                "kind": event.kind,
                "tags": event.tags,
                "content": event.content,
                "sig": event.signature,
            },
        ]
    )


class RelayConnection:
    """One open websocket to a relay, used for a single publish."""

    def __init__(self, url: str, ws: websocket.WebSocket) -> None:
        self.url = url
        self._ws = ws

    def publish(self, event: Event, timeout: float) -> str:
        """Send *event* and wait for the relay's ``OK`` answer.

        Returns the relay message on acceptance. Raises
        :class:`RelayRejectedError` on rejection and :class:`TimeoutError`
        when no answer arrives within *timeout* seconds.
        """
        deadline = time.monotonic() + timeout
        event_id = event.id
        self._ws.send(event_message(event))

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError(f"no OK from {self.url} within {timeout:.0f}s")
            self._ws.settimeout(remaining)
            try:
                raw = self._ws.recv()
            except websocket.WebSocketTimeoutException as exc:
                raise TimeoutError(f"no OK from {self.url} within {timeout:.0f}s") from exc

            try:
                frame = json.loads(raw)
            except (TypeError, json.JSONDecodeError):
                logger.debug("Ignoring non-JSON frame from %s", self.url)
                continue
            if not isinstance(frame, list) or not frame:
                continue

            if frame[0] == "NOTICE":
                logger.info("Relay %s notice: %s", self.url, frame[1] if len(frame) > 1 else "")
            elif frame[0] == "OK" and len(frame) >= 3 and frame[1] == event_id:
                message = str(frame[3]) if len(frame) > 3 else ""
                if frame[2] is True:
                    return message
                raise RelayRejectedError(f"{self.url} rejected event: {message or 'no reason given'}")

    def close(self) -> None:
        if self._ws is None:
            return
        try:
            self._ws.close()
        except (websocket.WebSocketException, OSError) as exc:
            logger.debug("Error closing connection to %s: %s", self.url, exc)
        finally:
            self._ws = None


def connect_relay(url: str, timeout: float) -> RelayConnection:
    """Open a websocket to *url*, failing after *timeout* seconds."""
    ws = websocket.create_connection(url, timeout=timeout)
    return RelayConnection(url, ws)

__all__ = ["RelayConnection", "RelayError", "RelayRejectedError", "connect_relay", "event_message"]
