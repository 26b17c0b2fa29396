"""Signing and multi-relay publishing of Nostr events."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple

from nostr.event import Event
from nostr.key import PrivateKey

from ..clients.relay_client import RelayConnection, connect_relay
from ..config import RELAY_CONNECT_TIMEOUT, RELAY_PUBLISH_TIMEOUT
from ..models import OutgoingMessage, RelayOutcome
from .metrics import RunMetrics

logger = logging.getLogger(__name__)

Connector = Callable[[str, float], RelayConnection]


def _attempt_relay(
    relay: str,
    event: Event,
    connect: Connector,
    connect_timeout: float,
    publish_timeout: float,
) -> RelayOutcome:
    """Connect to one relay, publish *event*, always close the connection."""
    logger.debug("Connecting to relay %s", relay)
    try:
        conn = connect(relay, connect_timeout)
    except Exception as exc:
        logger.warning("Failed to connect to relay %s: %s", relay, exc)
        return RelayOutcome(relay=relay, success=False, error=f"connect: {exc}")

    started = time.monotonic()
    try:
        conn.publish(event, publish_timeout)
    except Exception as exc:
        logger.warning("Failed to publish event %s to relay %s: %s", event.id, relay, exc)
        return RelayOutcome(relay=relay, success=False, error=f"publish: {exc}")
    finally:
        conn.close()

    latency = time.monotonic() - started
    logger.info("Event %s published to relay %s in %.2fs", event.id, relay, latency)
    return RelayOutcome(relay=relay, success=True, latency=latency)


def publish_event(
    message: OutgoingMessage,
    identity: PrivateKey,
    relays: Sequence[str],
    metrics: RunMetrics,
    *,
    connect: Connector = connect_relay,
    connect_timeout: float = RELAY_CONNECT_TIMEOUT,
    publish_timeout: float = RELAY_PUBLISH_TIMEOUT,
    max_workers: int = 1,
    label: str = "event",
) -> Tuple[int, Optional[Exception]]:
    """Sign *message* with *identity* and send it to every relay.

    Returns ``(success_count, signing_error)``. A signing failure is
    returned, not raised, and no relay is contacted. Relay failures are
    logged, recorded in *metrics* and never stop the remaining attempts.
    """
    logger.info("Preparing to publish %s event to %d relays", label, len(relays))
    try:
        event = message.to_event(identity.public_key.hex())
        identity.sign_event(event)
    except Exception as exc:
        logger.error("Failed to sign %s event: %s", label, exc)
        return 0, exc
    logger.debug("Signed %s event %s (pubkey %s, %d tags)", label, event.id, event.public_key, len(event.tags))

    def attempt(relay: str) -> RelayOutcome:
        outcome = _attempt_relay(relay, event, connect, connect_timeout, publish_timeout)
        metrics.record_outcome(outcome)
        return outcome

    if max_workers > 1 and len(relays) > 1:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(relays))) as pool:
            outcomes: List[RelayOutcome] = list(pool.map(attempt, relays))
    else:
        outcomes = [attempt(relay) for relay in relays]

    successes = sum(1 for outcome in outcomes if outcome.success)
    if successes:
        logger.info("%s event %s accepted by %d/%d relays", label, event.id, successes, len(relays))
    else:
        logger.warning("%s event %s was not accepted by any relay", label, event.id)
    return successes, None

__all__ = ["publish_event", "Connector"]
