"""End-to-end fetch, build and publish pipeline for one day's events."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Tuple

from nostr.key import PrivateKey

from ..logging_config import logging as _  # noqa: F401  # ensure config applied early
from ..config import Settings, load_identity
from ..models import SourceEvent
from ..services.builders import build_picture_event, build_text_note
from ..services.discovery import FetchError, fetch_events
from ..services.metrics import RunMetrics
from ..services.normalization import normalize_event
from ..services.publishing import publish_event
from ..utils.datetime_utils import file_timestamp, same_calendar_day

logger = logging.getLogger(__name__)

PACING_TRIGGERS = ("text", "any")


@dataclass(slots=True)
class PacingPolicy:
    """When and how long to pause between two published events.

    ``trigger="text"`` pauses only after a successful text note;
    ``trigger="any"`` also pauses after a picture-only success.
    """

    delay: timedelta = timedelta(minutes=30)
    trigger: str = "text"

    def __post_init__(self) -> None:
        if self.trigger not in PACING_TRIGGERS:
            raise ValueError(f"unknown pacing trigger {self.trigger!r}")

    def should_wait(self, text_published: bool, picture_published: bool) -> bool:
        if self.trigger == "any":
            return text_published or picture_published
        return text_published

    def wait(self, stop_event: threading.Event) -> bool:
        """Block for the delay; return ``False`` if *stop_event* cut it short."""
        seconds = self.delay.total_seconds()
        if seconds <= 0:
            return not stop_event.is_set()
        logger.info("Waiting %s before the next event…", self.delay)
        return not stop_event.wait(seconds)


def _record(metrics: RunMetrics, prefix: str, count: int, error: Optional[Exception]) -> bool:
    if error is None and count > 0:
        metrics.increment(f"{prefix}_posted")
        return True
    metrics.increment(f"{prefix}_failed")
    return False


def process_event(
    event: SourceEvent,
    identity: PrivateKey,
    settings: Settings,
    metrics: RunMetrics,
) -> Tuple[bool, bool]:
    """Publish the text note and picture variants of *event*.

    Both variants are always attempted. Returns ``(text_ok, picture_ok)``.
    """
    logger.info("Processing event %s: %s", event.id, event.title)
    fields = normalize_event(event)

    note = build_text_note(event, fields.tags, fields.references, fields.media)
    count, error = publish_event(
        note,
        identity,
        settings.relays,
        metrics,
        max_workers=settings.relay_concurrency,
        label="kind1",
    )
    text_ok = _record(metrics, "kind1", count, error)
    if error is not None:
        logger.error("Kind 1 event for %s could not be signed: %s", event.id, error)
    elif not text_ok:
        logger.warning("Kind 1 event for %s failed to publish to any relay", event.id)

    picture_ok = False
    picture = build_picture_event(event, fields.tags, fields.references, fields.media)
    if picture is None:
        metrics.increment("kind20_skipped")
        if fields.media:
            metrics.increment("image_validation_fails")
        logger.info("Event %s did not qualify for a picture post", event.id)
    else:
        count, error = publish_event(
            picture,
            identity,
            settings.relays,
            metrics,
            max_workers=settings.relay_concurrency,
            label="kind20",
        )
        picture_ok = _record(metrics, "kind20", count, error)
        if error is not None:
            logger.error("Kind 20 event for %s could not be signed: %s", event.id, error)
        elif not picture_ok:
            logger.warning("Kind 20 event for %s failed to publish to any relay", event.id)

    return text_ok, picture_ok


def _export_metrics(metrics: RunMetrics, settings: Settings, prefix: str) -> None:
    metrics.log_summary()
    path = os.path.join(settings.metrics_dir, f"{prefix}_{file_timestamp()}.json")
    try:
        metrics.export(path)
    except OSError as exc:
        logger.error("Failed to export metrics to %s: %s", path, exc)
    else:
        logger.info("Metrics exported to %s", path)


def run(
    settings: Settings,
    *,
    identity: Optional[PrivateKey] = None,
    metrics: Optional[RunMetrics] = None,
    today: Optional[date] = None,
    pacing: Optional[PacingPolicy] = None,
    stop_event: Optional[threading.Event] = None,
) -> RunMetrics:
    """Execute the pipeline once for *today* (defaults to the local date)."""
    identity = identity or load_identity(settings.private_key)
    metrics = metrics or RunMetrics()
    today = today or date.today()
    pacing = pacing or PacingPolicy(delay=timedelta(minutes=settings.event_delay_minutes))
    stop_event = stop_event or threading.Event()

    month, day = f"{today.month:02d}", f"{today.day:02d}"
    logger.info("Starting calendar bot run for %s-%s", month, day)

    try:
        events = fetch_events(settings.api_endpoint, settings.api_key, month, day, settings.language)
    except FetchError:
        logger.exception("Failed to fetch events from API – aborting run")
        _export_metrics(metrics, settings, "metrics_error")
        raise

    todays: List[SourceEvent] = []
    for event in events:
        if same_calendar_day(event.date, today):
            todays.append(event)
        else:
            metrics.increment("events_skipped")
            logger.debug("Skipped event %s dated %s", event.id, event.date_tag)

    if not todays:
        logger.info("No events found for today's date")

    for index, event in enumerate(todays):
        if stop_event.is_set():
            logger.info("Stop requested – %d events left unprocessed", len(todays) - index)
            break
        text_ok, picture_ok = process_event(event, identity, settings, metrics)
        is_last = index == len(todays) - 1
        if not is_last and pacing.should_wait(text_ok, picture_ok):
            if not pacing.wait(stop_event):
                logger.info("Pause interrupted by stop request")
                break

    logger.info("Calendar bot run finished")
    _export_metrics(metrics, settings, "metrics_run")
    return metrics

__all__ = ["run", "process_event", "PacingPolicy"]
