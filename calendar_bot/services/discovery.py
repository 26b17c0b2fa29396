"""Event discovery via the calendar API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests

from ..clients.calendar_client import get_session as get_calendar_session
from ..config import API_TIMEOUT
from ..models import SourceEvent

logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    """The event list could not be retrieved from the calendar API."""


def _extract_records(payload: Any) -> List[Dict[str, Any]]:
    """Return the list of event records from a decoded API response."""
    if isinstance(payload, list):
        records = payload
    elif isinstance(payload, dict):
        records = payload.get("events") or []
    else:
        raise FetchError(f"unexpected API response type: {type(payload).__name__}")
    return [r for r in records if isinstance(r, dict)]


def fetch_events(endpoint: str, api_key: str, month: str, day: str, language: str) -> List[SourceEvent]:
    """Fetch the "on this day" events for *month*/*day* in *language*.

    Retries of transient failures happen inside the shared session; any
    error that survives them is raised as :class:`FetchError`.
    """
    url = f"{endpoint}/events"
    params = {"month": month, "day": day, "lang": language}
    headers = {"X-API-Key": api_key}
    logger.info("Fetching events for %s-%s (%s) from %s", month, day, language, url)

    try:
        response = get_calendar_session().get(url, params=params, headers=headers, timeout=API_TIMEOUT)
    except requests.RequestException as exc:
        logger.error("Calendar API request failed: %s", exc)
        raise FetchError(f"calendar API request failed: {exc}") from exc

    if response.status_code != 200:
        logger.error("Error from calendar API: %s - %s", response.status_code, response.text[:200])
        raise FetchError(f"calendar API error: {response.status_code}")

    try:
        payload = response.json()
    except ValueError as exc:
        raise FetchError(f"API response is not valid JSON: {exc}") from exc

    records = _extract_records(payload)
    events = [e for e in (SourceEvent.from_api(r) for r in records) if e is not None]
    logger.info("Fetched %d events (%d records)", len(events), len(records))
    return events

__all__ = ["fetch_events", "FetchError"]
