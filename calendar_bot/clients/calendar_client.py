"""Shared HTTP session for calendar API calls."""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .. import __version__
from ..config import API_RETRY_ATTEMPTS, API_RETRY_DELAY

_session: requests.Session | None = None


def build_retry() -> Retry:
    """Retry policy for transport errors and 5xx/429 answers, waits capped at the retry delay."""
    return Retry(
        total=API_RETRY_ATTEMPTS - 1,
        backoff_factor=API_RETRY_DELAY,
        backoff_max=API_RETRY_DELAY,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET"}),
        respect_retry_after_header=True,
        raise_on_status=False,
    )


def get_session() -> requests.Session:
    """Return a singleton :class:`requests.Session` configured for the calendar API."""
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers.update(
            {
                "Accept": "application/json",
                "User-Agent": f"calendar-bot/{__version__}",
            }
        )
        adapter = HTTPAdapter(max_retries=build_retry())
        _session.mount("https://", adapter)
        _session.mount("http://", adapter)
    return _session

__all__ = ["get_session", "build_retry"]
