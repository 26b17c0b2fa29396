"""Run-level counters shared by the publisher and the pipeline."""

from __future__ import annotations

import json
import logging
import os
import threading
from collections import defaultdict
from typing import Any, Dict, List

from ..models import RelayOutcome
from ..utils.datetime_utils import get_current_timestamp

logger = logging.getLogger(__name__)

COUNTERS: tuple[str, ...] = (
    "kind1_posted",
    "kind1_failed",
    "kind20_posted",
    "kind20_failed",
    "kind20_skipped",
    "image_validation_fails",
    "events_skipped",
)


class RunMetrics:
    """Thread-safe aggregate of one run's publishing results."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.started_at = get_current_timestamp()
        self.counters: Dict[str, int] = {name: 0 for name in COUNTERS}
        self.relay_successes: Dict[str, int] = defaultdict(int)
        self.relay_failures: Dict[str, int] = defaultdict(int)
        self.relay_latencies: Dict[str, List[float]] = defaultdict(list)

    def increment(self, name: str, amount: int = 1) -> None:
        if name not in self.counters:
            raise KeyError(f"unknown metric {name!r}")
        with self._lock:
            self.counters[name] += amount

    def record_outcome(self, outcome: RelayOutcome) -> None:
        with self._lock:
            if outcome.success:
                self.relay_successes[outcome.relay] += 1
                if outcome.latency is not None and outcome.latency > 0:
                    self.relay_latencies[outcome.relay].append(outcome.latency)
            else:
                self.relay_failures[outcome.relay] += 1

    def __getitem__(self, name: str) -> int:
        return self.counters[name]

    def average_latency(self, relay: str) -> float:
        with self._lock:
            samples = self.relay_latencies.get(relay) or []
            return sum(samples) / len(samples) if samples else 0.0

    def snapshot(self) -> Dict[str, Any]:
        """Return a JSON-serialisable copy of the current state."""
        with self._lock:
            now = get_current_timestamp()
            return {
                "timestamp": now.isoformat(),
                "runtime_seconds": round((now - self.started_at).total_seconds(), 3),
                **self.counters,
                "relay_successes": dict(self.relay_successes),
                "relay_failures": dict(self.relay_failures),
                "relay_avg_latency_seconds": {
                    relay: round(sum(samples) / len(samples), 3)
                    for relay, samples in self.relay_latencies.items()
                    if samples
                },
            }

    def log_summary(self) -> None:
        data = self.snapshot()
        logger.info("=== Calendar Bot Run Summary ===")
        logger.info("Runtime: %.1fs", data["runtime_seconds"])
        logger.info("Kind 1 posted/failed: %d/%d", data["kind1_posted"], data["kind1_failed"])
        logger.info(
            "Kind 20 posted/failed/skipped: %d/%d/%d",
            data["kind20_posted"],
            data["kind20_failed"],
            data["kind20_skipped"],
        )
        logger.info("Image validation failures: %d", data["image_validation_fails"])
        logger.info("Events skipped (other dates): %d", data["events_skipped"])
        relays = sorted(set(data["relay_successes"]) | set(data["relay_failures"]))
        for relay in relays:
            logger.info(
                "Relay %s: %d ok, %d failed, avg %.3fs",
                relay,
                data["relay_successes"].get(relay, 0),
                data["relay_failures"].get(relay, 0),
                data["relay_avg_latency_seconds"].get(relay, 0.0),
            )
        logger.info("================================")

    def export(self, path: str) -> str:
        """Write the snapshot to *path* as indented JSON and return the path."""
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(self.snapshot(), fh, indent=2, sort_keys=True)
        return path

__all__ = ["RunMetrics", "COUNTERS"]
