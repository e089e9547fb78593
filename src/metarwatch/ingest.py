"""Ingestion orchestrator: fetch the bulk feed, parse it, upsert the cache."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from metarwatch._http import FeedSource
from metarwatch.cache import ObservationCache
from metarwatch.exceptions import FeedError
from metarwatch.models.observation import Observation
from metarwatch.parser import parse_feed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestionReport:
    """Outcome of one ingestion cycle."""

    ok: bool
    features: int = 0
    cached: int = 0
    skipped: int = 0
    error: str | None = None


class IngestionOrchestrator:
    """Run fetch -> parse -> upsert cycles, one at a time.

    Feed failures are logged and end the cycle without touching the cache.
    A station whose cache write fails is logged and counted as skipped.
    Reads against the cache are never blocked by a running cycle.
    """

    def __init__(
        self,
        source: FeedSource,
        cache: ObservationCache,
        parser: Callable[[Any], Iterator[Observation]] = parse_feed,
    ) -> None:
        self.source = source
        self.cache = cache
        self.parser = parser
        self._cycle_lock = threading.Lock()

    def run_cycle(self) -> IngestionReport:
        with self._cycle_lock:
            return self._run_cycle()

    def _run_cycle(self) -> IngestionReport:
        logger.info("Querying METAR feed via %r", self.source)
        try:
            payload = self.source.fetch()
            observations = self.parser(payload)
        except FeedError as exc:
            logger.error("Unable to retrieve METARs: %s", exc, exc_info=exc)
            return IngestionReport(ok=False, error=f"{type(exc).__name__}: {exc}")
        except Exception as exc:
            logger.exception("Unexpected failure retrieving METARs")
            return IngestionReport(ok=False, error=f"{type(exc).__name__}: {exc}")

        features = len(payload.get("features") or [])
        cached = 0
        for observation in observations:
            try:
                entry = self.cache.upsert(observation.station, observation)
            except Exception:
                logger.exception("Unable to cache METAR for %s", observation.station)
                continue
            if entry is not None:
                cached += 1

        report = IngestionReport(
            ok=True, features=features, cached=cached, skipped=features - cached,
        )
        logger.info(
            "METAR ingestion complete: %d features, %d cached, %d skipped",
            report.features, report.cached, report.skipped,
        )
        return report

    def run_forever(self, interval: float, stop: threading.Event) -> None:
        """Run cycles every ``interval`` seconds until ``stop`` is set."""
        while not stop.is_set():
            self.run_cycle()
            stop.wait(interval)
