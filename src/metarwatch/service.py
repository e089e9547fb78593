"""Client-facing METAR service."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from metarwatch._http import FeedSource, HttpFeedSource
from metarwatch._logging import configure_log_dir, log_service_call
from metarwatch._projection import project, split_fields
from metarwatch.cache import ObservationCache
from metarwatch.config import Settings
from metarwatch.ingest import IngestionOrchestrator, IngestionReport
from metarwatch.models.observation import Observation
from metarwatch.resolver import QueryResolver
from metarwatch.stations import StationRegistry, default_registry
from metarwatch.store import CacheStore, InMemoryCacheStore, SQLiteCacheStore


class MetarService:
    """Query cached METARs and trigger feed updates.

    Usage:
        with MetarService() as wx:
            wx.update()
            wx.metar("KATL", data=["temperature", "wind"])
            wx.metar("atlanta")

        # Or built from METARWATCH_* environment variables:
        wx = MetarService.from_settings(Settings.from_env())
    """

    def __init__(
        self,
        registry: StationRegistry | None = None,
        source: FeedSource | None = None,
        store: CacheStore | None = None,
    ) -> None:
        self.registry = registry or default_registry()
        self.source = source or HttpFeedSource()
        self.cache = ObservationCache(store or InMemoryCacheStore())
        self.resolver = QueryResolver(self.registry, self.cache)
        self.ingestion = IngestionOrchestrator(self.source, self.cache)
        self.last_report: IngestionReport | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> MetarService:
        if settings.log_dir:
            configure_log_dir(settings.log_dir)
        source = HttpFeedSource(
            base_url=settings.feed_base_url,
            endpoint=settings.feed_endpoint,
            bbox=settings.feed_bbox,
            timeout=settings.feed_timeout,
        )
        store: CacheStore = (
            SQLiteCacheStore(settings.cache_path) if settings.cache_path else InMemoryCacheStore()
        )
        return cls(registry=settings.registry(), source=source, store=store)

    def __enter__(self) -> MetarService:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the feed connection and the cache store."""
        self.source.close()
        self.cache.store.close()

    # ── Endpoints ──────────────────────────────────────────────

    @log_service_call
    def update(self) -> None:
        """Run one ingestion cycle; feed failures are logged, never raised."""
        self.last_report = self.ingestion.run_cycle()

    @log_service_call
    def metar(
        self,
        identifier: str,
        data: str | Iterable[str] | None = None,
    ) -> list[Observation]:
        """Get the latest METAR(s) for a station code or group alias.

        ``data`` limits each record to the named fields (plus the station);
        it accepts a list and/or comma-separated names.

        Raises:
            InvalidStationError: unknown station and not a group alias.
            StationNotFoundError: known station without a cached METAR.
        """
        observations = self.resolver.resolve(identifier)
        return project(observations, split_fields(data))

    @staticmethod
    def as_dicts(observations: Sequence[Observation]) -> list[dict[str, Any]]:
        """JSON-ready dicts, leaving out fields that were not reported."""
        return [o.model_dump(mode="json", exclude_none=True) for o in observations]
