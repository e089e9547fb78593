"""metarwatch: METAR ingestion, per-station cache and filtered queries."""

from metarwatch._http import FeedSource, HttpFeedSource
from metarwatch._projection import FIELD_EXTRACTORS, project
from metarwatch.cache import ObservationCache
from metarwatch.config import Settings
from metarwatch.exceptions import (
    ConfigurationError,
    FeatureParseError,
    FeedAPIError,
    FeedConnectionError,
    FeedError,
    FeedFormatError,
    FeedTimeoutError,
    InvalidStationError,
    MetarWatchError,
    ObservationDecodeError,
    QueryError,
    StationNotFoundError,
)
from metarwatch.ingest import IngestionOrchestrator, IngestionReport
from metarwatch.models import Observation
from metarwatch.parser import parse_feature, parse_feed
from metarwatch.resolver import QueryResolver
from metarwatch.service import MetarService
from metarwatch.stations import StationRegistry, default_registry
from metarwatch.store import CacheStore, InMemoryCacheStore, SQLiteCacheStore

__all__ = [
    "FIELD_EXTRACTORS",
    "CacheStore",
    "ConfigurationError",
    "FeatureParseError",
    "FeedAPIError",
    "FeedConnectionError",
    "FeedError",
    "FeedFormatError",
    "FeedSource",
    "FeedTimeoutError",
    "HttpFeedSource",
    "InMemoryCacheStore",
    "IngestionOrchestrator",
    "IngestionReport",
    "InvalidStationError",
    "MetarService",
    "MetarWatchError",
    "Observation",
    "ObservationCache",
    "ObservationDecodeError",
    "QueryError",
    "QueryResolver",
    "SQLiteCacheStore",
    "Settings",
    "StationNotFoundError",
    "StationRegistry",
    "default_registry",
    "parse_feature",
    "parse_feed",
    "project",
]

__version__ = "0.1.0"
