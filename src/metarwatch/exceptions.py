"""Custom exceptions for metarwatch."""

from __future__ import annotations


class MetarWatchError(Exception):
    """Base exception for all metarwatch errors."""


class ConfigurationError(MetarWatchError):
    """Raised when environment configuration is missing or invalid."""


# ── Feed ────────────────────────────────────────────────────────────────────


class FeedError(MetarWatchError):
    """Base for failures fetching or reading the bulk METAR feed."""


class FeedConnectionError(FeedError):
    """Raised when the feed cannot be reached."""


class FeedTimeoutError(FeedError):
    """Raised when a request to the feed times out."""


class FeedAPIError(FeedError):
    """Raised when the feed answers with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class FeedFormatError(FeedError):
    """Raised when the feed body is not JSON or lacks the feature array."""


class FeatureParseError(MetarWatchError):
    """Raised when a single feature in an otherwise healthy feed is malformed."""


class ObservationDecodeError(MetarWatchError):
    """Raised when a cached value cannot be turned back into an Observation."""


# ── Queries ─────────────────────────────────────────────────────────────────


class QueryError(MetarWatchError):
    """Base for errors surfaced to clients."""

    status_code = 500

    def __init__(self, identifier: str, message: str) -> None:
        self.identifier = identifier
        self.message = message
        super().__init__(message)


class InvalidStationError(QueryError):
    """Identifier is neither an allowed station nor a known group alias."""

    status_code = 400

    def __init__(self, identifier: str) -> None:
        super().__init__(
            identifier,
            f"Provided station [{identifier}] is not an accepted station identifier",
        )


class StationNotFoundError(QueryError):
    """Station is valid but has no cached observation yet."""

    status_code = 404

    def __init__(self, identifier: str) -> None:
        super().__init__(identifier, f"METAR information not found for {identifier}")
