"""Feed source: HTTP transport for the bulk METAR feed, wrapping httpx."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx

from metarwatch._logging import log_feed_call
from metarwatch.exceptions import (
    FeedAPIError,
    FeedConnectionError,
    FeedFormatError,
    FeedTimeoutError,
)

DEFAULT_BASE_URL = "https://aviationweather.gov/api/data"
DEFAULT_ENDPOINT = "/metar"
DEFAULT_TIMEOUT = 30.0
# Atlanta sectional chart, min lat, min lon, max lat, max lon
DEFAULT_BBOX = "30.1588,-85.6898,35.1475,-80.8209"


def _handle_response(response: httpx.Response) -> Any:
    """Validate response status and return the parsed JSON body."""
    if not response.is_success:
        raise FeedAPIError(
            status_code=response.status_code,
            message=response.text,
        )
    try:
        return response.json()
    except ValueError as exc:
        raise FeedFormatError(f"Feed body is not JSON: {exc}") from exc


class FeedSource(ABC):
    """Anything that can hand over one complete bulk feed payload."""

    @abstractmethod
    def fetch(self) -> Any: ...

    def close(self) -> None:
        """Release transport resources, if any."""


class HttpFeedSource(FeedSource):
    """Synchronous feed source using httpx.Client."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        endpoint: str = DEFAULT_ENDPOINT,
        bbox: str = DEFAULT_BBOX,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.endpoint = endpoint
        self.params: list[tuple[str, str]] = [("format", "geojson"), ("bbox", bbox)]
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )

    def __repr__(self) -> str:
        return f"HttpFeedSource({str(self._client.base_url)!r}, {self.endpoint!r})"

    @log_feed_call
    def fetch(self) -> Any:
        """Perform a GET request for the whole feed and return parsed JSON."""
        try:
            response = self._client.get(self.endpoint, params=self.params)
        except httpx.ConnectError as exc:
            raise FeedConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise FeedTimeoutError(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise FeedConnectionError(str(exc)) from exc
        return _handle_response(response)

    def close(self) -> None:
        self._client.close()
