"""Shared test fixtures and sample feed payloads."""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from metarwatch._http import FeedSource
from metarwatch.cache import ObservationCache
from metarwatch.exceptions import FeedConnectionError
from metarwatch.stations import StationRegistry

BASE_URL = "https://aviationweather.gov/api/data"
FEED_URL = f"{BASE_URL}/metar"

KATL_RAW = "KATL 271604Z 12004KT 2 1/2SM RA BR BKN007 OVC026 09/08 A3019 RMK AO2 P0002 T00940083 $"

SAMPLE_KATL_PROPERTIES = {
    "data": "METAR",
    "id": "KATL",
    "site": "Atlanta/Hartsfield I",
    "prior": 0,
    "obsTime": "2022-02-27T16:04:00Z",
    "temp": 9.4,
    "dewp": 8.3,
    "wspd": 4,
    "wdir": 120,
    "ceil": 7,
    "cover": "OVC",
    "cldCvg1": "BKN",
    "cldBas1": "7",
    "cldCvg2": "OVC",
    "cldBas2": "26",
    "visib": 2.50,
    "fltcat": "IFR",
    "altim": 1022.4,
    "elev": 308,
    "wx": "RA BR",
    "rawOb": KATL_RAW,
}

SAMPLE_PDK_PROPERTIES = {
    "id": "KPDK",
    "obsTime": "2022-02-27T16:53:00Z",
    "temp": 11.1,
    "dewp": 7.8,
    "wspd": 0,
    "wdir": 0,
    "cldCvg1": "FEW",
    "cldBas1": "25",
    "visib": "10+",
    "fltcat": "VFR",
    "altim": 1021.0,
    "rawOb": "KPDK 271653Z 00000KT 10SM FEW025 11/08 A3015",
}

SAMPLE_MINIMAL_PROPERTIES = {
    "id": "KRYY",
    "obsTime": "2022-02-27T16:55:00Z",
    "rawOb": "KRYY 271655Z AUTO",
}


def make_feature(props: dict[str, Any], feature_id: str | None = "803757662") -> dict[str, Any]:
    feature: dict[str, Any] = {
        "type": "Feature",
        "properties": copy.deepcopy(props),
        "geometry": {"type": "Point", "coordinates": [-84.442, 33.630]},
    }
    if feature_id is not None:
        feature["id"] = feature_id
    return feature


def make_payload(*props: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [make_feature(p, feature_id=str(i)) for i, p in enumerate(props)],
    }


SAMPLE_PAYLOAD = make_payload(SAMPLE_KATL_PROPERTIES, SAMPLE_PDK_PROPERTIES)


class StaticFeedSource(FeedSource):
    """Feed source returning a canned payload, or raising a canned error."""

    def __init__(self, payload: Any = None, error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls = 0
        self.closed = False

    def fetch(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.payload)

    def close(self) -> None:
        self.closed = True


class TickingClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2022, 2, 27, 16, 10, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture(autouse=True)
def _call_log_in_tmp_path(tmp_path):
    """Send the call log file to tmp_path and reset the cached logger."""
    import metarwatch._logging as mod

    old_logger, old_dir, old_file = mod._logger, mod._LOG_DIR, mod._LOG_FILE
    logging.getLogger(mod.CALL_LOGGER_NAME).handlers.clear()
    mod._logger = None
    mod._LOG_DIR = str(tmp_path / "logs")
    mod._LOG_FILE = str(tmp_path / "logs" / "feed_calls.log")

    yield tmp_path / "logs"

    if mod._logger is not None:
        for handler in mod._logger.handlers[:]:
            handler.close()
            mod._logger.removeHandler(handler)
    mod._logger, mod._LOG_DIR, mod._LOG_FILE = old_logger, old_dir, old_file


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def registry() -> StationRegistry:
    return StationRegistry.from_config(
        "KATL,KPDK,KRYY,KFTY",
        {"atlanta": "KATL,KPDK,KRYY,KFTY"},
    )


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def cache(clock) -> ObservationCache:
    return ObservationCache(now=clock)


@pytest.fixture
def feed() -> StaticFeedSource:
    return StaticFeedSource(payload=SAMPLE_PAYLOAD)


@pytest.fixture
def broken_feed() -> StaticFeedSource:
    return StaticFeedSource(error=FeedConnectionError("connection refused"))
