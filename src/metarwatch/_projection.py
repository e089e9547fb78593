"""Field projection for client responses."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from operator import attrgetter
from typing import Any, Callable

from metarwatch.models.observation import Observation

OBSERVED = "observed"
RAW_TEXT = "raw_text"
BAROMETER = "barometer"
CEILING = "ceiling"
CLOUDS = "clouds"
DEWPOINT = "dewpoint"
ELEVATION = "elevation"
FLIGHT_CATEGORY = "flight_category"
HUMIDITY_PERCENT = "humidity_percent"
TEMPERATURE = "temperature"
VISIBILITY = "visibility"
WIND = "wind"

# Requested field name -> Observation attribute extractor.
# Adding a projectable field is an entry here, nothing else.
FIELD_EXTRACTORS: dict[str, Callable[[Observation], Any]] = {
    name: attrgetter(name)
    for name in (
        OBSERVED,
        RAW_TEXT,
        BAROMETER,
        CEILING,
        CLOUDS,
        DEWPOINT,
        ELEVATION,
        FLIGHT_CATEGORY,
        HUMIDITY_PERCENT,
        TEMPERATURE,
        VISIBILITY,
        WIND,
    )
}


def split_fields(values: str | Iterable[str] | None) -> list[str]:
    """Flatten repeated and comma-separated field requests.

    ``["wind,temperature", "clouds"]`` -> ``["wind", "temperature", "clouds"]``
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    fields: list[str] = []
    for value in values:
        fields.extend(part.strip() for part in value.split(",") if part.strip())
    return fields


def project_one(observation: Observation, fields: Sequence[str]) -> Observation:
    """Reduced copy of one observation: the station plus each recognized field."""
    selected: dict[str, Any] = {}
    for name in fields:
        extractor = FIELD_EXTRACTORS.get(name)
        if extractor is not None:
            selected[name] = extractor(observation)
    return Observation(station=observation.station, **selected)


def project(
    observations: Sequence[Observation],
    fields: Sequence[str] | None = None,
) -> list[Observation]:
    """Apply a field projection to each observation, keeping input order.

    An empty or absent field list returns the records unchanged. Unrecognized
    names add nothing.
    """
    if not fields:
        return list(observations)
    return [project_one(observation, fields) for observation in observations]
