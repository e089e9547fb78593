"""Feed parser: AviationWeather.gov GeoJSON features to Observation records.

The feed is a feature collection; each feature carries a ``properties`` bag
for one station. Property names follow the feed (``temp``, ``wspd``,
``cldCvg1`` ...). Bad features are dropped one at a time, only a payload
without a feature array fails the whole batch.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Mapping
from typing import Any

from metarwatch.exceptions import FeatureParseError, FeedFormatError
from metarwatch.models.conditions import (
    Barometer,
    Ceiling,
    Cloud,
    Dewpoint,
    Elevation,
    Temperature,
    Visibility,
    Wind,
)
from metarwatch.models.observation import MAX_CLOUD_LAYERS, Observation

logger = logging.getLogger(__name__)

# Feed property names
STATION_ID = "id"
OBSERVED_TIME = "obsTime"
TEMPERATURE = "temp"
DEWPOINT = "dewp"
WIND_SPEED = "wspd"
WIND_DIRECTION = "wdir"
CEILING = "ceil"
COVER = "cover"
CLOUD_COVER = "cldCvg"
CLOUD_BASE = "cldBas"
VISIBILITY = "visib"
FLIGHT_CATEGORY = "fltcat"
ALTIMETER = "altim"
ELEVATION = "elev"
RAW_OBSERVATION = "rawOb"

VARIABLE_WIND = "VRB"
HG_PER_MB = 0.0295299830714
FEET_PER_METER = 3.28084


def _present(props: Mapping[str, Any], name: str) -> bool:
    return props.get(name) is not None


def _as_float(props: Mapping[str, Any], name: str) -> float:
    value = props[name]
    if isinstance(value, bool):
        raise FeatureParseError(f"{name}: expected a number, got {value!r}")
    try:
        number = float(str(value).strip())
    except ValueError as exc:
        raise FeatureParseError(f"{name}: expected a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise FeatureParseError(f"{name}: expected a finite number, got {value!r}")
    return number


def _as_int(props: Mapping[str, Any], name: str) -> int:
    number = _as_float(props, name)
    if not number.is_integer():
        raise FeatureParseError(f"{name}: expected a whole number, got {props[name]!r}")
    return int(number)


def _as_str(props: Mapping[str, Any], name: str) -> str:
    value = props[name]
    if isinstance(value, (dict, list)):
        raise FeatureParseError(f"{name}: expected text, got {value!r}")
    return str(value)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return math.floor(value + 0.5)


def celsius_to_fahrenheit(celsius: float) -> int:
    return round_half_up(celsius * 9 / 5 + 32)


def relative_humidity(temp_c: float, dewpoint_c: float) -> float:
    """Relative humidity in percent, Magnus-Tetens approximation."""
    a = 17.27
    b = 237.7
    gamma_t = (a * temp_c) / (b + temp_c)
    gamma_td = (a * dewpoint_c) / (b + dewpoint_c)
    rh = 100 * math.exp(gamma_td - gamma_t)
    return round(min(100.0, max(0.0, rh)), 1)


def _parse_wind(props: Mapping[str, Any]) -> Wind:
    speed = _as_int(props, WIND_SPEED)
    if not _present(props, WIND_DIRECTION):
        raise FeatureParseError(f"{WIND_DIRECTION}: missing while {WIND_SPEED} is reported")
    if str(props[WIND_DIRECTION]).strip().upper() == VARIABLE_WIND:
        return Wind(speed_kt=speed, degrees=None, variable=True)
    return Wind(speed_kt=speed, degrees=_as_int(props, WIND_DIRECTION))


def _parse_clouds(props: Mapping[str, Any]) -> list[Cloud] | None:
    # Gaps in the layer numbering do not end the scan.
    clouds: list[Cloud] = []
    for index in range(1, MAX_CLOUD_LAYERS + 1):
        cover_field = f"{CLOUD_COVER}{index}"
        if not _present(props, cover_field):
            continue
        base_field = f"{CLOUD_BASE}{index}"
        base = _as_float(props, base_field) * 100 if _present(props, base_field) else None
        clouds.append(Cloud(code=_as_str(props, cover_field), base_feet_agl=base))
    return clouds or None


def parse_feature(props: Mapping[str, Any]) -> Observation:
    """Build an Observation from one feature's property bag.

    Raises:
        FeatureParseError: when a mandatory field is missing or a numeric
            field cannot be parsed.
    """
    for required in (STATION_ID, OBSERVED_TIME, RAW_OBSERVATION):
        if not _present(props, required) or not str(props[required]).strip():
            raise FeatureParseError(f"{required}: mandatory field is missing")

    fields: dict[str, Any] = {
        "station": _as_str(props, STATION_ID),
        "observed": _as_str(props, OBSERVED_TIME),
        "raw_text": _as_str(props, RAW_OBSERVATION),
    }

    temp_c = _as_float(props, TEMPERATURE) if _present(props, TEMPERATURE) else None
    dewp_c = _as_float(props, DEWPOINT) if _present(props, DEWPOINT) else None
    if temp_c is not None:
        fields["temperature"] = Temperature(
            celsius=round_half_up(temp_c), fahrenheit=celsius_to_fahrenheit(temp_c),
        )
    if dewp_c is not None:
        fields["dewpoint"] = Dewpoint(
            celsius=round_half_up(dewp_c), fahrenheit=celsius_to_fahrenheit(dewp_c),
        )
    if temp_c is not None and dewp_c is not None:
        fields["humidity_percent"] = relative_humidity(temp_c, dewp_c)

    if _present(props, WIND_SPEED):
        fields["wind"] = _parse_wind(props)

    if _present(props, CEILING):
        fields["ceiling"] = Ceiling(
            feet=_as_float(props, CEILING),
            code=_as_str(props, COVER) if _present(props, COVER) else None,
        )

    clouds = _parse_clouds(props)
    if clouds is not None:
        fields["clouds"] = clouds

    if _present(props, VISIBILITY):
        fields["visibility"] = Visibility(miles=_as_str(props, VISIBILITY))

    if _present(props, FLIGHT_CATEGORY):
        fields["flight_category"] = _as_str(props, FLIGHT_CATEGORY)

    if _present(props, ALTIMETER):
        mb = _as_float(props, ALTIMETER)
        fields["barometer"] = Barometer(
            mb=mb, hg=round(mb * HG_PER_MB, 2), kpa=round(mb / 10, 2),
        )

    if _present(props, ELEVATION):
        meters = _as_float(props, ELEVATION)
        fields["elevation"] = Elevation(meters=meters, feet=round(meters * FEET_PER_METER, 1))

    try:
        return Observation(**fields)
    except ValueError as exc:
        raise FeatureParseError(str(exc)) from exc


def _iter_features(features: list[Any]) -> Iterator[Observation]:
    for position, feature in enumerate(features):
        if not isinstance(feature, Mapping):
            continue
        props = feature.get("properties")
        identified = feature.get(STATION_ID) is not None or (
            isinstance(props, Mapping) and props.get(STATION_ID) is not None
        )
        if not identified:
            continue
        if not isinstance(props, Mapping):
            logger.warning(
                "Skipping feature %s at position %d: no properties",
                feature.get(STATION_ID), position,
            )
            continue
        try:
            yield parse_feature(props)
        except FeatureParseError as exc:
            logger.warning(
                "Skipping feature %s (%s) at position %d: %s",
                feature.get(STATION_ID), props.get(STATION_ID), position, exc,
            )


def parse_feed(payload: Any) -> Iterator[Observation]:
    """Validate a bulk payload and return a lazy iterator of observations.

    The structural check runs immediately, so a payload without a feature
    array fails before anything is yielded.

    Raises:
        FeedFormatError: when the payload is not a mapping holding a
            ``features`` list.
    """
    if not isinstance(payload, Mapping):
        raise FeedFormatError(f"Feed payload must be an object, got {type(payload).__name__}")
    features = payload.get("features")
    if not isinstance(features, list):
        raise FeedFormatError("Feed payload has no 'features' array")
    return _iter_features(features)
