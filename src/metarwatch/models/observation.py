"""Normalized METAR observation model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

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

MAX_CLOUD_LAYERS = 9


class Observation(BaseModel):
    """Latest surface observation for one station.

    Every sub-structure is None when the feed did not report it, so an absent
    wind is distinguishable from a calm one. Projected views reuse this model
    with only the requested fields set.
    """

    model_config = ConfigDict(frozen=True)

    station: str
    observed: str | None = None
    temperature: Temperature | None = None
    dewpoint: Dewpoint | None = None
    wind: Wind | None = None
    ceiling: Ceiling | None = None
    clouds: list[Cloud] | None = None
    visibility: Visibility | None = None
    flight_category: str | None = None
    barometer: Barometer | None = None
    elevation: Elevation | None = None
    humidity_percent: float | None = None
    raw_text: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("station")
    @classmethod
    def _upper_station(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("station must not be empty")
        return value

    @field_validator("clouds")
    @classmethod
    def _bounded_layers(cls, value: list[Cloud] | None) -> list[Cloud] | None:
        if value is not None and len(value) > MAX_CLOUD_LAYERS:
            raise ValueError(f"at most {MAX_CLOUD_LAYERS} cloud layers are reported")
        return value

    @property
    def is_cacheable(self) -> bool:
        """True when the observation carries the verbatim METAR text."""
        return bool(self.raw_text)
