"""metarwatch data models."""

from metarwatch.models.cache_entry import METAR_KEY_PREFIX, CacheEntry, metar_key
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

__all__ = [
    "MAX_CLOUD_LAYERS",
    "METAR_KEY_PREFIX",
    "Barometer",
    "CacheEntry",
    "Ceiling",
    "Cloud",
    "Dewpoint",
    "Elevation",
    "Observation",
    "Temperature",
    "Visibility",
    "Wind",
    "metar_key",
]
