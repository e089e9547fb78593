"""Stored cache entry model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

METAR_KEY_PREFIX = "METAR_"


def metar_key(station: str) -> str:
    """Return the cache key for a station code."""
    return f"{METAR_KEY_PREFIX}{station.strip().upper()}"


class CacheEntry(BaseModel):
    """A serialized observation stored under its station key."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str
    created_at: datetime
    updated_at: datetime
