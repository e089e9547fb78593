"""Observation cache: latest observation per station, last write wins."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable

from metarwatch.exceptions import ObservationDecodeError
from metarwatch.models.cache_entry import METAR_KEY_PREFIX, CacheEntry, metar_key
from metarwatch.models.observation import Observation
from metarwatch.serialization import deserialize_observation, serialize_observation
from metarwatch.store import CacheStore, InMemoryCacheStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ObservationCache:
    """Upsert and look up observations by station code.

    Entries are never evicted; staleness is visible through ``updated_at``.
    Writers to the same station serialize on a per-key lock, writers to
    different stations never share one.
    """

    def __init__(
        self,
        store: CacheStore | None = None,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store or InMemoryCacheStore()
        self._now = now
        self._key_locks: dict[str, threading.Lock] = {}
        self._key_locks_guard = threading.Lock()

    def _lock_for(self, key: str) -> threading.Lock:
        with self._key_locks_guard:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = threading.Lock()
            return lock

    def upsert(self, station: str, observation: Observation) -> CacheEntry | None:
        """Create or replace the entry for ``station``.

        Returns the stored entry, or None when the observation has no raw
        METAR text and therefore is not cached.
        """
        if not observation.is_cacheable:
            logger.warning("Not caching METAR for %s: no raw text", station)
            return None

        key = metar_key(station)
        with self._lock_for(key):
            existing = self.store.get_by_key(key)
            now = self._now()
            if existing is None:
                created_at = now
            else:
                created_at = existing.created_at
                if now <= existing.updated_at:
                    now = existing.updated_at + timedelta(microseconds=1)
            stamped = observation.model_copy(
                update={"created_at": created_at, "updated_at": now},
            )
            entry = CacheEntry(
                key=key,
                value=serialize_observation(stamped),
                created_at=created_at,
                updated_at=now,
            )
            return self.store.put(entry)

    def lookup(self, station: str) -> Observation | None:
        """Return the cached observation for ``station``, or None on a miss."""
        key = metar_key(station)
        entry = self.store.get_by_key(key)
        if entry is None:
            return None
        try:
            return deserialize_observation(entry.value)
        except ObservationDecodeError as exc:
            logger.warning("Unable to deserialize METAR from cache key %s: %s", key, exc)
            return None

    def entry(self, station: str) -> CacheEntry | None:
        """Return the raw stored entry, for staleness checks on ``updated_at``."""
        return self.store.get_by_key(metar_key(station))

    def stations(self) -> list[str]:
        """Station codes that currently have an entry."""
        return [
            key[len(METAR_KEY_PREFIX):]
            for key in self.store.keys()
            if key.startswith(METAR_KEY_PREFIX)
        ]
