"""Query resolver: identifier to cached observations."""

from __future__ import annotations

import logging

from metarwatch.cache import ObservationCache
from metarwatch.exceptions import InvalidStationError, StationNotFoundError
from metarwatch.models.observation import Observation
from metarwatch.stations import StationRegistry

logger = logging.getLogger(__name__)


class QueryResolver:
    """Resolve a station code or group alias against the cache.

    Group members without a cached observation are skipped, so a group query
    returns 1..N records; a group with nothing cached at all is not-found, as
    is a single valid station without an observation. Anything else is
    invalid input.
    """

    def __init__(self, registry: StationRegistry, cache: ObservationCache) -> None:
        self.registry = registry
        self.cache = cache

    def resolve(self, identifier: str) -> list[Observation]:
        """Return the cached observations an identifier stands for.

        Raises:
            InvalidStationError: identifier is neither a group alias nor an
                allowed station code.
            StationNotFoundError: station is allowed, or the alias is a known
                group, but nothing is cached for it.
        """
        identifier = (identifier or "").strip()
        if not identifier:
            raise InvalidStationError(identifier)

        members = self.registry.resolve_group(identifier)
        if members is not None:
            return self._resolve_group(identifier, members)

        code = identifier.upper()
        if not self.registry.is_valid(code):
            raise InvalidStationError(identifier)

        observation = self.cache.lookup(code)
        if observation is None:
            raise StationNotFoundError(code)
        return [observation]

    def _resolve_group(self, alias: str, members: tuple[str, ...]) -> list[Observation]:
        observations: list[Observation] = []
        for code in members:
            observation = self.cache.lookup(code)
            if observation is None:
                logger.warning("No METAR information found for ICAO Code %s (group %s)", code, alias)
                continue
            observations.append(observation)
        if not observations:
            raise StationNotFoundError(alias)
        return observations
