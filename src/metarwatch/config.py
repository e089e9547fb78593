"""Environment-driven settings."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from metarwatch._http import DEFAULT_BASE_URL, DEFAULT_BBOX, DEFAULT_ENDPOINT, DEFAULT_TIMEOUT
from metarwatch.exceptions import ConfigurationError
from metarwatch.stations import ATLANTA, ATLANTA_ICAO_CODES, StationRegistry, split_codes

ENV_PREFIX = "METARWATCH_"
DEFAULT_UPDATE_INTERVAL = 600.0  # the feed refreshes roughly every 10 minutes


def env(name: str, default: str | None = None, environ: Mapping[str, str] | None = None) -> str:
    """Fetch ``METARWATCH_<name>`` while allowing explicit defaults."""
    environ = os.environ if environ is None else environ
    value = environ.get(f"{ENV_PREFIX}{name}", default)
    if value is None:
        raise ConfigurationError(f"Environment variable {ENV_PREFIX}{name} is required")
    return value


def _env_float(name: str, default: float, environ: Mapping[str, str] | None) -> float:
    raw = env(name, str(default), environ)
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    feed_base_url: str = DEFAULT_BASE_URL
    feed_endpoint: str = DEFAULT_ENDPOINT
    feed_bbox: str = DEFAULT_BBOX
    feed_timeout: float = DEFAULT_TIMEOUT
    station_codes: str = ",".join(ATLANTA_ICAO_CODES)
    group_alias: str = ATLANTA
    cache_path: str | None = None
    update_interval: float = DEFAULT_UPDATE_INTERVAL
    log_dir: str | None = None
    extra_groups: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``METARWATCH_*`` variables.

        ``METARWATCH_GROUPS`` holds extra aliases as ``name=CODE1 CODE2;name2=...``.
        """
        defaults = cls()
        station_codes = env("STATION_CODES", defaults.station_codes, environ)
        if not split_codes(station_codes):
            raise ConfigurationError(f"{ENV_PREFIX}STATION_CODES must list at least one station")
        return cls(
            feed_base_url=env("FEED_BASE_URL", defaults.feed_base_url, environ),
            feed_endpoint=env("FEED_ENDPOINT", defaults.feed_endpoint, environ),
            feed_bbox=env("FEED_BBOX", defaults.feed_bbox, environ),
            feed_timeout=_env_float("FEED_TIMEOUT", defaults.feed_timeout, environ),
            station_codes=station_codes,
            group_alias=env("GROUP_ALIAS", defaults.group_alias, environ),
            cache_path=env("CACHE_PATH", "", environ) or None,
            update_interval=_env_float("UPDATE_INTERVAL", defaults.update_interval, environ),
            log_dir=env("LOG_DIR", "", environ) or None,
            extra_groups=_parse_groups(env("GROUPS", "", environ)),
        )

    def registry(self) -> StationRegistry:
        """Station registry: the allow-list doubles as the primary group."""
        groups: dict[str, str] = {self.group_alias: self.station_codes}
        groups.update(self.extra_groups)
        return StationRegistry.from_config(self.station_codes, groups)


def _parse_groups(raw: str) -> dict[str, str]:
    groups: dict[str, str] = {}
    for chunk in raw.split(";"):
        if not chunk.strip():
            continue
        alias, sep, members = chunk.partition("=")
        if not sep or not alias.strip():
            raise ConfigurationError(f"{ENV_PREFIX}GROUPS entry {chunk!r} must look like alias=CODES")
        groups[alias.strip()] = ",".join(members.replace(" ", ",").split(","))
    return groups
