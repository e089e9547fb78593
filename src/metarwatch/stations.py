"""Station registry: the allow-list of station codes and named groups."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

ATLANTA = "atlanta"

# Stations on the Atlanta sectional chart
ATLANTA_ICAO_CODES: tuple[str, ...] = (
    "KCNI", "KGVL", "KVPC", "KJCA", "KRYY", "KLZU", "KWDR", "KPUJ", "KMGE", "KPDK",
    "KFTY", "KCTJ", "KCVC", "KATL", "KCCO", "KFFC", "KHMP", "KLGC", "KOPN",
)


def split_codes(codes: str | Iterable[str]) -> tuple[str, ...]:
    """Normalize a comma-separated string or iterable into unique uppercase codes.

    Order of first appearance is kept.
    """
    items = codes.split(",") if isinstance(codes, str) else codes
    seen: dict[str, None] = {}
    for item in items:
        code = item.strip().upper()
        if code:
            seen.setdefault(code, None)
    return tuple(seen)


@dataclass(frozen=True)
class StationRegistry:
    """Immutable allow-list of station codes plus group aliases.

    Usage:
        registry = StationRegistry.from_config("KATL,KPDK", {"metro": "KATL,KPDK"})
        registry.is_valid("katl")          # True
        registry.resolve_group("METRO")    # ("KATL", "KPDK")
    """

    codes: frozenset[str]
    groups: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "codes", frozenset(c.strip().upper() for c in self.codes))
        normalized = {
            alias.strip().lower(): split_codes(members)
            for alias, members in dict(self.groups).items()
        }
        object.__setattr__(self, "groups", MappingProxyType(normalized))

    @classmethod
    def from_config(
        cls,
        codes: str | Iterable[str],
        groups: Mapping[str, str | Iterable[str]] | None = None,
    ) -> StationRegistry:
        return cls(
            codes=frozenset(split_codes(codes)),
            groups={alias: split_codes(members) for alias, members in (groups or {}).items()},
        )

    def is_valid(self, code: str) -> bool:
        """True if the uppercased code is on the allow-list."""
        return code.strip().upper() in self.codes

    def resolve_group(self, alias: str) -> tuple[str, ...] | None:
        """Member codes of a group alias (case-insensitive), or None."""
        return self.groups.get(alias.strip().lower())

    @property
    def stations(self) -> tuple[str, ...]:
        return tuple(sorted(self.codes))


def default_registry() -> StationRegistry:
    """Registry for the Atlanta sectional chart with the ``atlanta`` group alias."""
    return StationRegistry.from_config(ATLANTA_ICAO_CODES, {ATLANTA: ATLANTA_ICAO_CODES})
