"""Sub-structures of a METAR observation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Temperature(BaseModel):
    """Air temperature, whole degrees."""

    model_config = ConfigDict(frozen=True)

    celsius: int
    fahrenheit: int | None = None


class Dewpoint(BaseModel):
    """Dewpoint temperature, whole degrees."""

    model_config = ConfigDict(frozen=True)

    celsius: int
    fahrenheit: int | None = None


class Wind(BaseModel):
    """Surface wind. ``degrees`` is None for variable (VRB) wind."""

    model_config = ConfigDict(frozen=True)

    speed_kt: int
    degrees: int | None = None
    variable: bool = False


class Ceiling(BaseModel):
    model_config = ConfigDict(frozen=True)

    feet: float
    code: str | None = None


class Cloud(BaseModel):
    """A single reported cloud layer."""

    model_config = ConfigDict(frozen=True)

    code: str
    base_feet_agl: float | None = None


class Visibility(BaseModel):
    """Prevailing visibility as reported, e.g. ``"2.5"`` or ``"10+"``."""

    model_config = ConfigDict(frozen=True)

    miles: str


class Barometer(BaseModel):
    """Altimeter setting in millibars, with converted units."""

    model_config = ConfigDict(frozen=True)

    mb: float
    hg: float | None = None
    kpa: float | None = None


class Elevation(BaseModel):
    model_config = ConfigDict(frozen=True)

    meters: float
    feet: float | None = None
