"""Observation <-> cached text conversion."""

from __future__ import annotations

from pydantic import ValidationError

from metarwatch.exceptions import ObservationDecodeError
from metarwatch.models.observation import Observation


def serialize_observation(observation: Observation) -> str:
    """Render an observation as JSON text for the cache store."""
    return observation.model_dump_json()


def deserialize_observation(text: str | bytes) -> Observation:
    """Rebuild an observation from cached JSON text."""
    try:
        return Observation.model_validate_json(text)
    except ValidationError as exc:
        raise ObservationDecodeError(f"Failed to decode cached Observation: {exc}") from exc
