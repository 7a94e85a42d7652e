"""Aggregate capture artifact models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from traffic_replay.models.event import EventConfig
from traffic_replay.models.geojson import FeatureCollection


class ViewportCenter(BaseModel):
    """Display hint for the viewer; ``x`` is longitude, ``y`` latitude."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class EventCapture(BaseModel):
    """Every snapshot of an event merged into one artifact.

    ``first_timestamp_key`` and ``last_timestamp_key`` are the lexicographic
    min/max of the snapshot version keys and are omitted from the JSON
    output when no snapshot was captured.
    """

    model_config = ConfigDict(frozen=True)

    config: EventConfig
    first_timestamp_key: str | None = None
    last_timestamp_key: str | None = None
    captures: dict[str, FeatureCollection] = Field(default_factory=dict)
    captures_length_bytes: int = 0
    viewport_center: ViewportCenter

    def to_json(self) -> str:
        """Compact JSON encoding, omitting unset timestamp keys."""
        exclude = {key for key in ("first_timestamp_key", "last_timestamp_key") if getattr(self, key) is None}
        return self.model_dump_json(exclude=exclude)


class EventIndexEntry(BaseModel):
    """One entry of the ``events.json`` index consumed by the viewer."""

    model_config = ConfigDict(frozen=True)

    event: EventConfig
    url: str
