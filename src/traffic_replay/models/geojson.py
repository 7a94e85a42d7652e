"""Minimal GeoJSON models for point features."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from traffic_replay.models.pilot import Pilot

#: Key under ``Feature.properties`` holding the full pilot record.
PROPERTIES_DATA_KEY = "data"


class PointGeometry(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float]
    """``(longitude, latitude)`` per RFC 7946."""


class Feature(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["Feature"] = "Feature"
    id: int | str | None = None
    geometry: PointGeometry | None = None
    properties: dict[str, Any] | None = None

    @classmethod
    def from_pilot(cls, pilot: Pilot) -> Feature:
        """Point feature at the pilot position carrying the full record."""
        return cls(
            id=pilot.cid,
            geometry=PointGeometry(coordinates=(pilot.longitude, pilot.latitude)),
            properties={PROPERTIES_DATA_KEY: pilot.model_dump(mode="json")},
        )


class FeatureCollection(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[Feature] = Field(default_factory=list)
