"""Reference airport model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Airport(BaseModel):
    """A reference airport loaded once from the FAA airport base file."""

    model_config = ConfigDict(frozen=True)

    faa_id: str
    icao_id: str
    latitude: float
    longitude: float

    @property
    def point(self) -> tuple[float, float]:
        """``(latitude, longitude)`` in the order geopy expects."""
        return (self.latitude, self.longitude)
