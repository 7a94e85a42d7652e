"""Event definition model."""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field, model_validator

from traffic_replay.models._base import UtcDatetime


class EventConfig(BaseModel):
    """Declarative description of the event being captured.

    Parameters
    ----------
    name : str
        Human readable event name, used for the output slug.
    artccs : list[str]
        Participating ARTCC identifiers; carried through to the artifact
        for the viewer but not used for filtering.
    airports : list[str]
        ICAO ids of the scope airports.
    advertised_start_time, advertised_end_time : datetime
        Advertised event window in UTC.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    artccs: list[str] = Field(default_factory=list)
    airports: list[str] = Field(default_factory=list)
    advertised_start_time: UtcDatetime
    advertised_end_time: UtcDatetime

    @model_validator(mode="after")
    def _check_window(self) -> EventConfig:
        if self.advertised_end_time < self.advertised_start_time:
            raise ValueError("advertised_end_time precedes advertised_start_time")
        return self

    def capture_window(self, pre_roll: timedelta, post_roll: timedelta) -> tuple[datetime, datetime]:
        """Return ``(start - pre_roll, end + post_roll)``."""
        return (self.advertised_start_time - pre_roll, self.advertised_end_time + post_roll)
