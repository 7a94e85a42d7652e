"""Datafeed snapshot models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from traffic_replay.models._base import ReplayBaseModel, parse_feed_timestamp
from traffic_replay.models.pilot import Pilot


class FeedGeneral(ReplayBaseModel):
    """The ``general`` block of a datafeed response.

    ``update`` is the version key: a compact ``YYYYMMDDhhmmss``-style string
    used for deduplication and as the capture filename.  ``update_timestamp``
    is kept as the raw string; :meth:`parsed_timestamp` parses it on demand
    so a malformed value can be skipped without rejecting the response.
    """

    version: int | None = None
    update: str
    update_timestamp: str = ""
    connected_clients: int | None = None
    unique_users: int | None = None

    def parsed_timestamp(self) -> datetime:
        """Return ``update_timestamp`` as a UTC datetime.

        Raises
        ------
        ValueError
            If the timestamp is not valid RFC 3339.
        """
        return parse_feed_timestamp(self.update_timestamp)


class DataFeed(ReplayBaseModel):
    """One complete datafeed response (a snapshot of the whole network)."""

    general: FeedGeneral
    pilots: list[Pilot] = Field(default_factory=list)

    @property
    def version_key(self) -> str:
        return self.general.update
