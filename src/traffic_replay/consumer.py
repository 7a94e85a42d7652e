"""Filter incoming snapshots and persist one capture file per snapshot."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import TypeAdapter

from traffic_replay._constants import CAPTURE_RANGE_NM
from traffic_replay.channel import SnapshotChannel
from traffic_replay.geo import filter_pilots
from traffic_replay.layout import CaptureLayout
from traffic_replay.models.airport import Airport
from traffic_replay.models.feed import DataFeed
from traffic_replay.models.pilot import Pilot

_logger = logging.getLogger(__name__)

_PILOTS = TypeAdapter(list[Pilot])
"""Serializer for the JSON array stored in each capture file."""


class SnapshotConsumer:
    """Drain a snapshot channel into ``<captures_dir>/<version>.json`` files.

    Runs until the producer closes the channel.  A snapshot that cannot be
    serialized or written is logged and skipped; the loop carries on.
    """

    def __init__(
        self,
        channel: SnapshotChannel[DataFeed],
        layout: CaptureLayout,
        airports: Sequence[Airport],
        *,
        distance_nm: float = CAPTURE_RANGE_NM,
        logger: logging.Logger | None = None,
    ) -> None:
        self._channel = channel
        self._layout = layout
        self._airports = list(airports)
        self._distance_nm = distance_nm
        self._logger = logger or _logger
        self.written = 0
        self.skipped = 0

    async def run(self) -> None:
        """Consume until end-of-stream.

        Raises
        ------
        OSError
            If the captures directory cannot be created.
        """
        self._logger.info("Starting datafeed processor")
        try:
            self._layout.ensure_captures_dir()
            async for feed in self._channel:
                self.process(feed)
        finally:
            self._channel.close_receiver()
        self._logger.info("Datafeed processor finished: written=%d skipped=%d", self.written, self.skipped)

    def process(self, feed: DataFeed) -> bool:
        """Filter and persist one snapshot; return whether a file was written."""
        version_key = feed.version_key
        try:
            path = self._layout.capture_path(version_key)
        except ValueError as exc:
            self.skipped += 1
            self._logger.warning("Skipping datafeed: %s", exc)
            return False

        captured = filter_pilots(feed.pilots, self._airports, self._distance_nm)

        try:
            payload = _PILOTS.dump_json(captured)
        except ValueError as exc:
            self.skipped += 1
            self._logger.warning("Could not serialize capture %s: %s", version_key, exc)
            return False

        try:
            path.write_bytes(payload)
        except OSError as exc:
            self.skipped += 1
            self._logger.warning("Could not write capture file %s: %s", path, exc)
            return False

        self.written += 1
        self._logger.debug(
            "Finished processing datafeed %s: kept %d of %d pilots",
            version_key,
            len(captured),
            len(feed.pilots),
        )
        return True
