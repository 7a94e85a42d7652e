"""Time-windowed datafeed polling loop."""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

from traffic_replay._constants import MAX_POLL_DELAY_CREDIT, POLL_INTERVAL, RETRY_DELAY
from traffic_replay.channel import SnapshotChannel
from traffic_replay.exceptions import ChannelClosedError, FeedError
from traffic_replay.models.event import EventConfig
from traffic_replay.models.feed import DataFeed

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class FeedSource(Protocol):
    """Anything that can return a full datafeed snapshot."""

    async def get_datafeed(self) -> DataFeed:
        ...


class PollerState(enum.Enum):
    AWAITING_WINDOW = "awaiting_window"
    POLLING = "polling"
    DRAINING = "draining"
    STOPPED = "stopped"


class StopReason(enum.Enum):
    WINDOW_ENDED = "window_ended"
    RECEIVER_GONE = "receiver_gone"
    CANCELLED = "cancelled"


@dataclass
class PollerStats:
    forwarded: int = 0
    duplicates: int = 0
    feed_errors: int = 0
    bad_timestamps: int = 0


class FeedPoller:
    """Poll the datafeed between ``window_start`` and ``window_end``.

    The poller sleeps until the capture window opens, then requests the feed
    in a loop.  Every response whose version key differs from the last one
    seen is forwarded on *channel*; the loop ends once the feed reports an
    update time past ``window_end`` or the receiver goes away, and the
    channel is closed so the consumer observes end-of-stream.

    Feed failures, duplicates and unparsable timestamps are logged and
    retried after ``retry_delay`` seconds; they never stop the loop.  After
    each forwarded snapshot the poller sleeps
    ``poll_interval - min(max_poll_delay_credit, elapsed)`` so the cadence
    self-corrects towards ``poll_interval``.

    ``clock``, ``monotonic`` and ``sleep`` are injectable for tests.
    """

    def __init__(
        self,
        feed: FeedSource,
        channel: SnapshotChannel[DataFeed],
        *,
        window_start: datetime,
        window_end: datetime,
        poll_interval: float = POLL_INTERVAL,
        max_poll_delay_credit: float = MAX_POLL_DELAY_CREDIT,
        retry_delay: float = RETRY_DELAY,
        clock: Callable[[], datetime] = _utcnow,
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        self._feed = feed
        self._channel = channel
        self._window_start = window_start
        self._window_end = window_end
        self._poll_interval = poll_interval
        self._max_poll_delay_credit = min(max_poll_delay_credit, poll_interval)
        self._retry_delay = retry_delay
        self._clock = clock
        self._monotonic = monotonic
        self._sleep = sleep
        self._logger = logger or _logger
        self._last_version_key: str | None = None
        self.state = PollerState.AWAITING_WINDOW
        self.stop_reason: StopReason | None = None
        self.stats = PollerStats()

    @classmethod
    def for_event(
        cls,
        feed: FeedSource,
        channel: SnapshotChannel[DataFeed],
        event: EventConfig,
        *,
        pre_roll: timedelta,
        post_roll: timedelta,
        **kwargs: Any,
    ) -> FeedPoller:
        """Build a poller whose window is the event window plus pre/post roll."""
        window_start, window_end = event.capture_window(pre_roll, post_roll)
        return cls(feed, channel, window_start=window_start, window_end=window_end, **kwargs)

    @property
    def last_version_key(self) -> str | None:
        return self._last_version_key

    def initial_delay(self) -> float:
        """Seconds until the capture window opens, never negative."""
        return max(0.0, (self._window_start - self._clock()).total_seconds())

    async def run(self) -> StopReason:
        """Run until the window ends or the receiver is gone.

        The channel is always closed on exit, including on cancellation.
        """
        try:
            await self._await_window()
            self.stop_reason = await self._poll()
        except asyncio.CancelledError:
            self.stop_reason = StopReason.CANCELLED
            raise
        finally:
            self.state = PollerState.DRAINING
            self._channel.close()
            self.state = PollerState.STOPPED
            self._logger.info(
                "Datafeed loop stopped (%s): forwarded=%d duplicates=%d feed_errors=%d bad_timestamps=%d",
                self.stop_reason.value if self.stop_reason else "error",
                self.stats.forwarded,
                self.stats.duplicates,
                self.stats.feed_errors,
                self.stats.bad_timestamps,
            )
        return self.stop_reason

    async def _await_window(self) -> None:
        self.state = PollerState.AWAITING_WINDOW
        delay = self.initial_delay()
        if delay > 0:
            self._logger.info("Sleeping %.0fs until captures start at %s", delay, self._window_start.isoformat())
            await self._sleep(delay)
        self.state = PollerState.POLLING

    async def _poll(self) -> StopReason:
        self._logger.info("Starting datafeed loop, capturing until %s", self._window_end.isoformat())
        while True:
            started = self._monotonic()

            try:
                feed = await self._feed.get_datafeed()
            except FeedError as exc:
                self.stats.feed_errors += 1
                self._logger.warning("Could not fetch datafeed: %s", exc)
                await self._sleep(self._retry_delay)
                continue

            version_key = feed.version_key
            if version_key == self._last_version_key:
                self.stats.duplicates += 1
                self._logger.debug("Found duplicate datafeed %s", version_key)
                await self._sleep(self._retry_delay)
                continue

            try:
                update_time = feed.general.parsed_timestamp()
            except ValueError:
                self.stats.bad_timestamps += 1
                self._logger.warning(
                    "Could not parse datafeed timestamp %r (update %s)",
                    feed.general.update_timestamp,
                    version_key,
                )
                await self._sleep(self._retry_delay)
                continue

            if update_time > self._window_end:
                self._logger.info("Ending datafeed collection at %s", update_time.isoformat())
                return StopReason.WINDOW_ENDED

            try:
                await self._channel.send(feed)
            except ChannelClosedError:
                self._logger.error("Snapshot receiver is gone, ending datafeed loop")
                return StopReason.RECEIVER_GONE

            self._last_version_key = version_key
            self.stats.forwarded += 1
            self._logger.info("Found new datafeed %s (%s)", version_key, update_time.isoformat())

            elapsed = self._monotonic() - started
            if elapsed > self._max_poll_delay_credit:
                self._logger.warning("Long poll iteration: %.2fs", elapsed)
            sleep_for = self._poll_interval - min(self._max_poll_delay_credit, elapsed)
            self._logger.debug("Sleeping %.2fs", sleep_for)
            await self._sleep(sleep_for)
