"""Wire the capture pipeline together."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from traffic_replay.channel import SnapshotChannel
from traffic_replay.client import FeedClient
from traffic_replay.config import CaptureConfig
from traffic_replay.consolidate import Consolidator
from traffic_replay.consumer import SnapshotConsumer
from traffic_replay.exceptions import FeedError, ReplayConfigError
from traffic_replay.layout import CaptureLayout
from traffic_replay.loaders import load_airports, load_event_config, resolve_airports
from traffic_replay.models.airport import Airport
from traffic_replay.models.capture import EventCapture
from traffic_replay.models.event import EventConfig
from traffic_replay.models.feed import DataFeed
from traffic_replay.poller import FeedPoller, FeedSource

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventContext:
    """Everything loaded and validated before the first network request."""

    event: EventConfig
    airports: list[Airport]
    layout: CaptureLayout


def load_context(config: CaptureConfig) -> EventContext:
    """Load reference data and the event, failing fast on unknown airports.

    Raises
    ------
    ReplayConfigError
        On any configuration problem.
    """
    try:
        all_airports = load_airports(config.airports_path)
    except ReplayConfigError:
        _logger.error("Failed to load airports file %s", config.airports_path)
        raise
    try:
        event = load_event_config(config.event_path)
    except ReplayConfigError:
        _logger.error("Failed to load event config %s", config.event_path)
        raise
    airports = resolve_airports(event, all_airports)
    return EventContext(event=event, airports=airports, layout=CaptureLayout.for_event(config.output_dir, event))


async def capture_event(
    config: CaptureConfig,
    context: EventContext,
    feed: FeedSource,
    *,
    logger: logging.Logger | None = None,
    **poller_kwargs: Any,
) -> None:
    """Run the poller in a background task and the consumer to completion.

    Returns when the poller has closed the channel and the consumer has
    drained it.  ``poller_kwargs`` are forwarded to :class:`FeedPoller`
    (clock and sleep overrides in tests).
    """
    log = logger or _logger
    channel: SnapshotChannel[DataFeed] = SnapshotChannel(config.channel_capacity)
    poller = FeedPoller.for_event(
        feed,
        channel,
        context.event,
        pre_roll=timedelta(minutes=config.pre_roll_minutes),
        post_roll=timedelta(minutes=config.post_roll_minutes),
        poll_interval=config.poll_interval,
        max_poll_delay_credit=config.max_poll_delay_credit,
        retry_delay=config.retry_delay,
        logger=logger,
        **poller_kwargs,
    )
    consumer = SnapshotConsumer(
        channel,
        context.layout,
        context.airports,
        distance_nm=config.capture_range_nm,
        logger=logger,
    )

    poller_task = asyncio.create_task(poller.run(), name="traffic-replay-poller")
    try:
        await consumer.run()
    except OSError:
        log.exception("Failed to process datafeeds")
    finally:
        if not poller_task.done():
            poller_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await poller_task


def consolidate_event(config: CaptureConfig, context: EventContext) -> EventCapture:
    """Run the consolidation step alone.

    Raises
    ------
    ConsolidationError
        If any capture file is unreadable or the output cannot be written.
    """
    return Consolidator(
        context.event,
        context.airports,
        context.layout,
        update_index=config.update_index,
    ).run()


async def run_capture(config: CaptureConfig, *, feed: FeedSource | None = None) -> EventCapture:
    """Load configuration, capture the event window and consolidate.

    *feed* overrides the live :class:`FeedClient`.

    Raises
    ------
    ReplayConfigError
        Before any polling, on configuration problems or when the datafeed
        endpoint cannot be discovered.
    ConsolidationError
        If consolidation fails; capture files are left on disk.
    """
    context = load_context(config)
    _logger.info(
        "Capturing %r (%s) around %s",
        context.event.name,
        context.layout.slug,
        ", ".join(airport.icao_id for airport in context.airports),
    )

    if feed is not None:
        await capture_event(config, context, feed)
    else:
        try:
            client = FeedClient(
                status_url=config.status_url,
                datafeed_url=config.datafeed_url,
                request_timeout=config.request_timeout,
            )
            async with client:
                await capture_event(config, context, client)
        except FeedError as exc:
            # Only endpoint discovery can raise here; the poller absorbs the rest.
            raise ReplayConfigError(f"Failed to initialize datafeed client: {exc}") from exc

    return consolidate_event(config, context)
