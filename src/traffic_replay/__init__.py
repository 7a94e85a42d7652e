"""traffic_replay - Capture VATSIM traffic around an event for later replay."""

from importlib.metadata import PackageNotFoundError, version

from traffic_replay.channel import SnapshotChannel
from traffic_replay.client import FeedClient
from traffic_replay.config import CaptureConfig
from traffic_replay.consolidate import Consolidator
from traffic_replay.consumer import SnapshotConsumer
from traffic_replay.exceptions import (
    ChannelClosedError,
    ConsolidationError,
    FeedError,
    FeedPayloadError,
    FeedTransportError,
    ReplayConfigError,
    ReplayError,
)
from traffic_replay.geo import calculate_centroid, filter_pilots
from traffic_replay.layout import CaptureLayout, event_slug
from traffic_replay.models import (
    Airport,
    DataFeed,
    EventCapture,
    EventConfig,
    Feature,
    FeatureCollection,
    FlightPlan,
    Pilot,
)
from traffic_replay.poller import FeedPoller, PollerState, StopReason
from traffic_replay.runner import run_capture

try:
    __version__ = version("traffic-replay")
except PackageNotFoundError:
    __version__ = "0+local"

__all__ = [
    "__version__",
    "Airport",
    "CaptureConfig",
    "CaptureLayout",
    "ChannelClosedError",
    "ConsolidationError",
    "Consolidator",
    "DataFeed",
    "EventCapture",
    "EventConfig",
    "Feature",
    "FeatureCollection",
    "FeedClient",
    "FeedError",
    "FeedPayloadError",
    "FeedPoller",
    "FeedTransportError",
    "FlightPlan",
    "Pilot",
    "PollerState",
    "ReplayConfigError",
    "ReplayError",
    "SnapshotChannel",
    "SnapshotConsumer",
    "StopReason",
    "calculate_centroid",
    "event_slug",
    "filter_pilots",
    "run_capture",
]
