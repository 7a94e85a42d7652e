"""Data models for the datafeed, reference data and capture artifacts."""

from traffic_replay.models._base import ReplayBaseModel, UtcDatetime, parse_feed_timestamp
from traffic_replay.models.airport import Airport
from traffic_replay.models.capture import EventCapture, EventIndexEntry, ViewportCenter
from traffic_replay.models.event import EventConfig
from traffic_replay.models.feed import DataFeed, FeedGeneral
from traffic_replay.models.geojson import PROPERTIES_DATA_KEY, Feature, FeatureCollection, PointGeometry
from traffic_replay.models.pilot import FlightPlan, Pilot

__all__ = [
    "Airport",
    "DataFeed",
    "EventCapture",
    "EventConfig",
    "EventIndexEntry",
    "Feature",
    "FeatureCollection",
    "FeedGeneral",
    "FlightPlan",
    "PROPERTIES_DATA_KEY",
    "Pilot",
    "PointGeometry",
    "ReplayBaseModel",
    "UtcDatetime",
    "ViewportCenter",
    "parse_feed_timestamp",
]
