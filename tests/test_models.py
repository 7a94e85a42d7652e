"""Tests for datafeed, event and capture models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from traffic_replay.models.capture import EventCapture, ViewportCenter
from traffic_replay.models.event import EventConfig
from traffic_replay.models.feed import DataFeed
from traffic_replay.models.geojson import PROPERTIES_DATA_KEY, Feature
from traffic_replay.models.pilot import Pilot

PILOT_RECORD = {
    "cid": 1234567,
    "name": "Jane Doe KSFO",
    "callsign": "UAL123",
    "server": "USA-WEST",
    "pilot_rating": 1,
    "latitude": 37.61,
    "longitude": -122.38,
    "altitude": 12000,
    "groundspeed": 250,
    "transponder": "4621",
    "heading": 280,
    "qnh_i_hg": 29.92,
    "flight_plan": {
        "flight_rules": "I",
        "aircraft": "B738/L",
        "aircraft_faa": "B738/L",
        "aircraft_short": "B738",
        "departure": "KSFO",
        "arrival": "KSEA",
        "alternate": "KPDX",
        "cruise_tas": "450",
        "altitude": "35000",
        "route": "SSTIK5 OAK",
        "revision_id": 3,
    },
    "logon_time": "2026-01-01T17:30:00.0000000Z",
    "last_updated": "2026-01-01T18:01:02.1234567Z",
}


class TestDataFeed:
    def test_parses_v3_payload_and_ignores_extra_fields(self) -> None:
        feed = DataFeed.model_validate(
            {
                "general": {
                    "version": 3,
                    "reload": 1,
                    "update": "20260101180102",
                    "update_timestamp": "2026-01-01T18:01:02.6014412Z",
                    "connected_clients": 1000,
                },
                "pilots": [PILOT_RECORD],
                "controllers": [],
            }
        )

        assert feed.version_key == "20260101180102"
        assert feed.pilots[0].flight_plan is not None
        assert feed.pilots[0].flight_plan.revision_id == 3

    def test_parsed_timestamp_is_utc(self) -> None:
        feed = DataFeed.model_validate(
            {"general": {"update": "1", "update_timestamp": "2026-01-01T18:01:02.6014412Z"}, "pilots": []}
        )

        parsed = feed.general.parsed_timestamp()
        assert parsed.tzinfo is not None
        assert parsed.utcoffset() == timedelta(0)
        assert parsed.replace(microsecond=0) == datetime(2026, 1, 1, 18, 1, 2, tzinfo=UTC)

    def test_bad_timestamp_only_fails_on_parse(self) -> None:
        feed = DataFeed.model_validate({"general": {"update": "1", "update_timestamp": "yesterday"}})

        with pytest.raises(ValueError):
            feed.general.parsed_timestamp()

    def test_missing_update_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DataFeed.model_validate({"general": {"update_timestamp": "2026-01-01T00:00:00Z"}})

    def test_null_flight_plan(self) -> None:
        pilot = Pilot.model_validate({**PILOT_RECORD, "flight_plan": None})
        assert pilot.flight_plan is None

    def test_pilot_is_frozen(self) -> None:
        pilot = Pilot.model_validate(PILOT_RECORD)
        with pytest.raises(ValidationError):
            pilot.latitude = 0.0  # type: ignore[misc]


class TestEventConfig:
    def test_window_with_rolls(self) -> None:
        event = EventConfig(
            name="Test",
            airports=["KSFO"],
            advertised_start_time="2026-01-01T18:00:00Z",
            advertised_end_time="2026-01-01T21:00:00Z",
        )

        start, end = event.capture_window(timedelta(minutes=5), timedelta(minutes=5))

        assert start == datetime(2026, 1, 1, 17, 55, tzinfo=UTC)
        assert end == datetime(2026, 1, 1, 21, 5, tzinfo=UTC)

    def test_offset_times_normalised_to_utc(self) -> None:
        event = EventConfig(
            name="Test",
            advertised_start_time="2026-01-01T13:00:00-05:00",
            advertised_end_time="2026-01-01T16:00:00-05:00",
        )
        assert event.advertised_start_time == datetime(2026, 1, 1, 18, tzinfo=UTC)

    def test_end_before_start_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EventConfig(
                name="Test",
                advertised_start_time="2026-01-01T18:00:00Z",
                advertised_end_time="2026-01-01T17:00:00Z",
            )


class TestFeature:
    def test_from_pilot_embeds_record(self) -> None:
        pilot = Pilot.model_validate(PILOT_RECORD)

        feature = Feature.from_pilot(pilot)
        dumped = feature.model_dump(mode="json")

        assert dumped["type"] == "Feature"
        assert dumped["id"] == 1234567
        assert dumped["geometry"] == {"type": "Point", "coordinates": [-122.38, 37.61]}
        assert dumped["properties"][PROPERTIES_DATA_KEY]["callsign"] == "UAL123"
        assert dumped["properties"][PROPERTIES_DATA_KEY]["flight_plan"]["departure"] == "KSFO"


class TestEventCapture:
    def test_empty_capture_omits_timestamp_keys(self) -> None:
        event = EventConfig(
            name="Test",
            advertised_start_time="2026-01-01T18:00:00Z",
            advertised_end_time="2026-01-01T21:00:00Z",
        )
        capture = EventCapture(config=event, viewport_center=ViewportCenter(x=1.0, y=2.0))

        text = capture.to_json()

        assert "first_timestamp_key" not in text
        assert "last_timestamp_key" not in text
        assert '"viewport_center":{"x":1.0,"y":2.0}' in text
