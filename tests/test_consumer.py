from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from traffic_replay.channel import SnapshotChannel
from traffic_replay.consumer import SnapshotConsumer
from traffic_replay.exceptions import ChannelClosedError
from traffic_replay.layout import CaptureLayout
from traffic_replay.models.airport import Airport
from traffic_replay.models.event import EventConfig
from traffic_replay.models.feed import DataFeed

KSFO = Airport(faa_id="SFO", icao_id="KSFO", latitude=37.619, longitude=-122.375)

EVENT = EventConfig(
    name="Bay Area Blast",
    airports=["KSFO"],
    advertised_start_time=datetime(2026, 1, 1, 18, tzinfo=UTC),
    advertised_end_time=datetime(2026, 1, 1, 21, tzinfo=UTC),
)


def _feed(update: str) -> DataFeed:
    return DataFeed.model_validate(
        {
            "general": {"update": update, "update_timestamp": "2026-01-01T19:00:00Z"},
            "pilots": [
                {"cid": 1, "callsign": "NEAR", "latitude": 37.62, "longitude": -122.37, "flight_plan": None},
                {"cid": 2, "callsign": "FAR", "latitude": 51.47, "longitude": -0.45},
                {
                    "cid": 3,
                    "callsign": "INBOUND",
                    "latitude": 51.47,
                    "longitude": -0.45,
                    "flight_plan": {"departure": "EGLL", "arrival": "KSFO", "revision_id": 1},
                },
            ],
        }
    )


@pytest.fixture
def layout(tmp_path: Path) -> CaptureLayout:
    return CaptureLayout.for_event(tmp_path, EVENT)


@pytest.mark.asyncio
async def test_writes_one_filtered_file_per_snapshot(layout: CaptureLayout) -> None:
    channel: SnapshotChannel[DataFeed] = SnapshotChannel(4)
    await channel.send(_feed("20260101190000"))
    await channel.send(_feed("20260101190015"))
    channel.close()

    consumer = SnapshotConsumer(channel, layout, [KSFO], distance_nm=600)
    await consumer.run()

    files = sorted(path.name for path in layout.captures_dir.iterdir())
    assert files == ["20260101190000.json", "20260101190015.json"]
    records = json.loads(layout.capture_path("20260101190000").read_text())
    assert [record["callsign"] for record in records] == ["NEAR", "INBOUND"]
    assert records[0]["flight_plan"] is None
    assert records[1]["flight_plan"]["arrival"] == "KSFO"
    assert consumer.written == 2


@pytest.mark.asyncio
async def test_empty_stream_still_creates_captures_dir(layout: CaptureLayout) -> None:
    channel: SnapshotChannel[DataFeed] = SnapshotChannel(1)
    channel.close()

    await SnapshotConsumer(channel, layout, [KSFO]).run()

    assert layout.captures_dir.is_dir()
    assert list(layout.captures_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_write_failure_skips_snapshot_and_continues(layout: CaptureLayout) -> None:
    channel: SnapshotChannel[DataFeed] = SnapshotChannel(4)
    layout.ensure_captures_dir()
    # A directory where the capture file should go makes write_bytes fail.
    layout.capture_path("blocked").mkdir()
    await channel.send(_feed("blocked"))
    await channel.send(_feed("ok"))
    channel.close()

    consumer = SnapshotConsumer(channel, layout, [KSFO])
    await consumer.run()

    assert consumer.skipped == 1
    assert consumer.written == 1
    assert layout.capture_path("ok").is_file()


@pytest.mark.asyncio
async def test_receiver_closed_after_run(layout: CaptureLayout) -> None:
    channel: SnapshotChannel[DataFeed] = SnapshotChannel(1)
    channel.close()

    await SnapshotConsumer(channel, layout, [KSFO]).run()

    with pytest.raises(ChannelClosedError):
        await channel.send(_feed("late"))


@pytest.mark.asyncio
@pytest.mark.parametrize("version_key", ["../../escaped", "..", "a/b", "a\\b", "a.b", ""])
async def test_unsafe_version_key_is_skipped(layout: CaptureLayout, version_key: str) -> None:
    channel: SnapshotChannel[DataFeed] = SnapshotChannel(4)
    await channel.send(_feed(version_key))
    await channel.send(_feed("20260101190015"))
    channel.close()

    consumer = SnapshotConsumer(channel, layout, [KSFO])
    await consumer.run()

    assert consumer.skipped == 1
    assert consumer.written == 1
    assert not (layout.root / "escaped.json").exists()
    assert [path.name for path in layout.captures_dir.iterdir()] == ["20260101190015.json"]
