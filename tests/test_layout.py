from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from traffic_replay.layout import CaptureLayout, event_slug, slugify
from traffic_replay.models.event import EventConfig


def _event(name: str) -> EventConfig:
    return EventConfig(
        name=name,
        advertised_start_time=datetime(2026, 3, 7, 23, 0, tzinfo=UTC),
        advertised_end_time=datetime(2026, 3, 8, 2, 0, tzinfo=UTC),
    )


def test_slugify() -> None:
    assert slugify("Northeast Corridor: Boston -> DC!") == "northeast-corridor-boston-dc"
    assert slugify("  Zürich Überflug  ") == "zurich-uberflug"


def test_event_slug_uses_start_date() -> None:
    assert event_slug(_event("Cross the Pond")) == "2026-03-07-cross-the-pond"


def test_layout_paths(tmp_path: Path) -> None:
    layout = CaptureLayout.for_event(tmp_path, _event("FNO"))

    assert layout.event_dir == tmp_path / "2026-03-07-fno"
    assert layout.captures_dir == tmp_path / "2026-03-07-fno" / "captures"
    assert layout.capture_path("20260307230000") == layout.captures_dir / "20260307230000.json"
    assert layout.output_path == tmp_path / "2026-03-07-fno" / "2026-03-07-fno.json"
    assert layout.index_path == tmp_path / "events.json"
    assert layout.output_url == "2026-03-07-fno/2026-03-07-fno.json"


def test_ensure_captures_dir_is_idempotent(tmp_path: Path) -> None:
    layout = CaptureLayout.for_event(tmp_path, _event("FNO"))

    layout.ensure_captures_dir()
    layout.ensure_captures_dir()

    assert layout.captures_dir.is_dir()


@pytest.mark.parametrize("version_key", ["../escaped", "..", ".", "a/b", "a\\b", ""])
def test_capture_path_rejects_path_like_keys(tmp_path: Path, version_key: str) -> None:
    layout = CaptureLayout.for_event(tmp_path, _event("FNO"))

    with pytest.raises(ValueError, match="version key"):
        layout.capture_path(version_key)
