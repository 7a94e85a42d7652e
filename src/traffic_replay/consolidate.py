"""Merge per-snapshot capture files into one event artifact.

Capture files are read in file-name order and grouped by version key (the
file stem).  The first/last keys recorded on the artifact are plain string
min/max, which matches chronological order only because VATSIM version keys
are fixed-width ``YYYYMMDDhhmmss`` strings.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from traffic_replay._constants import CAPTURE_SUFFIX
from traffic_replay.exceptions import ConsolidationError
from traffic_replay.geo import calculate_centroid
from traffic_replay.layout import CaptureLayout
from traffic_replay.models.airport import Airport
from traffic_replay.models.capture import EventCapture, EventIndexEntry
from traffic_replay.models.event import EventConfig
from traffic_replay.models.geojson import Feature, FeatureCollection
from traffic_replay.models.pilot import Pilot

_logger = logging.getLogger(__name__)

_PILOTS = TypeAdapter(list[Pilot])
_CAPTURES = TypeAdapter(dict[str, FeatureCollection])
_INDEX = TypeAdapter(list[EventIndexEntry])


def read_capture_file(path: Path) -> list[Pilot]:
    """Read one capture file.

    Raises
    ------
    ConsolidationError
        If the file cannot be read or does not hold a list of pilots.
    """
    try:
        return _PILOTS.validate_json(path.read_bytes())
    except OSError as exc:
        raise ConsolidationError(f"Could not read capture file {path}: {exc}", path=str(path)) from exc
    except ValidationError as exc:
        raise ConsolidationError(f"Corrupt capture file {path}: {exc}", path=str(path)) from exc


def to_feature_collection(pilots: Sequence[Pilot]) -> FeatureCollection:
    return FeatureCollection(features=[Feature.from_pilot(pilot) for pilot in pilots])


def capture_files(captures_dir: Path) -> list[Path]:
    """Immediate ``*.json`` files of *captures_dir* (non-recursive)."""
    return sorted(path for path in captures_dir.iterdir() if path.is_file() and path.suffix == CAPTURE_SUFFIX)


class Consolidator:
    """Build and write the :class:`EventCapture` artifact for an event."""

    def __init__(
        self,
        event: EventConfig,
        airports: Sequence[Airport],
        layout: CaptureLayout,
        *,
        update_index: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        self._event = event
        self._airports = list(airports)
        self._layout = layout
        self._update_index = update_index
        self._logger = logger or _logger

    def build(self) -> EventCapture:
        """Read every capture file into an :class:`EventCapture`.

        Raises
        ------
        ConsolidationError
            If the captures directory or any capture file is unreadable.
        """
        captures_dir = self._layout.captures_dir
        try:
            paths = capture_files(captures_dir)
        except OSError as exc:
            raise ConsolidationError(
                f"Could not list captures directory {captures_dir}: {exc}",
                path=str(captures_dir),
            ) from exc

        captures: dict[str, FeatureCollection] = {}
        min_key: str | None = None
        max_key: str | None = None
        for path in paths:
            pilots = read_capture_file(path)
            version_key = path.stem
            if min_key is None or version_key < min_key:
                min_key = version_key
            if max_key is None or version_key > max_key:
                max_key = version_key
            captures[version_key] = to_feature_collection(pilots)

        try:
            centroid = calculate_centroid(self._airports)
        except ValueError as exc:
            raise ConsolidationError(str(exc)) from exc

        captures_length = len(_CAPTURES.dump_json(captures))
        self._logger.debug("Read %d capture files (%d bytes of features)", len(captures), captures_length)

        return EventCapture(
            config=self._event,
            first_timestamp_key=min_key,
            last_timestamp_key=max_key,
            captures=captures,
            captures_length_bytes=captures_length,
            viewport_center=centroid,
        )

    def write(self, capture: EventCapture) -> Path:
        """Write *capture* to the event output path.

        Raises
        ------
        ConsolidationError
            If the output file cannot be written.
        """
        path = self._layout.output_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(capture.to_json(), encoding="utf-8")
        except OSError as exc:
            raise ConsolidationError(f"Could not write {path}: {exc}", path=str(path)) from exc
        return path

    def run(self) -> EventCapture:
        """Build, write and (optionally) index the artifact."""
        capture = self.build()
        path = self.write(capture)
        if self._update_index:
            self.update_events_index()
        self._logger.info(
            "Completed combining %d datafeed captures into %s",
            len(capture.captures),
            path,
        )
        return capture

    def update_events_index(self) -> list[EventIndexEntry]:
        """Upsert this event into ``events.json``, ordered by start time.

        Raises
        ------
        ConsolidationError
            If the existing index is unreadable or cannot be rewritten.
        """
        index_path = self._layout.index_path
        entries: list[EventIndexEntry] = []
        if index_path.exists():
            try:
                entries = _INDEX.validate_json(index_path.read_bytes())
            except (OSError, ValidationError) as exc:
                raise ConsolidationError(
                    f"Could not read events index {index_path}: {exc}",
                    path=str(index_path),
                ) from exc

        url = self._layout.output_url
        entries = [entry for entry in entries if entry.url != url]
        entries.append(EventIndexEntry(event=self._event, url=url))
        entries.sort(key=lambda entry: entry.event.advertised_start_time)

        try:
            index_path.write_text(
                json.dumps(_INDEX.dump_python(entries, mode="json"), indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            raise ConsolidationError(f"Could not write events index {index_path}: {exc}", path=str(index_path)) from exc
        return entries
