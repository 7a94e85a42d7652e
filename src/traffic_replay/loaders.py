"""Loaders for the reference airport file and the event definition."""

from __future__ import annotations

import csv
import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError

from traffic_replay.exceptions import ReplayConfigError
from traffic_replay.models.airport import Airport
from traffic_replay.models.event import EventConfig

_logger = logging.getLogger(__name__)

# FAA APT_BASE.csv column names.
_COL_FAA_ID = "ARPT_ID"
_COL_ICAO_ID = "ICAO_ID"
_COL_LATITUDE = "LAT_DECIMAL"
_COL_LONGITUDE = "LONG_DECIMAL"


def load_airports(path: Path) -> dict[str, Airport]:
    """Load airports keyed by ICAO id.

    Rows without an ICAO id are skipped.

    Raises
    ------
    ReplayConfigError
        If the file cannot be read, lacks a required column or holds a
        non-numeric coordinate.
    """
    _logger.debug("Loading airports from %s", path)
    airports: dict[str, Airport] = {}
    try:
        with open(path, newline="", encoding="utf-8-sig") as fh:
            reader = csv.DictReader(fh)
            missing = {_COL_FAA_ID, _COL_ICAO_ID, _COL_LATITUDE, _COL_LONGITUDE} - set(reader.fieldnames or ())
            if missing:
                raise ReplayConfigError(f"{path} is missing columns: {', '.join(sorted(missing))}")
            for line_no, row in enumerate(reader, start=2):
                icao_id = (row.get(_COL_ICAO_ID) or "").strip()
                if not icao_id:
                    continue
                try:
                    airports[icao_id] = Airport(
                        faa_id=(row.get(_COL_FAA_ID) or "").strip(),
                        icao_id=icao_id,
                        latitude=float(row[_COL_LATITUDE]),
                        longitude=float(row[_COL_LONGITUDE]),
                    )
                except (TypeError, ValueError) as exc:
                    raise ReplayConfigError(f"{path}:{line_no}: invalid coordinates for {icao_id}") from exc
    except OSError as exc:
        raise ReplayConfigError(f"Could not read airports file {path}: {exc}") from exc

    _logger.debug("Loaded %d airports", len(airports))
    return airports


def load_event_config(path: Path) -> EventConfig:
    """Load and validate a TOML event definition.

    Raises
    ------
    ReplayConfigError
        If the file is unreadable, not TOML or fails validation.
    """
    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except OSError as exc:
        raise ReplayConfigError(f"Could not read event config {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ReplayConfigError(f"Event config {path} is not valid TOML: {exc}") from exc

    try:
        return EventConfig.model_validate(raw)
    except ValidationError as exc:
        raise ReplayConfigError(f"Invalid event config {path}: {exc}") from exc


def resolve_airports(event: EventConfig, airports: Mapping[str, Airport]) -> list[Airport]:
    """Resolve the event's ICAO ids, in configuration order.

    Raises
    ------
    ReplayConfigError
        If any id is unknown or the event lists no airports.
    """
    if not event.airports:
        raise ReplayConfigError(f"Event {event.name!r} lists no airports")
    resolved: list[Airport] = []
    for icao_id in event.airports:
        airport = airports.get(icao_id)
        if airport is None:
            _logger.error("Invalid airport ICAO id %s, not found in reference data", icao_id)
            raise ReplayConfigError(f"Invalid airport ICAO id {icao_id}, not found in reference data")
        resolved.append(airport)
    return resolved
