"""Relevance filtering and simple geometry over reference airports.

Distances are great-circle distances on a spherical earth computed by
:mod:`geopy`, using the IUGG mean earth radius.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from geopy.distance import great_circle

from traffic_replay._constants import CAPTURE_RANGE_NM, NM_TO_METERS
from traffic_replay.models.airport import Airport
from traffic_replay.models.capture import ViewportCenter
from traffic_replay.models.pilot import Pilot

#: IUGG mean earth radius in kilometres.
MEAN_EARTH_RADIUS_KM = 6371.0088


def distance_meters(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Great-circle distance between two ``(latitude, longitude)`` points."""
    return great_circle(a, b, radius=MEAN_EARTH_RADIUS_KM).meters


def _within_range(pilot: Pilot, airports: Sequence[Airport], limit_meters: float) -> bool:
    position = (pilot.latitude, pilot.longitude)
    return any(distance_meters(airport.point, position) < limit_meters for airport in airports)


def filter_pilots(
    pilots: Iterable[Pilot],
    airports: Sequence[Airport],
    distance_nm: float = CAPTURE_RANGE_NM,
) -> list[Pilot]:
    """Return the pilots relevant to *airports*, preserving input order.

    A pilot is relevant when its flight plan departs from or arrives at one
    of the airports, or when it is strictly closer than *distance_nm* to any
    of them.  Pilots without a flight plan are judged on distance alone.
    """
    icao_ids = frozenset(airport.icao_id for airport in airports)
    limit_meters = distance_nm * NM_TO_METERS
    kept: list[Pilot] = []
    for pilot in pilots:
        plan = pilot.flight_plan
        if plan is not None and plan.touches(icao_ids):
            kept.append(pilot)
        elif _within_range(pilot, airports, limit_meters):
            kept.append(pilot)
    return kept


def calculate_centroid(airports: Sequence[Airport]) -> ViewportCenter:
    """Arithmetic mean of the airport coordinates.

    Raises
    ------
    ValueError
        If *airports* is empty.
    """
    if not airports:
        raise ValueError("cannot compute a centroid of zero airports")
    count = len(airports)
    return ViewportCenter(
        x=sum(airport.longitude for airport in airports) / count,
        y=sum(airport.latitude for airport in airports) / count,
    )
