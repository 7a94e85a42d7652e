from __future__ import annotations

import pytest

from traffic_replay.geo import calculate_centroid, distance_meters, filter_pilots
from traffic_replay.models.airport import Airport
from traffic_replay.models.pilot import FlightPlan, Pilot

KSFO = Airport(faa_id="SFO", icao_id="KSFO", latitude=37.619, longitude=-122.375)
KOAK = Airport(faa_id="OAK", icao_id="KOAK", latitude=37.721, longitude=-122.221)
KJFK = Airport(faa_id="JFK", icao_id="KJFK", latitude=40.640, longitude=-73.779)


def _pilot(cid: int, lat: float, lon: float, *, departure: str | None = None, arrival: str = "") -> Pilot:
    plan = None
    if departure is not None:
        plan = FlightPlan(departure=departure, arrival=arrival)
    return Pilot(cid=cid, callsign=f"TST{cid}", latitude=lat, longitude=lon, flight_plan=plan)


def test_scenario_ksfo_five_nm() -> None:
    at_field = _pilot(1, 37.619, -122.375)
    null_island = _pilot(2, 0.0, 0.0)
    departing = _pilot(3, 10.0, 10.0, departure="KSFO")

    kept = filter_pilots([at_field, null_island, departing], [KSFO], 5)

    assert [p.cid for p in kept] == [1, 3]


def test_plan_match_kept_regardless_of_distance() -> None:
    arriving = _pilot(1, -33.9, 151.2, departure="YSSY", arrival="KSFO")
    assert filter_pilots([arriving], [KSFO], 1) == [arriving]


def test_plan_without_match_falls_back_to_distance() -> None:
    nearby = _pilot(1, 37.7, -122.3, departure="KLAX", arrival="KSEA")
    far = _pilot(2, 47.4, -122.3, departure="KLAX", arrival="KSEA")

    assert [p.cid for p in filter_pilots([nearby, far], [KSFO], 50)] == [1]


def test_distance_threshold_is_strict() -> None:
    on_field = _pilot(1, KSFO.latitude, KSFO.longitude)

    assert filter_pilots([on_field], [KSFO], 0) == []
    assert filter_pilots([on_field], [KSFO], 0.001) == [on_field]


def test_any_reference_airport_counts() -> None:
    pilot = _pilot(1, 40.7, -73.8)
    assert filter_pilots([pilot], [KSFO, KJFK], 20) == [pilot]


def test_order_preserved() -> None:
    pilots = [_pilot(cid, 37.6 + cid / 100, -122.4) for cid in (5, 3, 9, 1)]
    assert [p.cid for p in filter_pilots(pilots, [KSFO], 600)] == [5, 3, 9, 1]


def test_distance_meters_one_degree_of_latitude() -> None:
    assert distance_meters((0.0, 0.0), (1.0, 0.0)) == pytest.approx(111_195, rel=1e-3)


def test_centroid_is_plain_mean() -> None:
    center = calculate_centroid([KSFO, KOAK])

    assert center.x == pytest.approx((-122.375 + -122.221) / 2)
    assert center.y == pytest.approx((37.619 + 37.721) / 2)


def test_centroid_requires_airports() -> None:
    with pytest.raises(ValueError):
        calculate_centroid([])
