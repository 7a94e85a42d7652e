"""Pilot (tracked aircraft) models from the VATSIM v3 datafeed."""

from __future__ import annotations

from pydantic import Field

from traffic_replay.models._base import ReplayBaseModel


class FlightPlan(ReplayBaseModel):
    """Filed flight plan attached to a connected pilot.

    ``departure`` and ``arrival`` are ICAO airport codes as filed; they are
    free text on the network and may be empty.
    """

    flight_rules: str = ""
    aircraft: str = ""
    aircraft_faa: str = ""
    aircraft_short: str = ""
    departure: str = ""
    arrival: str = ""
    alternate: str = ""
    altitude: str = ""
    route: str = ""
    revision_id: int = 0

    def touches(self, icao_ids: frozenset[str] | set[str]) -> bool:
        """Whether the plan departs from or arrives at one of *icao_ids*."""
        return self.departure in icao_ids or self.arrival in icao_ids


class Pilot(ReplayBaseModel):
    """A single connected pilot as reported by one datafeed snapshot.

    Parameters
    ----------
    cid : int
        Network member id; used as the GeoJSON feature id.
    name : str
        Display name.
    callsign : str
        Callsign in use for this session.
    latitude, longitude : float
        Position in decimal degrees.
    altitude : int
        Altitude in feet.
    groundspeed : int
        Ground speed in knots.
    transponder : str
        Squawk code.
    heading : int
        Heading in degrees.
    flight_plan : FlightPlan or None
        Filed plan, absent when the pilot has not filed.
    logon_time : str
        Session start timestamp, as sent by the feed.
    last_updated : str
        Last position update timestamp, as sent by the feed.
    """

    cid: int
    name: str = ""
    callsign: str = ""
    latitude: float
    longitude: float
    altitude: int = 0
    groundspeed: int = 0
    transponder: str = ""
    heading: int = 0
    flight_plan: FlightPlan | None = Field(default=None)
    logon_time: str = ""
    last_updated: str = ""
