"""
records.py
~~~~~~~~~~
Normalise one raw ADSBX v2 aircraft record (``ac[]`` item) into the values
the feature assembler needs.

Public helper
-------------
    normalize_record(ac) ->
        {
            "id": str,                    # lower-case, trimmed ICAO hex
            "coordinates": [lon, lat, alt_m],  # alt_m is NaN when unknown
            "civmil": "-C" | "-M",
            "classification": "-F" | "-H" | "-L" | "",
            "cot_type": str,              # default CoT type
            "speed": float,               # m/s, NaN when unknown
            "course": float,              # degrees, NaN when unknown
            "seen_pos": float,            # seconds since position update
        }
        or ``None`` when the record has no usable hex or position.

Unknown speed and course are NaN, never 0: zero would claim a stationary
aircraft heading due north.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Final, TypedDict

from .symbology import civmil_suffix, classification_suffix, default_cot_type

LOG = logging.getLogger("records")

KNOTS_TO_MPS: Final[float] = 0.5144444
FEET_TO_METERS: Final[float] = 0.3048

#: NaN per the CoT convention for "unknown".
UNKNOWN: Final[float] = math.nan


class AircraftRecord(TypedDict, total=False):
    """Subset of the ADSBX v2 aircraft object plus the fields we join in."""

    hex: str
    type: str
    flight: str
    r: str  # registration
    t: str  # aircraft type designator
    lat: float
    lon: float
    alt_baro: float | str  # feet, or "ground"
    alt_geom: float | str
    gs: float  # knots
    track: float
    category: str
    squawk: str
    emergency: str
    dbFlags: int
    seen: float
    seen_pos: float
    # added by the include join
    group: str
    cot_type: str
    comments: str
    callsign: str
    agency: str


class NormalizedRecord(TypedDict):
    id: str
    coordinates: list[float]
    civmil: str
    classification: str
    cot_type: str
    speed: float
    course: float
    seen_pos: float


def is_number(value: Any) -> bool:
    """True for real ints/floats (bools excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_altitude(value: Any) -> float | None:
    """Feet as float, or ``None`` for absent / textual values like "ground"."""
    if value is None or isinstance(value, bool):
        return None
    if is_number(value):
        parsed = float(value)
    elif isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(parsed) else parsed


def altitude_meters(ac: AircraftRecord) -> float:
    """Geometric altitude, else barometric, in metres; NaN when neither parses."""
    feet = parse_altitude(ac.get("alt_geom"))
    if feet is None:
        feet = parse_altitude(ac.get("alt_baro"))
    return UNKNOWN if feet is None else feet * FEET_TO_METERS


def speed_mps(ac: AircraftRecord) -> float:
    gs = ac.get("gs")
    return float(gs) * KNOTS_TO_MPS if is_number(gs) else UNKNOWN


def course_deg(ac: AircraftRecord) -> float:
    track = ac.get("track")
    return float(track) if is_number(track) else UNKNOWN


def record_id(ac: AircraftRecord) -> str | None:
    raw = ac.get("hex")
    if not isinstance(raw, str):
        return None
    return raw.strip().lower() or None


def normalize_record(ac: AircraftRecord) -> NormalizedRecord | None:
    aircraft_id = record_id(ac)
    if aircraft_id is None:
        return None

    lat, lon = ac.get("lat"), ac.get("lon")
    if not (is_number(lat) and is_number(lon)):
        LOG.debug("skipping %s: no position", aircraft_id)
        return None

    civmil = civmil_suffix(ac.get("dbFlags"))
    classification = classification_suffix(ac.get("category"))
    seen_pos = ac.get("seen_pos", ac.get("seen"))

    return NormalizedRecord(
        id=aircraft_id,
        coordinates=[float(lon), float(lat), altitude_meters(ac)],
        civmil=civmil,
        classification=classification,
        cot_type=default_cot_type(civmil, classification),
        speed=speed_mps(ac),
        course=course_deg(ac),
        seen_pos=float(seen_pos) if is_number(seen_pos) else 0.0,
    )


__all__ = [
    "FEET_TO_METERS",
    "KNOTS_TO_MPS",
    "AircraftRecord",
    "NormalizedRecord",
    "altitude_meters",
    "normalize_record",
]
