"""
features.py
~~~~~~~~~~~
Turn raw ADSBX aircraft records into GeoJSON point features carrying CoT
properties.

Per aircraft:

1. normalise (hex, position, altitude, speed, course, default type);
2. join with the include index (first enrichment pass);
3. build remarks from the enriched record;
4. pick an icon from the group and apply any custom CoT type.

Only one feature exists per hex: a later record for the same hex replaces
the earlier feature.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Final, Iterable, Literal, TypedDict

from dateutil import tz

from .enrichment import enrich
from .includes import IncludeIndex
from .records import AircraftRecord, normalize_record
from .remarks import build_remarks
from .symbology import icon_for_group, is_assigned

UTC: Final = tz.UTC
LOG = logging.getLogger("features")


class PointGeometry(TypedDict):
    type: Literal["Point"]
    coordinates: list[float]


class FeatureProperties(TypedDict, total=False):
    type: str
    callsign: str
    time: dt.datetime
    start: dt.datetime
    speed: float
    course: float
    remarks: str
    icon: str
    metadata: AircraftRecord


class Feature(TypedDict):
    id: str
    type: Literal["Feature"]
    properties: FeatureProperties
    geometry: PointGeometry


class FeatureCollection(TypedDict):
    type: Literal["FeatureCollection"]
    features: list[Feature]


def empty_collection() -> FeatureCollection:
    return FeatureCollection(type="FeatureCollection", features=[])


def _callsign(ac: AircraftRecord) -> str:
    for key in ("callsign", "flight"):
        value = ac.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def assemble_feature(
    raw: AircraftRecord,
    index: IncludeIndex,
    *,
    use_icon: bool = True,
    now: dt.datetime | None = None,
) -> Feature | None:
    """Build the feature for one record, or ``None`` when it is unusable."""
    norm = normalize_record(raw)
    if norm is None:
        return None

    ac: AircraftRecord = dict(raw)  # type: ignore[assignment]
    enrich(ac, index)

    now = now or dt.datetime.now(UTC)
    seen_at = now - dt.timedelta(seconds=norm["seen_pos"])

    properties = FeatureProperties(
        type=norm["cot_type"],
        callsign=_callsign(ac),
        time=seen_at,
        start=seen_at,
        speed=norm["speed"],
        course=norm["course"],
        metadata=ac,
        remarks=build_remarks(ac),
    )

    if use_icon:
        icon = icon_for_group(ac.get("group"), norm["id"])
        if icon:
            properties["icon"] = icon

    # The override replaces the type string only; the icon still follows group.
    if is_assigned(ac.get("cot_type")):
        properties["type"] = ac["cot_type"].strip()

    return Feature(
        id=norm["id"],
        type="Feature",
        properties=properties,
        geometry=PointGeometry(type="Point", coordinates=norm["coordinates"]),
    )


def assemble_features(
    aircraft: Iterable[Any],
    index: IncludeIndex,
    *,
    use_icon: bool = True,
    now: dt.datetime | None = None,
) -> dict[str, Feature]:
    """Assemble every usable record, keyed by hex (last record wins)."""
    now = now or dt.datetime.now(UTC)
    features: dict[str, Feature] = {}
    for raw in aircraft:
        if not isinstance(raw, dict):
            continue
        try:
            feature = assemble_feature(raw, index, use_icon=use_icon, now=now)  # type: ignore[arg-type]
        except (AttributeError, TypeError, ValueError) as exc:
            LOG.warning("skipping malformed record %r: %s", raw.get("hex"), exc)
            continue
        if feature is not None:
            features[feature["id"]] = feature
    return features


__all__ = [
    "Feature",
    "FeatureCollection",
    "assemble_feature",
    "assemble_features",
    "empty_collection",
]
