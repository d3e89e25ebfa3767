"""
remarks.py
~~~~~~~~~~
Human-readable remarks attached to every feature, one ``Label: value`` per
line in a fixed order::

    Flight: N123AB
    Callsign: RESCUE N123AB
    Registration: N123AB
    Type: EC35
    ...

:func:`update_remarks` edits single labels in an existing block without
rebuilding it, so anything else already in the text survives.
"""

from __future__ import annotations

from typing import Any, Final, Mapping

from .records import AircraftRecord, is_number
from .symbology import is_assigned

REMARKS_ORDER: Final[tuple[str, ...]] = (
    "Flight",
    "Callsign",
    "Registration",
    "Agency",
    "Type",
    "Category",
    "Alt Baro",
    "Alt Geom",
    "Emergency",
    "Squawk",
    "Group",
    "Comments",
)

UNKNOWN_VALUE: Final[str] = "Unknown"


def format_group(group: str) -> str:
    return group.replace("_", "-").strip()


def _format_number(value: float) -> str:
    """Render ``1000.0`` as ``1000`` and ``1000.5`` as ``1000.5``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_altitude(value: Any) -> str:
    if is_number(value):
        return f"{_format_number(value)} ft"
    return str(value)


def _text(value: Any) -> str:
    return (value if isinstance(value, str) and value else UNKNOWN_VALUE).strip()


def _one_line(value: str) -> str:
    """Collapse line breaks so a value cannot spill into a new label."""
    return " ".join(value.split())


def _serialise(fields: Mapping[str, str]) -> str:
    lines = [
        f"{label}: {_one_line(fields[label])}" for label in REMARKS_ORDER if label in fields
    ]
    lines += [
        f"{label}: {_one_line(value)}"
        for label, value in fields.items()
        if label not in REMARKS_ORDER
    ]
    return "\n".join(lines)


def build_remarks(ac: AircraftRecord) -> str:
    """Serialise the remarks block for an (already enriched) record."""
    fields: dict[str, str] = {
        "Flight": _text(ac.get("flight")),
        "Registration": _text(ac.get("r")),
        "Type": _text(ac.get("t")),
        "Category": _text(ac.get("category")),
        "Emergency": _text(ac.get("emergency")),
        "Squawk": _text(ac.get("squawk")),
    }

    if ac.get("callsign"):
        fields["Callsign"] = ac["callsign"].strip()
    if ac.get("agency"):
        fields["Agency"] = ac["agency"].strip()
    if ac.get("alt_baro") is not None:
        fields["Alt Baro"] = format_altitude(ac["alt_baro"])
    if ac.get("alt_geom") is not None:
        fields["Alt Geom"] = format_altitude(ac["alt_geom"])
    if is_assigned(ac.get("group")):
        fields["Group"] = format_group(ac["group"])
    if ac.get("comments"):
        fields["Comments"] = ac["comments"].strip()

    return _serialise(fields)


def parse_remarks(remarks: str) -> dict[str, str]:
    """Split each line at its first colon; lines without a label are dropped."""
    fields: dict[str, str] = {}
    for line in remarks.split("\n"):
        label, sep, value = line.partition(":")
        label = label.strip()
        if sep and label:
            fields[label] = value.strip()
    return fields


def update_remarks(remarks: str, updates: Mapping[str, str | None]) -> str:
    """
    Set, replace or (with ``None``) delete labels in a remarks block.

    Canonical labels come first in :data:`REMARKS_ORDER`; any other labels
    follow in the order they first appeared.
    """
    fields = parse_remarks(remarks)
    for label, value in updates.items():
        if value is None:
            fields.pop(label, None)
        else:
            fields[label] = value
    return _serialise(fields)


__all__ = [
    "REMARKS_ORDER",
    "build_remarks",
    "format_group",
    "parse_remarks",
    "update_remarks",
]
