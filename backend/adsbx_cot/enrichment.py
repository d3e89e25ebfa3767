"""
enrichment.py
~~~~~~~~~~~~~
Join a live aircraft record with its include entry.

Only the fields an entry actually defines are copied onto the record; a
``$CALLSIGN`` placeholder in the entry's callsign is replaced with the live
flight callsign (``"RESCUE $CALLSIGN"`` + ``"N123AB "`` → ``"RESCUE N123AB"``).
"""

from __future__ import annotations

import logging
from typing import Final

from .constants import CALLSIGN_PLACEHOLDER
from .includes import IncludeEntry, IncludeIndex
from .records import AircraftRecord

LOG = logging.getLogger("enrichment")

JOIN_FIELDS: Final[tuple[str, ...]] = (
    "group",
    "cot_type",
    "comments",
    "callsign",
    "agency",
)


def resolve_callsign(template: str, flight: str | None) -> str:
    """Substitute the live *flight* callsign into *template*."""
    if CALLSIGN_PLACEHOLDER not in template:
        return template
    live = flight.strip() if isinstance(flight, str) else ""
    return template.replace(CALLSIGN_PLACEHOLDER, live, 1)


def apply_include(
    ac: AircraftRecord,
    entry: IncludeEntry,
    fields: tuple[str, ...] = JOIN_FIELDS,
) -> dict[str, str]:
    """
    Overlay *entry* onto *ac* in place for the given *fields*.

    Returns the values written, keyed by field, so callers can mirror them
    elsewhere (remarks).
    """
    written: dict[str, str] = {}
    for field in fields:
        value = entry.get(field)  # type: ignore[misc]
        if value is None:
            continue
        if field == "callsign":
            value = resolve_callsign(value, ac.get("flight"))
        ac[field] = value  # type: ignore[literal-required]
        written[field] = value
    return written


def enrich(ac: AircraftRecord, index: IncludeIndex) -> IncludeEntry | None:
    """Resolve *ac* against *index* (hex, then registration) and overlay it."""
    entry = index.lookup(ac.get("hex"), ac.get("r"))
    if entry is None:
        return None
    apply_include(ac, entry)
    LOG.debug("matched %s → group=%s", ac.get("hex"), entry.get("group"))
    return entry


__all__ = ["JOIN_FIELDS", "apply_include", "enrich", "resolve_callsign"]
