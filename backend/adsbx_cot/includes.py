"""
includes.py
~~~~~~~~~~~
Aircraft of interest ("includes") and the lookup index built from them.

Each entry carries:
    ``domain``       : public-safety domain (EMS, FIRE, LAW, FED, MIL)
    ``group``        : icon group from the Public Safety Air set, or UNKNOWN
    ``agency``       : operating agency (optional)
    ``ICAO_hex``     : six-digit Mode-S hex code (optional)
    ``registration`` : tail number (optional)
    ``callsign``     : display callsign, may embed ``$CALLSIGN`` (optional)
    ``cot_type``     : custom CoT type override (optional)
    ``comments``     : free text (optional)

An entry with neither ``ICAO_hex`` nor ``registration`` never matches.
"""

from __future__ import annotations

import logging
from typing import Any, Final, Iterable, TypedDict

from .symbology import VALID_ICON_GROUPS

LOG = logging.getLogger("includes")

DOMAINS: Final[tuple[str, ...]] = ("EMS", "FIRE", "LAW", "FED", "MIL")
UNKNOWN_GROUP: Final[str] = "UNKNOWN"
INCLUDE_GROUPS: Final[frozenset[str]] = VALID_ICON_GROUPS | {UNKNOWN_GROUP}

OPTIONAL_FIELDS: Final[tuple[str, ...]] = (
    "agency",
    "ICAO_hex",
    "registration",
    "callsign",
    "cot_type",
    "comments",
)


class IncludeEntry(TypedDict, total=False):
    domain: str
    group: str
    agency: str
    ICAO_hex: str
    registration: str
    callsign: str
    cot_type: str
    comments: str


def _key(value: Any) -> str | None:
    """Normalise a hex / registration into an index key."""
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    return key or None


class IncludeIndex:
    """Two lookups over the include entries: by ICAO hex and by registration.

    Entries are indexed in the order given; a later entry with the same key
    replaces the earlier one.
    """

    def __init__(self) -> None:
        self.by_hex: dict[str, IncludeEntry] = {}
        self.by_registration: dict[str, IncludeEntry] = {}

    @classmethod
    def build(cls, entries: Iterable[IncludeEntry]) -> "IncludeIndex":
        index = cls()
        for entry in entries:
            registration = _key(entry.get("registration"))
            if registration:
                index.by_registration[registration] = entry
            hex_code = _key(entry.get("ICAO_hex"))
            if hex_code:
                index.by_hex[hex_code] = entry
        LOG.debug(
            "include index: %d by hex, %d by registration",
            len(index.by_hex),
            len(index.by_registration),
        )
        return index

    def lookup(self, hex_code: Any, registration: Any = None) -> IncludeEntry | None:
        """Return the hex match, else the registration match, else ``None``."""
        key = _key(hex_code)
        if key and key in self.by_hex:
            return self.by_hex[key]
        key = _key(registration)
        if key:
            return self.by_registration.get(key)
        return None

    def __bool__(self) -> bool:
        return bool(self.by_hex or self.by_registration)


def entry_from_config(raw: Any) -> IncludeEntry:
    """
    Validate one operator-declared include (``ADSBX_INCLUDES`` item).

    Raises
    ------
    ValueError
        Unknown ``domain`` or ``group``, or a non-string field.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"include entry must be an object, got {type(raw).__name__}")

    domain = raw.get("domain")
    if domain not in DOMAINS:
        raise ValueError(f"include entry has invalid domain {domain!r}")

    group = raw.get("group", UNKNOWN_GROUP)
    if group not in INCLUDE_GROUPS:
        raise ValueError(f"include entry has invalid group {group!r}")

    entry = IncludeEntry(domain=domain, group=group)
    for field in OPTIONAL_FIELDS:
        value = raw.get(field)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValueError(f"include entry field {field!r} must be a string")
        entry[field] = value  # type: ignore[literal-required]
    return entry


def entries_from_config(raw_entries: Iterable[Any]) -> list[IncludeEntry]:
    return [entry_from_config(raw) for raw in raw_entries]


__all__ = [
    "DOMAINS",
    "INCLUDE_GROUPS",
    "IncludeEntry",
    "IncludeIndex",
    "entries_from_config",
    "entry_from_config",
]
