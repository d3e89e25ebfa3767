"""
symbology.py
~~~~~~~~~~~~
Single source of truth for how an aircraft is drawn on the map.

Key points
----------
* The CoT type string is ``"a-f-A" + civ/mil suffix + airframe suffix``,
  e.g. ``a-f-A-C-F`` for a civilian fixed-wing aircraft.
* The airframe suffix comes from the ADS-B emitter category
  (https://www.adsbexchange.com/emitter-category-ads-b-do-260b-2-2-3-2-5-2/).
* Icons come from TAK's *Public Safety Air* icon set
  (https://tak.gov/public-safety-air-icons/); only the groups listed in
  ``VALID_ICON_GROUPS`` exist in that set.
"""

from __future__ import annotations

import logging
from typing import Any, Final

LOG = logging.getLogger("symbology")

BASE_COT_TYPE: Final[str] = "a-f-A"

#: UUID and folder of the Public Safety Air iconset inside TAK.
PUBLIC_SAFETY_AIR_ICON_PATH: Final[str] = (
    "66f14976-4b62-4023-8edb-d8d2ebeaa336/Public Safety Air/"
)

#: Group values that mean "nothing assigned".
PLACEHOLDER_VALUES: Final[frozenset[str]] = frozenset({"None", "UNKNOWN"})

# ───────────── emitter category → airframe suffix
CATEGORY_SUFFIX: Final[dict[str, str]] = {
    "A0": "-F",  # no category info, still used by some airplanes
    "A1": "-F",  # light (< 15 500 lbs)
    "A2": "-F",  # small (15 500 – 75 000 lbs)
    "A3": "-F",  # large (75 000 – 300 000 lbs)
    "A4": "-F",  # high vortex large (B-757)
    "A5": "-F",  # heavy (> 300 000 lbs)
    "A6": "-F",  # high performance (> 5 g and 400 kts)
    "A7": "-H",  # rotorcraft
    "B2": "-L",  # lighter-than-air
}

CIVILIAN_SUFFIX: Final[str] = "-C"
MILITARY_SUFFIX: Final[str] = "-M"

VALID_ICON_GROUPS: Final[frozenset[str]] = frozenset(
    {
        "a-f-A-M-F-A",
        "a-f-A-M-F-C",
        "a-f-A-M-F-J",
        "a-f-A-M-F-O",
        "a-f-A-M-F-Q",
        "a-f-A-M-F-R-Z",
        "a-f-A-M-F-R",
        "a-f-A-M-F-U",
        "a-f-A-M-F-V",
        "a-f-A-M-F-WX",
        "a-f-A-M-F-Y",
        "a-f-A-M-H-H",
        "a-f-A-M-H-R",
        "a-f-A-M-H-V",
        "a-f-A-M-H",
        "a-n-A-M-F-V",
        "CIV_FIXED_CAP",
        "CIV_FIXED_ISR",
        "CIV_LTA_AIRSHIP",
        "CIV_LTA_BALLOON",
        "CIV_LTA_TETHERED",
        "CIV_ROTOR_ISR",
        "CIV_UAS",
        "CIV_UAS_ROTOR",
        "EMS_FIXED_WING",
        "EMS_ROTOR",
        "EMS_ROTOR_RESCUE",
        "FED_FIXED_WING",
        "FED_FIXED_WING_ISR",
        "FED_ROTOR",
        "FED_ROTOR_RESCUE",
        "FED_UAS",
        "FIRE_AIR_ATTACK",
        "FIRE_AIR_TANKER",
        "FIRE_INTEL",
        "FIRE_LEAD_PLANE",
        "FIRE_MULTI_USE",
        "FIRE_ROTOR",
        "FIRE_ROTOR_AIR_ATTACK",
        "FIRE_ROTOR_INTEL",
        "FIRE_ROTOR_RESCUE",
        "FIRE_SEAT",
        "FIRE_SMOKE_JMPR",
        "FIRE_UAS",
        "LE_FIXED_WING",
        "LE_FIXED_WING_ISR",
        "LE_ROTOR",
        "LE_ROTOR_RESCUE",
        "LE_UAS",
        "MIL_ROTOR_ISR_RESCUE",
        "MIL_ROTOR_MED_RESCUE",
    }
)


def is_assigned(value: Any) -> bool:
    """True when *value* is a non-empty string other than ``None``/``UNKNOWN``."""
    if not isinstance(value, str):
        return False
    value = value.strip()
    return bool(value) and value not in PLACEHOLDER_VALUES


def classification_suffix(category: Any) -> str:
    """Airframe suffix for an emitter category; empty when unknown."""
    if not isinstance(category, str):
        return ""
    return CATEGORY_SUFFIX.get(category.strip(), "")


def civmil_suffix(db_flags: Any) -> str:
    """``-M`` when bit 0 of the ADSBX ``dbFlags`` field is set, else ``-C``."""
    if db_flags is None or isinstance(db_flags, bool):
        return CIVILIAN_SUFFIX
    try:
        flags = int(db_flags)
    except (TypeError, ValueError):
        return CIVILIAN_SUFFIX
    return MILITARY_SUFFIX if flags % 2 else CIVILIAN_SUFFIX


def default_cot_type(civmil: str, classification: str) -> str:
    return BASE_COT_TYPE + civmil + classification


def icon_for_group(group: Any, aircraft_id: str = "") -> str | None:
    """
    Return the Public Safety Air icon path for *group*, or ``None``.

    Unassigned groups yield ``None`` silently; an assigned group that is not
    part of the icon set is logged as a warning and also yields ``None``.
    """
    if not is_assigned(group):
        return None
    name = group.strip()
    if name not in VALID_ICON_GROUPS:
        LOG.warning(
            "Invalid icon group '%s' for aircraft %s, using default icon",
            name,
            aircraft_id,
        )
        return None
    return f"{PUBLIC_SAFETY_AIR_ICON_PATH}{name}.png"


__all__ = [
    "PUBLIC_SAFETY_AIR_ICON_PATH",
    "VALID_ICON_GROUPS",
    "civmil_suffix",
    "classification_suffix",
    "default_cot_type",
    "icon_for_group",
    "is_assigned",
]
