"""
filter_policy.py
~~~~~~~~~~~~~~~~
Decide which assembled features are emitted.

* **Pass-through** (filtering off): every feature, in assembly order.
* **Filter mode**: only aircraft matching an include entry. The index is
  walked by hex first, then by registration; each match is re-joined with its
  entry and its remarks refreshed label by label before it is emitted. A
  feature is emitted at most once, so an aircraft listed both by hex and by
  registration is handled by the hex walk only.
"""

from __future__ import annotations

import logging
from typing import Mapping

from .enrichment import resolve_callsign
from .features import Feature
from .includes import IncludeEntry, IncludeIndex
from .remarks import format_group, update_remarks
from .symbology import is_assigned

LOG = logging.getLogger("filter_policy")


def _remarks_value(value: str) -> str | None:
    """Trimmed remarks value; ``None`` (delete the label) when empty."""
    return value.strip() or None


def refresh_feature(feature: Feature, entry: IncludeEntry) -> None:
    """Re-apply *entry* to the feature metadata and update its remarks."""
    props = feature["properties"]
    ac = props["metadata"]
    remarks = props["remarks"]

    group = entry.get("group")
    if group is not None:
        ac["group"] = group
        remarks = update_remarks(
            remarks, {"Group": format_group(group) if is_assigned(group) else None}
        )

    comments = entry.get("comments")
    if comments is not None:
        ac["comments"] = comments
        remarks = update_remarks(remarks, {"Comments": _remarks_value(comments)})

    callsign = entry.get("callsign")
    if callsign is not None:
        final = resolve_callsign(callsign, ac.get("flight"))
        ac["callsign"] = final
        remarks = update_remarks(remarks, {"Callsign": _remarks_value(final)})

    agency = entry.get("agency")
    if agency is not None:
        ac["agency"] = agency
        remarks = update_remarks(remarks, {"Agency": _remarks_value(agency)})

    props["remarks"] = remarks


def _registration(feature: Feature) -> str | None:
    reg = feature["properties"]["metadata"].get("r")
    return reg.strip().lower() if isinstance(reg, str) else None


def filter_features(
    features: Mapping[str, Feature], index: IncludeIndex
) -> list[Feature]:
    """Keep only features matched by *index*, refreshed with their entry."""
    selected: list[Feature] = []
    processed: set[str] = set()

    # Features are keyed by the normalised hex, i.e. the same key as by_hex.
    for hex_code, entry in index.by_hex.items():
        feature = features.get(hex_code)
        if feature is None or hex_code in processed:
            continue
        refresh_feature(feature, entry)
        processed.add(hex_code)
        selected.append(feature)

    for registration, entry in index.by_registration.items():
        for feature_id, feature in features.items():
            if feature_id in processed:
                continue
            if _registration(feature) == registration:
                refresh_feature(feature, entry)
                processed.add(feature_id)
                selected.append(feature)
                break

    return selected


def select_features(
    features: Mapping[str, Feature], index: IncludeIndex, *, filtering: bool
) -> list[Feature]:
    if not filtering:
        return list(features.values())
    selected = filter_features(features, index)
    LOG.info("filter kept %d of %d aircraft", len(selected), len(features))
    return selected


__all__ = ["filter_features", "refresh_feature", "select_features"]
