"""
task_service.py
~~~~~~~~~~~~~~~
One ETL pass: ADSBX snapshot → enriched CoT features → sink.

1. Fetch the aircraft around the configured centre.
2. Merge configured includes with the optional CSV and index them.
3. Assemble one feature per aircraft (first enrichment pass).
4. Apply the filter policy (second pass in filter mode).
5. Submit the collection.

A provider outage still produces (and submits) an empty collection; a CSV
outage only drops the CSV includes for this run.
"""

from __future__ import annotations

import datetime as dt
import logging

import httpx

from .config import Settings
from .features import FeatureCollection, assemble_features, empty_collection
from .filter_policy import select_features
from .includes import IncludeEntry, IncludeIndex
from .includes_service import load_includes
from .provider_service import fetch_aircraft
from .sink_service import submit

LOG = logging.getLogger("task_service")


def gather_includes(settings: Settings) -> list[IncludeEntry]:
    """Configured includes followed by the CSV includes (if reachable)."""
    entries = list(settings.includes)
    if not settings.includes_url:
        return entries
    try:
        csv_entries = load_includes(
            settings.includes_url, timeout=settings.http_timeout_sec
        )
    except Exception as exc:  # noqa: BLE001 – any CSV failure is non-fatal
        LOG.error("[CSV] %s, continuing with configured includes", exc)
        return entries
    entries.extend(csv_entries)
    LOG.info("[CSV] total includes after merge: %d", len(entries))
    return entries


def _submit(collection: FeatureCollection, settings: Settings) -> None:
    LOG.info("submitting %d features", len(collection["features"]))
    try:
        submit(
            collection,
            settings.sink_url,
            settings.sink_token,
            timeout=settings.http_timeout_sec,
        )
    except httpx.HTTPError as exc:
        LOG.error("sink submission failed: %s", exc)


def run_task(settings: Settings, *, now: dt.datetime | None = None) -> FeatureCollection:
    """Run one batch and return the collection that was submitted."""
    try:
        aircraft = fetch_aircraft(
            settings.adsbx_api,
            settings.lat,
            settings.lon,
            settings.dist,
            settings.adsbx_token,
            timeout=settings.http_timeout_sec,
            debug=settings.debug,
        )
    except Exception as exc:  # noqa: BLE001 – network, HTTP or payload errors
        LOG.error("Error fetching ADSBX data: %s", exc)
        collection = empty_collection()
        _submit(collection, settings)
        return collection

    index = IncludeIndex.build(gather_includes(settings))
    features = assemble_features(aircraft, index, use_icon=settings.use_icon, now=now)
    selected = select_features(features, index, filtering=settings.filtering)

    LOG.info(
        "processed %d valid aircraft (filtered from %d total)",
        len(features),
        len(aircraft),
    )

    collection = FeatureCollection(type="FeatureCollection", features=selected)
    _submit(collection, settings)
    return collection


__all__ = ["gather_includes", "run_task"]
