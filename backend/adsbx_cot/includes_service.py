"""
includes_service.py
~~~~~~~~~~~~~~~~~~~
Load extra include entries from a remotely hosted CSV
(``ADSBX_INCLUDES_URL``), merged after the configured ones.

Expected CSV layout (header names are case-insensitive, order is free)::

    domain,agency,icao_hex,registration,callsign,group,type,comment
    FIRE,CAL FIRE,a1b2c3,N123AB,RESCUE $CALLSIGN,FIRE_ROTOR,,Copter 1

Google-Drive share links are rewritten to their export URLs; several export
endpoints are tried in turn because Drive answers differently for plain
files and for Sheets.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Final

import httpx

from .api_logging import logged_request
from .constants import BROWSER_USER_AGENT
from .includes import IncludeEntry

LOG = logging.getLogger("includes_service")

DEFAULT_DOMAIN: Final[str] = "MIL"
DEFAULT_GROUP: Final[str] = "UNKNOWN"

# CSV column → entry field; later columns win ("type" over "cot_type").
COLUMN_MAP: Final[tuple[tuple[str, str], ...]] = (
    ("agency", "agency"),
    ("icao_hex", "ICAO_hex"),
    ("registration", "registration"),
    ("callsign", "callsign"),
    ("cot_type", "cot_type"),
    ("type", "cot_type"),
    ("comments", "comments"),
    ("comment", "comments"),
)


class IncludesError(RuntimeError):
    """The include CSV could not be obtained."""


# ───────────────────────────── parsing ──────────────────────────────────
def parse_includes_csv(text: str) -> list[IncludeEntry]:
    """Map CSV rows onto include entries; blank cells are ignored."""
    rows = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    header: list[str] | None = None
    entries: list[IncludeEntry] = []

    for values in rows:
        if header is None:
            header = [col.strip().lower() for col in values]
            LOG.debug("CSV header columns: %s", ", ".join(header))
            continue
        if not any(v.strip() for v in values):
            continue

        row = {
            key: value.strip()
            for key, value in zip(header, values)
            if value.strip()
        }
        entry = IncludeEntry(
            domain=row.get("domain", DEFAULT_DOMAIN),
            group=row.get("group", DEFAULT_GROUP),
        )
        for column, field in COLUMN_MAP:
            if column in row:
                entry[field] = row[column]  # type: ignore[literal-required]
        entries.append(entry)

    return entries


# ───────────────────────────── Google Drive ─────────────────────────────
def extract_drive_file_id(url: str) -> str:
    """File id from the common Drive URL shapes, or ``""``."""
    if "drive.google.com" not in url:
        return ""
    if "id=" in url:
        return url.split("id=", 1)[1].split("&", 1)[0]
    if "/file/d/" in url:
        return url.split("/file/d/", 1)[1].split("/", 1)[0]
    if "/d/" in url:
        return url.split("/d/", 1)[1].split("/", 1)[0]
    return ""


def drive_export_url(url: str) -> str:
    """Rewrite a Drive share link into a direct download link."""
    if "export=download" in url:
        return url
    file_id = extract_drive_file_id(url)
    if not file_id:
        LOG.warning("[CSV] could not extract file id from Google Drive URL")
        return url
    return f"https://drive.google.com/uc?export=download&id={file_id}"


def drive_download_urls(file_id: str) -> list[tuple[str, str]]:
    return [
        ("standard export", f"https://drive.google.com/uc?export=download&id={file_id}"),
        ("sheets export", f"https://docs.google.com/spreadsheets/d/{file_id}/export?format=csv"),
        ("alternate export", f"https://drive.google.com/uc?id={file_id}&export=download"),
    ]


# ───────────────────────────── fetching ─────────────────────────────────
def _get_text(cli: httpx.Client, url: str) -> str:
    resp = logged_request(cli, "get", url)
    text = resp.text
    if not text or not text.strip():
        raise IncludesError(f"empty CSV data from {url}")
    return text


def _download_from_drive(cli: httpx.Client, url: str) -> str:
    file_id = extract_drive_file_id(url)
    if not file_id:
        raise IncludesError("could not extract file id from Google Drive URL")

    last_error: Exception | None = None
    for description, candidate in drive_download_urls(file_id):
        try:
            return _get_text(cli, candidate)
        except (httpx.HTTPError, IncludesError) as exc:
            LOG.info("[GDrive] %s failed: %s", description, exc)
            last_error = exc
    raise IncludesError(f"all Google Drive download methods failed: {last_error}")


def fetch_includes_csv(url: str, *, timeout: float = 10.0) -> str:
    """
    Download the include CSV as text.

    Raises
    ------
    httpx.HTTPError
        Transport failure or non-2xx status.
    IncludesError
        Empty body, or every Google Drive method failed.
    """
    with httpx.Client(
        headers={"User-Agent": BROWSER_USER_AGENT},
        timeout=timeout,
        follow_redirects=True,
    ) as cli:
        if "drive.google.com" in url:
            try:
                return _download_from_drive(cli, url)
            except IncludesError as exc:
                LOG.warning("[CSV] Google Drive helper failed: %s", exc)
            url = drive_export_url(url)
        return _get_text(cli, url)


def load_includes(url: str, *, timeout: float = 10.0) -> list[IncludeEntry]:
    """Fetch and parse the include CSV at *url*."""
    text = fetch_includes_csv(url, timeout=timeout)
    LOG.debug("[CSV] data preview: %r", text[:100])
    entries = parse_includes_csv(text)
    LOG.info("[CSV] parsed %d aircraft from %s", len(entries), url)
    if entries:
        LOG.debug("[CSV] first parsed item: %s", entries[0])
    return entries


__all__ = [
    "IncludesError",
    "drive_export_url",
    "extract_drive_file_id",
    "fetch_includes_csv",
    "load_includes",
    "parse_includes_csv",
]
