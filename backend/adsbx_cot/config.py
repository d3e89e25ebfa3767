"""
config.py
~~~~~~~~~
Runtime configuration, read from environment variables (a local ``.env`` is
loaded by :pymod:`main`).

Variables
---------
    QUERY_LATLON         "lat,lon" centre of the ADSBX query
    QUERY_DIST           radius in nautical miles
    ADSBX_API            ADSBX base URL (direct or RapidAPI host)
    ADSBX_TOKEN          ADSBX API token
    ADSBX_FILTERING      only emit aircraft from the includes
    ADSBX_USE_ICON       pick icons from the include group
    ADSBX_INCLUDES       JSON array of include entries
    ADSBX_INCLUDES_FILE  path to a JSON array of include entries
    ADSBX_INCLUDES_URL   CSV of extra includes, merged after the above
    DEBUG                verbose logging incl. raw API preview
    SINK_URL / SINK_TOKEN  where the feature collection is POSTed
    POLL_INTERVAL_SEC    background loop period, 0 disables the loop
    HTTP_TIMEOUT_SEC     timeout for every outbound request
    RUN_TOKEN            protects ``POST /run``
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Mapping

from .includes import IncludeEntry, entries_from_config

LOG = logging.getLogger("config")

ADSBX_APIS: Final[tuple[str, ...]] = (
    "https://adsbexchange-com1.p.rapidapi.com",
    "https://adsbexchange.com/api/aircraft",
)
DEFAULT_LATLON: Final[str] = "37.1841,-119.4696"
DEFAULT_DIST: Final[str] = "750"


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_latlon(value: str) -> tuple[float, float]:
    """``"37.1841, -119.4696"`` → ``(37.1841, -119.4696)``."""
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 2:
        raise ValueError(f"QUERY_LATLON must be 'lat,lon', got {value!r}")
    try:
        lat, lon = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise ValueError(f"QUERY_LATLON is not numeric: {value!r}") from exc
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        raise ValueError(f"QUERY_LATLON out of range: {value!r}")
    return lat, lon


def _load_includes(env: Mapping[str, str]) -> list[IncludeEntry]:
    raw = env.get("ADSBX_INCLUDES", "").strip()
    path = env.get("ADSBX_INCLUDES_FILE", "").strip()
    if not raw and path:
        raw = Path(path).expanduser().read_text(encoding="utf-8")
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"ADSBX_INCLUDES is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ValueError("ADSBX_INCLUDES must be a JSON array")
    return entries_from_config(data)


@dataclass(frozen=True)
class Settings:
    """Configuration for one deployment of the ETL."""

    lat: float
    lon: float
    dist: str = DEFAULT_DIST
    adsbx_api: str = ADSBX_APIS[1]
    adsbx_token: str = ""
    filtering: bool = True
    use_icon: bool = True
    includes: list[IncludeEntry] = field(default_factory=list)
    includes_url: str = ""
    debug: bool = False
    sink_url: str = ""
    sink_token: str = ""
    poll_interval_sec: float = 60.0
    http_timeout_sec: float = 10.0
    run_token: str = ""


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """
    Build :class:`Settings` from *env* (defaults to ``os.environ``).

    Raises
    ------
    ValueError
        Malformed location, unknown API endpoint or invalid include entry.
    """
    env = os.environ if env is None else env

    lat, lon = parse_latlon(env.get("QUERY_LATLON", DEFAULT_LATLON))

    dist = env.get("QUERY_DIST", DEFAULT_DIST).strip()
    try:
        float(dist)
    except ValueError as exc:
        raise ValueError(f"QUERY_DIST is not numeric: {dist!r}") from exc

    api = env.get("ADSBX_API", ADSBX_APIS[1]).strip().rstrip("/")
    if api not in ADSBX_APIS:
        raise ValueError(f"ADSBX_API must be one of {ADSBX_APIS}, got {api!r}")

    settings = Settings(
        lat=lat,
        lon=lon,
        dist=dist,
        adsbx_api=api,
        adsbx_token=env.get("ADSBX_TOKEN", ""),
        filtering=_get_bool(env, "ADSBX_FILTERING", True),
        use_icon=_get_bool(env, "ADSBX_USE_ICON", True),
        includes=_load_includes(env),
        includes_url=env.get("ADSBX_INCLUDES_URL", "").strip(),
        debug=_get_bool(env, "DEBUG", False),
        sink_url=env.get("SINK_URL", "").strip(),
        sink_token=env.get("SINK_TOKEN", ""),
        poll_interval_sec=float(env.get("POLL_INTERVAL_SEC", "60")),
        http_timeout_sec=float(env.get("HTTP_TIMEOUT_SEC", "10")),
        run_token=env.get("RUN_TOKEN", ""),
    )

    if not settings.adsbx_token:
        LOG.warning("ADSBX_TOKEN is not set, provider requests will be rejected")
    LOG.info(
        "config: centre=%.4f,%.4f dist=%s NM includes=%d filtering=%s",
        settings.lat,
        settings.lon,
        settings.dist,
        len(settings.includes),
        settings.filtering,
    )
    return settings


__all__ = ["ADSBX_APIS", "Settings", "load_settings", "parse_latlon"]
