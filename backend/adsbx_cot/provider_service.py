"""
provider_service.py
~~~~~~~~~~~~~~~~~~~
Fetch every aircraft within a radius of a point from the **ADS-B Exchange**
v2 API (direct or through RapidAPI; both accept the same token headers).

    GET {api}/v2/lat/{lat}/lon/{lon}/dist/{dist}/?apiKey=…&cacheBuster=…

Errors are raised, not swallowed: the task runner decides what an outage
means for the run.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Final

import httpx

from .api_logging import logged_request
from .constants import USER_AGENT
from .records import AircraftRecord

LOG = logging.getLogger("provider_service")

DEBUG_PREVIEW_CHARS: Final[int] = 1_000


class ProviderError(RuntimeError):
    """The provider answered, but not with an aircraft list."""


def build_url(api: str, lat: float, lon: float, dist: str) -> str:
    return f"{api.rstrip('/')}/v2/lat/{lat}/lon/{lon}/dist/{dist}/"


def fetch_aircraft(
    api: str,
    lat: float,
    lon: float,
    dist: str,
    token: str,
    *,
    timeout: float = 10.0,
    debug: bool = False,
) -> list[AircraftRecord]:
    """
    Return the raw ``ac`` list of the ADSBX response.

    Raises
    ------
    httpx.HTTPError
        Transport failure or non-2xx status.
    ProviderError
        Body is not JSON or has no ``ac`` array.
    """
    url = build_url(api, lat, lon, dist)
    params = {"apiKey": token, "cacheBuster": str(int(time.time() * 1000))}
    headers = {
        "User-Agent": USER_AGENT,
        "x-rapidapi-key": token,
        "api-auth": token,
    }

    with httpx.Client(headers=headers, timeout=timeout) as cli:
        resp = logged_request(cli, "get", url, params=params)

    try:
        data: Any = resp.json()
    except ValueError as exc:
        raise ProviderError(f"ADSBX returned malformed JSON: {exc}") from exc

    if debug:
        LOG.debug("raw API response: %s...", json.dumps(data)[:DEBUG_PREVIEW_CHARS])

    if not isinstance(data, dict) or not isinstance(data.get("ac"), list):
        raise ProviderError("Invalid API response format: missing aircraft data")

    aircraft: list[AircraftRecord] = data["ac"]
    LOG.info("received %d aircraft from ADSBX", len(aircraft))
    return aircraft


__all__ = ["ProviderError", "build_url", "fetch_aircraft"]
