"""
sink_service.py
~~~~~~~~~~~~~~~
Hand the finished feature collection to the map-display sink (a CloudTAK
layer ingest endpoint) in one request per run.

Serialisation
-------------
Inside the pipeline unknown speed / course / altitude are ``math.nan`` and
timestamps are aware ``datetime`` objects. JSON has no NaN, so at this
boundary NaN becomes ``null`` (what a JavaScript sink produces for NaN as
well) and datetimes become ISO-8601 strings.
"""

from __future__ import annotations

import datetime as dt
import logging
import math
from typing import Any

import httpx

from .api_logging import logged_request
from .constants import USER_AGENT
from .features import FeatureCollection

LOG = logging.getLogger("sink_service")


def json_safe(obj: Any) -> Any:
    """Recursively convert NaN → ``None`` and datetimes → ISO strings."""
    if isinstance(obj, float):
        return None if math.isnan(obj) or math.isinf(obj) else obj
    if isinstance(obj, dt.datetime):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {key: json_safe(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [json_safe(value) for value in obj]
    return obj


def submit(
    collection: FeatureCollection,
    sink_url: str,
    token: str = "",
    *,
    timeout: float = 10.0,
) -> bool:
    """
    POST *collection* to *sink_url*.

    Returns ``False`` without sending when no sink is configured. Transport
    errors and non-2xx answers raise :class:`httpx.HTTPError`.
    """
    count = len(collection["features"])
    if not sink_url:
        LOG.info("no sink configured, %d features not submitted", count)
        return False

    headers = {"User-Agent": USER_AGENT}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    with httpx.Client(headers=headers, timeout=timeout) as cli:
        logged_request(cli, "post", sink_url, json=json_safe(collection))

    LOG.info("submitted %d features", count)
    return True


__all__ = ["json_safe", "submit"]
