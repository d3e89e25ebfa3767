"""
api_logging.py
~~~~~~~~~~~~~~
Tiny wrapper that prints **one concise log line** per outbound HTTP request
(ADSBX API, include CSV, sink) and (optionally) raises for HTTP errors.

Usage example
-------------
>>> from .api_logging import logged_request
>>> with httpx.Client() as cli:
...     resp = logged_request(cli, "get", "https://example.org/data.csv",
...                           raise_for_status=False)
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any

LOG = logging.getLogger("extapi")

# Credentials may ride in the query string (ADSBX ``apiKey``); never log them.
_SECRET_PARAM = re.compile(r"(?i)\b(apikey|api_key|token|key)=([^&\s]+)")


def redact(url: str) -> str:
    """Return *url* with credential-looking query values replaced by ``***``."""
    return _SECRET_PARAM.sub(r"\1=***", str(url))


def logged_request(
    client: Any,
    method: str,
    url: str,
    *args: Any,
    raise_for_status: bool = True,
    **kwargs: Any,
):
    """
    Issue one HTTP request **and** emit a concise log line.

    Parameters
    ----------
    client:
        ``httpx.Client`` instance.
    method:
        HTTP verb – e.g. ``"get"``, ``"post"`` … **lower-case** or **upper-case**.
    url:
        Absolute URL.
    raise_for_status:
        *True* ⇒ propagate every 4xx/5xx via
        :pymeth:`httpx.Response.raise_for_status`.
        *False* ⇒ never raise; the caller decides.

    Returns
    -------
    httpx.Response
        Raw response so the caller can inspect status / JSON / headers.

    Notes
    -----
    * **≥400** responses are logged at *WARNING*, everything else at *INFO*.
    * The logged URL is passed through :func:`redact`.
    """
    verb = method.upper()
    shown = redact(url)
    t0 = time.perf_counter()
    try:
        response = getattr(client, method.lower())(url, *args, **kwargs)
    except Exception as exc:  # network error before we get a response
        latency_ms = (time.perf_counter() - t0) * 1000.0
        LOG.warning("FAIL %s %s %.0f ms %s", verb, shown, latency_ms, exc)
        raise

    latency_ms = (time.perf_counter() - t0) * 1000.0
    code = response.status_code

    if code >= 400:
        LOG.warning("%s %s → %s (%.0f ms)", verb, shown, code, latency_ms)
    else:
        LOG.info("%s %s → %s (%.0f ms)", verb, shown, code, latency_ms)

    if raise_for_status and code >= 400:
        response.raise_for_status()

    return response


__all__ = ["logged_request", "redact"]
