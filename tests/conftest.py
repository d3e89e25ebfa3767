"""
tests/conftest.py
~~~~~~~~~~~~~~~~~
Global pytest fixtures.

`isolate_environment` strips every variable :func:`config.load_settings`
reads, so a developer's ``.env`` or shell never leaks into a test.
`make_settings` builds a :class:`Settings` with offline-friendly defaults
(no CSV, no sink) that individual tests override by keyword.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from adsbx_cot.config import Settings

ENV_VARS = (
    "QUERY_LATLON",
    "QUERY_DIST",
    "ADSBX_API",
    "ADSBX_TOKEN",
    "ADSBX_FILTERING",
    "ADSBX_USE_ICON",
    "ADSBX_INCLUDES",
    "ADSBX_INCLUDES_FILE",
    "ADSBX_INCLUDES_URL",
    "DEBUG",
    "SINK_URL",
    "SINK_TOKEN",
    "POLL_INTERVAL_SEC",
    "HTTP_TIMEOUT_SEC",
    "RUN_TOKEN",
)


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "lat": 37.1841,
            "lon": -119.4696,
            "adsbx_token": "t0k3n",
            "poll_interval_sec": 0,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def rotor_aircraft() -> dict[str, Any]:
    """A CAL FIRE helicopter as ADSBX reports it."""
    return {
        "hex": "ABC123 ",
        "type": "adsb_icao",
        "flight": "N123AB  ",
        "r": "N123AB",
        "t": "EC35",
        "lat": 38.5,
        "lon": -121.5,
        "alt_baro": 1000,
        "alt_geom": 1100,
        "gs": 100,
        "track": 270.5,
        "category": "A7",
        "squawk": "1200",
        "emergency": "none",
        "seen": 0.4,
        "seen_pos": 2.0,
    }


@pytest.fixture
def airliner() -> dict[str, Any]:
    """An ordinary airliner that is on nobody's include list."""
    return {
        "hex": "def456",
        "type": "adsb_icao",
        "flight": "UAL1  ",
        "r": "N77001",
        "t": "B77W",
        "lat": 37.6,
        "lon": -122.4,
        "alt_baro": 35000,
        "gs": 480.0,
        "track": 90,
        "category": "A5",
        "squawk": "3321",
        "emergency": "none",
        "seen": 0.1,
        "seen_pos": 0.5,
    }
