"""
tests/integration/test_adsbx_api.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Integration tests for the ADSBX v2 point/radius endpoint.

Run with:
    INTEGRATION_TESTS=1 INTEGRATION_ADSBX_TOKEN=... \
        pytest tests/integration/test_adsbx_api.py -v
"""

from __future__ import annotations

from adsbx_cot.includes import IncludeIndex
from adsbx_cot.features import assemble_features
from adsbx_cot.provider_service import fetch_aircraft

API = "https://adsbexchange.com/api/aircraft"
# Around LAX, always busy.
LAT, LON = 33.9416, -118.4085


def test_live_query_returns_aircraft(adsbx_token: str, integration_timeout: float) -> None:
    aircraft = fetch_aircraft(API, LAT, LON, "25", adsbx_token, timeout=integration_timeout)

    assert isinstance(aircraft, list)
    for ac in aircraft[:5]:
        assert "hex" in ac


def test_live_aircraft_assemble(adsbx_token: str, integration_timeout: float) -> None:
    aircraft = fetch_aircraft(API, LAT, LON, "25", adsbx_token, timeout=integration_timeout)

    features = assemble_features(aircraft, IncludeIndex.build([]), use_icon=True)

    for feat in features.values():
        assert feat["properties"]["type"].startswith("a-f-A")
        assert len(feat["geometry"]["coordinates"]) == 3
