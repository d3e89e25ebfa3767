"""
tests/test_main.py
~~~~~~~~~~~~~~~~~~
HTTP surface: health probe, GeoJSON snapshot and the token-protected run.

The batch itself is stubbed; `TestClient` is used without a context manager
so the polling loop in the lifespan never starts.
"""

from __future__ import annotations

import dataclasses
import math

import pytest
from fastapi.testclient import TestClient

from adsbx_cot import main
from adsbx_cot.features import empty_collection

client = TestClient(main.app)


@pytest.fixture
def batch(monkeypatch: pytest.MonkeyPatch) -> list[object]:
    """Replace the ETL run with a canned single-feature collection."""
    calls: list[object] = []
    collection = {
        "type": "FeatureCollection",
        "features": [
            {
                "id": "abc123",
                "type": "Feature",
                "properties": {"type": "a-f-A-C-H", "speed": math.nan},
                "geometry": {"type": "Point", "coordinates": [-121.5, 38.5, 335.28]},
            }
        ],
    }

    def _fake_run(settings):
        calls.append(settings)
        return collection

    monkeypatch.setattr(main, "run_task", _fake_run, raising=True)
    monkeypatch.setattr(main.app.state, "last_collection", None, raising=False)
    return calls


def test_healthz() -> None:
    resp = client.get("/healthz")

    assert resp.status_code == 200
    assert resp.text == "ok"


def test_features_geojson_runs_once_when_empty(batch) -> None:
    resp = client.get("/features.geojson")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/geo+json")
    body = resp.json()
    assert body["features"][0]["id"] == "abc123"
    assert body["features"][0]["properties"]["speed"] is None
    assert len(batch) == 1


def test_features_geojson_serves_last_collection(batch, monkeypatch) -> None:
    monkeypatch.setattr(main.app.state, "last_collection", empty_collection(), raising=False)

    resp = client.get("/features.geojson")

    assert resp.json() == {"type": "FeatureCollection", "features": []}
    assert batch == []


def test_run_forbidden_without_configured_token(batch, monkeypatch) -> None:
    monkeypatch.setattr(
        main, "SETTINGS", dataclasses.replace(main.get_settings(), run_token=""), raising=True
    )

    resp = client.post("/run", params={"token": "anything"})

    assert resp.status_code == 403
    assert batch == []


def test_run_forbidden_with_wrong_token(batch, monkeypatch) -> None:
    monkeypatch.setattr(
        main, "SETTINGS", dataclasses.replace(main.get_settings(), run_token="secret"), raising=True
    )

    resp = client.post("/run", params={"token": "guess"})

    assert resp.status_code == 403


def test_run_requires_token_parameter() -> None:
    assert client.post("/run").status_code == 422


def test_run_triggers_batch(batch, monkeypatch) -> None:
    monkeypatch.setattr(
        main, "SETTINGS", dataclasses.replace(main.get_settings(), run_token="secret"), raising=True
    )

    resp = client.post("/run", params={"token": "secret"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["features"] == 1
    assert body["ran_at"]
    assert len(batch) == 1


def test_settings_load_on_first_use(monkeypatch: pytest.MonkeyPatch) -> None:
    """A broken environment only surfaces once settings are needed."""
    monkeypatch.setattr(main, "SETTINGS", None, raising=True)
    monkeypatch.setenv("QUERY_LATLON", "not-a-place")

    assert client.get("/healthz").status_code == 200
    with pytest.raises(ValueError):
        main.get_settings()
    assert main.SETTINGS is None


def test_settings_are_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main, "SETTINGS", None, raising=True)

    first = main.get_settings()

    assert main.get_settings() is first
