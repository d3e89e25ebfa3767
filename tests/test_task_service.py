"""
tests/test_task_service.py
~~~~~~~~~~~~~~~~~~~~~~~~~~
End-to-end batch runs with the provider, CSV source and sink stubbed.

* provider outage ⇒ empty collection, still submitted;
* CSV outage ⇒ configured includes only;
* CSV includes are merged after (and override) configured ones.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import pytest

from adsbx_cot import task_service as task
from adsbx_cot.includes import IncludeEntry
from adsbx_cot.provider_service import ProviderError


@pytest.fixture
def submitted(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    calls: list[dict[str, Any]] = []

    def _fake_submit(collection, sink_url, token="", *, timeout=10.0):
        calls.append(collection)
        return True

    monkeypatch.setattr(task, "submit", _fake_submit, raising=True)
    return calls


def _provide(monkeypatch: pytest.MonkeyPatch, aircraft: list[dict[str, Any]]) -> None:
    monkeypatch.setattr(task, "fetch_aircraft", lambda *a, **k: aircraft, raising=True)


def test_filter_mode_run(monkeypatch, make_settings, submitted, rotor_aircraft, airliner) -> None:
    _provide(monkeypatch, [rotor_aircraft, airliner])
    settings = make_settings(
        includes=[IncludeEntry(domain="FIRE", group="FIRE_ROTOR", ICAO_hex="abc123")]
    )

    collection = task.run_task(settings)

    assert collection["type"] == "FeatureCollection"
    assert [f["id"] for f in collection["features"]] == ["abc123"]
    assert submitted == [collection]


def test_pass_through_run(monkeypatch, make_settings, submitted, rotor_aircraft, airliner) -> None:
    _provide(monkeypatch, [rotor_aircraft, airliner])

    collection = task.run_task(make_settings(filtering=False))

    assert {f["id"] for f in collection["features"]} == {"abc123", "def456"}


@pytest.mark.parametrize(
    "error",
    [httpx.ConnectError("boom"), ProviderError("missing aircraft data")],
)
def test_provider_failure_yields_empty_collection(
    monkeypatch, make_settings, submitted, caplog, error
) -> None:
    def _fail(*_a, **_k):
        raise error

    monkeypatch.setattr(task, "fetch_aircraft", _fail, raising=True)

    collection = task.run_task(make_settings())

    assert collection == {"type": "FeatureCollection", "features": []}
    assert submitted == [collection]
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_csv_failure_keeps_configured_includes(
    monkeypatch, make_settings, submitted, rotor_aircraft, caplog
) -> None:
    _provide(monkeypatch, [rotor_aircraft])

    def _csv_down(*_a, **_k):
        raise httpx.ReadTimeout("slow drive")

    monkeypatch.setattr(task, "load_includes", _csv_down, raising=True)
    settings = make_settings(
        includes=[IncludeEntry(domain="FIRE", group="FIRE_ROTOR", ICAO_hex="abc123")],
        includes_url="https://example.org/includes.csv",
    )

    collection = task.run_task(settings)

    assert [f["id"] for f in collection["features"]] == ["abc123"]
    assert any("[CSV]" in r.getMessage() for r in caplog.records)


def test_csv_includes_override_configured(monkeypatch, make_settings, submitted, rotor_aircraft) -> None:
    _provide(monkeypatch, [rotor_aircraft])
    csv_entry = IncludeEntry(domain="EMS", group="EMS_ROTOR", ICAO_hex="ABC123")
    monkeypatch.setattr(task, "load_includes", lambda *a, **k: [csv_entry], raising=True)
    settings = make_settings(
        includes=[IncludeEntry(domain="FIRE", group="FIRE_ROTOR", ICAO_hex="abc123")],
        includes_url="https://example.org/includes.csv",
    )

    (feat,) = task.run_task(settings)["features"]

    assert feat["properties"]["icon"].endswith("EMS_ROTOR.png")
    assert "Group: EMS-ROTOR" in feat["properties"]["remarks"]


def test_sink_failure_is_logged_not_raised(
    monkeypatch, make_settings, rotor_aircraft, caplog
) -> None:
    _provide(monkeypatch, [rotor_aircraft])

    def _sink_down(*_a, **_k):
        raise httpx.ConnectError("sink down")

    monkeypatch.setattr(task, "submit", _sink_down, raising=True)

    collection = task.run_task(make_settings(filtering=False))

    assert len(collection["features"]) == 1
    assert any("sink submission failed" in r.getMessage() for r in caplog.records)


def test_non_string_flight_does_not_break_run(
    monkeypatch, make_settings, submitted, airliner
) -> None:
    _provide(monkeypatch, [airliner, dict(airliner, hex="bad001", flight=123)])

    collection = task.run_task(make_settings(filtering=False))

    assert {f["id"] for f in collection["features"]} == {"def456", "bad001"}
    assert submitted == [collection]
