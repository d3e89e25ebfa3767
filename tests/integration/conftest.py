"""
tests/integration/conftest.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Integration test configuration - skip unless INTEGRATION_TESTS=1.

Usage:
    # Run only unit tests (default, CI-safe)
    pytest -q

    # Run integration tests locally
    INTEGRATION_TESTS=1 INTEGRATION_ADSBX_TOKEN=... pytest tests/integration/ -v
"""

from __future__ import annotations

import os

import pytest


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip all integration tests unless INTEGRATION_TESTS=1."""
    if os.getenv("INTEGRATION_TESTS"):
        return

    skip_marker = pytest.mark.skip(
        reason="Integration tests disabled (set INTEGRATION_TESTS=1 to enable)"
    )
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(skip_marker)


@pytest.fixture
def adsbx_token() -> str:
    """Live ADSBX token, kept apart from the ADSBX_TOKEN the unit tests clear."""
    token = os.getenv("INTEGRATION_ADSBX_TOKEN", "")
    if not token:
        pytest.skip("set INTEGRATION_ADSBX_TOKEN to call the live ADSBX API")
    return token


@pytest.fixture
def integration_timeout() -> float:
    """Default timeout for integration test HTTP calls (seconds)."""
    return 30.0
