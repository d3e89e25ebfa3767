"""
tests/integration/
~~~~~~~~~~~~~~~~~~
Integration tests that call real external APIs.

These tests are SKIPPED by default. To run them:

    INTEGRATION_TESTS=1 INTEGRATION_ADSBX_TOKEN=... pytest tests/integration/ -v

Rate Limit Considerations:
- ADSBX: every call counts against the subscription quota - avoid in CI
"""
