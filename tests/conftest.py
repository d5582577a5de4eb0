"""Pytest configuration and shared fixtures for all tests."""

import pytest


@pytest.fixture(autouse=True)
def disable_sentry_for_tests(monkeypatch):
    """Disable Sentry telemetry for all tests.

    Tests that exercise Sentry setup patch ``sentry_sdk.init`` themselves.
    """
    monkeypatch.setenv("TELEMETRY", "false")
    monkeypatch.delenv("SENTRY_DSN", raising=False)


@pytest.fixture(autouse=True)
def clear_ore_deploy_env(monkeypatch):
    """Keep ORE_DEPLOY_* variables from the developer's shell out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("ORE_DEPLOY_"):
            monkeypatch.delenv(key)
