"""Shared pytest configuration and fixtures for searchdeck tests."""

import random

import pytest

from searchdeck.core.config import ConfigSchema

# Import HTTP mocking fixtures from fixtures module
pytest_plugins = ["tests.fixtures.mock_http"]


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests (fast, no external deps)")


def pytest_collection_modifyitems(config, items):
    """Add markers to tests based on their location."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Remove every searchdeck variable so host settings and keys never leak into a test.

    A .env file loaded on import is undone here as well.
    """
    for spec in ConfigSchema.all_specs().values():
        monkeypatch.delenv(spec.name, raising=False)
    yield


@pytest.fixture
def rng():
    return random.Random(1234)
