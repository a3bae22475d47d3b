"""Pytest configuration and shared fixtures for wikiapi-core tests."""

import pytest

from wikiapi_core.auth import CredentialResolver
from wikiapi_core.parsing import CollectingReporter, XmlConverter


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear test-related environment variables before each test.

    This prevents a developer's wiki settings from leaking into tests.
    """
    import os

    test_prefixes = ("TEST_", "WIKIAPI_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def reporter():
    """Reporter that keeps messages instead of logging them."""
    return CollectingReporter()


@pytest.fixture
def converter(reporter):
    """Converter wired to the collecting reporter."""
    return XmlConverter(reporter=reporter)


@pytest.fixture
def resolver():
    """Credential resolver that ignores any .env file."""
    return CredentialResolver(load_dotenv=False)
