"""Shared fixtures for the authorization tests."""

import pytest

from featureguard import Principal
from featureguard.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached; start every test from the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def nobody():
    """Authenticated, but holds no capabilities."""
    return Principal.of("u1", [])


@pytest.fixture
def principal_factory():
    def make(*capabilities, id="u1"):
        return Principal.of(id, capabilities)
    return make
