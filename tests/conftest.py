"""Shared pytest fixtures."""

import pytest

from formwright.config import get_settings


@pytest.fixture(autouse=True)
def clean_settings():
    """Ensure cached settings never leak between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
