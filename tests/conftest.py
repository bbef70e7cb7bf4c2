"""Common test fixtures."""

import os

import pytest

from schema_composer.config import get_config


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep tests away from the caller's SCHEMA_COMPOSER_* variables and .env file."""
    for name in list(os.environ):
        if name.startswith("SCHEMA_COMPOSER_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    get_config.cache_clear()
    yield
    get_config.cache_clear()
