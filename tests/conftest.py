"""Shared fixtures for dotenv_registry tests."""

import shutil
from pathlib import Path

import pytest

from dotenv_registry.api import convenience
from dotenv_registry.storage.cache import CacheStore, default_store

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _clean_shared_state():
    """Each test starts with an empty default store and no default registry."""
    default_store().clear()
    convenience.reset()
    yield
    default_store().clear()
    convenience.reset()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def store() -> CacheStore:
    """A private cache store."""
    return CacheStore()


@pytest.fixture
def copy_fixture(tmp_path):
    """Copy a fixture file into tmp_path so tests can modify it."""

    def _copy(name: str) -> Path:
        target = tmp_path / name
        shutil.copy(FIXTURES_DIR / name, target)
        return target

    return _copy
