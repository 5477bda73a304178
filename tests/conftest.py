"""
Pytest configuration and fixtures for bucketcache tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from bucketcache.config import Settings, clear_settings_cache
from bucketcache.partition import InMemoryPartition, SQLitePartition

# Small enough that a handful of short entries fills a bucket.
SMALL_LIMIT = 64


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def mock_env_vars(temp_dir: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock environment variables for testing."""
    env_vars = {
        "CACHE_NAMESPACE": "acme",
        "CACHE_ENABLED": "true",
        "CACHE_ITEM_SIZE_LIMIT": "1000",
        "CACHE_DB_PATH": str(temp_dir / "db" / "partitions.db"),
        "LOG_LEVEL": "DEBUG",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars
    clear_settings_cache()


@pytest.fixture
def settings(temp_dir: Path) -> Settings:
    """Provide a Settings instance independent of the environment."""
    return Settings(
        _env_file=None,
        CACHE_NAMESPACE=None,
        CACHE_ENABLED=True,
        CACHE_ITEM_SIZE_LIMIT=SMALL_LIMIT,
        CACHE_DB_PATH=temp_dir / "partitions.db",
    )


@pytest.fixture
def partition() -> InMemoryPartition:
    """Provide an in-memory partition with a small item size limit."""
    return InMemoryPartition("local.Test", SMALL_LIMIT)


@pytest.fixture
def sqlite_partition(temp_dir: Path) -> Generator[SQLitePartition, None, None]:
    """Provide a SQLite partition with a small item size limit."""
    p = SQLitePartition(temp_dir / "partitions.db", "local.Test", SMALL_LIMIT)
    yield p
    p.close()
