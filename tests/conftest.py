# tests/conftest.py

"""Shared pytest fixtures for all tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path: Path) -> Generator[Path, None, None]:
    """Point the offers cache at a per-test temp file."""
    cache_path = tmp_path / "offers.json"
    with patch("src.config.settings.Settings.CACHE_PATH", cache_path):
        yield cache_path
