"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from tests.unit.samples import SNAPSHOT


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    """Write the standard snapshot to disk and return its path."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")
    return path
