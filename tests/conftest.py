"""Shared fixtures."""

from pathlib import Path

import pytest

from site_audit.layout import RunLayout


@pytest.fixture
def layout(tmp_path: Path) -> RunLayout:
    """Layout of an empty run directory."""
    run_dir = tmp_path / "reports" / "20240101-120000"
    run_dir.mkdir(parents=True)
    return RunLayout(run_dir)
