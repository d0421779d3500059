"""Locate files under tests/fixtures."""

from __future__ import annotations

from pathlib import Path

FIXTURES_ROOT = Path(__file__).resolve().parent / "fixtures"


def fixture_path(relative_path: str) -> Path:
    """Return the absolute path of a fixture file.

    Args:
        relative_path: Path relative to tests/fixtures, e.g. ``raw/conflict_events.json``.

    Returns:
        Absolute fixture path.
    """
    return FIXTURES_ROOT / relative_path
