"""Unit tests for core config parsing."""

from __future__ import annotations

from datetime import date

import pytest

from core.config import MosaicConfig
from core.errors import MosaicConfigError


def test_from_env_reads_data_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve data root from environment."""
    monkeypatch.setenv("MOSAIC_DATA_ROOT", "./.tmp-mosaic")

    config = MosaicConfig.from_env()

    assert config.data_root.name == ".tmp-mosaic"


def test_from_env_defaults_baseline_date(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should default the baseline date when unset."""
    monkeypatch.delenv("MOSAIC_BASELINE_DATE", raising=False)

    config = MosaicConfig.from_env()

    assert config.baseline_date == date(2023, 10, 7)


def test_from_env_reads_chunk_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should parse chunk size and threshold overrides."""
    monkeypatch.setenv("MOSAIC_CHUNK_SIZE", "250")
    monkeypatch.setenv("MOSAIC_CHUNK_THRESHOLD", "500")

    config = MosaicConfig.from_env()

    assert (config.chunk_size, config.chunk_threshold) == (250, 500)


def test_from_env_raises_for_invalid_chunk_size(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric chunk size."""
    monkeypatch.setenv("MOSAIC_CHUNK_SIZE", "not-a-number")

    with pytest.raises(MosaicConfigError):
        MosaicConfig.from_env()


def test_from_env_raises_for_zero_recent_days(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject non-positive recent windows."""
    monkeypatch.setenv("MOSAIC_RECENT_DAYS", "0")

    with pytest.raises(MosaicConfigError):
        MosaicConfig.from_env()


def test_from_env_raises_for_invalid_baseline_date(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for a baseline that is not an ISO date."""
    monkeypatch.setenv("MOSAIC_BASELINE_DATE", "07/10/2023")

    with pytest.raises(MosaicConfigError):
        MosaicConfig.from_env()


def test_from_env_raises_for_threshold_out_of_range(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for a quality threshold above one."""
    monkeypatch.setenv("MOSAIC_QUALITY_THRESHOLD", "1.5")

    with pytest.raises(MosaicConfigError):
        MosaicConfig.from_env()
