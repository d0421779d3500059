"""Runtime configuration model for Mosaic.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import os
from pathlib import Path

from core.constants import (
    DEFAULT_BASELINE_DATE,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CHUNK_THRESHOLD,
    DEFAULT_DATA_ROOT,
    DEFAULT_LINK_RADIUS_METERS,
    DEFAULT_LINK_WINDOW_DAYS,
    DEFAULT_QUALITY_THRESHOLD,
    DEFAULT_RECENT_DAYS,
)
from core.errors import MosaicConfigError


@dataclass(frozen=True)
class MosaicConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for unified outputs and reports.
        baseline_date: Reference date for before/after comparisons.
        quality_threshold: Dataset score cutoff for ``meetsThreshold``.
        chunk_size: Records per chunk file.
        chunk_threshold: Record count above which chunking activates.
        recent_days: Window size in days for ``recent.json``.
        link_radius_meters: Spatial join radius for the linker.
        link_window_days: Temporal join window for the linker.
    """

    data_root: Path
    baseline_date: date = date.fromisoformat(DEFAULT_BASELINE_DATE)
    quality_threshold: float = DEFAULT_QUALITY_THRESHOLD
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_threshold: int = DEFAULT_CHUNK_THRESHOLD
    recent_days: int = DEFAULT_RECENT_DAYS
    link_radius_meters: float = DEFAULT_LINK_RADIUS_METERS
    link_window_days: int = DEFAULT_LINK_WINDOW_DAYS

    @classmethod
    def from_env(cls) -> "MosaicConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            MosaicConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("MOSAIC_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            baseline_date=_parse_date_env("MOSAIC_BASELINE_DATE", DEFAULT_BASELINE_DATE),
            quality_threshold=_parse_ratio_env(
                "MOSAIC_QUALITY_THRESHOLD", DEFAULT_QUALITY_THRESHOLD
            ),
            chunk_size=_parse_positive_int_env("MOSAIC_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
            chunk_threshold=_parse_positive_int_env(
                "MOSAIC_CHUNK_THRESHOLD", DEFAULT_CHUNK_THRESHOLD
            ),
            recent_days=_parse_positive_int_env("MOSAIC_RECENT_DAYS", DEFAULT_RECENT_DAYS),
            link_radius_meters=_parse_positive_float_env(
                "MOSAIC_LINK_RADIUS_METERS", DEFAULT_LINK_RADIUS_METERS
            ),
            link_window_days=_parse_positive_int_env(
                "MOSAIC_LINK_WINDOW_DAYS", DEFAULT_LINK_WINDOW_DAYS
            ),
        )


def _parse_date_env(env_name: str, default_value: str) -> date:
    """Parse an ISO date environment value.

    Args:
        env_name: Environment variable name.
        default_value: ISO date used when the variable is unset.

    Returns:
        Parsed calendar date.

    Raises:
        MosaicConfigError: If value is not an ISO date.
    """
    raw_value = os.getenv(env_name, default_value)
    try:
        return date.fromisoformat(raw_value.strip())
    except ValueError as error:
        raise MosaicConfigError(
            f"Invalid {env_name} value: expected YYYY-MM-DD, got '{raw_value}'. "
            f"Set {env_name} to an ISO calendar date."
        ) from error


def _parse_ratio_env(env_name: str, default_value: float) -> float:
    raw_value = os.getenv(env_name)
    if raw_value is None:
        return default_value
    value = _parse_float(env_name, raw_value)
    if value < 0.0 or value > 1.0:
        raise MosaicConfigError(
            f"Invalid {env_name} value {value}: expected a number in [0, 1]."
        )
    return value


def _parse_positive_float_env(env_name: str, default_value: float) -> float:
    raw_value = os.getenv(env_name)
    if raw_value is None:
        return default_value
    value = _parse_float(env_name, raw_value)
    if value <= 0:
        raise MosaicConfigError(f"Invalid {env_name} value {value}: expected a positive number.")
    return value


def _parse_positive_int_env(env_name: str, default_value: int) -> int:
    """Parse a positive integer environment value.

    Args:
        env_name: Environment variable name.
        default_value: Value used when the variable is unset.

    Returns:
        Parsed integer.

    Raises:
        MosaicConfigError: If value is not an integer >= 1.
    """
    raw_value = os.getenv(env_name)
    if raw_value is None:
        return default_value
    try:
        value = int(raw_value)
    except ValueError as error:
        raise MosaicConfigError(
            f"Invalid {env_name} value: expected integer, got '{raw_value}'. "
            f"Set {env_name} to a numeric value."
        ) from error
    if value < 1:
        raise MosaicConfigError(f"Invalid {env_name} value {value}: expected integer >= 1.")
    return value


def _parse_float(env_name: str, raw_value: str) -> float:
    try:
        return float(raw_value)
    except ValueError as error:
        raise MosaicConfigError(
            f"Invalid {env_name} value: expected number, got '{raw_value}'. "
            f"Set {env_name} to a numeric value."
        ) from error
