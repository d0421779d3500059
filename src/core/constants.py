"""Core constants used across Mosaic modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".mosaic")
UNIFIED_DIR_NAME = "unified"
ANALYSIS_DIR_NAME = "analysis"
ALL_DATA_FILE_NAME = "all-data.json"
METADATA_FILE_NAME = "metadata.json"
VALIDATION_FILE_NAME = "validation.json"
RECENT_FILE_NAME = "recent.json"
INDEX_FILE_NAME = "index.json"
UNDATED_PARTITION_KEY = "undated"
CHUNKS_DIR_NAME = "chunks"
CHUNK_FILE_PATTERN = "chunk-{number}.json"
SUPPORTED_INPUT_EXTENSIONS = (".json",)
HASH_ALGORITHM = "sha256"
RECORD_ID_HEX_LENGTH = 16
RECORD_SCHEMA_VERSION = 1

DEFAULT_BASELINE_DATE = "2023-10-07"
ACTIVE_CONFLICT_END_DATE = "2024-01-01"
ACCURACY_CUTOFF_DATE = "2020-01-01"
DEFAULT_QUALITY_THRESHOLD = 0.6
DEFAULT_SOURCE_CONFIDENCE = 0.8
DEFAULT_CHUNK_SIZE = 10000
DEFAULT_CHUNK_THRESHOLD = 10000
DEFAULT_RECENT_DAYS = 90
DEFAULT_LINK_RADIUS_METERS = 1000.0
DEFAULT_LINK_WINDOW_DAYS = 7
EARTH_RADIUS_METERS = 6371000.0

MAX_PLAUSIBLE_VALUE = 1e9
DEFAULT_OUTLIER_MULTIPLIER = 1.5
DEFAULT_ZSCORE_THRESHOLD = 3.0
DEFAULT_CHANGE_POINT_THRESHOLD = 2.0
DEFAULT_SEASONAL_PERIOD = 7
DEFAULT_FORECAST_PERIODS = 7
DEFAULT_MAX_LAG = 10
DEFAULT_EMA_ALPHA = 0.3
DEFAULT_ROLLING_WINDOW = 7
DEFAULT_TOP_REGIONS = 10
TREND_SLOPE_EPSILON = 0.01
SEASONALITY_THRESHOLD = 0.3
STRONG_TREND_R_SQUARED = 0.7
MODERATE_TREND_R_SQUARED = 0.4

REGION_GAZA = "Gaza Strip"
REGION_WEST_BANK = "West Bank"
REGION_EAST_JERUSALEM = "East Jerusalem"
REGION_PALESTINE = "Palestine"
REGION_UNKNOWN = "Unknown"
SUPPORTED_REGIONS = (
    REGION_GAZA,
    REGION_WEST_BANK,
    REGION_EAST_JERUSALEM,
    REGION_PALESTINE,
    REGION_UNKNOWN,
)
SUPPORTED_PERIOD_TYPES = ("day", "week", "month", "quarter", "year")
DEFAULT_DESCRIPTIVE_FIELDS = ("fatalities", "injuries", "severity_index")
