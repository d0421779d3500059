"""Primitive value parsing for loosely-typed provider records.

Provider feeds mix numeric strings, thousands separators, several date
layouts, and coordinate shapes. These helpers turn them into canonical
Python values without raising on ragged input.
"""

from __future__ import annotations

from datetime import date, datetime
import math
import re
from typing import Mapping

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
)
_YEAR_PATTERN = re.compile(r"^\d{4}$")
_YEAR_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})$")
_MIN_YEAR = 1800
_MAX_YEAR = 2200


def parse_float(value: object) -> float | None:
    """Parse a numeric value, returning None when absent or invalid.

    Args:
        value: Raw provider value.

    Returns:
        Finite float or None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = value.strip().replace(",", "").replace("%", "")
        if not cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_int(value: object, default: int = 0) -> int:
    """Parse an integer count, truncating decimals.

    Args:
        value: Raw provider value.
        default: Value returned when input is absent or invalid.

    Returns:
        Parsed integer.
    """
    number = parse_float(value)
    if number is None:
        return default
    return int(number)


def parse_optional_int(value: object) -> int | None:
    """Parse an integer count, preserving absence as None."""
    number = parse_float(value)
    return None if number is None else int(number)


def normalize_date(value: object) -> str | None:
    """Normalize a raw date into ``YYYY-MM-DD``.

    Bare years map to January 1st and ``YYYY-MM`` maps to the first of the
    month. Text that does not parse is returned stripped so downstream
    quality scoring can penalize it; absent values return None.

    Args:
        value: Raw provider date value.

    Returns:
        ISO date string, the raw text when unparseable, or None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)):
        return _normalize_year_number(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    parsed = _parse_date_text(text)
    return parsed.isoformat() if parsed is not None else text


def parse_iso_date(value: str | None) -> date | None:
    """Parse a normalized ``YYYY-MM-DD`` date string.

    Args:
        value: Canonical record date.

    Returns:
        Calendar date, or None when value is absent or not ISO.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def extract_coordinates(mapped: Mapping[str, object]) -> tuple[float, float] | None:
    """Extract ``(longitude, latitude)`` from canonical location fields.

    Accepts separate ``longitude``/``latitude`` fields, a ``coordinates``
    pair in ``[lon, lat]`` order, a ``{"lat", "lon"}`` mapping, or a GeoJSON
    point geometry. Out-of-range values are kept for quality scoring.

    Args:
        mapped: Field-mapped record.

    Returns:
        Coordinate pair or None.
    """
    longitude = parse_float(mapped.get("longitude"))
    latitude = parse_float(mapped.get("latitude"))
    if longitude is not None and latitude is not None:
        return (longitude, latitude)
    raw_coordinates = mapped.get("coordinates")
    if isinstance(raw_coordinates, Mapping):
        if "coordinates" in raw_coordinates:
            return _pair_from_sequence(raw_coordinates.get("coordinates"))
        longitude = parse_float(raw_coordinates.get("lon", raw_coordinates.get("lng")))
        latitude = parse_float(raw_coordinates.get("lat"))
        if longitude is not None and latitude is not None:
            return (longitude, latitude)
        return None
    return _pair_from_sequence(raw_coordinates)


def _pair_from_sequence(value: object) -> tuple[float, float] | None:
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return None
    longitude = parse_float(value[0])
    latitude = parse_float(value[1])
    if longitude is None or latitude is None:
        return None
    return (longitude, latitude)


def _normalize_year_number(value: int | float) -> str | None:
    if isinstance(value, float) and (math.isnan(value) or not value.is_integer()):
        return None
    year = int(value)
    if _MIN_YEAR <= year <= _MAX_YEAR:
        return f"{year:04d}-01-01"
    return str(value)


def _parse_date_text(text: str) -> date | None:
    if _YEAR_PATTERN.match(text):
        year = int(text)
        return date(year, 1, 1) if _MIN_YEAR <= year <= _MAX_YEAR else None
    year_month = _YEAR_MONTH_PATTERN.match(text)
    if year_month:
        try:
            return date(int(year_month.group(1)), int(year_month.group(2)), 1)
        except ValueError:
            return None
    iso_candidate = text.replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(iso_candidate).date()
    except ValueError:
        pass
    for date_format in _DATE_FORMATS:
        try:
            return datetime.strptime(text, date_format).date()
        except ValueError:
            continue
    return None
