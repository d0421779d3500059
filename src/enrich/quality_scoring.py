"""Per-record quality scoring.

Scores are bounded in [0, 1]. Completeness is driven by the category's
required-field table; consistency and accuracy apply fixed penalties and
bonuses for implausible values and source authority.
"""

from __future__ import annotations

from datetime import date
import re

from core.constants import ACCURACY_CUTOFF_DATE, MAX_PLAUSIBLE_VALUE
from core.types import CanonicalRecord, QualityMetrics
from enrich.demographics import lookup_source_confidence
from enrich.spatial_context import coordinates_in_range
from transforms.value_parsing import parse_iso_date

BASE_REQUIRED_FIELDS = ("id", "date")
OFFICIAL_ORGANIZATION_TOKENS = frozenset(
    {"un", "unrwa", "unicef", "unhcr", "undp", "unocha", "ocha", "who", "wfp", "unesco"}
)
OFFICIAL_ORGANIZATION_PHRASES = (
    "united nations",
    "world bank",
    "world health organization",
    "worldbank",
)
_ACCURACY_CUTOFF = date.fromisoformat(ACCURACY_CUTOFF_DATE)
_TOKEN_PATTERN = re.compile(r"[a-z0-9]+")


def score_record_quality(
    record: CanonicalRecord,
    required_fields: tuple[str, ...],
    reference_date: date,
) -> QualityMetrics:
    """Score one canonical record.

    Args:
        record: Canonical record to score.
        required_fields: Category-specific required fields.
        reference_date: Current date used for the future-date penalty.

    Returns:
        Bounded quality metrics.
    """
    completeness = calculate_completeness(record, required_fields)
    consistency = calculate_consistency(record, reference_date)
    accuracy = calculate_accuracy(record)
    source_names = tuple(
        name for source in record.sources for name in (source.name, source.organization)
    )
    return QualityMetrics(
        score=round((completeness + consistency + accuracy) / 3, 6),
        completeness=round(completeness, 6),
        consistency=round(consistency, 6),
        accuracy=round(accuracy, 6),
        confidence=lookup_source_confidence(source_names),
        verified=record.quality.verified,
    )


def calculate_completeness(record: CanonicalRecord, required_fields: tuple[str, ...]) -> float:
    """Return the share of base and category fields that are present."""
    all_fields = BASE_REQUIRED_FIELDS + tuple(
        field_name for field_name in required_fields if field_name not in BASE_REQUIRED_FIELDS
    )
    present = sum(
        1 for field_name in all_fields if is_present(record_field_value(record, field_name))
    )
    return present / len(all_fields)


def calculate_consistency(record: CanonicalRecord, reference_date: date) -> float:
    """Return 1.0 minus penalties for implausible date, coordinates, and value.

    Args:
        record: Canonical record.
        reference_date: Current date for the future-date check.

    Returns:
        Consistency floored at 0.
    """
    consistency = 1.0
    if record.date:
        parsed_date = parse_iso_date(record.date)
        if parsed_date is None:
            consistency -= 0.4
        elif parsed_date > reference_date:
            consistency -= 0.2
    if not coordinates_in_range(record.location.coordinates):
        consistency -= 0.4
    if record.value is not None:
        if record.value < 0:
            consistency -= 0.2
        if record.value > MAX_PLAUSIBLE_VALUE:
            consistency -= 0.1
    return max(0.0, consistency)


def calculate_accuracy(record: CanonicalRecord) -> float:
    """Return source-authority accuracy clamped to [0, 1]."""
    accuracy = 1.0
    if any(
        is_official_organization(source.organization) or is_official_organization(source.name)
        for source in record.sources
    ):
        accuracy += 0.1
    parsed_date = parse_iso_date(record.date)
    if parsed_date is not None and parsed_date < _ACCURACY_CUTOFF:
        accuracy -= 0.1
    return max(0.0, min(1.0, accuracy))


def is_official_organization(name: str) -> bool:
    """Return whether a source name is a recognized official organization.

    Args:
        name: Source name or organization.

    Returns:
        True for UN agencies, WHO, World Bank, and OCHA.
    """
    normalized = name.lower()
    if any(phrase in normalized for phrase in OFFICIAL_ORGANIZATION_PHRASES):
        return True
    tokens = _TOKEN_PATTERN.findall(normalized)
    return any(token in OFFICIAL_ORGANIZATION_TOKENS for token in tokens)


def record_field_value(record: CanonicalRecord, field_name: str) -> object:
    """Read a canonical or payload field from a record by its JSON name."""
    if field_name == "id":
        return record.record_id
    if field_name == "type":
        return record.record_type
    if field_name == "date":
        return record.date
    if field_name == "location":
        return record.location.name
    if field_name == "value":
        return record.value
    if field_name == "unit":
        return record.unit
    return record.attributes.get(field_name)


def is_present(value: object) -> bool:
    """Return whether a field value counts toward completeness."""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True
