"""Dataset-level validation report.

Aggregates per-record quality into one report with a pass/fail threshold.
Validation problems are reported as errors and warnings, never raised.
"""

from __future__ import annotations

from typing import Sequence

from core.constants import DEFAULT_QUALITY_THRESHOLD, REGION_UNKNOWN
from core.types import CanonicalRecord, ValidationReport
from enrich.quality_scoring import BASE_REQUIRED_FIELDS, is_present, record_field_value
from transforms.value_parsing import parse_iso_date

MAX_REPORTED_ISSUES = 100


def validate_records(
    records: object,
    required_fields: tuple[str, ...],
    threshold: float = DEFAULT_QUALITY_THRESHOLD,
) -> ValidationReport:
    """Validate a dataset and summarize its quality.

    Args:
        records: Canonical records; any non-sequence input is reported.
        required_fields: Category required-field table.
        threshold: Minimum mean quality score to pass.

    Returns:
        Validation report.
    """
    if not isinstance(records, (list, tuple)):
        return _empty_report(("Dataset is not an array",))
    typed_records = [record for record in records if isinstance(record, CanonicalRecord)]
    errors = _collect_errors(records, typed_records, required_fields)
    warnings = _collect_warnings(typed_records)
    if not typed_records:
        return _empty_report(tuple(errors), tuple(warnings))
    count = len(typed_records)
    quality_score = sum(record.quality.score for record in typed_records) / count
    return ValidationReport(
        quality_score=round(quality_score, 6),
        completeness=round(sum(r.quality.completeness for r in typed_records) / count, 6),
        consistency=round(sum(r.quality.consistency for r in typed_records) / count, 6),
        accuracy=round(sum(r.quality.accuracy for r in typed_records) / count, 6),
        meets_threshold=quality_score >= threshold,
        record_count=count,
        errors=tuple(errors),
        warnings=tuple(warnings),
    )


def report_to_payload(report: ValidationReport) -> dict[str, object]:
    """Serialize a validation report with its camelCase JSON keys."""
    return {
        "qualityScore": report.quality_score,
        "completeness": report.completeness,
        "consistency": report.consistency,
        "accuracy": report.accuracy,
        "meetsThreshold": report.meets_threshold,
        "recordCount": report.record_count,
        "errors": list(report.errors),
        "warnings": list(report.warnings),
    }


def _collect_errors(
    records: Sequence[object],
    typed_records: list[CanonicalRecord],
    required_fields: tuple[str, ...],
) -> list[str]:
    errors: list[str] = []
    if len(typed_records) != len(records):
        errors.append(f"{len(records) - len(typed_records)} entries are not canonical records")
    all_fields = BASE_REQUIRED_FIELDS + tuple(
        field_name for field_name in required_fields if field_name not in BASE_REQUIRED_FIELDS
    )
    for index, record in enumerate(typed_records):
        missing = [
            field_name
            for field_name in all_fields
            if not is_present(record_field_value(record, field_name))
        ]
        if missing:
            errors.append(f"Record {index}: missing required fields: {', '.join(missing)}")
    return _truncate(errors)


def _collect_warnings(typed_records: list[CanonicalRecord]) -> list[str]:
    warnings: list[str] = []
    for index, record in enumerate(typed_records):
        if record.date and parse_iso_date(record.date) is None:
            warnings.append(f"Record {index}: unparseable date '{record.date}'")
        if record.location.region == REGION_UNKNOWN:
            warnings.append(f"Record {index}: region could not be classified")
    return _truncate(warnings)


def _truncate(issues: list[str]) -> list[str]:
    if len(issues) <= MAX_REPORTED_ISSUES:
        return issues
    hidden = len(issues) - MAX_REPORTED_ISSUES
    return issues[:MAX_REPORTED_ISSUES] + [f"... {hidden} more"]


def _empty_report(
    errors: tuple[str, ...],
    warnings: tuple[str, ...] = (),
) -> ValidationReport:
    return ValidationReport(
        quality_score=0.0,
        completeness=0.0,
        consistency=0.0,
        accuracy=0.0,
        meets_threshold=False,
        record_count=0,
        errors=errors,
        warnings=warnings,
    )
