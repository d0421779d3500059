"""Temporal context derived from a record date and the baseline date."""

from __future__ import annotations

from datetime import date

from core.constants import ACTIVE_CONFLICT_END_DATE
from core.types import TemporalContext
from transforms.value_parsing import parse_iso_date

_ACTIVE_CONFLICT_END = date.fromisoformat(ACTIVE_CONFLICT_END_DATE)


def build_temporal_context(record_date: str | None, baseline_date: date) -> TemporalContext | None:
    """Build temporal context for a record date.

    Args:
        record_date: Canonical record date.
        baseline_date: Reference date for before/after comparisons.

    Returns:
        Temporal context, or None when the date is absent or unparseable.
    """
    parsed_date = parse_iso_date(record_date)
    if parsed_date is None:
        return None
    return TemporalContext(
        days_since_baseline=(parsed_date - baseline_date).days,
        baseline_period="before_baseline" if parsed_date < baseline_date else "after_baseline",
        conflict_phase=determine_conflict_phase(parsed_date, baseline_date),
        season=season_for_month(parsed_date.month),
    )


def determine_conflict_phase(record_date: date, baseline_date: date) -> str:
    """Return the conflict phase label for a date."""
    if record_date < baseline_date:
        return "pre-escalation"
    if record_date < _ACTIVE_CONFLICT_END:
        return "active-conflict"
    return "ongoing-conflict"


def season_for_month(month: int) -> str:
    """Return the meteorological season for a calendar month."""
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "autumn"
    return "winter"
