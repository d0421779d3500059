"""Cross-dataset record linker.

Supported joins:
    conflict -> infrastructure: within ``radius_meters`` and ``window_days``.
    infrastructure -> humanitarian: same location name or governorate,
        within ``window_days``.
    economic -> social: same calendar year.

Candidate records are indexed by day ordinal (and by year for the
economic join), so a window lookup touches only the days inside the window.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable, Mapping, Sequence

from core.config import MosaicConfig
from core.constants import DEFAULT_LINK_RADIUS_METERS, DEFAULT_LINK_WINDOW_DAYS
from core.types import CanonicalRecord
from enrich.spatial_context import haversine_distance
from transforms.value_parsing import parse_iso_date

CONFLICT_CATEGORY = "conflict"
INFRASTRUCTURE_CATEGORY = "infrastructure"
HUMANITARIAN_CATEGORY = "humanitarian"
ECONOMIC_CATEGORY = "economic"
SOCIAL_CATEGORY = "social"
LINK_TARGETS = {
    CONFLICT_CATEGORY: (INFRASTRUCTURE_CATEGORY,),
    INFRASTRUCTURE_CATEGORY: (HUMANITARIAN_CATEGORY,),
    ECONOMIC_CATEGORY: (SOCIAL_CATEGORY,),
}


class _DateIndex:
    """Records bucketed by day ordinal and by calendar year."""

    def __init__(self, records: Iterable[CanonicalRecord]) -> None:
        self._by_day: dict[int, list[CanonicalRecord]] = {}
        self._by_year: dict[int, list[CanonicalRecord]] = {}
        for record in records:
            record_date = parse_iso_date(record.date)
            if record_date is None:
                continue
            self._by_day.setdefault(record_date.toordinal(), []).append(record)
            self._by_year.setdefault(record_date.year, []).append(record)

    def within_days(self, center: date, window_days: int) -> list[CanonicalRecord]:
        ordinal = center.toordinal()
        matches: list[CanonicalRecord] = []
        for day in range(ordinal - window_days, ordinal + window_days + 1):
            matches.extend(self._by_day.get(day, ()))
        return matches

    def in_year(self, year: int) -> list[CanonicalRecord]:
        return list(self._by_year.get(year, ()))


class DataLinker:
    """Attach ``related_data`` id references between category datasets."""

    def __init__(
        self,
        radius_meters: float = DEFAULT_LINK_RADIUS_METERS,
        window_days: int = DEFAULT_LINK_WINDOW_DAYS,
    ) -> None:
        self.radius_meters = radius_meters
        self.window_days = window_days

    @classmethod
    def from_config(cls, config: MosaicConfig) -> "DataLinker":
        """Build a linker with the configured radius and window."""
        return cls(radius_meters=config.link_radius_meters, window_days=config.link_window_days)

    def link_related_data(
        self,
        primary: Sequence[CanonicalRecord],
        datasets: Mapping[str, Sequence[CanonicalRecord]],
    ) -> list[CanonicalRecord]:
        """Link every primary record against the other datasets.

        Args:
            primary: Records to annotate.
            datasets: Other datasets keyed by category name.

        Returns:
            Primary records in input order. Records with matches carry their
            match ids under ``related_data``; others are returned unchanged.
        """
        indexes = {category: _DateIndex(records) for category, records in datasets.items()}
        linked: list[CanonicalRecord] = []
        for record in primary:
            related = self.find_related_data(record, indexes)
            if related:
                merged = {**record.related_data, **related}
                linked.append(replace(record, related_data=merged))
            else:
                linked.append(record)
        return linked

    def find_related_data(
        self,
        record: CanonicalRecord,
        indexes: Mapping[str, _DateIndex],
    ) -> dict[str, tuple[str, ...]]:
        """Return match ids of one record keyed by related category."""
        record_date = parse_iso_date(record.date)
        if record_date is None:
            return {}
        related: dict[str, tuple[str, ...]] = {}
        if record.category == CONFLICT_CATEGORY and INFRASTRUCTURE_CATEGORY in indexes:
            candidates = indexes[INFRASTRUCTURE_CATEGORY].within_days(
                record_date, self.window_days
            )
            matches = [item for item in candidates if self._is_nearby(record, item)]
            _add_matches(related, INFRASTRUCTURE_CATEGORY, matches)
        if record.category == INFRASTRUCTURE_CATEGORY and HUMANITARIAN_CATEGORY in indexes:
            candidates = indexes[HUMANITARIAN_CATEGORY].within_days(record_date, self.window_days)
            matches = [item for item in candidates if same_location(record, item)]
            _add_matches(related, HUMANITARIAN_CATEGORY, matches)
        if record.category == ECONOMIC_CATEGORY and SOCIAL_CATEGORY in indexes:
            same_year = indexes[SOCIAL_CATEGORY].in_year(record_date.year)
            _add_matches(related, SOCIAL_CATEGORY, same_year)
        return related

    def _is_nearby(self, first: CanonicalRecord, second: CanonicalRecord) -> bool:
        first_point = first.location.coordinates
        second_point = second.location.coordinates
        if first_point is None or second_point is None:
            return False
        distance = haversine_distance(
            first_point[1], first_point[0], second_point[1], second_point[0]
        )
        return distance <= self.radius_meters


def same_location(first: CanonicalRecord, second: CanonicalRecord) -> bool:
    """Return whether two records share a location name or a non-empty governorate."""
    if first.location.name == second.location.name:
        return True
    first_level1 = first.location.admin_levels.level1
    return bool(first_level1) and first_level1 == second.location.admin_levels.level1


def link_targets(category: str) -> tuple[str, ...]:
    """Return the categories a category can be linked against."""
    return LINK_TARGETS.get(category, ())


def count_linked(records: Iterable[CanonicalRecord]) -> int:
    """Count records carrying at least one link."""
    return sum(1 for record in records if record.related_data)


def _add_matches(
    related: dict[str, tuple[str, ...]],
    category: str,
    matches: Sequence[CanonicalRecord],
) -> None:
    if matches:
        related[category] = tuple(match.record_id for match in matches)
