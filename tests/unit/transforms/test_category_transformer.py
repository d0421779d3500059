"""Unit tests for the strategy-driven category transformer."""

from __future__ import annotations

import json

from core.constants import REGION_GAZA, REGION_WEST_BANK
from tests.fixture_paths import fixture_path
from tests.record_factory import make_context, make_source_meta
from transforms.category_spec import CategorySpec, RecordPayload
from transforms.field_mapping import with_location_fields
from transforms.registry import get_transformer
from transforms.transformer import CategoryTransformer


def _fixture_records() -> list[object]:
    payload = json.loads(fixture_path("raw/conflict_events.json").read_text(encoding="utf-8"))
    return payload["data"]


def test_transform_counts_ghosts_and_ignores_non_mappings(tmp_path) -> None:
    """Ghost rows should be counted while junk entries are ignored."""
    transformer = get_transformer("conflict", make_context(tmp_path))

    result = transformer.transform(_fixture_records(), make_source_meta())

    assert (len(result.records), result.ghost_count, result.skipped_count) == (5, 1, 0)


def test_transform_writes_provenance_and_category(tmp_path) -> None:
    """Every record should carry the category and its source reference."""
    transformer = get_transformer("conflict", make_context(tmp_path))

    record = transformer.transform(_fixture_records()[:1], make_source_meta()).records[0]

    assert (
        record.category,
        record.sources[0].name,
        record.sources[0].organization,
        record.record_id.startswith("conflict-"),
    ) == ("conflict", "test-feed", "Test Org", True)


def test_transform_classifies_region_and_coordinates(tmp_path) -> None:
    """Locations should be classified and coordinates extracted lon-first."""
    transformer = get_transformer("conflict", make_context(tmp_path))

    records = transformer.transform(_fixture_records()[:3], make_source_meta()).records

    assert [(record.location.region, record.location.coordinates) for record in records] == [
        (REGION_GAZA, (34.46, 31.5)),
        (REGION_GAZA, None),
        (REGION_WEST_BANK, None),
    ]


def test_transform_keeps_unparseable_date_as_text(tmp_path) -> None:
    """Unparseable dates should be preserved and penalized, not fabricated."""
    transformer = get_transformer("conflict", make_context(tmp_path))

    record = transformer.transform(_fixture_records()[5:6], make_source_meta()).records[0]

    assert record.date == "sometime in spring" and record.quality.consistency == 0.6


def test_transform_counts_failing_records_without_aborting(tmp_path) -> None:
    """A payload builder error should skip only the failing record."""

    def _build(mapped, source_meta):
        if mapped.get("value") == "boom":
            raise ValueError("bad value")
        return RecordPayload(value=1.0, unit="count")

    spec = CategorySpec(
        category="test",
        record_type="test",
        id_prefix="test",
        required_fields=(),
        field_mapping=with_location_fields({"value": ("value",)}),
        build_payload=_build,
    )
    transformer = CategoryTransformer(spec, make_context(tmp_path))
    raw = [{"value": "boom", "location": "Gaza"}, {"value": "ok", "location": "Gaza"}]

    result = transformer.transform(raw, make_source_meta("test"))

    assert (len(result.records), result.skipped_count) == (1, 1)


def test_transform_uses_extra_aliases_first(tmp_path) -> None:
    """Provider aliases should be consulted before the default table."""
    aliases = {"fatalities": ("killed_total",)}
    transformer = get_transformer("conflict", make_context(tmp_path), aliases)
    raw = [{"date": "2023-10-10", "killed_total": 7, "location": "Rafah"}]

    record = transformer.transform(raw, make_source_meta()).records[0]

    assert record.attributes["fatalities"] == 7


def test_enrich_adds_temporal_context(tmp_path) -> None:
    """Enrichment should attach temporal context to dated records."""
    transformer = get_transformer("conflict", make_context(tmp_path))
    records = transformer.transform(_fixture_records()[:1], make_source_meta()).records

    enriched = transformer.enrich(records)[0]

    assert enriched.temporal_context is not None and (
        enriched.temporal_context.days_since_baseline,
        enriched.temporal_context.conflict_phase,
    ) == (3, "active-conflict")


def test_validate_reports_scores_within_bounds(tmp_path) -> None:
    """Every record quality score should stay inside [0, 1]."""
    transformer = get_transformer("conflict", make_context(tmp_path))
    records = transformer.enrich(
        transformer.transform(_fixture_records(), make_source_meta()).records
    )

    report = transformer.validate(records)

    assert report.record_count == 5 and all(
        0.0 <= record.quality.score <= 1.0 for record in records
    )
