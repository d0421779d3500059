"""Unit tests for the infrastructure and shelter categories."""

from __future__ import annotations

import json

from tests.fixture_paths import fixture_path
from tests.record_factory import make_context, make_source_meta
from transforms.registry import get_transformer


def test_infrastructure_is_valued_by_estimated_cost(tmp_path) -> None:
    """Damage rows should be valued by their cost in USD."""
    transformer = get_transformer("infrastructure", make_context(tmp_path))
    raw = json.loads(fixture_path("raw/infrastructure_damage.json").read_text(encoding="utf-8"))

    result = transformer.transform(raw, make_source_meta("infrastructure"))

    assert [(record.value, record.unit) for record in result.records] == [
        (1250000.0, "usd"),
        (40000.0, "usd"),
    ]


def test_infrastructure_defaults_structure_and_status(tmp_path) -> None:
    """Rows without labels should default to a damaged building."""
    transformer = get_transformer("infrastructure", make_context(tmp_path))
    raw = [{"date": "2023-10-15", "location": "Jabalia", "cost": 10}]

    record = transformer.transform(raw, make_source_meta("infrastructure")).records[0]

    assert (record.attributes["structure_type"], record.attributes["status"]) == (
        "building",
        "damaged",
    )


def test_shelter_rows_write_infrastructure_records(tmp_path) -> None:
    """Shelter rows should land in the infrastructure category with shelter ids."""
    transformer = get_transformer("shelter", make_context(tmp_path))
    raw = [{"name": "UNRWA school shelter", "capacity": 350, "governorate": "Khan Younis"}]

    record = transformer.transform(raw, make_source_meta("shelter")).records[0]

    assert (
        record.category,
        record.record_id.startswith("shelter-"),
        record.attributes["structure_type"],
        record.unit,
    ) == ("infrastructure", True, "shelter", "units")
