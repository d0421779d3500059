"""Unit tests for the martyrs registry category."""

from __future__ import annotations

from tests.record_factory import make_context, make_source_meta
from transforms.categories.martyrs import normalize_sex
from transforms.registry import get_transformer


def test_normalize_sex_maps_short_codes() -> None:
    """Single-letter codes should map to full labels."""
    assert [normalize_sex(label) for label in ("M", "f", "x", None)] == [
        "male",
        "female",
        "unknown",
        "unknown",
    ]


def test_martyr_entry_counts_one_person(tmp_path) -> None:
    """Each registry entry should count a single person in Gaza by default."""
    transformer = get_transformer("martyrs", make_context(tmp_path))
    raw = [{"en_name": "Example Name", "age": "34", "sex": "M", "dob": "1989-03-02"}]

    record = transformer.transform(raw, make_source_meta("martyrs")).records[0]

    assert (
        record.record_type,
        record.value,
        record.unit,
        record.location.name,
        record.attributes["age"],
    ) == ("martyr", 1.0, "persons", "Gaza", 34)


def test_identical_entries_get_distinct_ids(tmp_path) -> None:
    """Repeated registry rows are distinct people and must keep distinct ids."""
    transformer = get_transformer("martyrs", make_context(tmp_path))
    entry = {"name": "Repeated Name", "age": 20, "sex": "F"}

    result = transformer.transform([entry, dict(entry)], make_source_meta("martyrs"))

    assert len({record.record_id for record in result.records}) == 2


def test_unnamed_entries_are_filtered(tmp_path) -> None:
    """Rows without any name should be dropped."""
    transformer = get_transformer("martyrs", make_context(tmp_path))

    result = transformer.transform([{"age": 40}], make_source_meta("martyrs"))

    assert result.filtered_count == 1
