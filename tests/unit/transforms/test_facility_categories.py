"""Unit tests for the health, education, and water categories."""

from __future__ import annotations

from tests.record_factory import make_context, make_source_meta
from transforms.registry import get_transformer


def test_health_facility_is_valued_by_beds(tmp_path) -> None:
    """Facility rows should be valued by bed capacity."""
    transformer = get_transformer("health", make_context(tmp_path))
    raw = [{"name": "Al-Shifa", "bed_capacity": "700", "location": "Gaza City"}]

    record = transformer.transform(raw, make_source_meta("health")).records[0]

    assert (record.value, record.unit, record.attributes["facility_name"]) == (
        700.0,
        "beds",
        "Al-Shifa",
    )


def test_health_indicator_row_uses_display_year(tmp_path) -> None:
    """WHO indicator rows should be dated from their display year."""
    transformer = get_transformer("health", make_context(tmp_path))
    raw = [
        {
            "gho_(code)": "WHS4_100",
            "gho_(display)": "Immunization coverage",
            "numeric": 92.5,
            "year_(display)": 2020,
            "country_(display)": "occupied Palestinian territory",
        }
    ]

    record = transformer.transform(raw, make_source_meta("health")).records[0]

    assert (record.date, record.value, record.attributes["facility_type"]) == (
        "2020-01-01",
        92.5,
        "indicator",
    )


def test_health_drops_foreign_locations(tmp_path) -> None:
    """Rows located in unrelated countries should be filtered."""
    transformer = get_transformer("health", make_context(tmp_path))
    raw = [{"name": "Hospital", "beds": 10, "location": "Ukraine"}]

    result = transformer.transform(raw, make_source_meta("health"))

    assert (len(result.records), result.filtered_count) == (0, 1)


def test_education_keeps_only_palestine_rows(tmp_path) -> None:
    """Education rows outside Palestine should be filtered."""
    transformer = get_transformer("education", make_context(tmp_path))
    raw = [
        {"school_name": "Gaza Prep", "students": 900, "geographic_area": "Gaza Strip"},
        {"school_name": "Amman Prep", "students": 800, "geographic_area": "Jordan"},
    ]

    result = transformer.transform(raw, make_source_meta("education"))

    assert [record.attributes["facility_name"] for record in result.records] == ["Gaza Prep"]


def test_water_capacity_is_the_value(tmp_path) -> None:
    """Water facilities should be valued by daily capacity."""
    transformer = get_transformer("water", make_context(tmp_path))
    raw = [{"name": "Desalination plant", "capacity": "2,500", "location": "Deir al-Balah"}]

    record = transformer.transform(raw, make_source_meta("water")).records[0]

    assert (record.value, record.unit) == (2500.0, "cubic_meters")
