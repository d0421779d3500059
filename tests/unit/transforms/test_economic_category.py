"""Unit tests for the economic indicator category."""

from __future__ import annotations

import pytest

from core.constants import REGION_PALESTINE
from tests.record_factory import make_context, make_record, make_source_meta
from transforms.categories.economic import add_indicator_trends, detect_unit
from transforms.registry import get_transformer


def _observation(record_id: str, year: int, value: float, code: str = "NY.GDP"):
    return make_record(
        record_id,
        category="economic",
        date=f"{year}-01-01",
        location_name="Palestine",
        region=REGION_PALESTINE,
        value=value,
        unit="currency_usd",
        attributes={"indicator_code": code},
    )


def test_detect_unit_reads_indicator_name() -> None:
    """Units should be inferred from indicator display names."""
    names = ["GDP (current US$)", "Unemployment, total (% of labor force)", "Population"]

    assert [detect_unit(name) for name in names] == ["currency_usd", "percentage", "number"]


def test_economic_transform_normalizes_year_and_region(tmp_path) -> None:
    """Observations should be dated January first and default to Palestine."""
    transformer = get_transformer("economic", make_context(tmp_path))
    raw = [
        {
            "indicator": "NY.GDP",
            "indicator_name": "GDP (current US$)",
            "value": 1.5,
            "year": 2022,
        }
    ]

    record = transformer.transform(raw, make_source_meta("economic")).records[0]

    assert (record.date, record.location.region, record.unit) == (
        "2022-01-01",
        REGION_PALESTINE,
        "currency_usd",
    )


def test_economic_transform_drops_missing_values_and_skips_bad_years(tmp_path) -> None:
    """Missing values are filtered while unusable years are skipped."""
    transformer = get_transformer("economic", make_context(tmp_path))
    raw = [
        {"indicator": "NY.GDP", "value": None, "year": 2021},
        {"indicator": "NY.GDP", "value": 3.0, "year": "unknown"},
    ]

    result = transformer.transform(raw, make_source_meta("economic"))

    assert (len(result.records), result.filtered_count, result.skipped_count) == (0, 1, 1)


def test_add_indicator_trends_reports_baseline_change(tmp_path) -> None:
    """Growth from 100 before the baseline to 300 after it should be 200%."""
    records = [
        _observation("e-1", 2022, 80.0),
        _observation("e-2", 2023, 100.0),
        _observation("e-3", 2024, 300.0),
    ]

    analyzed = add_indicator_trends(records, make_context(tmp_path))
    analysis = analyzed[2].attributes["analysis"]

    assert analysis["baseline_comparison"] == pytest.approx(200.0)


def test_add_indicator_trends_skips_single_observation(tmp_path) -> None:
    """Indicators with one observation should get no analysis."""
    records = [_observation("e-1", 2022, 80.0), _observation("e-2", 2022, 5.0, code="SP.POP")]

    analyzed = add_indicator_trends(records, make_context(tmp_path))

    assert analyzed[1].attributes["analysis"] is None
