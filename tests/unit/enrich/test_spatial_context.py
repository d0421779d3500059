"""Unit tests for region classification and governorate inference."""

from __future__ import annotations

import pytest

from core.constants import (
    REGION_EAST_JERUSALEM,
    REGION_GAZA,
    REGION_PALESTINE,
    REGION_UNKNOWN,
    REGION_WEST_BANK,
)
from enrich.spatial_context import (
    classify_region,
    classify_region_type,
    classify_region_with_fallback,
    find_governorate_by_coordinates,
    haversine_distance,
    infer_governorate,
    normalize_location_name,
)
from tests.record_factory import make_source_meta


def test_classify_region_maps_known_places() -> None:
    """Town names should map onto their regions."""
    names = ["Khan Yunis", "Ramallah", "Old City, Jerusalem", "PSE", "Nowhereville", None]

    regions = [classify_region(name) for name in names]

    assert regions == [
        REGION_GAZA,
        REGION_WEST_BANK,
        REGION_EAST_JERUSALEM,
        REGION_PALESTINE,
        REGION_UNKNOWN,
        REGION_UNKNOWN,
    ]


def test_normalize_location_name_strips_separators() -> None:
    """Pipe separators and runs of whitespace should collapse to single spaces."""
    assert normalize_location_name("  Gaza |  North ") == "gaza north"


def test_classify_region_with_fallback_reads_dataset_title() -> None:
    """Unclassifiable names should fall back to dataset title and description."""
    meta = make_source_meta(title="West Bank incident log")

    assert classify_region_with_fallback("Area C site 4", meta) == REGION_WEST_BANK


def test_infer_governorate_prefers_specific_names() -> None:
    """Northern towns should map to North Gaza rather than Gaza."""
    assert infer_governorate("Beit Lahia") == "North Gaza"


def test_find_governorate_by_coordinates_uses_bounding_boxes() -> None:
    """Points should resolve to the governorate box containing them."""
    points = [(34.47, 31.50), (35.20, 31.90), (10.0, 10.0), None]

    assert [find_governorate_by_coordinates(point) for point in points] == [
        "Gaza",
        "Ramallah",
        None,
        None,
    ]


def test_haversine_distance_of_one_degree_latitude() -> None:
    """One degree of latitude should be roughly 111 km."""
    assert haversine_distance(31.0, 34.0, 32.0, 34.0) == pytest.approx(111194.9, rel=1e-4)


def test_classify_region_type_reads_name_markers() -> None:
    """Camps, cities, and villages should be told apart by name."""
    names = ["Jenin Camp", "Gaza City", "Al-Aqaba village", "Area C"]

    assert [classify_region_type(name) for name in names] == ["camp", "urban", "rural", None]
