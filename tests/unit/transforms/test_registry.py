"""Unit tests for the category registry."""

from __future__ import annotations

import pytest

from core.errors import MosaicTransformError
from tests.record_factory import make_context
from transforms.registry import get_category_spec, get_transformer, supported_categories


def test_supported_categories_lists_every_category() -> None:
    """Registry should expose all categories in sorted order."""
    assert supported_categories() == (
        "conflict",
        "culture",
        "economic",
        "education",
        "health",
        "historical",
        "humanitarian",
        "infrastructure",
        "land",
        "martyrs",
        "refugee",
        "shelter",
        "water",
    )


def test_get_category_spec_normalizes_name() -> None:
    """Lookup should ignore case and surrounding whitespace."""
    assert get_category_spec("  Conflict ").category == "conflict"


def test_shelter_spec_writes_infrastructure_category() -> None:
    """Shelter records should land in the infrastructure category."""
    assert get_category_spec("shelter").category == "infrastructure"


def test_get_transformer_raises_for_unknown_category(tmp_path) -> None:
    """Unknown categories should raise transform error."""
    with pytest.raises(MosaicTransformError):
        get_transformer("weather", make_context(tmp_path))
