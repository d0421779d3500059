"""Category transformer registry.

This module maps category names to their transformation strategies.
Adding a category means adding one ``CategorySpec`` entry here.
"""

from __future__ import annotations

from typing import Mapping

from core.errors import MosaicTransformError
from core.run_context import RunContext
from transforms.categories.conflict import CONFLICT_SPEC
from transforms.categories.economic import ECONOMIC_SPEC
from transforms.categories.facilities import EDUCATION_SPEC, HEALTH_SPEC, WATER_SPEC
from transforms.categories.heritage import CULTURE_SPEC, HISTORICAL_SPEC
from transforms.categories.humanitarian import HUMANITARIAN_SPEC, REFUGEE_SPEC
from transforms.categories.infrastructure import INFRASTRUCTURE_SPEC, SHELTER_SPEC
from transforms.categories.land import LAND_SPEC
from transforms.categories.martyrs import MARTYRS_SPEC
from transforms.category_spec import CategorySpec
from transforms.transformer import CategoryTransformer

CATEGORY_SPECS: Mapping[str, CategorySpec] = {
    "conflict": CONFLICT_SPEC,
    "economic": ECONOMIC_SPEC,
    "health": HEALTH_SPEC,
    "education": EDUCATION_SPEC,
    "water": WATER_SPEC,
    "infrastructure": INFRASTRUCTURE_SPEC,
    "shelter": SHELTER_SPEC,
    "humanitarian": HUMANITARIAN_SPEC,
    "refugee": REFUGEE_SPEC,
    "land": LAND_SPEC,
    "culture": CULTURE_SPEC,
    "historical": HISTORICAL_SPEC,
    "martyrs": MARTYRS_SPEC,
}


def supported_categories() -> tuple[str, ...]:
    """Return registered category names in sorted order."""
    return tuple(sorted(CATEGORY_SPECS))


def get_category_spec(category: str) -> CategorySpec:
    """Resolve the strategy registered for a category.

    Raises:
        MosaicTransformError: If no strategy is registered.
    """
    spec = CATEGORY_SPECS.get(category.strip().lower())
    if spec is None:
        raise MosaicTransformError(
            f"Unsupported category '{category}'. "
            f"Use one of: {', '.join(supported_categories())}."
        )
    return spec


def get_transformer(
    category: str,
    context: RunContext,
    extra_aliases: Mapping[str, tuple[str, ...]] | None = None,
) -> CategoryTransformer:
    """Build a transformer for a category.

    Args:
        category: Registered category name.
        context: Run context of the current invocation.
        extra_aliases: Optional provider aliases merged ahead of the defaults.

    Returns:
        Transformer bound to the category strategy.

    Raises:
        MosaicTransformError: If the category is not registered.
    """
    return CategoryTransformer(get_category_spec(category), context, extra_aliases)
