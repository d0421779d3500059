"""Demographic inference and source confidence lookups."""

from __future__ import annotations

from typing import Mapping

from core.constants import DEFAULT_SOURCE_CONFIDENCE
from transforms.value_parsing import parse_float

SOURCE_CONFIDENCE = (
    ("un ocha", 0.95),
    ("ocha", 0.95),
    ("b'tselem", 0.9),
    ("btselem", 0.9),
    ("tech for palestine", 0.9),
    ("tech4palestine", 0.9),
    ("pchr", 0.85),
    ("al-mezan", 0.85),
    ("al mezan", 0.85),
    ("ministry of health", 0.8),
    ("moh", 0.8),
)


def infer_casualty_breakdown(casualties: Mapping[str, object]) -> dict[str, object]:
    """Infer ``men_killed`` from total, children, and women killed.

    The breakdown is returned unchanged when ``men_killed`` is already set
    or any input count is missing.

    Args:
        casualties: Casualty breakdown mapping.

    Returns:
        Copy of the breakdown, with ``men_killed`` inferred when possible.
    """
    breakdown = dict(casualties)
    if breakdown.get("men_killed") is not None:
        return breakdown
    killed = parse_float(breakdown.get("killed"))
    children = parse_float(breakdown.get("children_killed"))
    women = parse_float(breakdown.get("women_killed"))
    if killed is None or children is None or women is None:
        return breakdown
    breakdown["men_killed"] = max(0, int(killed - children - women))
    return breakdown


def lookup_source_confidence(source_names: tuple[str, ...]) -> float:
    """Return the highest known confidence among source names.

    Args:
        source_names: Source names and organizations of one record.

    Returns:
        Confidence in [0, 1], default when no source is known.
    """
    matches = [
        confidence
        for source_name in source_names
        for keyword, confidence in SOURCE_CONFIDENCE
        if _mentions(source_name, keyword)
    ]
    return max(matches) if matches else DEFAULT_SOURCE_CONFIDENCE


def _mentions(source_name: str, keyword: str) -> bool:
    normalized = source_name.strip().lower()
    if len(keyword) <= 4:
        return keyword in normalized.replace("-", " ").replace("/", " ").split()
    return keyword in normalized
