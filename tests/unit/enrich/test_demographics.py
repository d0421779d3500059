"""Unit tests for demographic inference and source confidence."""

from __future__ import annotations

from enrich.demographics import infer_casualty_breakdown, lookup_source_confidence


def test_infer_casualty_breakdown_derives_men_killed() -> None:
    """Men killed should be the total minus children and women."""
    breakdown = infer_casualty_breakdown({"killed": 10, "children_killed": 3, "women_killed": 2})

    assert breakdown["men_killed"] == 5


def test_infer_casualty_breakdown_keeps_reported_value() -> None:
    """A reported men_killed count should not be overwritten."""
    casualties = {"killed": 10, "children_killed": 3, "women_killed": 2, "men_killed": 4}

    assert infer_casualty_breakdown(casualties)["men_killed"] == 4


def test_infer_casualty_breakdown_needs_all_counts() -> None:
    """Nothing should be inferred when any input count is missing."""
    assert "men_killed" not in infer_casualty_breakdown({"killed": 10, "children_killed": 3})


def test_lookup_source_confidence_takes_best_match() -> None:
    """The most trusted known source should set the confidence."""
    assert lookup_source_confidence(("Ministry of Health", "UN OCHA")) == 0.95


def test_lookup_source_confidence_matches_short_names_as_words() -> None:
    """Short keywords should not match inside longer words."""
    assert lookup_source_confidence(("Ochalabs", "PCHR")) == 0.85
