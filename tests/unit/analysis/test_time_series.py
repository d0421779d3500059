"""Unit tests for time-series analysis."""

from __future__ import annotations

import pytest

from analysis.time_series import (
    analyze_time_series,
    calculate_growth_rate,
    calculate_linear_trend,
    detect_change_points,
    detect_seasonality,
    forecast_linear,
    moving_average,
)
from core.errors import MosaicAnalysisError


def test_linear_trend_of_perfect_line() -> None:
    """A perfect increasing line should have unit slope and R² of one."""
    trend = calculate_linear_trend([1, 2, 3, 4, 5, 6, 7])

    assert (trend.direction, trend.strength, (trend.slope, trend.intercept, trend.r_squared)) == (
        "increasing",
        "strong",
        pytest.approx((1.0, 1.0, 1.0)),
    )


def test_linear_trend_of_constant_series_is_stable() -> None:
    """Flat series should be stable with zero R²."""
    trend = calculate_linear_trend([5, 5, 5])

    assert (trend.direction, trend.r_squared, trend.strength) == ("stable", 0.0, "weak")


def test_linear_trend_of_short_series_is_neutral() -> None:
    """A single point has no trend."""
    assert calculate_linear_trend([4]).intercept == 4.0


def test_detect_change_points_flags_spike() -> None:
    """An isolated jump should be reported as a spike."""
    points = detect_change_points([1, 1, 1, 1, 20, 1, 1, 1, 1])

    assert [(point.index, point.kind) for point in points] == [(4, "spike")]


def test_detect_change_points_ignores_constant_series() -> None:
    """Series with zero spread have no change points."""
    assert detect_change_points([3, 3, 3, 3]) == []


def test_forecast_linear_extends_trend() -> None:
    """Forecasts should continue the fitted line."""
    forecast = forecast_linear([1, 2, 3], periods=2)

    assert [(point.period, point.forecast) for point in forecast] == [(1, 4.0), (2, 5.0)]


def test_forecast_linear_is_clamped_at_zero() -> None:
    """Declining trends should not forecast negative counts."""
    forecast = forecast_linear([5, 4, 3, 2, 1], periods=3)

    assert [point.forecast for point in forecast] == [0.0, 0.0, 0.0]


def test_moving_average_uses_shorter_leading_windows() -> None:
    """Early points should average whatever history exists."""
    assert moving_average([2, 4, 6], 2) == [2.0, 3.0, 5.0]


def test_moving_average_rejects_empty_window() -> None:
    """Windows below one should raise."""
    with pytest.raises(MosaicAnalysisError):
        moving_average([1, 2, 3], 0)


def test_detect_seasonality_finds_weekly_cycle() -> None:
    """A repeating weekly peak should be detected at period seven."""
    series = [0, 0, 0, 0, 0, 0, 10] * 3

    seasonality = detect_seasonality(series, 7)

    assert (seasonality.has_seasonality, seasonality.period) == (True, 7)


def test_detect_seasonality_needs_two_periods() -> None:
    """Series shorter than two periods cannot be seasonal."""
    assert detect_seasonality([1, 2, 3], 7).has_seasonality is False


def test_calculate_growth_rate_skips_zero_values() -> None:
    """Growth should run from the first to the last non-zero value."""
    assert calculate_growth_rate([10, 0, 20]) == 100.0


def test_analyze_time_series_forecast_horizon() -> None:
    """The combined analysis should forecast the requested horizon."""
    analysis = analyze_time_series([1, 3, 2, 5, 4, 6], forecast_periods=3)

    assert len(analysis.forecast) == 3
