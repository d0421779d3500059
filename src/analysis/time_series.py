"""Time-series trend, seasonality, forecast, and change-point analysis.

All functions take an ordered numeric series (one value per bucket) and
ignore non-numeric entries. Short or empty series produce neutral results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from analysis.descriptive import calculate_mean, calculate_std_dev, numeric_values
from core.constants import (
    DEFAULT_CHANGE_POINT_THRESHOLD,
    DEFAULT_EMA_ALPHA,
    DEFAULT_FORECAST_PERIODS,
    DEFAULT_MAX_LAG,
    DEFAULT_SEASONAL_PERIOD,
    MODERATE_TREND_R_SQUARED,
    SEASONALITY_THRESHOLD,
    STRONG_TREND_R_SQUARED,
    TREND_SLOPE_EPSILON,
)
from core.errors import MosaicAnalysisError


@dataclass(frozen=True)
class LinearTrend:
    """Ordinary least squares fit of value against index."""

    slope: float
    intercept: float
    r_squared: float
    direction: str
    strength: str


@dataclass(frozen=True)
class Seasonality:
    """Autocorrelation-based seasonality check at one lag."""

    has_seasonality: bool
    period: int | None
    strength: float
    autocorrelation: float


@dataclass(frozen=True)
class Decomposition:
    """Additive decomposition into trend, seasonal, and residual parts."""

    original: tuple[float, ...]
    trend: tuple[float, ...]
    seasonal: tuple[float, ...]
    residual: tuple[float, ...]


@dataclass(frozen=True)
class ForecastPoint:
    """One forecast step."""

    period: int
    forecast: float
    method: str
    confidence: float | None = None


@dataclass(frozen=True)
class ChangePoint:
    """Index where the series deviates sharply from its neighbors."""

    index: int
    value: float
    z_score: float
    kind: str


@dataclass(frozen=True)
class TimeSeriesAnalysis:
    """Combined time-series analysis."""

    trend: LinearTrend
    seasonality: Seasonality
    acf: tuple[tuple[int, float], ...]
    decomposition: Decomposition
    forecast: tuple[ForecastPoint, ...]
    change_points: tuple[ChangePoint, ...]
    growth_rate: float
    volatility: float


def calculate_linear_trend(values: Iterable[object]) -> LinearTrend:
    """Fit ``value = slope * index + intercept`` by least squares.

    Direction is increasing or decreasing when ``|slope| > 0.01``, else
    stable. Strength is strong above R² 0.7, moderate above 0.4, else weak.

    Args:
        values: Ordered numeric series.

    Returns:
        Fitted trend; R² is 0 when the series is constant.
    """
    series = numeric_values(values)
    count = len(series)
    if count < 2:
        intercept = series[0] if series else 0.0
        return LinearTrend(
            slope=0.0, intercept=intercept, r_squared=0.0, direction="stable", strength="weak"
        )
    x_mean = (count - 1) / 2
    y_mean = sum(series) / count
    numerator = sum((index - x_mean) * (value - y_mean) for index, value in enumerate(series))
    denominator = sum((index - x_mean) ** 2 for index in range(count))
    slope = numerator / denominator if denominator else 0.0
    intercept = y_mean - slope * x_mean
    ss_res = sum((value - (slope * index + intercept)) ** 2 for index, value in enumerate(series))
    ss_tot = sum((value - y_mean) ** 2 for value in series)
    r_squared = 0.0 if ss_tot == 0 else 1 - ss_res / ss_tot
    return LinearTrend(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        direction=_trend_direction(slope),
        strength=_trend_strength(r_squared),
    )


def calculate_autocorrelation(values: Iterable[object], lag: int = 1) -> float:
    """Return the sample autocorrelation at a lag, 0 when undefined."""
    series = numeric_values(values)
    if lag < 0 or len(series) < lag + 1:
        return 0.0
    mean = sum(series) / len(series)
    numerator = sum(
        (series[index] - mean) * (series[index + lag] - mean)
        for index in range(len(series) - lag)
    )
    denominator = sum((value - mean) ** 2 for value in series)
    return 0.0 if denominator == 0 else numerator / denominator


def calculate_acf(
    values: Iterable[object],
    max_lag: int = DEFAULT_MAX_LAG,
) -> list[tuple[int, float]]:
    """Return ``(lag, autocorrelation)`` pairs for lags 0..max_lag."""
    series = numeric_values(values)
    return [(lag, calculate_autocorrelation(series, lag)) for lag in range(max_lag + 1)]


def detect_seasonality(
    values: Iterable[object],
    period: int = DEFAULT_SEASONAL_PERIOD,
) -> Seasonality:
    """Check for seasonality at a candidate period.

    Args:
        values: Ordered numeric series.
        period: Candidate lag.

    Returns:
        Seasonality result; requires at least two full periods of data.
    """
    series = numeric_values(values)
    if len(series) < period * 2:
        return Seasonality(has_seasonality=False, period=None, strength=0.0, autocorrelation=0.0)
    autocorrelation = calculate_autocorrelation(series, period)
    has_seasonality = abs(autocorrelation) > SEASONALITY_THRESHOLD
    return Seasonality(
        has_seasonality=has_seasonality,
        period=period if has_seasonality else None,
        strength=abs(autocorrelation),
        autocorrelation=autocorrelation,
    )


def moving_average(
    values: Iterable[object],
    window_size: int = DEFAULT_SEASONAL_PERIOD,
) -> list[float]:
    """Return the trailing moving average; early points use a shorter window.

    Raises:
        MosaicAnalysisError: If window size is below 1.
    """
    if window_size < 1:
        raise MosaicAnalysisError(f"Invalid moving-average window {window_size}: expected >= 1.")
    series = numeric_values(values)
    averages: list[float] = []
    for index in range(len(series)):
        window = series[max(0, index - window_size + 1) : index + 1]
        averages.append(sum(window) / len(window))
    return averages


def exponential_moving_average(
    values: Iterable[object],
    alpha: float = DEFAULT_EMA_ALPHA,
) -> list[float]:
    """Return the exponential moving average seeded with the first value."""
    series = numeric_values(values)
    if not series:
        return []
    averages = [series[0]]
    for value in series[1:]:
        averages.append(alpha * value + (1 - alpha) * averages[-1])
    return averages


def decompose(values: Iterable[object], period: int = DEFAULT_SEASONAL_PERIOD) -> Decomposition:
    """Split a series into moving-average trend, seasonal, and residual parts.

    The seasonal component is the mean detrended value at each position
    modulo the period, tiled across the series.

    Args:
        values: Ordered numeric series.
        period: Seasonal period and moving-average window.

    Returns:
        Decomposition; components are empty when the series is shorter
        than two periods.
    """
    series = numeric_values(values)
    if len(series) < period * 2:
        return Decomposition(original=tuple(series), trend=(), seasonal=(), residual=())
    trend = moving_average(series, period)
    detrended = [value - trend_value for value, trend_value in zip(series, trend)]
    position_totals = [0.0] * period
    position_counts = [0] * period
    for index, value in enumerate(detrended):
        position_totals[index % period] += value
        position_counts[index % period] += 1
    position_means = [
        total / count if count else 0.0 for total, count in zip(position_totals, position_counts)
    ]
    seasonal = [position_means[index % period] for index in range(len(series))]
    residual = [
        value - trend_value - seasonal_value
        for value, trend_value, seasonal_value in zip(series, trend, seasonal)
    ]
    return Decomposition(
        original=tuple(series),
        trend=tuple(trend),
        seasonal=tuple(seasonal),
        residual=tuple(residual),
    )


def forecast_linear(
    values: Iterable[object],
    periods: int = DEFAULT_FORECAST_PERIODS,
) -> list[ForecastPoint]:
    """Extrapolate the fitted linear trend, clamped at zero.

    Args:
        values: Ordered numeric series.
        periods: Number of future steps.

    Returns:
        Forecast points with confidence equal to the fit's R².
    """
    series = numeric_values(values)
    if len(series) < 2:
        return []
    trend = calculate_linear_trend(series)
    return [
        ForecastPoint(
            period=step + 1,
            forecast=max(0.0, trend.slope * (len(series) + step) + trend.intercept),
            method="linear_regression",
            confidence=trend.r_squared,
        )
        for step in range(periods)
    ]


def forecast_exponential(
    values: Iterable[object],
    periods: int = DEFAULT_FORECAST_PERIODS,
    alpha: float = DEFAULT_EMA_ALPHA,
) -> list[ForecastPoint]:
    """Hold the last exponential moving average for every future step."""
    averages = exponential_moving_average(values, alpha)
    if not averages:
        return []
    level = max(0.0, averages[-1])
    return [
        ForecastPoint(period=step + 1, forecast=level, method="exponential_smoothing")
        for step in range(periods)
    ]


def detect_change_points(
    values: Iterable[object],
    threshold: float = DEFAULT_CHANGE_POINT_THRESHOLD,
) -> list[ChangePoint]:
    """Flag interior points that are extreme and jump away from a neighbor.

    A point qualifies when its absolute z-score exceeds the threshold and
    its difference to either neighbor exceeds one standard deviation.

    Args:
        values: Ordered numeric series.
        threshold: Absolute z-score cutoff.

    Returns:
        Change points classified as spike (above mean) or drop (below mean).
    """
    series = numeric_values(values)
    if len(series) < 3:
        return []
    mean = calculate_mean(series)
    std_dev = calculate_std_dev(series)
    if std_dev == 0:
        return []
    change_points: list[ChangePoint] = []
    for index in range(1, len(series) - 1):
        value = series[index]
        z_score = abs((value - mean) / std_dev)
        previous_jump = abs(value - series[index - 1])
        next_jump = abs(value - series[index + 1])
        if z_score > threshold and (previous_jump > std_dev or next_jump > std_dev):
            change_points.append(
                ChangePoint(
                    index=index,
                    value=value,
                    z_score=z_score,
                    kind="spike" if value > mean else "drop",
                )
            )
    return change_points


def calculate_growth_rate(values: Iterable[object]) -> float:
    """Return percentage growth from the first to the last non-zero value."""
    series = [value for value in numeric_values(values) if value != 0]
    if len(series) < 2:
        return 0.0
    return ((series[-1] - series[0]) / series[0]) * 100


def calculate_average_growth(values: Iterable[object]) -> float:
    """Return the mean step-over-step percentage growth, skipping zero bases."""
    series = numeric_values(values)
    growth_rates = [
        (current - previous) / previous * 100
        for previous, current in zip(series, series[1:])
        if previous != 0
    ]
    return sum(growth_rates) / len(growth_rates) if growth_rates else 0.0


def calculate_cagr(start_value: float, end_value: float, periods: float) -> float:
    """Return the compound annual growth rate in percent, 0 for non-positive inputs."""
    if start_value <= 0 or end_value <= 0 or periods <= 0:
        return 0.0
    return ((end_value / start_value) ** (1 / periods) - 1) * 100


def analyze_time_series(
    values: Iterable[object],
    period: int = DEFAULT_SEASONAL_PERIOD,
    forecast_periods: int = DEFAULT_FORECAST_PERIODS,
    max_lag: int = DEFAULT_MAX_LAG,
) -> TimeSeriesAnalysis:
    """Run trend, seasonality, ACF, decomposition, forecast, and change points.

    Args:
        values: Ordered numeric series.
        period: Seasonal period.
        forecast_periods: Linear forecast horizon.
        max_lag: Largest ACF lag.

    Returns:
        Combined analysis.
    """
    series = numeric_values(values)
    return TimeSeriesAnalysis(
        trend=calculate_linear_trend(series),
        seasonality=detect_seasonality(series, period),
        acf=tuple(calculate_acf(series, max_lag)),
        decomposition=decompose(series, period),
        forecast=tuple(forecast_linear(series, forecast_periods)),
        change_points=tuple(detect_change_points(series)),
        growth_rate=calculate_growth_rate(series),
        volatility=calculate_std_dev(series),
    )


def _trend_direction(slope: float) -> str:
    if abs(slope) > TREND_SLOPE_EPSILON:
        return "increasing" if slope > 0 else "decreasing"
    return "stable"


def _trend_strength(r_squared: float) -> str:
    if abs(r_squared) > STRONG_TREND_R_SQUARED:
        return "strong"
    if abs(r_squared) > MODERATE_TREND_R_SQUARED:
        return "moderate"
    return "weak"
