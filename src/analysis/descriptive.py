"""Descriptive statistics over numeric sequences.

Every function ignores non-numeric and NaN entries. Empty input yields
zeros (or None for the mode) instead of raising. Variance and standard
deviation are population statistics.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
import math
from typing import Iterable, Mapping, Sequence

from core.constants import DEFAULT_OUTLIER_MULTIPLIER, DEFAULT_ZSCORE_THRESHOLD
from core.errors import MosaicAnalysisError

SUMMARY_PERCENTILES = (10, 25, 50, 75, 90, 95, 99)


@dataclass(frozen=True)
class Quartiles:
    """First, second, and third quartiles."""

    q1: float
    q2: float
    q3: float


@dataclass(frozen=True)
class OutlierReport:
    """Outliers found by one detection method.

    Attributes:
        outliers: Outlying values in input order.
        indices: Positions of outliers within the numeric values.
        lower_bound: Lower fence, IQR method only.
        upper_bound: Upper fence, IQR method only.
        z_scores: Per-value z-scores, z-score method only.
    """

    outliers: tuple[float, ...]
    indices: tuple[int, ...]
    lower_bound: float = 0.0
    upper_bound: float = 0.0
    z_scores: tuple[float, ...] = ()


def numeric_values(values: Iterable[object]) -> list[float]:
    """Keep finite numeric entries, dropping booleans, None, text, and NaN."""
    kept: list[float] = []
    for value in values:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        if math.isnan(value):
            continue
        kept.append(float(value))
    return kept


def calculate_mean(values: Iterable[object]) -> float:
    """Return the arithmetic mean."""
    numbers = numeric_values(values)
    if not numbers:
        return 0.0
    return sum(numbers) / len(numbers)


def calculate_median(values: Iterable[object]) -> float:
    """Return the median; even-length input averages the two middle values."""
    numbers = sorted(numeric_values(values))
    if not numbers:
        return 0.0
    middle = len(numbers) // 2
    if len(numbers) % 2 == 0:
        return (numbers[middle - 1] + numbers[middle]) / 2
    return numbers[middle]


def calculate_mode(values: Iterable[object]) -> float | None:
    """Return the most frequent value, first seen wins ties."""
    numbers = numeric_values(values)
    if not numbers:
        return None
    counts = Counter(numbers)
    best_value = numbers[0]
    for number in numbers:
        if counts[number] > counts[best_value]:
            best_value = number
    return best_value


def calculate_variance(values: Iterable[object]) -> float:
    """Return the population variance (divides by N)."""
    numbers = numeric_values(values)
    if not numbers:
        return 0.0
    mean = sum(numbers) / len(numbers)
    return sum((number - mean) ** 2 for number in numbers) / len(numbers)


def calculate_std_dev(values: Iterable[object]) -> float:
    """Return the population standard deviation."""
    return math.sqrt(calculate_variance(values))


def calculate_quartiles(values: Iterable[object]) -> Quartiles:
    """Return quartiles from the medians of the lower and upper halves.

    For odd-length input the overall median element belongs to neither half.

    Args:
        values: Numeric sequence.

    Returns:
        Quartiles, all zero for empty input.
    """
    numbers = sorted(numeric_values(values))
    if not numbers:
        return Quartiles(q1=0.0, q2=0.0, q3=0.0)
    middle = len(numbers) // 2
    lower_half = numbers[:middle]
    upper_half = numbers[middle:] if len(numbers) % 2 == 0 else numbers[middle + 1 :]
    return Quartiles(
        q1=calculate_median(lower_half),
        q2=calculate_median(numbers),
        q3=calculate_median(upper_half),
    )


def calculate_iqr(values: Iterable[object]) -> float:
    """Return the interquartile range Q3 - Q1."""
    quartiles = calculate_quartiles(values)
    return quartiles.q3 - quartiles.q1


def calculate_min_max(values: Iterable[object]) -> tuple[float, float]:
    """Return ``(min, max)``, zeros for empty input."""
    numbers = numeric_values(values)
    if not numbers:
        return (0.0, 0.0)
    return (min(numbers), max(numbers))


def calculate_range(values: Iterable[object]) -> float:
    """Return max - min."""
    minimum, maximum = calculate_min_max(values)
    return maximum - minimum


def calculate_percentile(values: Iterable[object], percentile: float) -> float:
    """Return a percentile by linear interpolation between order statistics.

    Args:
        values: Numeric sequence.
        percentile: Percentile in [0, 100].

    Returns:
        Interpolated percentile value.

    Raises:
        MosaicAnalysisError: If percentile is outside [0, 100].
    """
    if percentile < 0 or percentile > 100:
        raise MosaicAnalysisError(
            f"Invalid percentile {percentile}: expected a value between 0 and 100."
        )
    numbers = sorted(numeric_values(values))
    if not numbers:
        return 0.0
    position = (percentile / 100) * (len(numbers) - 1)
    lower = math.floor(position)
    upper = math.ceil(position)
    if lower == upper:
        return numbers[lower]
    weight = position - lower
    return numbers[lower] * (1 - weight) + numbers[upper] * weight


def detect_outliers_iqr(
    values: Iterable[object],
    multiplier: float = DEFAULT_OUTLIER_MULTIPLIER,
) -> OutlierReport:
    """Flag values outside ``[Q1 - m*IQR, Q3 + m*IQR]``.

    Args:
        values: Numeric sequence.
        multiplier: Fence multiplier.

    Returns:
        Outlier report with fences.
    """
    numbers = numeric_values(values)
    if not numbers:
        return OutlierReport(outliers=(), indices=())
    quartiles = calculate_quartiles(numbers)
    iqr = quartiles.q3 - quartiles.q1
    lower_bound = quartiles.q1 - multiplier * iqr
    upper_bound = quartiles.q3 + multiplier * iqr
    flagged = [
        (index, number)
        for index, number in enumerate(numbers)
        if number < lower_bound or number > upper_bound
    ]
    return OutlierReport(
        outliers=tuple(number for _, number in flagged),
        indices=tuple(index for index, _ in flagged),
        lower_bound=lower_bound,
        upper_bound=upper_bound,
    )


def detect_outliers_zscore(
    values: Iterable[object],
    threshold: float = DEFAULT_ZSCORE_THRESHOLD,
) -> OutlierReport:
    """Flag values whose absolute population z-score exceeds a threshold.

    Args:
        values: Numeric sequence.
        threshold: Absolute z-score cutoff.

    Returns:
        Outlier report with z-scores; empty when standard deviation is zero.
    """
    numbers = numeric_values(values)
    std_dev = calculate_std_dev(numbers)
    if not numbers or std_dev == 0:
        return OutlierReport(outliers=(), indices=())
    mean = calculate_mean(numbers)
    z_scores = tuple((number - mean) / std_dev for number in numbers)
    flagged = [index for index, z_score in enumerate(z_scores) if abs(z_score) > threshold]
    return OutlierReport(
        outliers=tuple(numbers[index] for index in flagged),
        indices=tuple(flagged),
        z_scores=z_scores,
    )


def calculate_correlation(x_values: Sequence[object], y_values: Sequence[object]) -> float:
    """Return the Pearson correlation of two equal-length sequences, 0 if undefined."""
    x_numbers = [_as_number(value) for value in x_values]
    y_numbers = [_as_number(value) for value in y_values]
    if not x_numbers or len(x_numbers) != len(y_numbers):
        return 0.0
    x_mean = sum(x_numbers) / len(x_numbers)
    y_mean = sum(y_numbers) / len(y_numbers)
    numerator = sum((x - x_mean) * (y - y_mean) for x, y in zip(x_numbers, y_numbers))
    x_spread = sum((x - x_mean) ** 2 for x in x_numbers)
    y_spread = sum((y - y_mean) ** 2 for y in y_numbers)
    denominator = math.sqrt(x_spread * y_spread)
    return 0.0 if denominator == 0 else numerator / denominator


def summarize(values: Iterable[object]) -> dict[str, object]:
    """Return the full descriptive summary of a numeric sequence.

    Args:
        values: Numeric sequence.

    Returns:
        JSON-safe summary with central tendency, spread, quartiles,
        IQR outliers, and standard percentiles.
    """
    numbers = numeric_values(values)
    quartiles = calculate_quartiles(numbers)
    minimum, maximum = calculate_min_max(numbers)
    outliers = detect_outliers_iqr(numbers)
    summary: dict[str, object] = {
        "count": len(numbers),
        "mean": calculate_mean(numbers),
        "median": calculate_median(numbers),
        "mode": calculate_mode(numbers),
        "std_dev": calculate_std_dev(numbers),
        "variance": calculate_variance(numbers),
        "min": minimum,
        "max": maximum,
        "range": maximum - minimum,
        "quartiles": {"q1": quartiles.q1, "q2": quartiles.q2, "q3": quartiles.q3},
        "iqr": quartiles.q3 - quartiles.q1,
        "outliers": {
            "count": len(outliers.outliers),
            "values": list(outliers.outliers),
            "bounds": {"lower": outliers.lower_bound, "upper": outliers.upper_bound},
        },
    }
    if numbers:
        summary["percentiles"] = {
            f"p{percentile}": calculate_percentile(numbers, percentile)
            for percentile in SUMMARY_PERCENTILES
        }
    return summary


def summarize_fields(
    rows: Iterable[Mapping[str, object]],
    fields: Sequence[str],
) -> dict[str, dict[str, object]]:
    """Summarize several numeric fields across rows, skipping missing values."""
    materialized = list(rows)
    return {
        field_name: summarize(
            row[field_name] for row in materialized if row.get(field_name) is not None
        )
        for field_name in fields
    }


def _as_number(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value):
        return 0.0
    return float(value)
