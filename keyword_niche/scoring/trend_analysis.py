"""Keyword Niche - Trend regression and direction scoring.

The slope is an ordinary least-squares fit of ratio against month index.
It is shared by the full niche score and by the quick score's seed-level
trend approximation.
"""

from __future__ import annotations

from typing import Optional, Sequence

from keyword_niche.schemas import TrendAnalysis, TrendSeries

MIN_TREND_POINTS = 3


def least_squares_slope(values: Sequence[float]) -> float:
    """Slope of *values* against x = 0..n-1. Returns 0.0 for a flat x axis."""
    n = len(values)
    sum_x = sum(range(n))
    sum_y = sum(values)
    sum_xy = sum(x * y for x, y in enumerate(values))
    sum_xx = sum(x * x for x in range(n))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


def analyze_trend(
    series: Optional[TrendSeries],
    weight: float = 20.0,
) -> TrendAnalysis:
    """Classify the trend direction and score it against *weight*.

    Fewer than three points (or no series at all) is treated as neutral.
    """
    if series is None or len(series.results) < MIN_TREND_POINTS:
        return TrendAnalysis(score=weight * 0.5, slope=0.0, direction="stable")

    slope = least_squares_slope([p.ratio for p in series.results])

    if slope > 2:
        return TrendAnalysis(
            score=weight * min(1.0, 0.7 + slope / 20),
            slope=slope,
            direction="rising",
        )
    if slope > 0.5:
        return TrendAnalysis(
            score=weight * (0.55 + (slope - 0.5) / 3.3),
            slope=slope,
            direction="rising",
        )
    if slope >= -0.5:
        return TrendAnalysis(score=weight * 0.5, slope=slope, direction="stable")
    if slope >= -2:
        return TrendAnalysis(
            score=weight * (0.25 + 0.25 * ((slope + 2) / 1.5)),
            slope=slope,
            direction="declining",
        )
    return TrendAnalysis(score=weight * 0.15, slope=slope, direction="declining")
