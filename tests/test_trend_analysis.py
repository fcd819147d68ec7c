"""Tests for the least-squares trend classifier."""

from __future__ import annotations

import pytest

from factories import make_series
from keyword_niche.scoring.trend_analysis import analyze_trend, least_squares_slope


class TestLeastSquaresSlope:
    def test_perfect_line(self):
        assert least_squares_slope([float(i) for i in range(12)]) == pytest.approx(1.0)

    def test_flat(self):
        assert least_squares_slope([42.0] * 12) == 0.0

    def test_single_point_has_no_slope(self):
        assert least_squares_slope([7.0]) == 0.0
        assert least_squares_slope([]) == 0.0

    def test_noisy_series(self):
        # y = 2x + noise that cancels out in the fit
        values = [0.0, 3.0, 4.0, 5.0, 8.0]
        assert least_squares_slope(values) == pytest.approx(1.8)


class TestAnalyzeTrend:
    @pytest.mark.parametrize("ratios", [[], [40.0], [10.0, 90.0]])
    def test_too_few_points_is_neutral(self, ratios: list[float]):
        result = analyze_trend(make_series(ratios), weight=20)
        assert result.slope == 0.0
        assert result.direction == "stable"
        assert result.score == 10.0

    def test_no_series_is_neutral(self):
        result = analyze_trend(None, weight=30)
        assert result.score == 15.0
        assert result.direction == "stable"

    def test_linear_rising_series_hits_clamp(self, rising_trend):
        result = analyze_trend(rising_trend, weight=20)
        assert result.slope == pytest.approx(10.0)
        assert result.direction == "rising"
        assert result.score == pytest.approx(20.0)

    @pytest.mark.parametrize("start,step,direction,expected", [
        (10.0, 3.0, "rising", 17.0),
        (0.0, 1.0, "rising", 20 * (0.55 + 0.5 / 3.3)),
        (10.0, 0.5, "stable", 10.0),
        (50.0, 0.0, "stable", 10.0),
        (50.0, -0.5, "stable", 10.0),
        (50.0, -1.0, "declining", 20 * (0.25 + 0.25 / 1.5)),
        (50.0, -2.0, "declining", 5.0),
        (100.0, -5.0, "declining", 3.0),
    ])
    def test_direction_bands(
        self, start: float, step: float, direction: str, expected: float,
    ):
        series = make_series([start + step * i for i in range(12)])
        result = analyze_trend(series, weight=20)
        assert result.slope == pytest.approx(step)
        assert result.direction == direction
        assert result.score == pytest.approx(expected)

    def test_weight_scales_score(self, flat_trend):
        assert analyze_trend(flat_trend, weight=8).score == 4.0
