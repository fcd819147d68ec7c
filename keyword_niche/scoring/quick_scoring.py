"""Keyword Niche - Quick score from SearchAd metadata only.

Used to rank every related keyword of a seed without any network calls.
Competition is approximated from the competition index, and the trend
component is taken once from the seed's own trend series.
"""

from __future__ import annotations

from typing import Iterable, Optional

from keyword_niche.schemas import (
    CompetitionIndex,
    KeywordMetric,
    QuickScoreBreakdown,
    QuickScoreResult,
    TrendSeries,
)
from keyword_niche.scoring.niche_scoring import (
    RatioBand,
    ratio_band_score,
    score_volume,
)
from keyword_niche.scoring.rounding import round_half_up
from keyword_niche.scoring.trend_analysis import analyze_trend
from keyword_niche.scoring.weights import DEFAULT_QUICK_WEIGHTS, QuickWeights
from keyword_niche.utils.validators import split_words, strip_spaces

COMPETITION_MULTIPLIERS: dict[CompetitionIndex, float] = {
    CompetitionIndex.HIGH: 0.2,
    CompetitionIndex.MEDIUM: 0.5,
    CompetitionIndex.LOW: 1.0,
}

# Stand-in blog post counts when no live content count is available.
ESTIMATED_CONTENT_COUNTS: dict[CompetitionIndex, int] = {
    CompetitionIndex.HIGH: 50000,
    CompetitionIndex.MEDIUM: 10000,
    CompetitionIndex.LOW: 2000,
}

QUICK_EFFICIENCY_BANDS: tuple[RatioBand, ...] = (
    (0.3, 1.0, 0.6, 0.4),
    (0.1, 0.3, 0.35, 0.25),
    (0.01, 0.1, 0.1, 0.25),
)
QUICK_EFFICIENCY_FLOOR = 0.05
QUICK_EFFICIENCY_NO_SEARCHES = 0.1

MAX_RELEVANCE_BONUS = 5.0


def score_quick_competition(comp_idx: CompetitionIndex, weight: float) -> float:
    return weight * COMPETITION_MULTIPLIERS[comp_idx]


def score_quick_efficiency(
    total_searches: int,
    comp_idx: CompetitionIndex,
    weight: float,
) -> float:
    if total_searches == 0:
        return weight * QUICK_EFFICIENCY_NO_SEARCHES
    ratio = total_searches / ESTIMATED_CONTENT_COUNTS[comp_idx]
    return weight * ratio_band_score(
        ratio, QUICK_EFFICIENCY_BANDS, QUICK_EFFICIENCY_FLOOR,
    )


def trend_approx_score(
    seed_trend: Optional[TrendSeries],
    weight: float,
) -> float:
    """Trend component shared by every related keyword of a seed."""
    return analyze_trend(seed_trend, weight).score


def seed_relevance_bonus(keyword: str, seed: Optional[str]) -> float:
    """Bonus (0-5) for keywords that contain the seed or its words.

    - whole seed, spaces stripped, case-insensitive: +5
    - multi-word seed, every word present: +4
    - some words present: +2 * matched / total
    """
    if not seed:
        return 0.0
    keyword_lower = keyword.lower()

    if strip_spaces(seed).lower() in keyword_lower:
        return MAX_RELEVANCE_BONUS

    parts = split_words(seed)
    if len(parts) > 1:
        matched = sum(1 for p in parts if p.lower() in keyword_lower)
        if matched == len(parts):
            return 4.0
        if matched > 0:
            return 2 * (matched / len(parts))
    return 0.0


def _build_quick_score(
    metric: KeywordMetric,
    trend_score: float,
    seed: Optional[str],
    weights: QuickWeights,
) -> QuickScoreResult:
    total = metric.total_searches

    volume_score = score_volume(total, weights.volume)
    comp_score = score_quick_competition(metric.comp_idx, weights.competition)
    efficiency_score = score_quick_efficiency(
        total, metric.comp_idx, weights.efficiency,
    )
    bonus = seed_relevance_bonus(metric.rel_keyword, seed)

    # The relevance bonus only appears in the total, never in the breakdown.
    quick_score = round_half_up(
        volume_score + comp_score + efficiency_score + trend_score + bonus,
    )

    return QuickScoreResult(
        keyword=metric.rel_keyword,
        total_searches=total,
        pc_searches=metric.monthly_pc_qc_cnt,
        mobile_searches=metric.monthly_mobile_qc_cnt,
        comp_idx=metric.comp_idx,
        quick_score=quick_score,
        breakdown=QuickScoreBreakdown(
            volume_score=round_half_up(volume_score),
            comp_score=round_half_up(comp_score),
            efficiency_score=round_half_up(efficiency_score),
            trend_approx_score=round_half_up(trend_score),
        ),
    )


def calculate_quick_score(
    metric: KeywordMetric,
    seed_trend: Optional[TrendSeries],
    seed: Optional[str] = None,
    weights: Optional[QuickWeights] = None,
) -> QuickScoreResult:
    weights = weights or DEFAULT_QUICK_WEIGHTS
    trend_score = trend_approx_score(seed_trend, weights.trend_approx)
    return _build_quick_score(metric, trend_score, seed, weights)


def rank_quick_scores(
    metrics: Iterable[KeywordMetric],
    seed_trend: Optional[TrendSeries],
    seed: Optional[str] = None,
    weights: Optional[QuickWeights] = None,
) -> list[QuickScoreResult]:
    """Quick-score every metric and sort by score, highest first.

    The seed trend is analysed once for the whole batch. Ties keep their
    catalog order.
    """
    weights = weights or DEFAULT_QUICK_WEIGHTS
    trend_score = trend_approx_score(seed_trend, weights.trend_approx)
    results = [
        _build_quick_score(m, trend_score, seed, weights) for m in metrics
    ]
    results.sort(key=lambda r: r.quick_score, reverse=True)
    return results
