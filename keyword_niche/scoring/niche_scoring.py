"""Keyword Niche - Deterministic scoring functions for the full niche score.

All functions are pure: no network calls, no shared state. Every scorer
takes its weight explicitly and returns a value in [0, weight].
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Sequence

from keyword_niche.schemas import (
    BlogPost,
    ContentCompetitionData,
    NicheGrade,
    NicheScoreBreakdown,
    NicheScoreDetails,
    NicheScoreResult,
    SearchVolumeData,
    TrendSeries,
)
from keyword_niche.scoring.rounding import round_half_up
from keyword_niche.scoring.trend_analysis import analyze_trend
from keyword_niche.scoring.weights import DEFAULT_NICHE_WEIGHTS, NicheWeights

# (lower bound, upper bound, fraction at lower bound, span up to upper bound)
RatioBand = tuple[float, float, float, float]

# Demand/supply bands for the full score (searches / indexed blog posts).
FULL_EFFICIENCY_BANDS: tuple[RatioBand, ...] = (
    (0.3, 1.0, 0.7, 0.3),
    (0.1, 0.3, 0.45, 0.25),
    (0.01, 0.1, 0.15, 0.3),
    (0.001, 0.01, 0.05, 0.1),
)
FULL_EFFICIENCY_FLOOR = 0.02
FULL_EFFICIENCY_NO_DATA = 0.3

_GRADE_THRESHOLDS: tuple[tuple[float, NicheGrade], ...] = (
    (75, "A"),
    (60, "B"),
    (45, "C"),
    (30, "D"),
)


# ---------------------------------------------------------------------------
# Volume
# ---------------------------------------------------------------------------


def score_volume(total_searches: int, weight: float) -> float:
    """Score monthly search volume against the 1k-30k sweet spot.

    Full weight on the 3,000-15,000 plateau; too little demand and very
    broad head terms both fall off.
    """
    if total_searches == 0:
        return 0.0

    if 1000 <= total_searches <= 30000:
        if 3000 <= total_searches <= 15000:
            return weight
        if total_searches < 3000:
            return weight * (0.7 + 0.3 * ((total_searches - 1000) / 2000))
        return weight * (0.6 + 0.4 * ((30000 - total_searches) / 15000))

    if total_searches < 10:
        return weight * 0.05
    if total_searches < 100:
        return weight * (0.15 + 0.15 * ((total_searches - 10) / 90))
    if total_searches < 500:
        return weight * (0.3 + 0.2 * ((total_searches - 100) / 400))
    if total_searches < 1000:
        return weight * (0.5 + 0.2 * ((total_searches - 500) / 500))
    if total_searches <= 100000:
        return weight * (0.5 * ((100000 - total_searches) / 70000))
    return weight * 0.05


# ---------------------------------------------------------------------------
# Competition
# ---------------------------------------------------------------------------


def saturation_score(total_results: int) -> float:
    """Map the indexed content count to [0, 1]; less content is better."""
    if total_results < 500:
        return 1.0
    if total_results < 3000:
        return 1.0 - 0.15 * ((total_results - 500) / 2500)
    if total_results < 10000:
        return 0.85 - 0.2 * ((total_results - 3000) / 7000)
    if total_results < 50000:
        return 0.65 - 0.2 * ((total_results - 10000) / 40000)
    if total_results < 200000:
        return 0.45 - 0.2 * ((total_results - 50000) / 150000)
    if total_results < 1000000:
        return 0.25 - 0.15 * ((total_results - 200000) / 800000)
    return 0.1 - min(0.08, 0.08 * ((total_results - 1000000) / 9000000))


def diversity_bonus(posts: Sequence[BlogPost]) -> float:
    """Reward result pages not dominated by a handful of publishers."""
    if not posts:
        ratio = 1.0
    else:
        ratio = len({p.bloggerlink for p in posts}) / len(posts)
    return 1.0 if ratio >= 0.7 else ratio / 0.7


def score_competition(data: ContentCompetitionData, weight: float) -> float:
    combined = (
        saturation_score(data.total_results) * 0.55
        + diversity_bonus(data.posts) * 0.45
    )
    return weight * combined


# ---------------------------------------------------------------------------
# Freshness
# ---------------------------------------------------------------------------


def post_datetime(postdate: str) -> datetime:
    """Midnight of a yyyymmdd date; out-of-range months and days roll over.

    "20240230" is 2024-03-01 and "20240100" is 2023-12-31.
    """
    year, month, day = int(postdate[0:4]), int(postdate[4:6]), int(postdate[6:8])
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(max(year, 1), month, 1) + timedelta(days=day - 1)


def _post_age_days(postdate: str, now: datetime) -> float:
    return (now - post_datetime(postdate)).total_seconds() / 86400


def average_post_age_days(
    posts: Sequence[BlogPost],
    now: Optional[datetime] = None,
) -> float:
    """Mean age of *posts* in days; 0.0 when there are none."""
    if not posts:
        return 0.0
    now = now or datetime.now()
    return sum(_post_age_days(p.postdate, now) for p in posts) / len(posts)


def score_freshness(
    posts: Sequence[BlogPost],
    weight: float,
    now: Optional[datetime] = None,
) -> float:
    """Score the age of competing posts.

    Older average content scores HIGHER: stale result pages are easier to
    outrank. No posts is neutral.
    """
    if not posts:
        return weight * 0.5

    avg_age = average_post_age_days(posts, now)
    if avg_age > 365:
        return weight * 1.0
    if avg_age > 180:
        return weight * 0.85
    if avg_age > 90:
        return weight * 0.65
    if avg_age > 60:
        return weight * 0.5
    if avg_age > 30:
        return weight * 0.35
    return weight * 0.15


# ---------------------------------------------------------------------------
# Efficiency
# ---------------------------------------------------------------------------


def ratio_band_score(
    ratio: float,
    bands: Sequence[RatioBand],
    floor: float,
) -> float:
    """Map a demand/supply ratio to [0, 1] through linear *bands*.

    A ratio of 1.0 or more is always 1.0. *bands* are checked from the
    highest lower bound down; below the last band *floor* is returned.
    """
    if ratio >= 1.0:
        return 1.0
    for lower, upper, base, span in bands:
        if ratio >= lower:
            return base + span * ((ratio - lower) / (upper - lower))
    return floor


def score_efficiency(
    total_searches: int,
    total_posts: int,
    weight: float,
) -> float:
    """Score monthly searches per indexed blog post."""
    if total_searches == 0 or total_posts == 0:
        return weight * FULL_EFFICIENCY_NO_DATA
    ratio = total_searches / total_posts
    return weight * ratio_band_score(
        ratio, FULL_EFFICIENCY_BANDS, FULL_EFFICIENCY_FLOOR,
    )


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


def grade_for(score: float) -> NicheGrade:
    for threshold, grade in _GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


def calculate_niche_score(
    volume_data: SearchVolumeData,
    competition_data: ContentCompetitionData,
    trend_series: Optional[TrendSeries],
    weights: Optional[NicheWeights] = None,
    now: Optional[datetime] = None,
) -> NicheScoreResult:
    """Combine all sub-scores into a 0-100 niche score with a grade.

    Competition and efficiency are reported as a single breakdown field.
    The total is the sum of the already-rounded breakdown fields.
    """
    weights = weights or DEFAULT_NICHE_WEIGHTS
    now = now or datetime.now()
    searches = volume_data.total_monthly_searches

    volume_score = score_volume(searches, weights.volume)
    competition_score = score_competition(competition_data, weights.competition)
    freshness_score = score_freshness(
        competition_data.posts, weights.freshness, now,
    )
    trend = analyze_trend(trend_series, weights.trend)
    efficiency_score = score_efficiency(
        searches, competition_data.total_results, weights.efficiency,
    )

    breakdown = NicheScoreBreakdown(
        volume_score=round_half_up(volume_score),
        competition_score=round_half_up(competition_score + efficiency_score),
        freshness_score=round_half_up(freshness_score),
        trend_score=round_half_up(trend.score),
    )
    total_score = round_half_up(
        breakdown.volume_score
        + breakdown.competition_score
        + breakdown.freshness_score
        + breakdown.trend_score,
    )

    avg_age = average_post_age_days(competition_data.posts, now)

    return NicheScoreResult(
        keyword=volume_data.keyword,
        total_score=total_score,
        grade=grade_for(total_score),
        breakdown=breakdown,
        details=NicheScoreDetails(
            search_volume=searches,
            total_blog_posts=competition_data.total_results,
            avg_post_age_days=int(round_half_up(avg_age, 0)),
            trend_direction=trend.direction,
            trend_slope=round_half_up(trend.slope, 2),
        ),
        analyzed_at=datetime.now().astimezone(),
    )
