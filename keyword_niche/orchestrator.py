"""Keyword Niche - Pipeline orchestration over the Naver clients."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import Awaitable, Callable, Optional, Sequence

from keyword_niche.config import AppConfig
from keyword_niche.integrations.blog_search_client import BlogSearchClient
from keyword_niche.integrations.datalab_client import DataLabClient
from keyword_niche.integrations.searchad_client import SearchAdClient
from keyword_niche.schemas import (
    ApiCallCounts,
    BatchError,
    BatchResult,
    BatchSummary,
    ContentCompetitionData,
    ExpandMetadata,
    ExpandResult,
    KeywordMetric,
    NicheScoreResult,
    RisingKeyword,
    SearchVolumeData,
    TrendingResult,
    TrendingSummary,
    TrendSeries,
)
from keyword_niche.scoring.niche_scoring import calculate_niche_score
from keyword_niche.scoring.quick_scoring import rank_quick_scores
from keyword_niche.scoring.rounding import round_half_up
from keyword_niche.scoring.trend_analysis import analyze_trend
from keyword_niche.scoring.weights import NicheWeights

logger = logging.getLogger(__name__)

TrendFetcher = Callable[[str], Awaitable[TrendSeries]]
CompetitionFetcher = Callable[[str], Awaitable[ContentCompetitionData]]

_RECENT_TREND_POINTS = 3


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _now() -> datetime:
    return datetime.now().astimezone()


def _volume_from_metric(metric: KeywordMetric) -> SearchVolumeData:
    return SearchVolumeData(
        keyword=metric.rel_keyword,
        total_monthly_searches=metric.total_searches,
        pc_searches=metric.monthly_pc_qc_cnt,
        mobile_searches=metric.monthly_mobile_qc_cnt,
        competition_index=metric.comp_idx,
        related_keywords=[],
    )


# ---------------------------------------------------------------------------
# Single-source lookups
# ---------------------------------------------------------------------------


async def run_search_volume(config: AppConfig, keyword: str) -> SearchVolumeData:
    return await SearchAdClient(config).resolve_volume(keyword)


async def run_trend(config: AppConfig, keyword: str) -> TrendSeries:
    return await DataLabClient(config).fetch_trend(keyword)


async def run_blog_competition(
    config: AppConfig,
    keyword: str,
) -> ContentCompetitionData:
    return await BlogSearchClient(config).fetch_competition(keyword)


async def run_niche_score(config: AppConfig, keyword: str) -> NicheScoreResult:
    """Full niche score for one keyword. Upstream errors propagate."""
    searchad = SearchAdClient(config)
    datalab = DataLabClient(config)
    blog = BlogSearchClient(config)

    volume, trend, competition = await asyncio.gather(
        searchad.resolve_volume(keyword),
        datalab.fetch_trend(keyword),
        blog.fetch_competition(keyword),
    )
    result = calculate_niche_score(
        volume, competition, trend, weights=config.niche_weights,
    )
    logger.info(
        "Niche score for '%s': %.1f (%s)", keyword, result.total_score, result.grade,
    )
    return result


# ---------------------------------------------------------------------------
# Full scoring of quick-score candidates
# ---------------------------------------------------------------------------


async def full_score_candidates(
    candidates: Sequence[KeywordMetric],
    fetch_trend: TrendFetcher,
    fetch_competition: CompetitionFetcher,
    weights: Optional[NicheWeights] = None,
) -> tuple[list[NicheScoreResult], int]:
    """Enrich and full-score every candidate concurrently.

    A candidate whose trend or competition lookup fails is logged and
    counted; it never affects its siblings. Returns (results, failed).
    """

    async def score_one(metric: KeywordMetric) -> Optional[NicheScoreResult]:
        try:
            trend, competition = await asyncio.gather(
                fetch_trend(metric.rel_keyword),
                fetch_competition(metric.rel_keyword),
            )
            return calculate_niche_score(
                _volume_from_metric(metric), competition, trend, weights=weights,
            )
        except Exception as exc:
            logger.warning(
                "Full score failed for '%s': %s", metric.rel_keyword, exc,
            )
            return None

    outcomes = await asyncio.gather(*(score_one(m) for m in candidates))
    results = [r for r in outcomes if r is not None]
    return results, len(outcomes) - len(results)


async def _seed_trend(datalab: DataLabClient, keyword: str) -> Optional[TrendSeries]:
    """Seed trend for the quick-score approximation; None on failure."""
    try:
        return await datalab.fetch_trend(keyword)
    except Exception as exc:
        logger.warning(
            "Seed trend lookup failed for '%s', using neutral trend: %s",
            keyword,
            exc,
        )
        return None


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------


async def run_expand(
    config: AppConfig,
    keyword: str,
    full_score_count: Optional[int] = None,
) -> ExpandResult:
    """Seed -> related keywords -> quick score all -> full score top N."""
    started = time.perf_counter()
    top_n = full_score_count or config.full_score_count
    logger.info("Starting keyword expansion for '%s' (top %d)", keyword, top_n)

    searchad = SearchAdClient(config)
    datalab = DataLabClient(config)
    blog = BlogSearchClient(config)

    volume = await searchad.resolve_volume(keyword)
    related = volume.related_keywords
    if not related:
        logger.warning("No related keywords for '%s'", keyword)
        return ExpandResult(
            seed_keyword=keyword,
            error=(
                f'No related keywords found for "{keyword}". '
                "Try a more general keyword."
            ),
            analyzed_at=_now(),
        )

    seed_trend = await _seed_trend(datalab, keyword)
    quick_scores = rank_quick_scores(
        related, seed_trend, keyword, weights=config.quick_weights,
    )

    by_keyword: dict[str, KeywordMetric] = {}
    for m in related:
        by_keyword.setdefault(m.rel_keyword, m)
    candidates = [by_keyword[q.keyword] for q in quick_scores[:top_n]]
    full_scores, failed = await full_score_candidates(
        candidates,
        datalab.fetch_trend,
        blog.fetch_competition,
        weights=config.niche_weights,
    )
    full_scores.sort(key=lambda r: r.total_score, reverse=True)

    metadata = ExpandMetadata(
        total_related=len(related),
        quick_scored=len(quick_scores),
        full_scored=len(full_scores),
        full_score_failed=failed,
        duration_ms=_elapsed_ms(started),
        api_calls=ApiCallCounts(
            search_ad=searchad.calls,
            data_lab=datalab.calls,
            blog_search=blog.calls,
        ),
    )
    logger.info(
        "Expansion done for '%s': %d quick, %d full, %d failed",
        keyword,
        metadata.quick_scored,
        metadata.full_scored,
        failed,
    )
    return ExpandResult(
        seed_keyword=keyword,
        quick_scores=quick_scores,
        full_scores=full_scores,
        metadata=metadata,
        analyzed_at=_now(),
    )


async def run_batch(config: AppConfig, keywords: Sequence[str]) -> BatchResult:
    """Full niche score for each keyword; failures become BatchErrors."""
    started = time.perf_counter()

    async def analyze(keyword: str) -> NicheScoreResult | BatchError:
        try:
            return await run_niche_score(config, keyword)
        except Exception as exc:
            logger.exception("Batch analysis failed for '%s'", keyword)
            return BatchError(keyword=keyword, error=str(exc) or "Analysis failed")

    outcomes = await asyncio.gather(*(analyze(k) for k in keywords))
    scores = [o for o in outcomes if isinstance(o, NicheScoreResult)]
    errors = [o for o in outcomes if isinstance(o, BatchError)]
    scores.sort(key=lambda r: r.total_score, reverse=True)

    best = scores[0] if scores else None
    return BatchResult(
        results=scores,
        errors=errors,
        summary=BatchSummary(
            total=len(keywords),
            analyzed=len(scores),
            failed=len(errors),
            best_keyword=best.keyword if best else None,
            best_score=best.total_score if best else None,
            best_grade=best.grade if best else None,
            duration_ms=_elapsed_ms(started),
        ),
    )


async def run_trending_discover(
    config: AppConfig,
    keyword: str,
    limit: Optional[int] = None,
) -> TrendingResult:
    """Related keywords of *keyword* whose 12-month trend is rising."""
    started = time.perf_counter()
    limit = limit or config.trending_limit

    searchad = SearchAdClient(config)
    datalab = DataLabClient(config)

    volume = await searchad.resolve_volume(keyword)
    related = volume.related_keywords
    if not related:
        return TrendingResult(
            seed_keyword=keyword,
            error=f'No related keywords found for "{keyword}".',
        )

    candidates = [
        m for m in related if m.total_searches >= config.trending_min_volume
    ][: config.trending_candidate_pool]

    async def check(metric: KeywordMetric) -> Optional[RisingKeyword]:
        try:
            trend = await datalab.fetch_trend(metric.rel_keyword)
        except Exception as exc:
            logger.warning(
                "Trend lookup failed for '%s': %s", metric.rel_keyword, exc,
            )
            return None
        analysis = analyze_trend(trend, config.niche_weights.trend)
        return RisingKeyword(
            keyword=metric.rel_keyword,
            total_searches=metric.total_searches,
            pc_searches=metric.monthly_pc_qc_cnt,
            mobile_searches=metric.monthly_mobile_qc_cnt,
            comp_idx=metric.comp_idx,
            trend_direction=analysis.direction,
            trend_slope=round_half_up(analysis.slope, 2),
            trend_score=round_half_up(analysis.score),
            recent_trend=trend.results[-_RECENT_TREND_POINTS:],
        )

    checked = await asyncio.gather(*(check(m) for m in candidates))
    rising = [
        r for r in checked if r is not None and r.trend_direction == "rising"
    ]
    rising.sort(key=lambda r: r.trend_slope, reverse=True)
    rising = rising[:limit]

    return TrendingResult(
        seed_keyword=keyword,
        rising_keywords=rising,
        summary=TrendingSummary(
            total_related=len(related),
            candidates_checked=len(candidates),
            rising_found=len(rising),
            duration_ms=_elapsed_ms(started),
        ),
    )
