"""Tests for Pydantic data contracts."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from factories import make_posts
from keyword_niche.schemas import (
    BlogPost,
    CompetitionIndex,
    ContentCompetitionData,
    KeywordMetric,
    NicheScoreBreakdown,
    SearchVolumeData,
    TrendPoint,
)


class TestCompetitionIndex:
    @pytest.mark.parametrize("raw,expected", [
        ("높음", CompetitionIndex.HIGH),
        ("중간", CompetitionIndex.MEDIUM),
        ("낮음", CompetitionIndex.LOW),
        ("HIGH", CompetitionIndex.HIGH),
        ("low", CompetitionIndex.LOW),
        (None, CompetitionIndex.LOW),
        ("", CompetitionIndex.LOW),
        ("???", CompetitionIndex.MEDIUM),
    ])
    def test_parse(self, raw: object, expected: CompetitionIndex):
        assert CompetitionIndex.parse(raw) is expected

    def test_value_is_korean_label(self):
        assert CompetitionIndex.HIGH.value == "높음"


class TestKeywordMetric:
    def test_from_api_aliases(self):
        metric = KeywordMetric.model_validate({
            "relKeyword": "가을패션",
            "monthlyPcQcCnt": 2000,
            "monthlyMobileQcCnt": 3000,
            "compIdx": "낮음",
        })
        assert metric.rel_keyword == "가을패션"
        assert metric.total_searches == 5000
        assert metric.comp_idx is CompetitionIndex.LOW

    def test_missing_comp_idx_is_low(self):
        metric = KeywordMetric(rel_keyword="가을")
        assert metric.comp_idx is CompetitionIndex.LOW

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            KeywordMetric(rel_keyword="가을", monthly_pc_qc_cnt=-1)

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            KeywordMetric(rel_keyword="가을", bogus=1)

    def test_frozen(self):
        metric = KeywordMetric(rel_keyword="가을")
        with pytest.raises(ValidationError):
            metric.rel_keyword = "겨울"


class TestSearchVolumeData:
    def test_total_must_match_parts(self):
        with pytest.raises(ValidationError, match="total_monthly_searches"):
            SearchVolumeData(
                keyword="가을",
                total_monthly_searches=10,
                pc_searches=3,
                mobile_searches=3,
            )

    def test_defaults(self):
        data = SearchVolumeData(
            keyword="가을", total_monthly_searches=0, pc_searches=0, mobile_searches=0,
        )
        assert data.competition_index is CompetitionIndex.LOW
        assert data.related_keywords == []


class TestTrendPoint:
    def test_negative_ratio_rejected(self):
        with pytest.raises(ValidationError):
            TrendPoint(period="2025-01-01", ratio=-0.1)

    def test_ratio_above_100_accepted(self):
        assert TrendPoint(period="2025-12-01", ratio=120).ratio == 120.0


class TestBlogModels:
    @pytest.mark.parametrize("postdate", ["2025-01-01", "202501", "", "2025010a"])
    def test_postdate_format(self, postdate: str):
        with pytest.raises(ValidationError):
            BlogPost(postdate=postdate)

    def test_at_most_ten_posts(self):
        with pytest.raises(ValidationError):
            ContentCompetitionData(keyword="k", total_results=11, posts=make_posts(11))

    def test_total_results_non_negative(self):
        with pytest.raises(ValidationError):
            ContentCompetitionData(keyword="k", total_results=-1)


class TestScoreRecords:
    def test_breakdown_non_negative(self):
        with pytest.raises(ValidationError):
            NicheScoreBreakdown(
                volume_score=-1, competition_score=0, freshness_score=0, trend_score=0,
            )
