"""Shared pytest fixtures for Keyword Niche tests."""

from __future__ import annotations

import pytest

from factories import make_metric, make_posts, make_series
from keyword_niche.config import AppConfig
from keyword_niche.schemas import (
    CompetitionIndex,
    ContentCompetitionData,
    SearchVolumeData,
    TrendSeries,
)


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        naver_searchad_customer_id="1234567",
        naver_searchad_api_key="searchad-key",
        naver_searchad_secret_key="searchad-secret",
        naver_client_id="client-id",
        naver_client_secret="client-secret",
        retry_initial_delay=0.0,
        max_retries=3,
    )


@pytest.fixture
def sample_volume_data() -> SearchVolumeData:
    return SearchVolumeData(
        keyword="가을 패션",
        total_monthly_searches=5000,
        pc_searches=2000,
        mobile_searches=3000,
        competition_index=CompetitionIndex.LOW,
        related_keywords=[make_metric("가을패션", 2000, 3000, CompetitionIndex.LOW)],
    )


@pytest.fixture
def sample_competition() -> ContentCompetitionData:
    return ContentCompetitionData(
        keyword="가을 패션",
        total_results=400,
        posts=make_posts(10, age_days=410),
    )


@pytest.fixture
def flat_trend() -> TrendSeries:
    return make_series([50.0] * 12)


@pytest.fixture
def rising_trend() -> TrendSeries:
    return make_series([10.0 * (i + 1) for i in range(12)])
