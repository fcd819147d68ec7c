"""Keyword Niche - Pydantic data contracts.

All models use strict validation (extra="forbid"). Records produced by the
scoring core are frozen: they are built once per request and never mutated.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

TrendDirection = Literal["rising", "stable", "declining"]
NicheGrade = Literal["A", "B", "C", "D", "F"]

_POSTDATE_RE = re.compile(r"^\d{8}$")


# ---------------------------------------------------------------------------
# Competition index
# ---------------------------------------------------------------------------

class CompetitionIndex(str, Enum):
    """Advertiser bidding pressure reported by SearchAd."""

    HIGH = "높음"
    MEDIUM = "중간"
    LOW = "낮음"

    @classmethod
    def parse(cls, value: object) -> "CompetitionIndex":
        """Map a raw SearchAd value onto the enum.

        Missing values are LOW (the API omits the field for tiny keywords).
        Anything unrecognised falls back to MEDIUM.
        """
        if isinstance(value, cls):
            return value
        if value is None or str(value).strip() == "":
            return cls.LOW
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        return cls.MEDIUM


# ---------------------------------------------------------------------------
# Search volume models
# ---------------------------------------------------------------------------

class KeywordMetric(BaseModel):
    """One row of the SearchAd keywordstool catalog."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    rel_keyword: str = Field(..., alias="relKeyword")
    monthly_pc_qc_cnt: int = Field(0, ge=0, alias="monthlyPcQcCnt")
    monthly_mobile_qc_cnt: int = Field(0, ge=0, alias="monthlyMobileQcCnt")
    monthly_ave_pc_clk_cnt: float = Field(0, alias="monthlyAvePcClkCnt")
    monthly_ave_mobile_clk_cnt: float = Field(0, alias="monthlyAveMobileClkCnt")
    monthly_ave_pc_ctr: float = Field(0, alias="monthlyAvePcCtr")
    monthly_ave_mobile_ctr: float = Field(0, alias="monthlyAveMobileCtr")
    pl_avg_depth: float = Field(0, alias="plAvgDepth")
    comp_idx: CompetitionIndex = Field(CompetitionIndex.LOW, alias="compIdx")

    @field_validator("comp_idx", mode="before")
    @classmethod
    def _parse_comp_idx(cls, value: object) -> CompetitionIndex:
        return CompetitionIndex.parse(value)

    @property
    def total_searches(self) -> int:
        return self.monthly_pc_qc_cnt + self.monthly_mobile_qc_cnt


class SearchVolumeData(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword: str
    total_monthly_searches: int = Field(..., ge=0)
    pc_searches: int = Field(..., ge=0)
    mobile_searches: int = Field(..., ge=0)
    competition_index: CompetitionIndex = CompetitionIndex.LOW
    related_keywords: list[KeywordMetric] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_total(self) -> "SearchVolumeData":
        if self.total_monthly_searches != self.pc_searches + self.mobile_searches:
            raise ValueError(
                "total_monthly_searches must equal pc_searches + mobile_searches",
            )
        return self


# ---------------------------------------------------------------------------
# Trend models
# ---------------------------------------------------------------------------

class TrendPoint(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    period: str
    ratio: float = Field(..., ge=0)


class TrendSeries(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword: str
    start_date: str
    end_date: str
    time_unit: Literal["month", "week", "date"] = "month"
    results: list[TrendPoint] = Field(default_factory=list)


class TrendAnalysis(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    score: float
    slope: float
    direction: TrendDirection


# ---------------------------------------------------------------------------
# Content competition models
# ---------------------------------------------------------------------------

class BlogPost(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    title: str = ""
    link: str = ""
    description: str = ""
    bloggername: str = ""
    bloggerlink: str = ""
    postdate: str

    @field_validator("postdate")
    @classmethod
    def _check_postdate(cls, value: str) -> str:
        if not _POSTDATE_RE.match(value):
            raise ValueError(f"postdate must be yyyymmdd, got {value!r}")
        return value


class ContentCompetitionData(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword: str
    total_results: int = Field(0, ge=0)
    posts: list[BlogPost] = Field(default_factory=list, max_length=10)


# ---------------------------------------------------------------------------
# Score results
# ---------------------------------------------------------------------------

class NicheScoreBreakdown(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    volume_score: float = Field(..., ge=0)
    competition_score: float = Field(..., ge=0)  # competition + efficiency
    freshness_score: float = Field(..., ge=0)
    trend_score: float = Field(..., ge=0)


class NicheScoreDetails(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    search_volume: int
    total_blog_posts: int
    avg_post_age_days: int
    trend_direction: TrendDirection
    trend_slope: float


class NicheScoreResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword: str
    total_score: float
    grade: NicheGrade
    breakdown: NicheScoreBreakdown
    details: NicheScoreDetails
    analyzed_at: datetime


class QuickScoreBreakdown(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    volume_score: float
    comp_score: float
    efficiency_score: float
    trend_approx_score: float


class QuickScoreResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword: str
    total_searches: int
    pc_searches: int
    mobile_searches: int
    comp_idx: CompetitionIndex
    quick_score: float
    breakdown: QuickScoreBreakdown


# ---------------------------------------------------------------------------
# Orchestration results
# ---------------------------------------------------------------------------

class ApiCallCounts(BaseModel):
    model_config = ConfigDict(extra="forbid")

    search_ad: int = 0
    data_lab: int = 0
    blog_search: int = 0


class ExpandMetadata(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_related: int
    quick_scored: int
    full_scored: int
    full_score_failed: int
    duration_ms: int
    api_calls: ApiCallCounts


class ExpandResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    seed_keyword: str
    quick_scores: list[QuickScoreResult] = Field(default_factory=list)
    full_scores: list[NicheScoreResult] = Field(default_factory=list)
    metadata: Optional[ExpandMetadata] = None
    error: Optional[str] = None
    analyzed_at: datetime


class BatchError(BaseModel):
    model_config = ConfigDict(extra="forbid")

    keyword: str
    error: str


class BatchSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total: int
    analyzed: int
    failed: int
    best_keyword: Optional[str] = None
    best_score: Optional[float] = None
    best_grade: Optional[NicheGrade] = None
    duration_ms: int


class BatchResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    results: list[NicheScoreResult] = Field(default_factory=list)
    errors: list[BatchError] = Field(default_factory=list)
    summary: BatchSummary


class RisingKeyword(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    keyword: str
    total_searches: int
    pc_searches: int
    mobile_searches: int
    comp_idx: CompetitionIndex
    trend_direction: TrendDirection
    trend_slope: float
    trend_score: float
    recent_trend: list[TrendPoint] = Field(default_factory=list)


class TrendingSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_related: int
    candidates_checked: int
    rising_found: int
    duration_ms: int


class TrendingResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    seed_keyword: str
    rising_keywords: list[RisingKeyword] = Field(default_factory=list)
    summary: Optional[TrendingSummary] = None
    error: Optional[str] = None
