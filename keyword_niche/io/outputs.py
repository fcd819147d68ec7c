"""Keyword Niche - Response shaping for the API and CLI surfaces."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

from keyword_niche.schemas import (
    ContentCompetitionData,
    ExpandResult,
    SearchVolumeData,
)

EXPAND_TOP_QUICK = 10
TOP_RELATED = 20


def to_json(payload: BaseModel | dict[str, Any], indent: int = 2) -> str:
    """Serialize a model or dict to JSON, keeping Hangul readable."""
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", exclude_none=True)
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def expand_summary(result: ExpandResult, top_n: int = EXPAND_TOP_QUICK) -> dict:
    """Trimmed view of an expansion: top quick scores plus every full score."""
    if result.error:
        return {"seed_keyword": result.seed_keyword, "error": result.error}

    return {
        "seed_keyword": result.seed_keyword,
        "quick_scores_count": len(result.quick_scores),
        "quick_scores_top": [
            {
                "keyword": q.keyword,
                "quick_score": q.quick_score,
                "total_searches": q.total_searches,
                "comp_idx": q.comp_idx.value,
            }
            for q in result.quick_scores[:top_n]
        ],
        "full_scores": [
            f.model_dump(mode="json", exclude={"analyzed_at"})
            for f in result.full_scores
        ],
        "metadata": (
            result.metadata.model_dump(mode="json") if result.metadata else None
        ),
    }


def search_volume_summary(data: SearchVolumeData, top_n: int = TOP_RELATED) -> dict:
    return {
        "keyword": data.keyword,
        "total_monthly_searches": data.total_monthly_searches,
        "pc_searches": data.pc_searches,
        "mobile_searches": data.mobile_searches,
        "competition_index": data.competition_index.value,
        "related_keywords_count": len(data.related_keywords),
        "top_related": [
            {
                "keyword": kw.rel_keyword,
                "total_searches": kw.total_searches,
                "comp_idx": kw.comp_idx.value,
            }
            for kw in data.related_keywords[:top_n]
        ],
    }


def blog_competition_summary(data: ContentCompetitionData) -> dict:
    return {
        "keyword": data.keyword,
        "total_results": data.total_results,
        "posts": [
            {
                "title": p.title,
                "bloggername": p.bloggername,
                "postdate": p.postdate,
            }
            for p in data.posts
        ],
    }
