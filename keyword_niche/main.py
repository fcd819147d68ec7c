"""Keyword Niche - FastAPI server exposing the keyword tools."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from keyword_niche.config import AppConfig
from keyword_niche.io.outputs import (
    blog_competition_summary,
    expand_summary,
    search_volume_summary,
)
from keyword_niche.orchestrator import (
    run_batch,
    run_blog_competition,
    run_expand,
    run_niche_score,
    run_search_volume,
    run_trend,
    run_trending_discover,
)
from keyword_niche.utils.exceptions import (
    NaverAPIError,
    NaverCredentialsError,
    NaverTransportError,
)
from keyword_niche.utils.logger import get_logger
from keyword_niche.utils.validators import (
    MAX_BATCH_KEYWORDS,
    validate_keyword,
    validate_keywords,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class KeywordRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    keyword: str

    @field_validator("keyword")
    @classmethod
    def _check_keyword(cls, value: str) -> str:
        return validate_keyword(value)


class ExpandRequest(KeywordRequest):
    full_score_count: int = Field(default=10, ge=1, le=20)


class TrendingRequest(KeywordRequest):
    limit: int = Field(default=10, ge=1, le=20)


class BatchRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    keywords: list[str] = Field(..., min_length=1, max_length=MAX_BATCH_KEYWORDS)

    @field_validator("keywords")
    @classmethod
    def _check_keywords(cls, value: list[str]) -> list[str]:
        return validate_keywords(value)


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    config = AppConfig()
    app.state.config = config
    get_logger("keyword_niche", config.log_level, config.log_dir)

    missing = config.missing_credentials()
    if missing:
        logger.warning("Missing credentials: %s", ", ".join(missing))
    logger.info("Keyword Niche server started")
    yield
    logger.info("Keyword Niche server stopped")


app = FastAPI(title="Keyword Niche", lifespan=lifespan)


def _config(request: Request) -> AppConfig:
    return request.app.state.config


@app.exception_handler(NaverCredentialsError)
async def _credentials_error(request: Request, exc: NaverCredentialsError) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=503)


@app.exception_handler(NaverAPIError)
async def _upstream_error(request: Request, exc: NaverAPIError) -> JSONResponse:
    logger.error("Upstream failure: %s", exc)
    return JSONResponse(
        {"error": str(exc), "upstream_status": exc.status_code}, status_code=502,
    )


@app.exception_handler(NaverTransportError)
async def _transport_error(request: Request, exc: NaverTransportError) -> JSONResponse:
    logger.error("Upstream unreachable: %s", exc)
    return JSONResponse({"error": str(exc)}, status_code=502)


@app.get("/health")
async def health() -> JSONResponse:
    return JSONResponse({"status": "ok"})


@app.post("/tools/keyword_expand")
async def keyword_expand(body: ExpandRequest, request: Request) -> dict:
    result = await run_expand(_config(request), body.keyword, body.full_score_count)
    return expand_summary(result)


@app.post("/tools/niche_score")
async def niche_score(body: KeywordRequest, request: Request) -> dict:
    result = await run_niche_score(_config(request), body.keyword)
    return result.model_dump(mode="json")


@app.post("/tools/search_volume")
async def search_volume(body: KeywordRequest, request: Request) -> dict:
    data = await run_search_volume(_config(request), body.keyword)
    return search_volume_summary(data)


@app.post("/tools/trend")
async def trend(body: KeywordRequest, request: Request) -> dict:
    series = await run_trend(_config(request), body.keyword)
    return series.model_dump(mode="json")


@app.post("/tools/blog_competition")
async def blog_competition(body: KeywordRequest, request: Request) -> dict:
    data = await run_blog_competition(_config(request), body.keyword)
    return blog_competition_summary(data)


@app.post("/tools/batch_analyze")
async def batch_analyze(body: BatchRequest, request: Request) -> dict:
    result = await run_batch(_config(request), body.keywords)
    return result.model_dump(
        mode="json", exclude={"results": {"__all__": {"analyzed_at"}}},
    )


@app.post("/tools/trending_discover")
async def trending_discover(body: TrendingRequest, request: Request) -> dict:
    result = await run_trending_discover(_config(request), body.keyword, body.limit)
    return result.model_dump(mode="json", exclude_none=True)
