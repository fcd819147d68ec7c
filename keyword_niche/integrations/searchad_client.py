"""Keyword Niche - Naver SearchAd keywordstool client."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import time
from typing import Any, Optional

import httpx

from keyword_niche.config import AppConfig
from keyword_niche.integrations.naver_http import NaverHttpClient
from keyword_niche.resolver import KeywordResolver
from keyword_niche.schemas import KeywordMetric, SearchVolumeData
from keyword_niche.utils.exceptions import NaverCredentialsError

logger = logging.getLogger(__name__)

KEYWORDSTOOL_PATH = "/keywordstool"


def generate_signature(
    timestamp: str,
    method: str,
    path: str,
    secret_key: str,
) -> str:
    """Base64 HMAC-SHA256 of ``"{timestamp}.{method}.{path}"``."""
    message = f"{timestamp}.{method}.{path}"
    digest = hmac.new(
        secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def parse_search_count(value: Any) -> int:
    """Parse SearchAd counts; the API reports tiny volumes as ``"< 10"``."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value).strip()
    if text == "< 10":
        return 5
    try:
        return int(text.replace(",", ""))
    except ValueError:
        return 0


def _parse_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def parse_keyword_list(items: list[dict[str, Any]]) -> list[KeywordMetric]:
    return [
        KeywordMetric(
            rel_keyword=item["relKeyword"],
            monthly_pc_qc_cnt=parse_search_count(item.get("monthlyPcQcCnt")),
            monthly_mobile_qc_cnt=parse_search_count(
                item.get("monthlyMobileQcCnt"),
            ),
            monthly_ave_pc_clk_cnt=_parse_float(item.get("monthlyAvePcClkCnt")),
            monthly_ave_mobile_clk_cnt=_parse_float(
                item.get("monthlyAveMobileClkCnt"),
            ),
            monthly_ave_pc_ctr=_parse_float(item.get("monthlyAvePcCtr")),
            monthly_ave_mobile_ctr=_parse_float(item.get("monthlyAveMobileCtr")),
            pl_avg_depth=_parse_float(item.get("plAvgDepth")),
            comp_idx=item.get("compIdx"),
        )
        for item in items
        if item.get("relKeyword")
    ]


class SearchAdClient(NaverHttpClient):
    """Keyword volume lookups against the SearchAd keywordstool API."""

    api_name = "SearchAd"

    def __init__(
        self,
        config: AppConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(config, transport)
        self._base_url = config.searchad_base_url.rstrip("/")

    def _headers(self, method: str, path: str) -> dict[str, str]:
        missing = self._config.missing_searchad_credentials()
        if missing:
            raise NaverCredentialsError(self.api_name, missing)

        timestamp = str(int(time.time() * 1000))
        secret = self._config.naver_searchad_secret_key.get_secret_value()
        return {
            "Content-Type": "application/json; charset=UTF-8",
            "X-Timestamp": timestamp,
            "X-API-KEY": self._config.naver_searchad_api_key.get_secret_value(),
            "X-Customer": str(self._config.naver_searchad_customer_id),
            "X-Signature": generate_signature(timestamp, "GET", path, secret),
        }

    async def fetch_keywords(self, hint: str) -> list[KeywordMetric]:
        """Single keywordstool call; *hint* may be comma-separated."""
        def build() -> httpx.Request:
            return httpx.Request(
                "GET",
                f"{self._base_url}{KEYWORDSTOOL_PATH}",
                params={"hintKeywords": hint, "showDetail": "1"},
                headers=self._headers("GET", KEYWORDSTOOL_PATH),
            )

        response = await self._request(build)
        keywords = parse_keyword_list(response.json().get("keywordList") or [])
        logger.debug("keywordstool '%s' returned %d rows", hint, len(keywords))
        return keywords

    async def resolve_volume(self, phrase: str) -> SearchVolumeData:
        """Resolve *phrase* to its best catalog row (two-stage lookup)."""
        resolver = KeywordResolver(
            self.fetch_keywords,
            min_confident_volume=self._config.min_confident_volume,
        )
        return await resolver.resolve(phrase)
