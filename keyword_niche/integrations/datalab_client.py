"""Keyword Niche - Naver DataLab search-trend client."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

import httpx

from keyword_niche.config import AppConfig
from keyword_niche.integrations.naver_http import NaverHttpClient
from keyword_niche.schemas import TrendPoint, TrendSeries
from keyword_niche.utils.exceptions import NaverCredentialsError

logger = logging.getLogger(__name__)


def one_year_before(day: date) -> date:
    """Same calendar day twelve months earlier (Feb 29 -> Feb 28)."""
    try:
        return day.replace(year=day.year - 1)
    except ValueError:
        return day.replace(year=day.year - 1, day=28)


def _clamp_ratio(value: object) -> float:
    try:
        ratio = float(value)
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, min(100.0, ratio))


class DataLabClient(NaverHttpClient):
    """12-month monthly search-interest ratios from DataLab."""

    api_name = "DataLab"

    def __init__(
        self,
        config: AppConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        today: Optional[date] = None,
    ) -> None:
        super().__init__(config, transport)
        self._today = today

    def _headers(self) -> dict[str, str]:
        missing = self._config.missing_developer_credentials()
        if missing:
            raise NaverCredentialsError("Developer", missing)
        return {
            "Content-Type": "application/json",
            "X-Naver-Client-Id": str(self._config.naver_client_id),
            "X-Naver-Client-Secret": (
                self._config.naver_client_secret.get_secret_value()
            ),
        }

    async def fetch_trend(self, keyword: str) -> TrendSeries:
        headers = self._headers()
        end_date = self._today or date.today()
        start_date = one_year_before(end_date)
        body = {
            "startDate": start_date.isoformat(),
            "endDate": end_date.isoformat(),
            "timeUnit": "month",
            "keywordGroups": [{"groupName": keyword, "keywords": [keyword]}],
        }

        response = await self._request(
            lambda: httpx.Request(
                "POST", self._config.datalab_url, json=body, headers=headers,
            ),
        )

        results = response.json().get("results") or []
        data = results[0].get("data", []) if results else []
        points = [
            TrendPoint(period=item["period"], ratio=_clamp_ratio(item.get("ratio")))
            for item in data
            if item.get("period")
        ]
        logger.debug("DataLab '%s' returned %d points", keyword, len(points))

        return TrendSeries(
            keyword=keyword,
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            time_unit="month",
            results=points,
        )
