"""Keyword Niche - Naver Blog Search client for content competition."""

from __future__ import annotations

import logging
import re

import httpx

from keyword_niche.integrations.naver_http import NaverHttpClient
from keyword_niche.schemas import BlogPost, ContentCompetitionData
from keyword_niche.utils.exceptions import NaverCredentialsError

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 10

_TAG_RE = re.compile(r"<[^>]*>")
_ENTITY_RE = re.compile(r"&[^;]+;")


def strip_html(text: str) -> str:
    return _ENTITY_RE.sub(" ", _TAG_RE.sub("", text or "")).strip()


def parse_posts(items: list[dict]) -> list[BlogPost]:
    """Build BlogPost records, skipping items without a yyyymmdd date."""
    posts: list[BlogPost] = []
    for item in items[:SAMPLE_SIZE]:
        postdate = str(item.get("postdate") or "")
        if not re.fullmatch(r"\d{8}", postdate):
            logger.debug("Skipping blog item with postdate %r", postdate)
            continue
        posts.append(
            BlogPost(
                title=strip_html(item.get("title", "")),
                link=item.get("link", ""),
                description=strip_html(item.get("description", "")),
                bloggername=item.get("bloggername", ""),
                bloggerlink=item.get("bloggerlink", ""),
                postdate=postdate,
            ),
        )
    return posts


class BlogSearchClient(NaverHttpClient):
    """Total indexed blog posts plus the top sampled posts for a keyword."""

    api_name = "Search"

    def _headers(self) -> dict[str, str]:
        missing = self._config.missing_developer_credentials()
        if missing:
            raise NaverCredentialsError("Developer", missing)
        return {
            "X-Naver-Client-Id": str(self._config.naver_client_id),
            "X-Naver-Client-Secret": (
                self._config.naver_client_secret.get_secret_value()
            ),
        }

    async def fetch_competition(self, keyword: str) -> ContentCompetitionData:
        headers = self._headers()
        params = {
            "query": keyword,
            "display": str(SAMPLE_SIZE),
            "start": "1",
            "sort": "sim",
        }

        response = await self._request(
            lambda: httpx.Request(
                "GET", self._config.blog_search_url, params=params, headers=headers,
            ),
        )

        payload = response.json()
        posts = parse_posts(payload.get("items") or [])
        return ContentCompetitionData(
            keyword=keyword,
            total_results=int(payload.get("total") or 0),
            posts=posts,
        )
