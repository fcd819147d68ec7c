"""Keyword Niche - Shared httpx helpers for the Naver clients."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import httpx

from keyword_niche.config import AppConfig
from keyword_niche.utils.exceptions import (
    NaverAPIError,
    NaverRateLimitError,
    NaverTransportError,
)
from keyword_niche.utils.retries import retry_with_backoff

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (
    NaverRateLimitError,
    httpx.TransportError,
)


def check_response(api: str, response: httpx.Response) -> None:
    """Raise a NaverAPIError (or NaverRateLimitError) for non-2xx responses."""
    if response.is_success:
        return
    body = response.text
    logger.error("%s returned %d: %s", api, response.status_code, body[:200])
    if response.status_code == 429:
        raise NaverRateLimitError(api, response.status_code, body)
    raise NaverAPIError(api, response.status_code, body)


def transport_retry(config: AppConfig) -> Callable:
    """Retry decorator configured for 429s and transport failures."""
    return retry_with_backoff(
        max_retries=config.max_retries,
        initial_delay=config.retry_initial_delay,
        exceptions=RETRYABLE_ERRORS,
    )


class NaverHttpClient:
    """Base for the Naver API clients: config, transport and retry policy."""

    api_name = "Naver"

    def __init__(
        self,
        config: AppConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._timeout = config.request_timeout
        self.calls = 0

    def _new_session(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)

    async def _send_once(
        self,
        build: Callable[[], httpx.Request],
    ) -> httpx.Response:
        request = build()
        self.calls += 1
        async with self._new_session() as client:
            response = await client.send(request)
        check_response(self.api_name, response)
        return response

    async def _request(self, build: Callable[[], httpx.Request]) -> httpx.Response:
        """Send the request made by *build*, retrying on 429s and transport errors.

        *build* runs once per attempt so signed headers carry a fresh timestamp.
        A transport failure that outlasts the retries becomes NaverTransportError.
        """
        send = transport_retry(self._config)(self._send_once)
        try:
            return await send(build)
        except httpx.TransportError as exc:
            detail = str(exc) or type(exc).__name__
            raise NaverTransportError(self.api_name, detail) from exc
