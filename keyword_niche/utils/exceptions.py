"""Keyword Niche - Domain-specific exceptions for the Naver integrations."""

from __future__ import annotations


class NaverError(Exception):
    """Base exception for Naver API errors."""
    pass


class NaverCredentialsError(NaverError):
    """Raised when the credentials for an API are not configured."""

    def __init__(self, api: str, missing: list[str]) -> None:
        super().__init__(
            f"Missing Naver {api} credentials. Set {', '.join(missing)}.",
        )
        self.api = api
        self.missing = missing


class NaverAPIError(NaverError):
    """Raised when a Naver API returns a non-2xx response."""

    def __init__(self, api: str, status_code: int, body: str = "") -> None:
        super().__init__(f"{api} API error ({status_code}): {body}")
        self.api = api
        self.status_code = status_code
        self.body = body


class NaverRateLimitError(NaverAPIError):
    """Raised when rate limited (HTTP 429)."""
    pass


class NaverTransportError(NaverError):
    """Raised when a Naver API stays unreachable after every retry."""

    def __init__(self, api: str, detail: str) -> None:
        super().__init__(f"{api} API unreachable: {detail}")
        self.api = api
        self.detail = detail
