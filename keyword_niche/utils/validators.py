"""Keyword Niche - Keyword text normalisation and input validation."""

from __future__ import annotations

import re
from typing import Iterable

MAX_KEYWORD_LENGTH = 40
MAX_BATCH_KEYWORDS = 10

_WHITESPACE_RE = re.compile(r"\s+")


def strip_spaces(text: str) -> str:
    """Remove all whitespace: the SearchAd catalog keys keywords this way."""
    return _WHITESPACE_RE.sub("", text.strip())


def split_words(text: str) -> list[str]:
    """Split *text* into its whitespace-separated words."""
    return text.split()


def is_multi_word(text: str) -> bool:
    return len(split_words(text)) > 1


def validate_keyword(text: str) -> str:
    """Return the trimmed keyword, or raise ValueError if it is unusable."""
    keyword = text.strip()
    if not keyword:
        raise ValueError("keyword must not be empty")
    if len(keyword) > MAX_KEYWORD_LENGTH:
        raise ValueError(
            f"keyword must be at most {MAX_KEYWORD_LENGTH} characters, "
            f"got {len(keyword)}"
        )
    return keyword


def validate_keywords(texts: Iterable[str]) -> list[str]:
    """Validate a batch of keywords (1-10 entries)."""
    keywords = [validate_keyword(t) for t in texts]
    if not keywords:
        raise ValueError("at least one keyword is required")
    if len(keywords) > MAX_BATCH_KEYWORDS:
        raise ValueError(
            f"at most {MAX_BATCH_KEYWORDS} keywords per batch, got {len(keywords)}"
        )
    return keywords
