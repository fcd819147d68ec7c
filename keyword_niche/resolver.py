"""Keyword Niche - Resolve a free-text phrase onto a SearchAd catalog row.

The catalog is keyed by space-stripped strings, and a concatenated query
under-counts multi-word phrases. Resolution runs in two stages:

1. Query the space-stripped phrase and look for an exact match.
2. If that volume is below ``min_confident_volume`` and the phrase has
   several words, query the comma-joined words (broad match) and pick the
   best candidate by tiered matching.
"""

from __future__ import annotations

import logging
import math
from typing import Awaitable, Callable, Optional, Sequence

from keyword_niche.schemas import CompetitionIndex, KeywordMetric, SearchVolumeData
from keyword_niche.utils.validators import is_multi_word, split_words, strip_spaces

logger = logging.getLogger(__name__)

KeywordLookup = Callable[[str], Awaitable[list[KeywordMetric]]]

DEFAULT_MIN_CONFIDENT_VOLUME = 100


def find_best_match(
    keywords: Sequence[KeywordMetric],
    phrase: str,
) -> Optional[KeywordMetric]:
    """Pick the catalog row that best represents *phrase*.

    Tiers, in order:
      a. exact match on the space-stripped phrase
      b. first row containing every word of the phrase
      c. row containing the most words, if it has at least half of them
    """
    no_space = strip_spaces(phrase)
    parts = split_words(phrase)

    for kw in keywords:
        if kw.rel_keyword == no_space:
            return kw

    for kw in keywords:
        if all(p in kw.rel_keyword for p in parts):
            return kw

    if len(parts) > 1:
        best_count = 0
        best_match: Optional[KeywordMetric] = None
        for kw in keywords:
            count = sum(1 for p in parts if p in kw.rel_keyword)
            if count > best_count:
                best_count = count
                best_match = kw
        if best_match is not None and best_count >= math.ceil(len(parts) / 2):
            return best_match

    return None


def merge_keywords(
    first: Sequence[KeywordMetric],
    second: Sequence[KeywordMetric],
) -> list[KeywordMetric]:
    """Union of both lists by keyword text, *first* order preserved."""
    seen = {kw.rel_keyword for kw in first}
    merged = list(first)
    for kw in second:
        if kw.rel_keyword not in seen:
            merged.append(kw)
            seen.add(kw.rel_keyword)
    return merged


def _volume_data(
    phrase: str,
    match: KeywordMetric,
    related: list[KeywordMetric],
) -> SearchVolumeData:
    return SearchVolumeData(
        keyword=phrase,
        total_monthly_searches=match.total_searches,
        pc_searches=match.monthly_pc_qc_cnt,
        mobile_searches=match.monthly_mobile_qc_cnt,
        competition_index=match.comp_idx,
        related_keywords=related,
    )


class KeywordResolver:
    """Two-stage volume lookup against a SearchAd-style catalog."""

    def __init__(
        self,
        lookup: KeywordLookup,
        min_confident_volume: int = DEFAULT_MIN_CONFIDENT_VOLUME,
    ) -> None:
        self._lookup = lookup
        self._min_confident_volume = min_confident_volume
        self.lookups = 0

    async def _fetch(self, hint: str) -> list[KeywordMetric]:
        self.lookups += 1
        return await self._lookup(hint)

    async def resolve(self, phrase: str) -> SearchVolumeData:
        phrase = phrase.strip()
        no_space = strip_spaces(phrase)

        # Stage 1: concatenated phrase, exact match only
        stage1 = await self._fetch(no_space)
        stage1_match = next(
            (kw for kw in stage1 if kw.rel_keyword == no_space), None,
        )
        stage1_volume = stage1_match.total_searches if stage1_match else 0

        if stage1_match is not None and stage1_volume >= self._min_confident_volume:
            return _volume_data(phrase, stage1_match, stage1)

        # Stage 2: comma-joined words, broad match (multi-word only)
        if is_multi_word(phrase):
            stage2 = await self._fetch(",".join(split_words(phrase)))
            stage2_match = find_best_match(stage2, phrase)
            if stage2_match is not None and stage2_match.total_searches > stage1_volume:
                logger.debug(
                    "Resolved '%s' via broad match '%s' (%d > %d)",
                    phrase,
                    stage2_match.rel_keyword,
                    stage2_match.total_searches,
                    stage1_volume,
                )
                return _volume_data(
                    phrase, stage2_match, merge_keywords(stage1, stage2),
                )

        if stage1_match is not None:
            return _volume_data(phrase, stage1_match, stage1)
        return self._first_row_fallback(phrase, stage1)

    @staticmethod
    def _first_row_fallback(
        phrase: str,
        stage1: list[KeywordMetric],
    ) -> SearchVolumeData:
        """Last resort: no exact match anywhere, use the first catalog row."""
        if stage1:
            logger.warning(
                "No match for '%s', falling back to first catalog row '%s'",
                phrase,
                stage1[0].rel_keyword,
            )
            return _volume_data(phrase, stage1[0], stage1)

        logger.warning("Catalog returned no rows for '%s'", phrase)
        return SearchVolumeData(
            keyword=phrase,
            total_monthly_searches=0,
            pc_searches=0,
            mobile_searches=0,
            competition_index=CompetitionIndex.LOW,
            related_keywords=[],
        )
