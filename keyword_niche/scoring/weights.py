"""Keyword Niche - Score weight profiles.

Each profile sums to 100. They are plain configuration values passed into
the scorers, so alternative profiles can be tested or loaded from the
environment through AppConfig.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NicheWeights(BaseModel):
    """Weights for the full niche score."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    volume: float = Field(default=20, ge=0)
    competition: float = Field(default=30, ge=0)
    freshness: float = Field(default=15, ge=0)
    trend: float = Field(default=20, ge=0)
    efficiency: float = Field(default=15, ge=0)


class QuickWeights(BaseModel):
    """Weights for the quick score (SearchAd metadata only)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    volume: float = Field(default=30, ge=0)
    competition: float = Field(default=25, ge=0)
    efficiency: float = Field(default=25, ge=0)
    trend_approx: float = Field(default=20, ge=0)


DEFAULT_NICHE_WEIGHTS = NicheWeights()
DEFAULT_QUICK_WEIGHTS = QuickWeights()
