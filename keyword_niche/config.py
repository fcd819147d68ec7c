"""Keyword Niche - Application configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from keyword_niche.scoring.weights import NicheWeights, QuickWeights


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="forbid",
    )

    # Naver SearchAd (keyword volume)
    naver_searchad_customer_id: Optional[str] = Field(
        default=None, description="SearchAd customer ID",
    )
    naver_searchad_api_key: Optional[SecretStr] = Field(
        default=None, description="SearchAd API access license",
    )
    naver_searchad_secret_key: Optional[SecretStr] = Field(
        default=None, description="SearchAd secret key used for signing",
    )

    # Naver Developers (DataLab trend + Blog search)
    naver_client_id: Optional[str] = Field(
        default=None, description="Naver Developers client ID",
    )
    naver_client_secret: Optional[SecretStr] = Field(
        default=None, description="Naver Developers client secret",
    )

    # Endpoints
    searchad_base_url: str = Field(default="https://api.searchad.naver.com")
    datalab_url: str = Field(
        default="https://openapi.naver.com/v1/datalab/search",
    )
    blog_search_url: str = Field(
        default="https://openapi.naver.com/v1/search/blog.json",
    )

    # Transport
    request_timeout: float = Field(
        default=10.0, description="HTTP timeout per request (seconds)",
    )
    max_retries: int = Field(
        default=3, ge=1, description="Attempts per request on 429/transport errors",
    )
    retry_initial_delay: float = Field(default=0.5, ge=0)

    # Pipeline
    full_score_count: int = Field(
        default=10, ge=1, le=20, description="Top quick-scored keywords to full-score",
    )
    min_confident_volume: int = Field(
        default=100, description="Stage-1 volume that skips the broad-match lookup",
    )
    trending_limit: int = Field(default=10, ge=1, le=20)
    trending_candidate_pool: int = Field(
        default=30, description="Related keywords checked for rising trends",
    )
    trending_min_volume: int = Field(
        default=50, description="Minimum monthly searches for trend discovery",
    )

    # Scoring
    niche_weights: NicheWeights = Field(default_factory=NicheWeights)
    quick_weights: QuickWeights = Field(default_factory=QuickWeights)

    # Monitoring
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Optional[Path] = Field(
        default=None, description="Directory for rotating log files",
    )

    def missing_searchad_credentials(self) -> list[str]:
        missing = []
        if not self.naver_searchad_customer_id:
            missing.append("NAVER_SEARCHAD_CUSTOMER_ID")
        if self.naver_searchad_api_key is None:
            missing.append("NAVER_SEARCHAD_API_KEY")
        if self.naver_searchad_secret_key is None:
            missing.append("NAVER_SEARCHAD_SECRET_KEY")
        return missing

    def missing_developer_credentials(self) -> list[str]:
        missing = []
        if not self.naver_client_id:
            missing.append("NAVER_CLIENT_ID")
        if self.naver_client_secret is None:
            missing.append("NAVER_CLIENT_SECRET")
        return missing

    def missing_credentials(self) -> list[str]:
        """Environment variable names of every unset credential."""
        return (
            self.missing_searchad_credentials()
            + self.missing_developer_credentials()
        )
