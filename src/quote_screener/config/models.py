"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic.
"""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field

from quote_screener.domain.entities import HUNDRED_MILLION, FilterSpec


class FetchConfig(BaseModel):
    """Upstream fetch settings."""

    batch_size: int = Field(default=300, ge=1)
    concurrency: int = Field(default=5, ge=1, le=64)
    search_limit: int = Field(default=100, ge=1)
    retry_attempts: int = Field(default=3, ge=1)
    retry_base_delay_seconds: float = Field(default=0.5, ge=0)


class ScreeningSettings(BaseModel):
    """Screening engine settings."""

    st_markers: List[str] = Field(default_factory=lambda: ["ST"])
    board_prefixes: List[str] = Field(default_factory=lambda: ["688"])
    market_value_unit: float = Field(default=HUNDRED_MILLION, gt=0)
    default_filter: FilterSpec = Field(default_factory=FilterSpec)


class RankingConfig(BaseModel):
    """Leaderboard settings."""

    limit: int = Field(default=20, ge=1)


class StorageConfig(BaseModel):
    """Persistence settings for watchlist and exclusion list."""

    backend: Literal["memory", "json_file"] = "memory"
    path: str = Field(default=".quote_screener")
    watchlist_key: str = "stock_watchlist"
    exclusion_key: str = "stock_excluded"


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False, alias="json")

    model_config = {"populate_by_name": True}


class ScreenerConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    screening: ScreeningSettings = Field(default_factory=ScreeningSettings)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"populate_by_name": True}
