"""
Configuration Package - Models and Loaders.

Configuration Structure:
    - ScreenerConfig: Root configuration object
    - FetchConfig: Upstream batch size, concurrency, retries
    - ScreeningSettings: ST markers, board prefixes, default filter
    - RankingConfig: Leaderboard size
    - StorageConfig: Persistence backend and keys
    - LoggingConfig: Log level and output format

Design Principles:
    - Type-safe via Pydantic
    - Validation on load (fail fast)
    - Support for profiles
    - Environment variable overrides
"""

from quote_screener.config.loader import ConfigLoader, load_config
from quote_screener.config.models import (
    FetchConfig,
    LoggingConfig,
    RankingConfig,
    ScreenerConfig,
    ScreeningSettings,
    StorageConfig,
)

__all__ = [
    "ConfigLoader",
    "load_config",
    "FetchConfig",
    "LoggingConfig",
    "RankingConfig",
    "ScreenerConfig",
    "ScreeningSettings",
    "StorageConfig",
]
