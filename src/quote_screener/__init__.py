"""
Quote Screener - Normalization, Screening and Ranking of A-Share Quotes.

Turns heterogeneous upstream quote records into canonical Quotes, filters
them against user criteria and a persisted exclusion list, orders them,
and derives leaderboards. Watchlist groups and the exclusion list persist
through a pluggable key-value store.

Architecture:
    - Hexagonal Architecture (Ports & Adapters)
    - Pure engine (normalize, screen, rank) with I/O at the edges
    - Configuration-driven behavior via YAML

Main Components:
    - domain: Core entities (Quote, FilterSpec, Watchlist, etc.)
    - normalization: Code classification, field aliasing, display formatting
    - filters / engine: Screening criteria, screening and ranking
    - storage: Key-value stores and list accessors
    - pipeline: Orchestration over a QuoteProvider
    - adapters: Providers, loggers, metrics
    - config: Configuration models and loaders

Example:
    >>> from quote_screener import FilterSpec, create_pipeline
    >>> pipeline = create_pipeline(config_path="config/default.yaml")
    >>> result = pipeline.screen(FilterSpec(min_change_percent=3, filter_st=True))
    >>> print(f"{len(result.quotes)} of {result.input_count} quotes match")
"""

import logging
from pathlib import Path
from typing import Optional, Union

from quote_screener.adapters.mock_provider import MockQuoteProvider
from quote_screener.config import ConfigLoader, ScreenerConfig
from quote_screener.domain.entities import FilterSpec, Quote, SortField, SortOrder
from quote_screener.engine.ranking import RankingView, RankMetric, leaderboard, rank
from quote_screener.engine.screening import screen
from quote_screener.interfaces.quote_provider import QuoteProvider
from quote_screener.normalization.codes import canonicalize
from quote_screener.normalization.normalizer import normalize
from quote_screener.observability import ObservabilityManager
from quote_screener.pipeline.screening_pipeline import ScreeningPipeline
from quote_screener.resilience.error_handler import (
    ErrorHandler,
    QuoteFetchError,
    QuoteNotFoundError,
    RetryConfig,
    ScreenerError,
)
from quote_screener.storage import (
    ExclusionList,
    WatchlistStore,
    add_group,
    add_to_group,
    create_store,
    exclude,
    is_excluded,
    remove_from_group,
    remove_group,
    rename_group,
    restore,
)
from quote_screener.validation.quote_validator import QuoteValidator

__version__ = "1.0.0"


def configure_logging(
    level: Union[int, str] = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for Quote Screener.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level, as a number or a name like "DEBUG"
        format: Log message format

    Example:
        >>> import quote_screener
        >>> quote_screener.configure_logging("DEBUG")
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("quote_screener").setLevel(level)


def create_pipeline(
    provider: Optional[QuoteProvider] = None,
    config: Optional[ScreenerConfig] = None,
    config_path: Optional[Union[str, Path]] = None,
    profile: Optional[str] = None,
) -> ScreeningPipeline:
    """
    Wire a ScreeningPipeline from configuration.

    Args:
        provider: Quote provider (deterministic mock provider when omitted)
        config: Ready configuration; loaded from config_path otherwise
        config_path: YAML config file
        profile: Optional profile to merge over the file

    Logging is configured from the ``logging`` section, and an
    ObservabilityManager built from the same section serves as audit logger
    and metrics collector.

    Returns:
        Pipeline with store-backed lists, retries and quote validation
    """
    if config is None:
        if config_path is not None:
            config = ConfigLoader().load(config_path, profile)
        else:
            config = ScreenerConfig()

    configure_logging(config.logging.level)
    observability = ObservabilityManager.from_config(config.logging)

    store = create_store(config.storage)
    error_handler = ErrorHandler(
        RetryConfig(
            max_attempts=config.fetch.retry_attempts,
            base_delay_seconds=config.fetch.retry_base_delay_seconds,
        )
    )
    return ScreeningPipeline(
        provider=provider or MockQuoteProvider(),
        config=config,
        exclusions=ExclusionList(store, key=config.storage.exclusion_key),
        audit_logger=observability,
        metrics_collector=observability,
        error_handler=error_handler,
        quote_validator=QuoteValidator(),
        watchlist=WatchlistStore(store, key=config.storage.watchlist_key),
    )


__all__ = [
    "__version__",
    "configure_logging",
    "create_pipeline",
    "ExclusionList",
    "FilterSpec",
    "Quote",
    "QuoteFetchError",
    "QuoteNotFoundError",
    "RankingView",
    "RankMetric",
    "ScreenerConfig",
    "ScreenerError",
    "ScreeningPipeline",
    "SortField",
    "SortOrder",
    "WatchlistStore",
    "add_group",
    "add_to_group",
    "canonicalize",
    "exclude",
    "is_excluded",
    "leaderboard",
    "normalize",
    "rank",
    "remove_from_group",
    "remove_group",
    "rename_group",
    "restore",
    "screen",
]
