"""
Pipeline Package - Orchestration.

Components:
    - ScreeningPipeline: Loads, normalizes, validates and screens quotes,
      and serves search, detail, watchlist, ranking and sector lookups

Design Principles:
    - All dependencies injected via constructor
    - Pure engine at the core, I/O at the edges
"""

from quote_screener.pipeline.screening_pipeline import ScreeningPipeline

__all__ = ["ScreeningPipeline"]
