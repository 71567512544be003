"""
Observability Package - Structured Logging, Metrics, Correlation.

This package provides:
    - ObservabilityManager: structlog event log with correlation IDs,
      usable as both audit logger and metrics collector

Design Principles:
    - Structured JSON logging via structlog
    - Correlation ID propagation for end-to-end tracing
"""

from quote_screener.observability.observability_manager import (
    ObservabilityManager,
    get_correlation_id,
    set_correlation_id,
)

__all__ = [
    "ObservabilityManager",
    "get_correlation_id",
    "set_correlation_id",
]
