"""
Resilience Package - Errors and Fault Tolerance.

This package provides:
    - ScreenerError hierarchy (QuoteFetchError, QuoteNotFoundError)
    - ErrorHandler: Retry and circuit breaker for provider calls

Design Principles:
    - Retry with backoff for transient errors
    - Circuit breaker for persistent failures
    - Upstream failures are raised, never turned into empty results
"""

from quote_screener.resilience.error_handler import (
    CircuitBreakerConfig,
    CircuitBreakerOpen,
    CircuitState,
    ErrorHandler,
    QuoteFetchError,
    QuoteNotFoundError,
    RetryConfig,
    RetryExhausted,
    ScreenerError,
)

__all__ = [
    "CircuitBreakerConfig",
    "CircuitBreakerOpen",
    "CircuitState",
    "ErrorHandler",
    "QuoteFetchError",
    "QuoteNotFoundError",
    "RetryConfig",
    "RetryExhausted",
    "ScreenerError",
]
