"""
Adapters Package - Infrastructure Implementations.

This package contains concrete implementations of the abstract
interfaces defined in the interfaces package (Ports & Adapters).

Providers:
    - MockQuoteProvider: Deterministic fake quotes for development/testing
    - BatchQuoteLoader: Bounded-concurrency bulk fetch helper for providers

Loggers:
    - ConsoleAuditLogger: Simple console output

Metrics:
    - InMemoryMetricsCollector: Simple in-memory collection

Design Principles:
    - All adapters implement their respective protocols
    - Easily swappable via Dependency Injection
    - No business logic in adapters
"""

from quote_screener.adapters.batch_loader import BatchQuoteLoader, chunk
from quote_screener.adapters.console_logger import ConsoleAuditLogger
from quote_screener.adapters.metrics_collector import InMemoryMetricsCollector
from quote_screener.adapters.mock_provider import MockQuoteProvider

__all__ = [
    "BatchQuoteLoader",
    "chunk",
    "ConsoleAuditLogger",
    "InMemoryMetricsCollector",
    "MockQuoteProvider",
]
