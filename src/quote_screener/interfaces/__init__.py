"""
Interfaces Layer - Abstract Protocols for Dependencies.

This package defines the abstract interfaces (using typing.Protocol) for
external dependencies. High-level modules depend on these abstractions,
not on concrete implementations.

Protocols:
    - QuoteProvider: Upstream quote data access
    - AuditLogger: Audit trail of screening decisions
    - MetricsCollector: Performance metrics

Design Principles:
    - Use typing.Protocol (not ABC) for Pythonic interfaces
    - Interface Segregation: Small, focused interfaces
"""

from quote_screener.interfaces.audit_logger import AuditLogger
from quote_screener.interfaces.metrics_collector import MetricsCollector
from quote_screener.interfaces.quote_provider import QuoteProvider

__all__ = ["AuditLogger", "MetricsCollector", "QuoteProvider"]
