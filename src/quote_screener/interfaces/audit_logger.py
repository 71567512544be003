"""
Audit Logger Protocol.

Defines the abstract interface for audit logging. The audit logger tracks
screening decisions for debugging and for explaining why a stock is
missing from a result.

The audit logger is responsible for:
    - Logging stage start/end events
    - Logging individual quote filter decisions
    - Logging anomalies and warnings
    - Maintaining correlation across a screening run

Design Notes:
    - Correlation ID propagation for tracing
    - No side effects on filtering logic
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class AuditLogger(Protocol):
    """Abstract interface for audit logging."""

    def set_correlation_id(self, correlation_id: str) -> None:
        """Set correlation ID for subsequent log entries."""
        ...

    def log_stage_start(
        self,
        stage_name: str,
        input_count: int,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log the start of a screening stage.

        Args:
            stage_name: Name of the criterion or pipeline step
            input_count: Number of quotes entering the stage
            metadata: Optional additional context
        """
        ...

    def log_stage_end(
        self,
        stage_name: str,
        output_count: int,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log the end of a screening stage."""
        ...

    def log_quote_filtered(
        self,
        code: str,
        stage_name: str,
        reason: str,
    ) -> None:
        """
        Log that a quote was filtered out.

        Args:
            code: Canonical code of the filtered stock
            stage_name: Which criterion rejected it
            reason: Human-readable rejection reason
        """
        ...

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log an anomaly or warning.

        Args:
            message: Description of the anomaly
            severity: INFO, WARNING, or CRITICAL
            context: Optional additional context
        """
        ...
