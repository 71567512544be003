"""
Observability Manager - Structured Event Log, Metrics and Correlation.

Provides:
    - Structured logging via structlog (JSON or console rendering)
    - Correlation ID propagation through contextvars
    - Recorded events and metrics for inspection after a screening run

Design Notes:
    - Implements both the AuditLogger and MetricsCollector protocols, so one
      instance can be handed to the pipeline for both roles
    - Thread-safe event and metric storage
"""

from __future__ import annotations

import logging
import threading
import uuid
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from quote_screener.config.models import LoggingConfig

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Get current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID in context."""
    _correlation_id.set(correlation_id)


class ObservabilityManager:
    """
    Structured event log with correlation IDs and metrics recording.
    """

    def __init__(
        self,
        service_name: str = "quote_screener",
        use_json: bool = True,
        log_level: int = logging.INFO,
    ) -> None:
        """
        Initialize observability manager.

        Args:
            service_name: Service name for log entries
            use_json: Render events as JSON lines instead of console text
            log_level: Minimum level for emitted events
        """
        self.service_name = service_name
        self.use_json = use_json
        self.log_level = log_level
        self._metrics: Dict[str, List[Dict[str, Any]]] = {}
        self._events: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

        self._configure_structlog()
        self._logger = structlog.get_logger(service_name)

    @classmethod
    def from_config(
        cls, config: LoggingConfig, service_name: str = "quote_screener"
    ) -> "ObservabilityManager":
        level = logging.getLevelName(config.level.upper())
        if not isinstance(level, int):
            level = logging.INFO
        return cls(service_name=service_name, use_json=config.json_output, log_level=level)

    def _configure_structlog(self) -> None:
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]

        if self.use_json:
            processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(self.log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=False,
        )

    def set_correlation_id(self, correlation_id: str) -> None:
        """
        Set correlation ID for current context.

        Args:
            correlation_id: Unique ID for request tracing
        """
        set_correlation_id(correlation_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

    def generate_correlation_id(self) -> str:
        """Generate and set a new correlation ID."""
        correlation_id = str(uuid.uuid4())
        self.set_correlation_id(correlation_id)
        return correlation_id

    def log_event(
        self,
        event_type: str,
        data: Optional[Dict[str, Any]] = None,
        level: str = "info",
    ) -> None:
        """
        Record and emit a structured event.

        Args:
            event_type: Type of event (e.g., "stage_start", "quote_filtered")
            data: Additional event data
            level: Log level (debug, info, warning, error)
        """
        event_data = {
            "event_type": event_type,
            "service": self.service_name,
            **(data or {}),
        }

        with self._lock:
            self._events.append(
                {
                    **event_data,
                    "timestamp": datetime.now().isoformat(),
                    "correlation_id": get_correlation_id(),
                }
            )

        log_method = getattr(self._logger, level.lower(), self._logger.info)
        log_method(event_type, **event_data)

    def record_metric(
        self,
        name: str,
        value: float,
        tags: Optional[Dict[str, str]] = None,
        metric_type: str = "gauge",
    ) -> None:
        metric_entry = {
            "timestamp": datetime.now().isoformat(),
            "value": value,
            "tags": tags or {},
            "type": metric_type,
            "correlation_id": get_correlation_id(),
        }

        with self._lock:
            self._metrics.setdefault(name, []).append(metric_entry)

    def get_trace_context(self) -> Dict[str, Any]:
        return {
            "correlation_id": get_correlation_id(),
            "service_name": self.service_name,
            "timestamp": datetime.now().isoformat(),
        }

    def get_metrics(self) -> Dict[str, List[Dict[str, Any]]]:
        """Get all recorded metrics."""
        with self._lock:
            return {name: list(entries) for name, entries in self._metrics.items()}

    def get_events(self, event_type: Optional[str] = None) -> List[Dict[str, Any]]:
        """Recorded events, optionally of one type."""
        with self._lock:
            if event_type is None:
                return list(self._events)
            return [e for e in self._events if e["event_type"] == event_type]

    def clear(self) -> None:
        with self._lock:
            self._metrics.clear()
            self._events.clear()

    # =========================================================================
    # AuditLogger Protocol
    # =========================================================================

    def log_stage_start(
        self,
        stage_name: str,
        input_count: int,
        metadata: Optional[Dict] = None,
    ) -> None:
        self.log_event(
            "stage_start",
            {
                "stage_name": stage_name,
                "input_count": input_count,
                **(metadata or {}),
            },
        )

    def log_stage_end(
        self,
        stage_name: str,
        output_count: int,
        duration_seconds: float,
        metadata: Optional[Dict] = None,
    ) -> None:
        self.log_event(
            "stage_end",
            {
                "stage_name": stage_name,
                "output_count": output_count,
                "duration_seconds": duration_seconds,
                **(metadata or {}),
            },
        )
        self.record_metric(
            "stage_duration_seconds",
            duration_seconds,
            tags={"stage": stage_name},
            metric_type="histogram",
        )

    def log_quote_filtered(
        self,
        code: str,
        stage_name: str,
        reason: str,
    ) -> None:
        self.log_event(
            "quote_filtered",
            {"code": code, "stage_name": stage_name, "reason": reason},
            level="debug",
        )

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict] = None,
    ) -> None:
        level = {"INFO": "info", "WARNING": "warning"}.get(severity.upper(), "error")
        self.log_event(
            "anomaly",
            {
                "message": message,
                "severity": severity,
                **(context or {}),
            },
            level=level,
        )

    # =========================================================================
    # MetricsCollector Protocol
    # =========================================================================

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict] = None,
    ) -> None:
        self.record_metric(name, duration_seconds, tags, metric_type="histogram")

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict] = None,
    ) -> None:
        self.record_metric(name, float(value), tags, metric_type="counter")

    def record_gauge(
        self,
        name: str,
        value: float,
        tags: Optional[Dict] = None,
    ) -> None:
        self.record_metric(name, value, tags, metric_type="gauge")
