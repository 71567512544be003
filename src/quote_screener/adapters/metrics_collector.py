"""
In-Memory Metrics Collector.

Stores screening metrics in memory and summarizes them per name.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from datetime import datetime
from threading import Lock
from typing import Any, Dict, Iterator, List, Optional


class InMemoryMetricsCollector:
    """Thread-safe in-memory metrics collector."""

    def __init__(self) -> None:
        self._metrics: Dict[str, List[Dict[str, Any]]] = {}
        self._lock = Lock()

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "timing", duration_seconds, tags)

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "count", value, tags)

    def record_gauge(
        self,
        name: str,
        value: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        self._record(name, "gauge", value, tags)

    @contextmanager
    def timer(self, name: str, tags: Optional[Dict[str, str]] = None) -> Iterator[None]:
        """Record the duration of the enclosed block as a timing."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record_timing(name, time.perf_counter() - start, tags)

    def get_values(self, name: str) -> List[Any]:
        """Raw recorded values for one metric, oldest first."""
        with self._lock:
            return [e["value"] for e in self._metrics.get(name, [])]

    def get_metrics(self) -> Dict[str, Any]:
        """
        Summary per metric name.

        Returns:
            name -> {"type", "count", "total", "min", "max", "last"}
        """
        with self._lock:
            summary = {}
            for name, entries in self._metrics.items():
                if not entries:
                    continue
                values = [e["value"] for e in entries]
                summary[name] = {
                    "type": entries[-1]["type"],
                    "count": len(values),
                    "total": sum(values),
                    "min": min(values),
                    "max": max(values),
                    "last": values[-1],
                }
            return summary

    def clear(self) -> None:
        with self._lock:
            self._metrics.clear()

    def _record(
        self,
        name: str,
        metric_type: str,
        value: Any,
        tags: Optional[Dict[str, str]],
    ) -> None:
        with self._lock:
            self._metrics.setdefault(name, []).append(
                {
                    "type": metric_type,
                    "value": value,
                    "tags": tags or {},
                    "timestamp": datetime.now().isoformat(),
                }
            )
