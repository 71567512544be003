"""
Console Audit Logger.

Prints the screening audit trail as a compact per-stage report:

    [09:31:02] [3f2a1c9e] [INFO ] exclusion: 16 in
    [09:31:02] [3f2a1c9e] [DEBUG]   x sz000656   special_treatment  name contains 'ST'
    [09:31:02] [3f2a1c9e] [INFO ] special_treatment: 14 kept, 2 rejected (0.1 ms)

Design Notes:
    - Rejections are counted per stage even when not verbose, so the stage
      summary always carries the rejected count
    - Output goes to a configurable stream (stdout by default)
"""

from __future__ import annotations

import sys
from datetime import datetime
from typing import Any, Dict, Optional, TextIO


class ConsoleAuditLogger:
    """Console audit logger for screening passes."""

    def __init__(self, verbose: bool = True, stream: Optional[TextIO] = None) -> None:
        """
        Initialize console logger.

        Args:
            verbose: Print stage starts and every rejected code. When False
                only stage summaries and anomalies are printed.
            stream: Output stream (stdout when omitted)
        """
        self._verbose = verbose
        self._stream = stream
        self._correlation_id: Optional[str] = None
        self._rejections: Dict[str, int] = {}

    def set_correlation_id(self, correlation_id: str) -> None:
        """Start a new pass: tag subsequent lines and reset rejection counts."""
        self._correlation_id = correlation_id
        self._rejections = {}

    def log_stage_start(
        self,
        stage_name: str,
        input_count: int,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._rejections[stage_name] = 0
        if self._verbose:
            self._write("INFO", f"{stage_name}: {input_count} in")

    def log_quote_filtered(
        self,
        code: str,
        stage_name: str,
        reason: str,
    ) -> None:
        """Count a rejected code and print it with its reason when verbose."""
        self._rejections[stage_name] = self._rejections.get(stage_name, 0) + 1
        if self._verbose:
            self._write("DEBUG", f"  x {code or '--':<10} {stage_name:<18} {reason}")

    def log_stage_end(
        self,
        stage_name: str,
        output_count: int,
        duration_seconds: float,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        rejected = self._rejections.get(stage_name, 0)
        self._write(
            "INFO",
            f"{stage_name}: {output_count} kept, {rejected} rejected "
            f"({duration_seconds * 1000:.1f} ms)",
        )

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = ", ".join(f"{k}={v}" for k, v in (context or {}).items())
        if details:
            message = f"{message} [{details}]"
        self._write(severity.upper(), f"ANOMALY: {message}")

    def rejections(self) -> Dict[str, int]:
        """Rejected code count per stage for the current pass."""
        return dict(self._rejections)

    def _write(self, level: str, message: str) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        corr_id = self._correlation_id[:8] if self._correlation_id else "--------"
        print(
            f"[{timestamp}] [{corr_id}] [{level:5}] {message}",
            file=self._stream or sys.stdout,
        )
