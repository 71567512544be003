"""
Error Handler - Exceptions and Resilience Patterns for Provider Calls.

Provides:
    - Exception hierarchy for screening failures
    - Retry with exponential backoff
    - Circuit breaker per upstream operation

Design Notes:
    - Upstream failures surface as QuoteFetchError, never as empty results
    - Malformed records and persistence failures do not raise
    - Circuit breaker rejects calls while an operation keeps failing
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ============================================================================
# Exceptions
# ============================================================================


class ScreenerError(Exception):
    """Base class for screener errors."""


class QuoteFetchError(ScreenerError):
    """Upstream quote data could not be fetched."""

    def __init__(self, message: str, operation: str = "fetch") -> None:
        super().__init__(message)
        self.operation = operation


class QuoteNotFoundError(QuoteFetchError):
    """Upstream answered but had no quote for the requested code."""

    def __init__(self, code: str) -> None:
        super().__init__(f"No quote found for {code}", operation="quote_detail")
        self.code = code


class CircuitBreakerOpen(ScreenerError):
    """Raised when circuit breaker is open."""


class RetryExhausted(ScreenerError):
    """Raised when all retry attempts are exhausted."""


# ============================================================================
# Configuration and state
# ============================================================================


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"      # Normal operation
    OPEN = "open"          # Failing, reject calls
    HALF_OPEN = "half_open"  # Testing if recovered


@dataclass
class CircuitBreakerConfig:
    """Configuration for circuit breaker."""
    failure_threshold: int = 5  # Failures before opening
    recovery_timeout_seconds: float = 60.0  # Time before half-open
    success_threshold: int = 2  # Successes before closing


@dataclass
class RetryConfig:
    """Configuration for retry logic."""
    max_attempts: int = 3
    base_delay_seconds: float = 0.5
    max_delay_seconds: float = 10.0
    exponential_base: float = 2.0
    retryable_exceptions: tuple = (Exception,)


@dataclass
class CircuitBreakerState:
    """Mutable state for circuit breaker."""
    state: CircuitState = CircuitState.CLOSED
    failure_count: int = 0
    success_count: int = 0
    last_failure_time: Optional[datetime] = None


class ErrorHandler:
    """
    Resilience wrapper for upstream quote calls.

    Features:
        - Retry with exponential backoff
        - Circuit breaker pattern
        - ``call`` combining both for one named operation
    """

    def __init__(
        self,
        retry_config: Optional[RetryConfig] = None,
        circuit_breaker_config: Optional[CircuitBreakerConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize error handler.

        Args:
            retry_config: Configuration for retry logic
            circuit_breaker_config: Configuration for circuit breaker
            sleep: Delay function between attempts
        """
        self.retry_config = retry_config or RetryConfig()
        self.circuit_breaker_config = circuit_breaker_config or CircuitBreakerConfig()
        self._sleep = sleep
        self._circuit_states: Dict[str, CircuitBreakerState] = {}

    def call(self, func: Callable[[], T], operation_name: str) -> T:
        """
        Execute an upstream call under circuit breaker and retry.

        Raises:
            CircuitBreakerOpen: When the operation's circuit is open
            RetryExhausted: When all attempts fail
        """
        return self.with_circuit_breaker(
            lambda: self.retry(func, operation_name), operation_name
        )

    def retry(
        self,
        func: Callable[[], T],
        operation_name: str = "operation",
    ) -> T:
        """
        Execute function with retry and exponential backoff.

        Args:
            func: Function to execute
            operation_name: Name for logging

        Returns:
            Result of successful execution

        Raises:
            RetryExhausted: When all attempts fail
        """
        last_exception: Optional[Exception] = None

        for attempt in range(1, self.retry_config.max_attempts + 1):
            try:
                result = func()
                if attempt > 1:
                    logger.info(
                        f"{operation_name} succeeded on attempt {attempt}"
                    )
                return result

            except self.retry_config.retryable_exceptions as e:
                last_exception = e
                if attempt < self.retry_config.max_attempts:
                    delay = self._calculate_delay(attempt)
                    logger.warning(
                        f"{operation_name} failed (attempt {attempt}/{self.retry_config.max_attempts}), "
                        f"retrying in {delay:.2f}s: {e}"
                    )
                    self._sleep(delay)
                else:
                    logger.error(
                        f"{operation_name} failed after {attempt} attempts: {e}"
                    )

        raise RetryExhausted(
            f"{operation_name} failed after {self.retry_config.max_attempts} attempts"
        ) from last_exception

    def _calculate_delay(self, attempt: int) -> float:
        """Calculate delay with exponential backoff."""
        delay = self.retry_config.base_delay_seconds * (
            self.retry_config.exponential_base ** (attempt - 1)
        )
        return min(delay, self.retry_config.max_delay_seconds)

    def with_circuit_breaker(
        self,
        func: Callable[[], T],
        circuit_name: str,
    ) -> T:
        """
        Execute function with circuit breaker protection.

        Raises:
            CircuitBreakerOpen: When circuit is open
        """
        state = self._get_circuit_state(circuit_name)

        if state.state == CircuitState.OPEN:
            if self._should_attempt_recovery(state):
                state.state = CircuitState.HALF_OPEN
                logger.info(f"Circuit {circuit_name} entering half-open state")
            else:
                raise CircuitBreakerOpen(
                    f"Circuit {circuit_name} is open, rejecting call"
                )

        try:
            result = func()
        except Exception:
            self._record_failure(state, circuit_name)
            raise

        self._record_success(state, circuit_name)
        return result

    def _get_circuit_state(self, circuit_name: str) -> CircuitBreakerState:
        if circuit_name not in self._circuit_states:
            self._circuit_states[circuit_name] = CircuitBreakerState()
        return self._circuit_states[circuit_name]

    def _should_attempt_recovery(self, state: CircuitBreakerState) -> bool:
        """Check if enough time has passed to attempt recovery."""
        if state.last_failure_time is None:
            return True
        elapsed = datetime.now() - state.last_failure_time
        return elapsed.total_seconds() >= self.circuit_breaker_config.recovery_timeout_seconds

    def _record_success(self, state: CircuitBreakerState, circuit_name: str) -> None:
        if state.state == CircuitState.HALF_OPEN:
            state.success_count += 1
            if state.success_count >= self.circuit_breaker_config.success_threshold:
                state.state = CircuitState.CLOSED
                state.failure_count = 0
                state.success_count = 0
                logger.info(f"Circuit {circuit_name} closed after recovery")
        else:
            state.failure_count = 0

    def _record_failure(self, state: CircuitBreakerState, circuit_name: str) -> None:
        state.failure_count += 1
        state.last_failure_time = datetime.now()
        state.success_count = 0

        if state.state == CircuitState.HALF_OPEN:
            state.state = CircuitState.OPEN
            logger.warning(f"Circuit {circuit_name} re-opened after failed recovery")
        elif state.failure_count >= self.circuit_breaker_config.failure_threshold:
            state.state = CircuitState.OPEN
            logger.warning(
                f"Circuit {circuit_name} opened after {state.failure_count} failures"
            )

    def reset_circuit(self, circuit_name: str) -> None:
        """Reset a circuit breaker to closed state."""
        if circuit_name in self._circuit_states:
            self._circuit_states[circuit_name] = CircuitBreakerState()
            logger.info(f"Circuit {circuit_name} reset to closed state")

    def get_circuit_state(self, circuit_name: str) -> CircuitState:
        """Get current state of a circuit breaker."""
        return self._get_circuit_state(circuit_name).state
