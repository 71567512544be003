"""
Quote Validator - Sanity Checks on Normalized Quotes.

Validates quotes after normalization:
    - Identity: code present, no duplicate codes
    - Prices: no negatives, low <= high, price inside the day's range
    - Volumes: no negative volume or turnover value
    - Moves: change percent within a plausible daily band

Design Notes:
    - Findings are reported, never raised: screening continues on the data
      it has
    - Zero values mean "missing" after normalization and are not flagged
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from quote_screener.domain.entities import Quote

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of quote validation."""

    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    flagged_codes: Dict[str, List[str]] = field(default_factory=dict)

    def add_error(self, code: str, error: str) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(f"{code or '--'}: {error}")
        self.flagged_codes.setdefault(code, []).append(error)
        self.is_valid = False

    def add_warning(self, code: str, warning: str) -> None:
        """Add a warning (validation still passes)."""
        self.warnings.append(f"{code or '--'}: {warning}")
        self.flagged_codes.setdefault(code, []).append(warning)

    @property
    def has_issues(self) -> bool:
        return bool(self.errors or self.warnings)


@dataclass
class QuoteValidatorConfig:
    """Configuration for quote validation."""

    # A-share daily limits are at most 30% (new listings aside)
    max_abs_change_percent: float = 30.0
    max_price: float = 100_000.0
    range_tolerance: float = 0.01


class QuoteValidator:
    """
    Validates normalized quotes for data quality issues.
    """

    def __init__(self, config: Optional[QuoteValidatorConfig] = None) -> None:
        self.config = config or QuoteValidatorConfig()

    def validate(self, quotes: Sequence[Quote]) -> ValidationResult:
        """
        Check every quote.

        Args:
            quotes: Normalized quotes

        Returns:
            ValidationResult with errors and warnings per code
        """
        result = ValidationResult()
        seen: Dict[str, int] = {}

        for quote in quotes:
            code = quote.code
            if not code:
                result.add_warning(code, "Missing code")
            else:
                seen[code] = seen.get(code, 0) + 1
                if seen[code] == 2:
                    result.add_warning(code, "Duplicate code")

            self._check_prices(quote, result)
            self._check_volumes(quote, result)

            if abs(quote.change_percent) > self.config.max_abs_change_percent:
                result.add_warning(
                    code, f"Implausible change {quote.change_percent:.2f}%"
                )

        self._log_result(len(quotes), result)
        return result

    def _check_prices(self, quote: Quote, result: ValidationResult) -> None:
        code = quote.code
        for name in ("price", "open", "high", "low", "prev_close"):
            value = getattr(quote, name)
            if value < 0:
                result.add_error(code, f"Negative {name} {value}")

        if quote.high and quote.low and quote.low > quote.high:
            result.add_error(code, f"Low ({quote.low}) > High ({quote.high})")
        elif quote.price and quote.high and quote.low:
            tolerance = self.config.range_tolerance
            if not (
                quote.low * (1 - tolerance)
                <= quote.price
                <= quote.high * (1 + tolerance)
            ):
                result.add_warning(
                    code,
                    f"Price {quote.price} outside day range [{quote.low}, {quote.high}]",
                )

        if quote.price > self.config.max_price:
            result.add_warning(code, f"Extreme price {quote.price}")

    def _check_volumes(self, quote: Quote, result: ValidationResult) -> None:
        if quote.volume < 0:
            result.add_error(quote.code, f"Negative volume {quote.volume}")
        if quote.amount < 0:
            result.add_error(quote.code, f"Negative amount {quote.amount}")

    def _log_result(self, total: int, result: ValidationResult) -> None:
        if result.errors:
            logger.warning(f"Quote validation: {len(result.errors)} errors in {total} quotes")
        if result.warnings:
            logger.info(f"Quote validation: {len(result.warnings)} warnings in {total} quotes")
