"""
Validation Package - Data Quality Checks.

Components:
    - QuoteValidator: Sanity checks on normalized quotes

Design Principles:
    - Report anomalies, never block screening
"""

from quote_screener.validation.quote_validator import (
    QuoteValidator,
    QuoteValidatorConfig,
    ValidationResult,
)

__all__ = ["QuoteValidator", "QuoteValidatorConfig", "ValidationResult"]
