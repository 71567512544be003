"""
Normalization Package - Canonical Quotes and Codes.

Components:
    - codes: Exchange-prefix classification of stock codes
    - normalizer: Alias-table mapping of raw records to Quote
    - formatting: Display helpers (亿/万 units, percentages)

Design Principles:
    - Pure functions, no I/O
    - Total over any input shape (never raises)
"""

from quote_screener.normalization.codes import (
    Exchange,
    canonicalize,
    display_code,
    exchange_of,
    strip_prefix,
)
from quote_screener.normalization.normalizer import (
    FIELD_ALIASES,
    canonical_turnover_rate,
    minute_strength,
    normalize,
    normalize_many,
    normalize_sector,
)

__all__ = [
    "Exchange",
    "canonicalize",
    "display_code",
    "exchange_of",
    "strip_prefix",
    "FIELD_ALIASES",
    "canonical_turnover_rate",
    "minute_strength",
    "normalize",
    "normalize_many",
    "normalize_sector",
]
