"""
Code Classifier - Exchange Prefixes for Bare Stock Codes.

Derives the canonical, exchange-prefixed symbol (e.g. ``sh600519``) from a
bare numeric code using leading-digit rules:

    - 60xxxx, 68xxxx       -> Shanghai (sh)
    - 00xxxx, 30xxxx       -> Shenzhen (sz)
    - 43xxxx, 83xxxx, 87xxxx -> Beijing (bj)

Design Notes:
    - Best-effort classification, not a validator
    - Unrecognized codes pass through unchanged
    - Pure and idempotent
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, Optional, Tuple

_NON_DIGITS = re.compile(r"[^0-9]")

PLACEHOLDER_CODE = "--"


class Exchange(str, Enum):
    """Exchange prefixes used in canonical codes."""

    SHANGHAI = "sh"
    SHENZHEN = "sz"
    BEIJING = "bj"


# Leading digits -> exchange. Checked in insertion order.
PREFIX_RULES: Dict[Tuple[str, ...], Exchange] = {
    ("60", "68"): Exchange.SHANGHAI,
    ("00", "30"): Exchange.SHENZHEN,
    ("43", "83", "87"): Exchange.BEIJING,
}

KNOWN_PREFIXES: Tuple[str, ...] = tuple(e.value for e in Exchange)


def has_exchange_prefix(code: str) -> bool:
    """Check if code already starts with a known exchange prefix."""
    return code.startswith(KNOWN_PREFIXES)


def canonicalize(code: Optional[str]) -> str:
    """
    Return the exchange-prefixed form of a stock code.

    Args:
        code: Bare or prefixed code (e.g. "600519", "sz000001")

    Returns:
        Prefixed code, or the input unchanged when no rule matches.
        ``None``/empty input yields an empty string.

    Example:
        >>> canonicalize("600519")
        'sh600519'
        >>> canonicalize("999999")
        '999999'
    """
    if not code:
        return ""
    code = str(code)

    if has_exchange_prefix(code):
        return code

    digits = _NON_DIGITS.sub("", code)
    for leading, exchange in PREFIX_RULES.items():
        if digits.startswith(leading):
            return f"{exchange.value}{digits}"

    return code


def display_code(code: Optional[str]) -> str:
    """Canonical code for display; placeholder when there is no code."""
    return canonicalize(code) or PLACEHOLDER_CODE


def strip_prefix(code: str) -> str:
    """Remove a leading exchange prefix, if any."""
    if has_exchange_prefix(code):
        return code[2:]
    return code


def exchange_of(code: Optional[str]) -> Optional[Exchange]:
    """Exchange of a code, or None when it cannot be classified."""
    canonical = canonicalize(code)
    if has_exchange_prefix(canonical):
        return Exchange(canonical[:2])
    return None
