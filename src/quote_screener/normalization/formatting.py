"""
Display Formatting - Human-Readable Numbers for Quote Tables.

Presentation helpers only. Canonical Quote fields always stay in raw units;
these functions turn them into compact strings using 亿 (1e8) and 万 (1e4).
"""

from __future__ import annotations

from typing import Any

from quote_screener.normalization.normalizer import canonical_turnover_rate, to_number

PLACEHOLDER = "--"
YI = 100_000_000
WAN = 10_000


def format_number(value: Any) -> str:
    """Compact number with 亿/万 suffix; zero and missing render as "--"."""
    number = to_number(value)
    if not number:
        return PLACEHOLDER
    if number >= YI:
        return f"{number / YI:.2f}亿"
    if number >= WAN:
        return f"{number / WAN:.2f}万"
    return f"{number:.2f}"


def format_amount(value: Any) -> str:
    """Turnover value (currency units)."""
    return format_number(value)


def format_volume(value: Any) -> str:
    """Volume in lots (手)."""
    number = to_number(value)
    if not number:
        return PLACEHOLDER
    if number >= WAN:
        return f"{number / WAN:.2f}万手"
    return f"{number:.0f}手"


def format_market_value(value: Any) -> str:
    """
    Market value with a unit guessed from magnitude.

    Upstream sources report market value in 元, 万元 or 亿元 without saying
    which. Large values are read as 元, mid-range values as 万元 and values
    below 1 as 亿元.
    """
    number = to_number(value)
    if not number:
        return PLACEHOLDER
    if number >= 10_000_000:
        return f"{number / YI:.2f}亿"
    if number >= 1000:
        return f"{number / WAN:.2f}亿"
    if number >= 1:
        return f"{number:.2f}亿"
    return f"{number * WAN:.2f}万"


def format_turnover_rate(value: Any) -> str:
    """Turnover rate as a percentage string."""
    if not to_number(value):
        return PLACEHOLDER
    return f"{canonical_turnover_rate(value):.2f}%"


def format_percent(value: Any, signed: bool = True) -> str:
    """Percentage with an explicit plus sign for gains."""
    number = to_number(value)
    sign = "+" if signed and number > 0 else ""
    return f"{sign}{number:.2f}%"
