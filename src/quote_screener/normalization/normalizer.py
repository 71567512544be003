"""
Quote Normalizer - Canonical Quotes from Heterogeneous Upstream Records.

Upstream endpoints (bulk quotes, simple quotes, full quotes, sector spot)
name and scale the same concepts differently. The normalizer resolves every
canonical field through a fixed, per-field priority list of alias keys and
applies unit canonicalization where sources disagree.

Rules:
    - First non-falsy alias wins (a literal 0 counts as missing)
    - Non-numeric, NaN and infinite values count as missing
    - Turnover rate below 1 is a decimal fraction and is scaled by 100
    - Minute strength is derived from price and previous close
    - Never raises: every field defaults to 0 (text to a placeholder)

Design Notes:
    - Alias resolution is a lookup table, not chained conditionals
    - Accepts mappings and attribute-style objects alike
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from quote_screener.domain.entities import Quote, SectorKind, SectorSummary
from quote_screener.normalization.codes import canonicalize

logger = logging.getLogger(__name__)

PLACEHOLDER_NAME = "--"

# Canonical field -> upstream alias keys, highest priority first.
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "price": ("price", "current", "now"),
    "change": ("change", "changeAmount"),
    "change_percent": ("changePercent", "changePct"),
    "open": ("open", "todayOpen", "openPrice"),
    "prev_close": ("prevClose", "yesterdayClose", "preClose", "lastClose"),
    "high": ("high", "todayHigh", "highPrice"),
    "low": ("low", "todayLow", "lowPrice"),
    "volume": ("volume", "turnoverVolume"),
    "amount": ("amount", "turnoverAmount", "totalAmount"),
    "turnover_rate": ("turnoverRate", "turnover", "turnoverRatio"),
    "volume_ratio": ("volumeRatio", "volRatio", "volumeRate"),
    "pe": ("pe", "peRatio", "priceEarningRatio"),
    "pb": ("pb", "pbRatio", "priceBookRatio"),
    "total_market_value": (
        "totalMarketValue",
        "totalValue",
        "marketValue",
        "totalMarketCap",
        "mktValue",
        "marketCap",
        "totalCap",
    ),
    "circulating_market_value": (
        "circulatingMarketValue",
        "circulatingValue",
        "floatMarketValue",
        "floatValue",
        "circulatingMarketCap",
        "floatCap",
        "circulatingCap",
    ),
}

# Sector spot records reuse some keys with a different meaning
# ("turnover" is both turnover value and turnover rate there).
SECTOR_ALIASES: Dict[str, Tuple[str, ...]] = {
    "change_percent": ("changePercent", "change"),
    "amount": ("amount", "turnover"),
    "turnover_rate": ("turnoverRate", "turnover"),
    "volume": ("volume",),
}

CODE_KEYS: Tuple[str, ...] = ("code", "symbol")


def _lookup(raw: Any, key: str) -> Any:
    """Read a key from a mapping or an attribute from an object."""
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return raw.get(key)
    return getattr(raw, key, None)


def to_number(value: Any) -> float:
    """Coerce a raw value to a finite float; 0.0 when impossible."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def resolve(raw: Any, aliases: Iterable[str]) -> float:
    """
    Resolve a numeric field from its aliases.

    Args:
        raw: Upstream record
        aliases: Alias keys in priority order

    Returns:
        First non-zero numeric value, or 0.0
    """
    for key in aliases:
        number = to_number(_lookup(raw, key))
        if number:
            return number
    return 0.0


def canonical_turnover_rate(value: Any) -> float:
    """
    Express a turnover rate as a percentage.

    Values below 1 are treated as decimal fractions (0.1396 -> 13.96);
    anything else is assumed to already be a percentage.
    """
    rate = to_number(value)
    if rate < 1:
        return rate * 100
    return rate


def minute_strength(price: float, prev_close: float) -> float:
    """Percent move of price relative to the previous close."""
    if not price or not prev_close:
        return 0.0
    return (price - prev_close) / prev_close * 100


def _resolve_text(raw: Any, keys: Iterable[str]) -> str:
    for key in keys:
        value = _lookup(raw, key)
        if value:
            return str(value)
    return ""


def normalize(raw: Any, fallback_code: Optional[str] = None) -> Quote:
    """
    Map a raw upstream record to a canonical Quote.

    Args:
        raw: Upstream record (mapping or object); any shape is accepted
        fallback_code: Code to use when the record carries none

    Returns:
        Quote with every numeric field finite
    """
    values: Dict[str, float] = {}
    for field_name, aliases in FIELD_ALIASES.items():
        values[field_name] = resolve(raw, aliases + (field_name,))

    values["turnover_rate"] = canonical_turnover_rate(values["turnover_rate"])
    values["minute_strength"] = minute_strength(
        values["price"], values["prev_close"]
    )

    code = _resolve_text(raw, CODE_KEYS) or (fallback_code or "")
    name = _resolve_text(raw, ("name",)) or PLACEHOLDER_NAME

    return Quote(code=canonicalize(code), name=name, **values)


def normalize_many(records: Optional[Iterable[Any]]) -> List[Quote]:
    """Normalize a batch of records, preserving order."""
    if not records:
        return []
    quotes = [normalize(record) for record in records]
    logger.debug(f"Normalized {len(quotes)} quotes")
    return quotes


def normalize_sector(
    raw: Any,
    kind: SectorKind = SectorKind.INDUSTRY,
    name: Optional[str] = None,
) -> SectorSummary:
    """
    Map a sector list or spot record to a SectorSummary.

    Sector lists may contain bare names instead of records.
    """
    if isinstance(raw, str):
        return SectorSummary(name=name or raw, kind=kind)

    values = {
        field_name: resolve(raw, aliases)
        for field_name, aliases in SECTOR_ALIASES.items()
    }
    resolved_name = name or _resolve_text(raw, ("name",)) or PLACEHOLDER_NAME
    return SectorSummary(name=resolved_name, kind=kind, **values)
