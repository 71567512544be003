"""
Domain Layer - Core Business Entities and Value Objects.

Entities:
    - Quote: Canonical price/volume/valuation snapshot of one stock
    - FilterSpec: Screening bounds, toggles and ordering
    - ExclusionEntry / Watchlist / WatchlistGroup: Persisted user lists
    - SectorSummary: Industry or concept sector performance
    - ScreeningRequest / StageResult / ScreeningResult: Screening records

Design Principles:
    - Immutable where possible (frozen models)
    - Invalid user input is coerced, never raised
    - No infrastructure dependencies
"""

from quote_screener.domain.entities import (
    DEFAULT_GROUP_ID,
    DEFAULT_GROUP_NAME,
    HUNDRED_MILLION,
    ExclusionEntry,
    FilterSpec,
    Quote,
    ScreeningRequest,
    ScreeningResult,
    SectorKind,
    SectorSummary,
    SortField,
    SortOrder,
    StageResult,
    Watchlist,
    WatchlistGroup,
)

__all__ = [
    "DEFAULT_GROUP_ID",
    "DEFAULT_GROUP_NAME",
    "HUNDRED_MILLION",
    "ExclusionEntry",
    "FilterSpec",
    "Quote",
    "ScreeningRequest",
    "ScreeningResult",
    "SectorKind",
    "SectorSummary",
    "SortField",
    "SortOrder",
    "StageResult",
    "Watchlist",
    "WatchlistGroup",
]
