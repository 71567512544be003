"""
Core Domain Entities.

This module defines the fundamental entities of the Quote Screener domain:
the canonical quote record, the user's filter specification, and the
curated stock sets (exclusion list and watchlist groups).
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

# Filter bounds for circulating market value are entered in 亿 (1e8) units.
HUNDRED_MILLION = 100_000_000

DEFAULT_GROUP_ID = "default"
DEFAULT_GROUP_NAME = "默认分组"


class SortField(str, Enum):
    """Quote fields a screening result can be sorted by."""

    CHANGE_PERCENT = "change_percent"
    PRICE = "price"
    CIRCULATING_MARKET_VALUE = "circulating_market_value"
    VOLUME_RATIO = "volume_ratio"
    TURNOVER_RATE = "turnover_rate"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class Quote(BaseModel):
    """Canonical snapshot of one tradable instrument."""

    code: str = Field(default="", description="Exchange-prefixed symbol")
    name: str = Field(default="--", description="Display name")
    price: float = 0.0
    change: float = Field(default=0.0, description="Absolute change")
    change_percent: float = Field(default=0.0, description="Percent, 2.5 = +2.5%")
    volume: float = 0.0
    amount: float = Field(default=0.0, description="Turnover value")
    high: float = 0.0
    low: float = 0.0
    open: float = 0.0
    prev_close: float = 0.0
    circulating_market_value: float = Field(
        default=0.0, description="Float market cap in currency units"
    )
    total_market_value: float = Field(
        default=0.0, description="Total market cap in currency units"
    )
    volume_ratio: float = 0.0
    turnover_rate: float = Field(default=0.0, description="Percent")
    minute_strength: float = Field(
        default=0.0, description="Percent move relative to previous close"
    )
    pe: float = 0.0
    pb: float = 0.0

    model_config = {"frozen": True}

    def __hash__(self) -> int:
        return hash(self.code)


_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

_FORM_KEYS: Dict[str, str] = {
    "filterST": "filter_st",
    "filterChiNext": "filter_board",
}


def _snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def _coerce_toggle(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _coerce_bound(value: Any, default: float) -> float:
    """Coerce user bound input to float, falling back to the default."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return number


# Lower bound -> value used when the input is invalid. Metrics that cannot
# be negative fall back to 0, signed ones stay unbounded.
_LOWER_BOUNDS: Dict[str, float] = {
    "min_change_percent": -math.inf,
    "min_price": 0.0,
    "min_circulating_market_value": 0.0,
    "min_volume_ratio": 0.0,
    "min_turnover_rate": 0.0,
    "min_minute_strength": -math.inf,
}
_UPPER_BOUNDS = (
    "max_change_percent",
    "max_price",
    "max_circulating_market_value",
    "max_volume_ratio",
    "max_turnover_rate",
    "max_minute_strength",
)


class FilterSpec(BaseModel):
    """
    User filter and ordering for a screening pass.

    Bounds are inclusive. Circulating market value bounds are expressed in
    hundred-million (亿) units. Invalid bound input is coerced instead of
    being rejected: upper bounds to +inf, lower bounds to 0 for metrics that
    cannot be negative and to -inf for change percent and minute strength.
    """

    min_change_percent: float = -math.inf
    max_change_percent: float = math.inf
    min_price: float = -math.inf
    max_price: float = math.inf
    min_circulating_market_value: float = -math.inf
    max_circulating_market_value: float = math.inf
    min_volume_ratio: float = -math.inf
    max_volume_ratio: float = math.inf
    min_turnover_rate: float = -math.inf
    max_turnover_rate: float = math.inf
    min_minute_strength: float = -math.inf
    max_minute_strength: float = math.inf
    filter_st: bool = False
    filter_board: bool = False
    sort_by: SortField = SortField.CHANGE_PERCENT
    sort_order: SortOrder = SortOrder.DESC

    model_config = {"frozen": True}

    @field_validator(*_LOWER_BOUNDS, mode="before")
    @classmethod
    def _coerce_lower(cls, value: Any, info: ValidationInfo) -> float:
        return _coerce_bound(value, _LOWER_BOUNDS[info.field_name])

    @field_validator(*_UPPER_BOUNDS, mode="before")
    @classmethod
    def _coerce_upper(cls, value: Any) -> float:
        return _coerce_bound(value, math.inf)

    @field_validator("sort_by", mode="before")
    @classmethod
    def _coerce_sort_by(cls, value: Any) -> Any:
        if isinstance(value, SortField):
            return value
        try:
            return SortField(_snake_case(str(value)))
        except ValueError:
            return SortField.CHANGE_PERCENT

    @field_validator("sort_order", mode="before")
    @classmethod
    def _coerce_sort_order(cls, value: Any) -> Any:
        if isinstance(value, SortOrder):
            return value
        try:
            return SortOrder(str(value).lower())
        except ValueError:
            return SortOrder.DESC

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "FilterSpec":
        """
        Build a spec from raw form values.

        Keys may be snake_case or the camelCase names used by the web form
        (``minChangePercent``, ``filterST``, ``sortBy`` ...). Unknown keys are
        ignored; toggles accept "true"/"1"/"on".
        """
        data: Dict[str, Any] = {}
        for key, value in form.items():
            field_name = _FORM_KEYS.get(key) or _snake_case(key)
            if field_name not in cls.model_fields:
                continue
            if field_name in ("filter_st", "filter_board"):
                value = _coerce_toggle(value)
            data[field_name] = value
        return cls.model_validate(data)


class ExclusionEntry(BaseModel):
    """A permanently hidden stock."""

    code: str
    name: str = ""
    reason: str = ""
    excluded_at: int = Field(..., description="Epoch milliseconds")

    model_config = {"frozen": True}


class WatchlistGroup(BaseModel):
    """Named, ordered set of favorite stock codes."""

    id: str
    name: str
    codes: List[str] = Field(default_factory=list)


class Watchlist(BaseModel):
    """Ordered sequence of watchlist groups."""

    groups: List[WatchlistGroup] = Field(default_factory=list)

    @classmethod
    def default(cls) -> "Watchlist":
        """Single empty default group."""
        return cls(
            groups=[WatchlistGroup(id=DEFAULT_GROUP_ID, name=DEFAULT_GROUP_NAME)]
        )

    def find_group(self, group_id: str) -> Optional[WatchlistGroup]:
        """Group with the given id, if any."""
        for group in self.groups:
            if group.id == group_id:
                return group
        return None


class SectorKind(str, Enum):
    """Kind of sector grouping."""

    INDUSTRY = "industry"
    CONCEPT = "concept"


class SectorSummary(BaseModel):
    """Spot performance of an industry or concept sector."""

    name: str
    kind: SectorKind = SectorKind.INDUSTRY
    change_percent: float = 0.0
    amount: float = 0.0
    turnover_rate: float = 0.0
    volume: float = 0.0

    model_config = {"frozen": True}


class ScreeningRequest(BaseModel):
    """Input for a screening pass."""

    spec: FilterSpec = Field(default_factory=FilterSpec)
    timestamp: datetime = Field(default_factory=datetime.now)
    keyword: Optional[str] = Field(default=None, description="Search keyword")
    correlation_id: str = Field(..., description="Unique request identifier")

    model_config = {"frozen": True}


class StageResult(BaseModel):
    """Rejections attributed to a single screening criterion."""

    stage_name: str
    input_count: int
    output_count: int
    duration_seconds: float = 0.0
    filtered_codes: List[str] = Field(default_factory=list)
    filter_reasons: Dict[str, str] = Field(
        default_factory=dict, description="Code -> rejection reason"
    )

    @property
    def rejected_count(self) -> int:
        return self.input_count - self.output_count


class ScreeningResult(BaseModel):
    """Complete result of a screening pass."""

    request: ScreeningRequest
    input_count: int
    quotes: List[Quote] = Field(default_factory=list)
    audit_trail: List[StageResult] = Field(default_factory=list)
    metrics: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def codes(self) -> List[str]:
        return [q.code for q in self.quotes]

    @property
    def total_reduction_ratio(self) -> float:
        """Calculate total reduction ratio."""
        if self.input_count == 0:
            return 0.0
        return 1.0 - (len(self.quotes) / self.input_count)
