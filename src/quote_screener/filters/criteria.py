"""
Screening Criteria - Independent Quote Predicates.

Each criterion checks a single quote and returns ``(passes, reason)``:
    - ExclusionCriterion: Code is on the persisted exclusion list
    - RangeCriterion: Numeric metric within inclusive bounds
    - SpecialTreatmentCriterion: Name carries an ST marker
    - BoardCriterion: Code belongs to a hidden listing board

Design Notes:
    - Criteria are pure; order never changes which quotes pass
    - Metric lookups default to 0 and re-canonicalize turnover rate
    - Clear rejection reasons for the audit trail
"""

from __future__ import annotations

import math
from typing import FrozenSet, Iterable, List, Optional, Protocol, Sequence

from quote_screener.config.models import ScreeningSettings
from quote_screener.domain.entities import HUNDRED_MILLION, FilterSpec, Quote
from quote_screener.domain.value_objects import CheckResult
from quote_screener.normalization.codes import canonicalize, strip_prefix
from quote_screener.normalization.normalizer import canonical_turnover_rate, to_number

PASSED: CheckResult = (True, "")


def metric_value(quote: Quote, field_name: str) -> float:
    """
    Numeric value of a quote metric for comparison and sorting.

    Missing or malformed values read as 0. Turnover rate is canonicalized
    again since quotes may arrive without passing through the normalizer.
    """
    value = to_number(getattr(quote, field_name, 0))
    if field_name == "turnover_rate":
        return canonical_turnover_rate(value)
    return value


class Criterion(Protocol):
    """Protocol for screening criteria."""

    @property
    def name(self) -> str:
        ...

    def check(self, quote: Quote) -> CheckResult:
        ...


class ExclusionCriterion:
    """Reject quotes whose code is on the exclusion list."""

    def __init__(self, excluded: Iterable[str]) -> None:
        self._excluded: FrozenSet[str] = frozenset(
            canonicalize(code) for code in excluded if code
        )

    @property
    def name(self) -> str:
        return "exclusion"

    def check(self, quote: Quote) -> CheckResult:
        if canonicalize(quote.code) in self._excluded:
            return False, "code on exclusion list"
        return PASSED


class RangeCriterion:
    """Reject quotes whose metric falls outside ``[lower, upper]``."""

    def __init__(
        self,
        field_name: str,
        lower: float = -math.inf,
        upper: float = math.inf,
    ) -> None:
        self.field_name = field_name
        self.lower = lower
        self.upper = upper

    @property
    def name(self) -> str:
        return f"{self.field_name}_range"

    def check(self, quote: Quote) -> CheckResult:
        value = metric_value(quote, self.field_name)
        if value < self.lower:
            return False, f"{self.field_name}={value:g} < min={self.lower:g}"
        if value > self.upper:
            return False, f"{self.field_name}={value:g} > max={self.upper:g}"
        return PASSED


class SpecialTreatmentCriterion:
    """Reject issuers flagged for special treatment (ST, *ST)."""

    def __init__(self, markers: Sequence[str] = ("ST",)) -> None:
        self.markers = tuple(markers)

    @property
    def name(self) -> str:
        return "special_treatment"

    def check(self, quote: Quote) -> CheckResult:
        for marker in self.markers:
            if marker in quote.name:
                return False, f"name contains {marker!r}"
        return PASSED


class BoardCriterion:
    """Reject codes listed on a hidden board (STAR Market by default)."""

    def __init__(self, prefixes: Sequence[str] = ("688",)) -> None:
        self.prefixes = tuple(prefixes)

    @property
    def name(self) -> str:
        return "board"

    def check(self, quote: Quote) -> CheckResult:
        digits = strip_prefix(quote.code)
        if digits.startswith(self.prefixes):
            return False, f"board prefix {digits[:3]}"
        return PASSED


def scale_bound(bound: float, unit: float = HUNDRED_MILLION) -> float:
    """Convert a bound entered in display units to currency units."""
    if math.isinf(bound):
        return bound
    return bound * unit


def build_criteria(
    spec: FilterSpec,
    excluded: Iterable[str] = (),
    settings: Optional[ScreeningSettings] = None,
) -> List[Criterion]:
    """
    Build the ordered criteria for a filter spec.

    Args:
        spec: User filter specification
        excluded: Codes on the exclusion list
        settings: Engine settings (ST markers, board prefixes, units)

    Returns:
        Criteria in evaluation order
    """
    settings = settings or ScreeningSettings()
    unit = settings.market_value_unit

    criteria: List[Criterion] = [
        ExclusionCriterion(excluded),
        RangeCriterion(
            "change_percent", spec.min_change_percent, spec.max_change_percent
        ),
        RangeCriterion("price", spec.min_price, spec.max_price),
        RangeCriterion(
            "circulating_market_value",
            scale_bound(spec.min_circulating_market_value, unit),
            scale_bound(spec.max_circulating_market_value, unit),
        ),
        RangeCriterion("volume_ratio", spec.min_volume_ratio, spec.max_volume_ratio),
        RangeCriterion(
            "turnover_rate", spec.min_turnover_rate, spec.max_turnover_rate
        ),
        RangeCriterion(
            "minute_strength", spec.min_minute_strength, spec.max_minute_strength
        ),
    ]

    if spec.filter_st:
        criteria.append(SpecialTreatmentCriterion(settings.st_markers))
    if spec.filter_board:
        criteria.append(BoardCriterion(settings.board_prefixes))

    return criteria
