"""
Screening Engine - Filter and Sort a Quote Set.

Evaluates the ordered criteria built from a FilterSpec over a candidate
quote set, then orders the survivors by the configured sort key.

Design Notes:
    - Pure and synchronous: output depends only on quotes, spec and the
      exclusion snapshot
    - Stage-by-stage evaluation is equivalent to short-circuiting per quote
      and yields per-criterion audit data
    - Sorting is stable in both directions (descending sorts on the negated
      key instead of reversing)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from quote_screener.config.models import ScreeningSettings
from quote_screener.domain.entities import (
    FilterSpec,
    Quote,
    SortField,
    SortOrder,
    StageResult,
)
from quote_screener.filters.criteria import Criterion, build_criteria, metric_value

logger = logging.getLogger(__name__)


@dataclass
class ScreeningOutcome:
    """Filtered, sorted quotes with per-criterion audit data."""

    input_count: int
    quotes: List[Quote] = field(default_factory=list)
    stages: List[StageResult] = field(default_factory=list)

    @property
    def rejected_count(self) -> int:
        return self.input_count - len(self.quotes)

    @property
    def rejection_reasons(self) -> Dict[str, str]:
        """Code -> reason for every rejected quote."""
        reasons: Dict[str, str] = {}
        for stage in self.stages:
            reasons.update(stage.filter_reasons)
        return reasons


def sort_quotes(
    quotes: Iterable[Quote],
    sort_by: SortField = SortField.CHANGE_PERCENT,
    sort_order: SortOrder = SortOrder.DESC,
) -> List[Quote]:
    """
    Stable sort by a quote metric.

    Ties keep their input order under either direction.
    """
    field_name = SortField(sort_by).value
    if SortOrder(sort_order) == SortOrder.DESC:
        return sorted(quotes, key=lambda q: -metric_value(q, field_name))
    return sorted(quotes, key=lambda q: metric_value(q, field_name))


class ScreeningEngine:
    """Applies a FilterSpec to a quote set."""

    def __init__(self, settings: Optional[ScreeningSettings] = None) -> None:
        """
        Initialize with engine settings.

        Args:
            settings: ST markers, board prefixes and market value unit
        """
        self.settings = settings or ScreeningSettings()

    def evaluate(
        self,
        quotes: Sequence[Quote],
        spec: FilterSpec,
        excluded: Iterable[str] = (),
    ) -> ScreeningOutcome:
        """
        Filter and sort quotes.

        Args:
            quotes: Candidate quotes
            spec: Filter and ordering
            excluded: Snapshot of excluded codes for this pass

        Returns:
            ScreeningOutcome with surviving quotes in sort order
        """
        criteria = build_criteria(spec, excluded, self.settings)
        current = list(quotes)
        stages: List[StageResult] = []

        for criterion in criteria:
            stage, current = self._apply(criterion, current)
            stages.append(stage)

        ordered = sort_quotes(current, spec.sort_by, spec.sort_order)
        logger.debug(
            f"Screened {len(quotes)} quotes -> {len(ordered)} "
            f"(sort_by={spec.sort_by.value}, order={spec.sort_order.value})"
        )
        return ScreeningOutcome(input_count=len(quotes), quotes=ordered, stages=stages)

    def screen(
        self,
        quotes: Sequence[Quote],
        spec: FilterSpec,
        excluded: Iterable[str] = (),
    ) -> List[Quote]:
        """Filtered, sorted quotes without audit data."""
        return self.evaluate(quotes, spec, excluded).quotes

    def _apply(
        self,
        criterion: Criterion,
        quotes: List[Quote],
    ) -> tuple[StageResult, List[Quote]]:
        """Apply one criterion to the quotes that survived earlier ones."""
        start = time.perf_counter()
        passed: List[Quote] = []
        rejected: List[str] = []
        reasons: Dict[str, str] = {}

        for quote in quotes:
            is_valid, reason = criterion.check(quote)
            if is_valid:
                passed.append(quote)
            else:
                rejected.append(quote.code)
                reasons[quote.code] = reason

        stage = StageResult(
            stage_name=criterion.name,
            input_count=len(quotes),
            output_count=len(passed),
            duration_seconds=time.perf_counter() - start,
            filtered_codes=rejected,
            filter_reasons=reasons,
        )
        return stage, passed


def screen(
    quotes: Sequence[Quote],
    spec: Optional[FilterSpec] = None,
    excluded: Iterable[str] = (),
    settings: Optional[ScreeningSettings] = None,
) -> List[Quote]:
    """
    Filter and sort quotes, excluding persisted-excluded codes.

    Args:
        quotes: Candidate quotes
        spec: Filter and ordering (defaults accept everything)
        excluded: Excluded codes
        settings: Optional engine settings

    Returns:
        Matching quotes in sort order

    Example:
        >>> spec = FilterSpec(min_change_percent=0)
        >>> [q.code for q in screen(quotes, spec)]
        ['sh600000']
    """
    return ScreeningEngine(settings).screen(quotes, spec or FilterSpec(), excluded)
