"""
Ranking Views - Single-Metric Leaderboards.

Fixed top-N views over a quote set the caller supplies (usually the
screened universe). Ranking never consults the exclusion list.

Views:
    - GAINERS: change_percent > 0, highest first
    - LOSERS: change_percent < 0, lowest first
    - VOLUME: highest volume first
    - AMOUNT: highest turnover value first
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from quote_screener.domain.entities import Quote, SortOrder
from quote_screener.filters.criteria import metric_value

DEFAULT_LIMIT = 20


class RankMetric(str, Enum):
    """Quote metrics a leaderboard can rank by."""

    CHANGE_PERCENT = "change_percent"
    PRICE = "price"
    VOLUME = "volume"
    AMOUNT = "amount"
    CIRCULATING_MARKET_VALUE = "circulating_market_value"
    VOLUME_RATIO = "volume_ratio"
    TURNOVER_RATE = "turnover_rate"


class RankingView(str, Enum):
    """Predefined leaderboards."""

    GAINERS = "gainers"
    LOSERS = "losers"
    VOLUME = "volume"
    AMOUNT = "amount"


# View -> (metric, direction, pre-filter)
VIEW_DEFINITIONS: Dict[
    RankingView, Tuple[RankMetric, SortOrder, Optional[Callable[[Quote], bool]]]
] = {
    RankingView.GAINERS: (
        RankMetric.CHANGE_PERCENT,
        SortOrder.DESC,
        lambda q: metric_value(q, "change_percent") > 0,
    ),
    RankingView.LOSERS: (
        RankMetric.CHANGE_PERCENT,
        SortOrder.ASC,
        lambda q: metric_value(q, "change_percent") < 0,
    ),
    RankingView.VOLUME: (RankMetric.VOLUME, SortOrder.DESC, None),
    RankingView.AMOUNT: (RankMetric.AMOUNT, SortOrder.DESC, None),
}


def rank(
    quotes: Iterable[Quote],
    metric: RankMetric = RankMetric.CHANGE_PERCENT,
    direction: SortOrder = SortOrder.DESC,
    limit: Optional[int] = DEFAULT_LIMIT,
) -> List[Quote]:
    """
    Stable top-N ordering by one metric.

    Args:
        quotes: Quotes to rank
        metric: Metric to rank by
        direction: ASC or DESC
        limit: Maximum number of quotes (None for all)

    Returns:
        Ranked quotes, ties in input order
    """
    field_name = RankMetric(metric).value
    sign = -1 if SortOrder(direction) == SortOrder.DESC else 1
    ranked = sorted(quotes, key=lambda q: sign * metric_value(q, field_name))
    if limit is None:
        return ranked
    return ranked[: max(limit, 0)]


def leaderboard(
    quotes: Iterable[Quote],
    view: RankingView,
    limit: Optional[int] = DEFAULT_LIMIT,
) -> List[Quote]:
    """
    Predefined leaderboard with its implicit pre-filter.

    Example:
        >>> top = leaderboard(quotes, RankingView.GAINERS)
    """
    metric, direction, pre_filter = VIEW_DEFINITIONS[RankingView(view)]
    candidates = [q for q in quotes if pre_filter(q)] if pre_filter else quotes
    return rank(candidates, metric, direction, limit)
