"""
Engine Package - Screening and Ranking.

Components:
    - ScreeningEngine / screen: FilterSpec evaluation with stable sorting
    - rank / leaderboard: Single-metric top-N views

Design Principles:
    - Stateless, pure functions of their inputs
    - No I/O; persisted state arrives as a snapshot argument
"""

from quote_screener.engine.ranking import (
    DEFAULT_LIMIT,
    RankingView,
    RankMetric,
    leaderboard,
    rank,
)
from quote_screener.engine.screening import (
    ScreeningEngine,
    ScreeningOutcome,
    screen,
    sort_quotes,
)

__all__ = [
    "DEFAULT_LIMIT",
    "RankingView",
    "RankMetric",
    "leaderboard",
    "rank",
    "ScreeningEngine",
    "ScreeningOutcome",
    "screen",
    "sort_quotes",
]
