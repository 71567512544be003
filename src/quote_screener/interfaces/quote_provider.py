"""
Quote Provider Protocol.

Defines the abstract interface for upstream quote data. Every data source
(mock, HTTP API, vendor SDK) implements this protocol to be used with the
screening pipeline.

The provider is responsible for:
    - Bulk loading the whole-market quote universe
    - Fetching full and simple quotes for explicit codes
    - Keyword search
    - Sector lists, sector spot data and constituents
    - Historical and intraday series

Design Notes:
    - Records are returned raw (heterogeneous field names); the normalizer
      turns them into Quotes
    - Providers raise on failure; they never return an empty list for an
      upstream error
    - Uses typing.Protocol for structural subtyping
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, runtime_checkable

from quote_screener.domain.value_objects import ProgressCallback, RawRecord


@runtime_checkable
class QuoteProvider(Protocol):
    """Abstract interface for quote data access."""

    def get_all_quotes(
        self,
        batch_size: int = 300,
        concurrency: int = 5,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[RawRecord]:
        """
        Load quotes for every listed stock.

        Args:
            batch_size: Codes per upstream request
            concurrency: Maximum requests in flight
            on_progress: Called with (completed_batches, total_batches)

        Returns:
            Raw quote records
        """
        ...

    def get_full_quotes(self, codes: List[str]) -> List[RawRecord]:
        """Detailed quote records for the given codes."""
        ...

    def get_simple_quotes(self, codes: List[str]) -> List[RawRecord]:
        """Lightweight quote records for the given codes."""
        ...

    def search(self, keyword: str) -> List[RawRecord]:
        """
        Search stocks by code, name or pinyin.

        Returns:
            Records carrying at least a code (``code`` or ``symbol``)
        """
        ...

    def get_industry_list(self) -> List[Any]:
        """Industry sectors, as names or records with a ``name``."""
        ...

    def get_industry_spot(self) -> List[RawRecord]:
        """Spot performance records for industry sectors."""
        ...

    def get_industry_constituents(self, name: str) -> List[RawRecord]:
        """Member stocks of an industry sector."""
        ...

    def get_history_kline(self, code: str, period: str = "daily") -> List[RawRecord]:
        """Historical candles for one stock."""
        ...

    def get_minute_kline(self, code: str, period: str = "1") -> List[RawRecord]:
        """Intraday candles for one stock."""
        ...
