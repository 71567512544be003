"""
Screening Pipeline - Main Orchestrator.

The ScreeningPipeline coordinates the screening workflow around the pure
engine:

    1. Load the quote universe from the provider (batched, concurrent)
    2. Normalize heterogeneous records into Quotes
    3. Validate quotes and report anomalies
    4. Snapshot the exclusion list once per pass
    5. Evaluate criteria and sort
    6. Record audit trail and metrics

It also serves the lookups built on the same provider: keyword search,
quote detail, watchlist quotes, rankings, sectors and series.

Design Notes:
    - All dependencies injected via constructor
    - Every provider failure surfaces as QuoteFetchError
    - Optional ErrorHandler adds retry and circuit breaker per operation
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from quote_screener.adapters.console_logger import ConsoleAuditLogger
from quote_screener.adapters.metrics_collector import InMemoryMetricsCollector
from quote_screener.config.models import ScreenerConfig
from quote_screener.domain.entities import (
    FilterSpec,
    Quote,
    ScreeningRequest,
    ScreeningResult,
    SectorSummary,
    StageResult,
)
from quote_screener.domain.value_objects import ProgressCallback, RawRecord
from quote_screener.engine.ranking import RankingView, leaderboard
from quote_screener.engine.screening import ScreeningEngine
from quote_screener.interfaces.audit_logger import AuditLogger
from quote_screener.interfaces.metrics_collector import MetricsCollector
from quote_screener.interfaces.quote_provider import QuoteProvider
from quote_screener.normalization.codes import canonicalize
from quote_screener.normalization.normalizer import (
    normalize_many,
    normalize_sector,
)
from quote_screener.resilience.error_handler import (
    ErrorHandler,
    QuoteFetchError,
    QuoteNotFoundError,
)
from quote_screener.storage.kv_store import InMemoryStore
from quote_screener.storage.lists import ExclusionList, WatchlistStore
from quote_screener.validation.quote_validator import QuoteValidator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScreeningPipeline:
    """Main orchestrator for quote screening."""

    def __init__(
        self,
        provider: QuoteProvider,
        config: Optional[ScreenerConfig] = None,
        exclusions: Optional[ExclusionList] = None,
        audit_logger: Optional[AuditLogger] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        error_handler: Optional[ErrorHandler] = None,
        quote_validator: Optional[QuoteValidator] = None,
        watchlist: Optional[WatchlistStore] = None,
    ) -> None:
        """
        Initialize pipeline with all dependencies.

        Args:
            provider: Upstream quote data source
            config: Screener configuration
            exclusions: Persisted exclusion list (in-memory when omitted)
            audit_logger: For audit trail
            metrics_collector: For performance metrics
            error_handler: For retry/circuit breaker (optional)
            quote_validator: For quote sanity checks (optional)
            watchlist: Watchlist groups (same store as the exclusions when omitted)
        """
        self.provider = provider
        self.config = config or ScreenerConfig()
        self.exclusions = exclusions or ExclusionList(InMemoryStore())
        self.audit_logger = audit_logger or ConsoleAuditLogger(verbose=False)
        self.metrics_collector = metrics_collector or InMemoryMetricsCollector()
        self.error_handler = error_handler
        self.quote_validator = quote_validator
        self.watchlist = watchlist or WatchlistStore(self.exclusions.store)
        self.engine = ScreeningEngine(self.config.screening)

    # =========================================================================
    # Universe screening
    # =========================================================================

    def load_quotes(
        self, on_progress: Optional[ProgressCallback] = None
    ) -> List[Quote]:
        """
        Load and normalize the whole-market universe.

        Raises:
            QuoteFetchError: If the bulk fetch fails
        """
        load_start = time.perf_counter()
        fetch = self.config.fetch

        raw = self._call(
            "get_all_quotes",
            lambda: self.provider.get_all_quotes(
                batch_size=fetch.batch_size,
                concurrency=fetch.concurrency,
                on_progress=on_progress,
            ),
        )
        quotes = normalize_many(raw)

        load_duration = time.perf_counter() - load_start
        self.metrics_collector.record_timing("quote_load_seconds", load_duration)
        logger.info(f"Loaded {len(quotes)} quotes in {load_duration:.2f}s")
        return quotes

    def screen(
        self,
        spec: Optional[FilterSpec] = None,
        quotes: Optional[List[Quote]] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ScreeningResult:
        """
        Execute a screening pass.

        Args:
            spec: Filter and ordering (configured default when omitted)
            quotes: Candidate quotes; the universe is loaded when None
            on_progress: Progress callback for the universe load

        Returns:
            ScreeningResult with matching quotes and audit trail

        Raises:
            QuoteFetchError: If the universe cannot be loaded
        """
        spec = spec or self.config.screening.default_filter
        if quotes is None:
            quotes = self.load_quotes(on_progress)
        return self._run(spec, quotes)

    def search(
        self,
        keyword: Optional[str],
        spec: Optional[FilterSpec] = None,
        quotes: Optional[List[Quote]] = None,
    ) -> ScreeningResult:
        """
        Keyword search, screened by the same spec.

        A blank keyword screens the supplied (or loaded) universe. Otherwise
        the top ``search_limit`` hits are fetched as simple quotes.

        Raises:
            QuoteFetchError: If search or quote fetch fails
        """
        spec = spec or self.config.screening.default_filter
        keyword = (keyword or "").strip()
        if not keyword:
            return self.screen(spec, quotes)

        hits = self._call("search", lambda: self.provider.search(keyword))
        codes = self._hit_codes(hits)
        if not codes:
            logger.info(f"No search hits for {keyword!r}")
            return self._run(spec, [], keyword=keyword)

        raw = self._call("get_simple_quotes", lambda: self.provider.get_simple_quotes(codes))
        return self._run(spec, normalize_many(raw), keyword=keyword)

    def rankings(
        self,
        quotes: Optional[List[Quote]] = None,
        limit: Optional[int] = None,
    ) -> Dict[RankingView, List[Quote]]:
        """
        All leaderboards over a quote set.

        Args:
            quotes: Quotes to rank; the universe is loaded when None
            limit: Entries per view (configured limit when omitted)
        """
        if quotes is None:
            quotes = self.load_quotes()
        limit = self.config.ranking.limit if limit is None else limit
        return {view: leaderboard(quotes, view, limit) for view in RankingView}

    def _run(
        self,
        spec: FilterSpec,
        quotes: List[Quote],
        keyword: Optional[str] = None,
    ) -> ScreeningResult:
        start_time = time.perf_counter()
        correlation_id = str(uuid.uuid4())
        self.audit_logger.set_correlation_id(correlation_id)

        request = ScreeningRequest(
            spec=spec, keyword=keyword, correlation_id=correlation_id
        )

        if self.quote_validator:
            validation_result = self.quote_validator.validate(quotes)
            if validation_result.has_issues:
                self.audit_logger.log_anomaly(
                    f"Quote validation: {len(validation_result.warnings)} warnings, "
                    f"{len(validation_result.errors)} errors",
                    severity="WARNING" if validation_result.is_valid else "ERROR",
                    context={"flagged_codes": len(validation_result.flagged_codes)},
                )

        excluded = self.exclusions.codes()
        self.metrics_collector.record_count("input_quotes_total", len(quotes))

        outcome = self.engine.evaluate(quotes, spec, excluded)
        for stage in outcome.stages:
            self._report_stage(stage)

        total_duration = time.perf_counter() - start_time
        self.metrics_collector.record_timing("screening_total_seconds", total_duration)
        logger.info(
            f"Screening {correlation_id[:8]}: {outcome.input_count} -> "
            f"{len(outcome.quotes)} quotes ({len(excluded)} excluded codes)"
        )

        return ScreeningResult(
            request=request,
            input_count=outcome.input_count,
            quotes=outcome.quotes,
            audit_trail=outcome.stages,
            metrics=self.metrics_collector.get_metrics(),
            metadata=self._build_metadata(correlation_id, total_duration, len(excluded)),
        )

    def _report_stage(self, stage: StageResult) -> None:
        self.audit_logger.log_stage_start(stage.stage_name, stage.input_count)
        for code, reason in stage.filter_reasons.items():
            self.audit_logger.log_quote_filtered(code, stage.stage_name, reason)
        self.audit_logger.log_stage_end(
            stage.stage_name, stage.output_count, stage.duration_seconds
        )
        self.metrics_collector.record_count(
            "quotes_filtered_total",
            stage.rejected_count,
            {"stage": stage.stage_name},
        )

    # =========================================================================
    # Lookups
    # =========================================================================

    def quote_detail(self, code: str) -> Quote:
        """
        Detailed quote for one stock.

        Falls back to the simple quote when the full quote fails or is empty.

        Raises:
            QuoteNotFoundError: If neither source has the code
            QuoteFetchError: If the fallback fetch fails
        """
        canonical = canonicalize(code)
        quotes = self._fetch_with_fallback([canonical])
        for quote in quotes:
            if quote.code == canonical:
                return quote
        raise QuoteNotFoundError(canonical)

    def watchlist_quotes(
        self, codes: Optional[List[str]] = None
    ) -> Dict[str, Quote]:
        """
        Quotes for watchlist codes, keyed by canonical code.

        Args:
            codes: Codes to quote; every watchlist code when None

        Codes the provider does not know are absent from the result.
        """
        if codes is None:
            codes = self.watchlist.all_codes()
        canonical: List[str] = []
        for code in codes:
            code = canonicalize(code)
            if code and code not in canonical:
                canonical.append(code)
        if not canonical:
            return {}

        return {quote.code: quote for quote in self._fetch_with_fallback(canonical)}

    def sector_summaries(self) -> List[SectorSummary]:
        """Industry sectors with spot data, strongest first."""
        names = self._call("get_industry_list", self.provider.get_industry_list)
        spot = self._call("get_industry_spot", self.provider.get_industry_spot)

        spot_by_name: Dict[str, RawRecord] = {}
        for record in spot or []:
            name = record.get("name") if isinstance(record, Mapping) else None
            if name:
                spot_by_name[str(name)] = record

        summaries: List[SectorSummary] = []
        for entry in names or []:
            name = entry if isinstance(entry, str) else str(entry.get("name") or "")
            if not name:
                continue
            summaries.append(normalize_sector(spot_by_name.get(name, name), name=name))

        return sorted(summaries, key=lambda s: -s.change_percent)

    def sector_constituents(self, name: str) -> List[Quote]:
        raw = self._call(
            "get_industry_constituents",
            lambda: self.provider.get_industry_constituents(name),
        )
        return normalize_many(raw)

    def history(self, code: str, period: str = "daily") -> List[RawRecord]:
        canonical = canonicalize(code)
        return list(
            self._call(
                "get_history_kline",
                lambda: self.provider.get_history_kline(canonical, period),
            )
            or []
        )

    def intraday(self, code: str) -> List[RawRecord]:
        canonical = canonicalize(code)
        return list(
            self._call(
                "get_minute_kline",
                lambda: self.provider.get_minute_kline(canonical),
            )
            or []
        )

    # =========================================================================
    # Provider access
    # =========================================================================

    def _fetch_with_fallback(self, codes: List[str]) -> List[Quote]:
        try:
            raw = self._call("get_full_quotes", lambda: self.provider.get_full_quotes(codes))
        except QuoteFetchError as e:
            logger.warning(f"Full quote fetch failed, using simple quotes: {e}")
            raw = []

        if not raw:
            raw = self._call(
                "get_simple_quotes", lambda: self.provider.get_simple_quotes(codes)
            )
        return [q for q in normalize_many(raw) if q.code]

    def _call(self, operation: str, func: Callable[[], T]) -> T:
        """Invoke the provider, mapping every failure to QuoteFetchError."""
        try:
            if self.error_handler:
                return self.error_handler.call(func, operation)
            return func()
        except QuoteFetchError:
            raise
        except Exception as e:
            logger.error(f"Provider call {operation} failed: {e}")
            raise QuoteFetchError(f"{operation} failed: {e}", operation=operation) from e

    def _hit_codes(self, hits: Optional[List[Any]]) -> List[str]:
        codes: List[str] = []
        for hit in hits or []:
            if isinstance(hit, str):
                code = canonicalize(hit)
            elif isinstance(hit, Mapping):
                code = canonicalize(hit.get("code") or hit.get("symbol"))
            else:
                code = canonicalize(getattr(hit, "code", None))
            if code and code not in codes:
                codes.append(code)
            if len(codes) >= self.config.fetch.search_limit:
                break
        return codes

    def _build_metadata(
        self, correlation_id: str, duration: float, excluded_count: int
    ) -> dict:
        return {
            "correlation_id": correlation_id,
            "timestamp": datetime.now().isoformat(),
            "duration_seconds": duration,
            "excluded_count": excluded_count,
            "version": "1.0.0",
        }
