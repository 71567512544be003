"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from quote_screener.adapters.console_logger import ConsoleAuditLogger
from quote_screener.adapters.metrics_collector import InMemoryMetricsCollector
from quote_screener.adapters.mock_provider import MockQuoteProvider
from quote_screener.config.models import ScreenerConfig, ScreeningSettings
from quote_screener.domain.entities import Quote
from quote_screener.storage.kv_store import InMemoryStore
from quote_screener.storage.lists import ExclusionList, WatchlistStore


@pytest.fixture(autouse=True)
def set_random_seed():
    """Ensure all tests are deterministic."""
    random.seed(42)
    yield


@pytest.fixture
def sample_config_path() -> Path:
    """Path to sample configuration file."""
    return Path(__file__).parent / "fixtures" / "sample_config.yaml"


@pytest.fixture
def mock_provider() -> MockQuoteProvider:
    """Create mock provider for testing."""
    return MockQuoteProvider(seed=42)


@pytest.fixture
def console_logger() -> ConsoleAuditLogger:
    """Create console logger for testing."""
    return ConsoleAuditLogger(verbose=False)


@pytest.fixture
def metrics_collector() -> InMemoryMetricsCollector:
    """Create metrics collector for testing."""
    return InMemoryMetricsCollector()


@pytest.fixture
def default_config() -> ScreenerConfig:
    """Create default screener configuration."""
    return ScreenerConfig()


@pytest.fixture
def screening_settings() -> ScreeningSettings:
    return ScreeningSettings()


@pytest.fixture
def memory_store() -> InMemoryStore:
    """Empty in-memory key-value store."""
    return InMemoryStore()


@pytest.fixture
def fixed_clock() -> Callable[[], float]:
    """Clock returning a fixed instant (2024-06-28 07:00:00 UTC)."""
    return lambda: 1_719_558_000.0


@pytest.fixture
def exclusion_list(memory_store: InMemoryStore, fixed_clock) -> ExclusionList:
    return ExclusionList(memory_store, clock=fixed_clock)


@pytest.fixture
def watchlist_store(memory_store: InMemoryStore, fixed_clock) -> WatchlistStore:
    return WatchlistStore(memory_store, clock=fixed_clock)


@pytest.fixture
def make_quote() -> Callable[..., Quote]:
    """Factory for quotes with sensible defaults."""

    def _make(code: str = "sh600000", **fields: Any) -> Quote:
        data: Dict[str, Any] = {
            "code": code,
            "name": "测试股份",
            "price": 10.0,
            "prev_close": 10.0,
            "change_percent": 0.0,
            "volume": 100_000,
            "amount": 1_000_000,
            "circulating_market_value": 50 * 100_000_000,
            "volume_ratio": 1.0,
            "turnover_rate": 2.0,
        }
        data.update(fields)
        return Quote(**data)

    return _make


@pytest.fixture
def sample_quotes(make_quote) -> List[Quote]:
    """
    Small universe covering every filter dimension.

    Order matters for stability tests: the two 3.0% movers appear in
    input order sh600000, sz000001.
    """
    return [
        make_quote("sh600000", name="浦发银行", change_percent=3.0, price=8.5),
        make_quote("sz000001", name="平安银行", change_percent=3.0, price=11.2),
        make_quote("sh600519", name="贵州茅台", change_percent=-1.5, price=1500.0,
                   circulating_market_value=18_000 * 100_000_000),
        make_quote("sh688981", name="中芯国际", change_percent=5.2, price=45.0),
        make_quote("sz000656", name="*ST金科", change_percent=-4.8, price=1.2),
        make_quote("bj830799", name="艾融软件", change_percent=0.0, price=20.0,
                   turnover_rate=0.15),
    ]


@pytest.fixture
def raw_full_record() -> Dict[str, Any]:
    """Full-quote shaped upstream record."""
    return {
        "code": "sh600000",
        "name": "浦发银行",
        "price": 8.5,
        "change": 0.25,
        "changePercent": 3.03,
        "open": 8.3,
        "prevClose": 8.25,
        "high": 8.6,
        "low": 8.2,
        "volume": 1_234_567,
        "amount": 10_493_819.5,
        "turnoverRate": 1.8,
        "volumeRatio": 1.4,
        "pe": 4.9,
        "pb": 0.4,
        "totalMarketValue": 249_500_000_000,
        "circulatingMarketValue": 249_500_000_000,
    }


@pytest.fixture
def raw_simple_record() -> Dict[str, Any]:
    """Simple-quote shaped upstream record (alternate names, decimal turnover)."""
    return {
        "symbol": "000001",
        "name": "平安银行",
        "current": 11.2,
        "changeAmount": 0.33,
        "changePct": 3.04,
        "yesterdayClose": 10.87,
        "turnoverVolume": 900_000,
        "turnoverAmount": 10_080_000,
        "turnover": 0.1396,
        "volRatio": 0.9,
        "marketValue": 217_300_000_000,
        "floatValue": 217_300_000_000,
    }
