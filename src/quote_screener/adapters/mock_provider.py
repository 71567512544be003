"""
Mock Quote Provider.

A fake data provider for development and testing. Generates deterministic
quotes for a small A-share universe and serves them in the same
heterogeneous shapes real endpoints use:

    - Full quotes: prefixed ``code``, camelCase fields, turnover in percent
    - Simple quotes: bare ``symbol``, alternate field names, turnover as a
      decimal fraction
    - Bulk universe: both shapes interleaved
"""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from quote_screener.adapters.batch_loader import BatchQuoteLoader
from quote_screener.domain.value_objects import ProgressCallback, RawRecord
from quote_screener.normalization.codes import canonicalize, strip_prefix


class MockQuoteProvider:
    """Fake quote provider for development and testing."""

    # (code, name, industry)
    MOCK_STOCKS: List[Tuple[str, str, str]] = [
        ("600000", "浦发银行", "银行"),
        ("601398", "工商银行", "银行"),
        ("000001", "平安银行", "银行"),
        ("600519", "贵州茅台", "酿酒行业"),
        ("000858", "五粮液", "酿酒行业"),
        ("300750", "宁德时代", "电池"),
        ("002594", "比亚迪", "汽车整车"),
        ("601012", "隆基绿能", "光伏设备"),
        ("000333", "美的集团", "家电行业"),
        ("600036", "招商银行", "银行"),
        # STAR market (hidden by the board filter)
        ("688981", "中芯国际", "半导体"),
        ("688111", "金山办公", "软件开发"),
        # Special treatment (hidden by the ST filter)
        ("600603", "ST广物", "物流行业"),
        ("000656", "*ST金科", "房地产开发"),
        # Beijing exchange
        ("830799", "艾融软件", "软件开发"),
        ("430047", "诺思兰德", "生物制品"),
    ]

    def __init__(
        self,
        seed: int = 42,
        stocks: Optional[Sequence[Tuple[str, str, str]]] = None,
    ) -> None:
        """
        Initialize mock provider with random seed.

        Args:
            seed: Random seed for reproducibility
            stocks: Optional (code, name, industry) universe override
        """
        self._seed = seed
        self._rng = random.Random(seed)
        self._stocks = list(stocks if stocks is not None else self.MOCK_STOCKS)
        self._quotes = self._generate_quotes()

    # ------------------------------------------------------------------
    # Quotes
    # ------------------------------------------------------------------

    def get_all_quotes(
        self,
        batch_size: int = 300,
        concurrency: int = 5,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[RawRecord]:
        """All quotes, full and simple shapes interleaved."""
        codes = [canonicalize(code) for code, _, _ in self._stocks]
        loader = BatchQuoteLoader(self._fetch_mixed, batch_size, concurrency)
        return loader.load(codes, on_progress)

    def get_full_quotes(self, codes: List[str]) -> List[RawRecord]:
        return [
            self._full_record(self._quotes[c])
            for c in self._known(codes)
        ]

    def get_simple_quotes(self, codes: List[str]) -> List[RawRecord]:
        return [
            self._simple_record(self._quotes[c])
            for c in self._known(codes)
        ]

    def search(self, keyword: str) -> List[RawRecord]:
        """Case-insensitive substring match on code and name."""
        needle = (keyword or "").strip().lower()
        if not needle:
            return []
        return [
            {"code": q["code"], "name": q["name"]}
            for q in self._quotes.values()
            if needle in q["code"].lower() or needle in q["name"].lower()
        ]

    # ------------------------------------------------------------------
    # Sectors
    # ------------------------------------------------------------------

    def get_industry_list(self) -> List[Any]:
        seen: Dict[str, None] = {}
        for _, _, industry in self._stocks:
            seen.setdefault(industry, None)
        return [{"name": name} for name in seen]

    def get_industry_spot(self) -> List[RawRecord]:
        """Per-industry averages of constituent moves."""
        records = []
        for entry in self.get_industry_list():
            members = [
                self._quotes[canonicalize(code)]
                for code, _, industry in self._stocks
                if industry == entry["name"]
            ]
            records.append(
                {
                    "name": entry["name"],
                    "changePercent": round(
                        sum(m["changePercent"] for m in members) / len(members), 2
                    ),
                    "amount": sum(m["amount"] for m in members),
                    "turnoverRate": round(
                        sum(m["turnoverRate"] for m in members) / len(members), 2
                    ),
                    "volume": sum(m["volume"] for m in members),
                }
            )
        return records

    def get_industry_constituents(self, name: str) -> List[RawRecord]:
        return [
            self._simple_record(self._quotes[canonicalize(code)])
            for code, _, industry in self._stocks
            if industry == name
        ]

    # ------------------------------------------------------------------
    # Series
    # ------------------------------------------------------------------

    def get_history_kline(self, code: str, period: str = "daily") -> List[RawRecord]:
        """Sixty deterministic daily candles ending at the current price."""
        quote = self._quotes.get(canonicalize(code))
        if quote is None:
            return []

        rng = random.Random(f"{self._seed}:{quote['code']}:{period}")
        step = {"daily": 1, "weekly": 7, "monthly": 30}.get(period, 1)
        close = quote["price"]
        candles = []
        day = date(2024, 6, 28)
        for _ in range(60):
            open_ = round(close * (1 + rng.uniform(-0.03, 0.03)), 2)
            candles.append(
                {
                    "date": day.isoformat(),
                    "open": open_,
                    "close": close,
                    "high": round(max(open_, close) * 1.01, 2),
                    "low": round(min(open_, close) * 0.99, 2),
                    "volume": rng.randint(10_000, 5_000_000),
                }
            )
            close = open_
            day -= timedelta(days=step)
        candles.reverse()
        return candles

    def get_minute_kline(self, code: str, period: str = "1") -> List[RawRecord]:
        """Morning session minute bars drifting from previous close to price."""
        quote = self._quotes.get(canonicalize(code))
        if quote is None:
            return []

        start = datetime(2024, 6, 28, 9, 30)
        bars = 120
        drift = (quote["price"] - quote["prevClose"]) / bars
        return [
            {
                "time": (start + timedelta(minutes=i)).strftime("%H:%M"),
                "price": round(quote["prevClose"] + drift * (i + 1), 2),
                "volume": int(quote["volume"] / bars),
            }
            for i in range(bars)
        ]

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _generate_quotes(self) -> Dict[str, Dict[str, Any]]:
        """Generate one canonical record per stock."""
        quotes: Dict[str, Dict[str, Any]] = {}
        for code, name, industry in self._stocks:
            prev_close = round(self._rng.uniform(3, 200), 2)
            change_percent = round(self._rng.uniform(-9.5, 9.5), 2)
            price = round(prev_close * (1 + change_percent / 100), 2)
            volume = self._rng.randint(50_000, 20_000_000)
            shares = self._rng.uniform(2e8, 2e10)
            circulating = round(price * shares * self._rng.uniform(0.4, 1.0), 0)

            canonical = canonicalize(code)
            quotes[canonical] = {
                "code": canonical,
                "name": name,
                "industry": industry,
                "price": price,
                "prevClose": prev_close,
                "change": round(price - prev_close, 2),
                "changePercent": change_percent,
                "open": round(prev_close * (1 + self._rng.uniform(-0.02, 0.02)), 2),
                "high": round(max(price, prev_close) * 1.015, 2),
                "low": round(min(price, prev_close) * 0.985, 2),
                "volume": volume,
                "amount": round(volume * price, 2),
                "turnoverRate": round(self._rng.uniform(1, 25), 2),
                "volumeRatio": round(self._rng.uniform(0.3, 4), 2),
                "pe": round(self._rng.uniform(5, 80), 2),
                "pb": round(self._rng.uniform(0.5, 12), 2),
                "totalMarketValue": round(price * shares, 0),
                "circulatingMarketValue": circulating,
            }
        return quotes

    def _known(self, codes: List[str]) -> List[str]:
        canonical = [canonicalize(c) for c in codes]
        return [c for c in canonical if c in self._quotes]

    def _fetch_mixed(self, codes: List[str]) -> List[RawRecord]:
        records = []
        for code in codes:
            quote = self._quotes[code]
            index = list(self._quotes).index(code)
            if index % 2 == 0:
                records.append(self._full_record(quote))
            else:
                records.append(self._simple_record(quote))
        return records

    @staticmethod
    def _full_record(quote: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in quote.items() if k != "industry"}

    @staticmethod
    def _simple_record(quote: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "symbol": strip_prefix(quote["code"]),
            "name": quote["name"],
            "current": quote["price"],
            "changeAmount": quote["change"],
            "changePct": quote["changePercent"],
            "yesterdayClose": quote["prevClose"],
            "todayOpen": quote["open"],
            "todayHigh": quote["high"],
            "todayLow": quote["low"],
            "turnoverVolume": quote["volume"],
            "turnoverAmount": quote["amount"],
            "turnover": round(quote["turnoverRate"] / 100, 4),
            "volRatio": quote["volumeRatio"],
            "marketValue": quote["totalMarketValue"],
            "floatValue": quote["circulatingMarketValue"],
        }
