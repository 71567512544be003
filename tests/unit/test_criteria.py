"""
Unit Tests for Screening Criteria.

Test Aspects Covered:
    ✅ Business Logic: Range bounds, ST marker, board prefix, exclusion
    ✅ Edge Cases: Inclusive bounds, infinite bounds, bare exclusion codes
    ✅ Data Quality: Rejection reasons for the audit trail
"""

from __future__ import annotations

import math

import pytest

from quote_screener.config.models import ScreeningSettings
from quote_screener.domain.entities import FilterSpec
from quote_screener.filters.criteria import (
    BoardCriterion,
    ExclusionCriterion,
    RangeCriterion,
    SpecialTreatmentCriterion,
    build_criteria,
    metric_value,
    scale_bound,
)


class TestRangeCriterion:
    """Test cases for RangeCriterion."""

    def test_bounds_are_inclusive(self, make_quote) -> None:
        """
        SCENARIO: Value equal to min and to max
        EXPECTED: Both pass
        """
        criterion = RangeCriterion("price", 10.0, 20.0)

        assert criterion.check(make_quote(price=10.0))[0] is True
        assert criterion.check(make_quote(price=20.0))[0] is True

    def test_rejects_below_min(self, make_quote) -> None:
        """
        SCENARIO: Price below lower bound
        EXPECTED: Rejected with reason naming the bound
        """
        # Act
        passes, reason = RangeCriterion("price", 10.0).check(make_quote(price=5.0))

        # Assert
        assert passes is False
        assert reason == "price=5 < min=10"

    def test_rejects_above_max(self, make_quote) -> None:
        passes, reason = RangeCriterion("price", upper=10.0).check(make_quote(price=12.5))
        assert passes is False
        assert "> max=10" in reason

    def test_unbounded_accepts_everything(self, make_quote) -> None:
        criterion = RangeCriterion("change_percent")
        assert criterion.check(make_quote(change_percent=-20))[0] is True
        assert criterion.name == "change_percent_range"

    def test_turnover_compared_as_percent(self, make_quote) -> None:
        """
        SCENARIO: Quote built directly with decimal turnover 0.15
        EXPECTED: Compared as 15%
        """
        criterion = RangeCriterion("turnover_rate", 10.0, 20.0)
        quote = make_quote(turnover_rate=0.15)

        assert metric_value(quote, "turnover_rate") == pytest.approx(15.0)
        assert criterion.check(quote)[0] is True


class TestSpecialTreatmentCriterion:
    """Test cases for the ST filter."""

    @pytest.mark.parametrize("name", ["*ST华数", "ST广物", "华数ST"])
    def test_rejects_st_names(self, make_quote, name: str) -> None:
        """
        SCENARIO: Name contains the ST marker anywhere
        EXPECTED: Rejected
        """
        assert SpecialTreatmentCriterion().check(make_quote(name=name))[0] is False

    def test_accepts_regular_name(self, make_quote) -> None:
        assert SpecialTreatmentCriterion().check(make_quote(name="华数股份"))[0] is True

    def test_marker_is_case_sensitive(self, make_quote) -> None:
        assert SpecialTreatmentCriterion().check(make_quote(name="Steel Co"))[0] is True


class TestBoardCriterion:
    """Test cases for the board filter."""

    @pytest.mark.parametrize("code", ["sh688981", "688111"])
    def test_rejects_star_market(self, make_quote, code: str) -> None:
        passes, reason = BoardCriterion().check(make_quote(code))
        assert passes is False
        assert reason == "board prefix 688"

    @pytest.mark.parametrize("code", ["sh600000", "sz300750", "bj830799"])
    def test_accepts_other_boards(self, make_quote, code: str) -> None:
        assert BoardCriterion().check(make_quote(code))[0] is True


class TestExclusionCriterion:
    """Test cases for the exclusion criterion."""

    def test_matches_canonical_and_bare_codes(self, make_quote) -> None:
        """
        SCENARIO: Exclusion set holds a bare code
        EXPECTED: Prefixed quote code still matches
        """
        criterion = ExclusionCriterion(["600519", "", "sz000001"])

        assert criterion.check(make_quote("sh600519"))[0] is False
        assert criterion.check(make_quote("sz000001"))[0] is False
        assert criterion.check(make_quote("sh600000"))[0] is True


class TestBuildCriteria:
    """Test cases for criteria assembly."""

    def test_default_order_without_toggles(self) -> None:
        """
        SCENARIO: Default spec
        EXPECTED: Exclusion first, six range criteria, no ST or board
        """
        names = [c.name for c in build_criteria(FilterSpec())]

        assert names == [
            "exclusion",
            "change_percent_range",
            "price_range",
            "circulating_market_value_range",
            "volume_ratio_range",
            "turnover_rate_range",
            "minute_strength_range",
        ]

    def test_toggles_append_criteria(self) -> None:
        spec = FilterSpec(filter_st=True, filter_board=True)
        names = [c.name for c in build_criteria(spec)]
        assert names[-2:] == ["special_treatment", "board"]

    def test_market_value_bounds_scaled(self, make_quote) -> None:
        """
        SCENARIO: minCirculatingMarketValue = 10 (亿)
        EXPECTED: 5e8 rejected, 1.2e9 accepted
        """
        # Arrange
        criteria = build_criteria(FilterSpec(min_circulating_market_value=10))
        market_value = next(
            c for c in criteria if c.name == "circulating_market_value_range"
        )

        # Act & Assert
        assert market_value.check(make_quote(circulating_market_value=5e8))[0] is False
        assert market_value.check(make_quote(circulating_market_value=1.2e9))[0] is True

    def test_custom_settings(self, make_quote) -> None:
        settings = ScreeningSettings(board_prefixes=["300"], market_value_unit=1e4)
        criteria = build_criteria(FilterSpec(filter_board=True), settings=settings)
        board = criteria[-1]
        assert board.check(make_quote("sz300750"))[0] is False

    def test_scale_bound_keeps_infinity(self) -> None:
        assert scale_bound(math.inf) == math.inf
        assert scale_bound(-math.inf) == -math.inf
        assert scale_bound(2.5) == 250_000_000
