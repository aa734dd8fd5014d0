"""Tests for the survey-to-now time correction."""

from datetime import date

import pytest

from satei.data.base import MarketMeta
from satei.engine.market import (
    EARLIER_SURVEY_DATE,
    LATER_SURVEY_DATE,
    months_between,
    time_factor,
)


class TestMonthsBetween:
    """Whole calendar months between two dates."""

    def test_survey_span_is_18_months(self):
        """The two vintages are 18 months apart."""
        assert months_between(EARLIER_SURVEY_DATE, LATER_SURVEY_DATE) == 18

    def test_day_of_month_ignored(self):
        """Only year and month count."""
        assert months_between(date(2025, 1, 31), date(2025, 2, 1)) == 1

    def test_negative_when_reversed(self):
        """End before start gives a negative count."""
        assert months_between(date(2025, 3, 1), date(2024, 3, 1)) == -12


class TestTimeFactor:
    """Linear index between the two survey medians."""

    def test_missing_medians(self):
        """No medians → no correction."""
        assert time_factor(date(2025, 9, 1), MarketMeta()) == 1

    def test_one_median_missing(self):
        """A single median is not enough."""
        meta = MarketMeta(earlier_median_ppsqm=200000.0)
        assert time_factor(date(2025, 9, 1), meta) == 1

    @pytest.mark.parametrize("now", [date(2020, 1, 1), date(2024, 6, 15), date(2025, 3, 1), date(2030, 12, 31)])
    def test_flat_market_is_identity(self, now):
        """Equal medians → factor exactly 1 for any date."""
        meta = MarketMeta(earlier_median_ppsqm=250000.0, later_median_ppsqm=250000.0)
        assert time_factor(now, meta) == 1

    def test_at_later_survey(self):
        """At the later survey date the index equals the later median."""
        meta = MarketMeta(earlier_median_ppsqm=200000.0, later_median_ppsqm=220000.0)
        assert time_factor(LATER_SURVEY_DATE, meta) == pytest.approx(1.0)

    def test_at_earlier_survey(self):
        """At the earlier survey date the factor is earlier/later."""
        meta = MarketMeta(earlier_median_ppsqm=200000.0, later_median_ppsqm=220000.0)
        assert time_factor(EARLIER_SURVEY_DATE, meta) == pytest.approx(200000 / 220000)

    def test_extrapolates_forward(self):
        """36 months after the earlier survey: 200k + 2 × 20k = 240k."""
        meta = MarketMeta(earlier_median_ppsqm=200000.0, later_median_ppsqm=220000.0)
        assert time_factor(date(2026, 9, 1), meta) == pytest.approx(240000 / 220000)

    def test_non_positive_index_falls_back(self):
        """A steep decline extrapolated below zero resets to 1."""
        meta = MarketMeta(earlier_median_ppsqm=300000.0, later_median_ppsqm=100000.0)
        assert time_factor(date(2026, 3, 1), meta) == 1

    def test_zero_median_treated_as_missing(self):
        """A zero median cannot anchor an index."""
        meta = MarketMeta(earlier_median_ppsqm=0.0, later_median_ppsqm=220000.0)
        assert time_factor(date(2025, 9, 1), meta) == 1
