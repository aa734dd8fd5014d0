"""Time correction between the two land-price survey vintages."""

import math
from datetime import date

from ..data.base import MarketMeta

# Reference dates of the two survey vintages
EARLIER_SURVEY_DATE = date(2023, 9, 1)
LATER_SURVEY_DATE = date(2025, 3, 1)

def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end (day of month ignored, may be negative)."""
    return (end.year - start.year) * 12 + (end.month - start.month)

def time_factor(now: date, meta: MarketMeta) -> float:
    """
    Multiplicative correction that brings a later-vintage price to `now`.

    The two medians are treated as samples of a market index at the two
    survey dates; the index is linearly inter/extrapolated to `now` and
    expressed relative to the later median. Falls back to 1 when a median is
    missing or the index would be non-positive or non-finite.
    """
    earlier = meta.earlier_median_ppsqm
    later = meta.later_median_ppsqm
    if not earlier or not later:
        return 1.0

    span = max(1, months_between(EARLIER_SURVEY_DATE, LATER_SURVEY_DATE))
    slope = (later - earlier) / span
    index_now = earlier + slope * months_between(EARLIER_SURVEY_DATE, now)
    factor = index_now / later
    if not math.isfinite(factor) or factor <= 0:
        return 1.0
    return factor
