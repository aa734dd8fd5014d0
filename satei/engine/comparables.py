import calendar
import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence, Tuple

from ..data.base import Deal, GeoPoint
from .geo import distance_meters

# Comparable search window
RADIUS_M = 1500.0
LOOKBACK_MONTHS = 24
MAX_COMPARABLES = 10
PERCENTILE = 0.6

@dataclass(frozen=True)
class ComparableSelection:
    count: int
    percentile_p60: Optional[float]
    deals: Tuple[Deal, ...] = ()

def months_before(day: date, months: int) -> date:
    """Calendar-month subtraction; the day is clamped to the target month's length."""
    total = day.year * 12 + (day.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))

def percentile(values: Iterable[float], p: float = PERCENTILE) -> Optional[float]:
    """Nearest-rank percentile: sorted ascending, index floor(p * (n - 1))."""
    arr = sorted(v for v in values if v is not None and not math.isnan(v))
    if not arr:
        return None
    return arr[math.floor((len(arr) - 1) * p)]

def select(
    deals: Sequence[Deal],
    query: GeoPoint,
    now: date,
    radius_m: float = RADIUS_M,
    lookback_months: int = LOOKBACK_MONTHS,
    limit: int = MAX_COMPARABLES,
) -> ComparableSelection:
    """
    Pick the closest recent deals around `query`.

    Recency is a hard cutoff, proximity is the ranking axis: deals without a
    date or older than the lookback window are dropped, the rest are ordered
    by distance and capped at `limit`.
    """
    cutoff = months_before(now, lookback_months)
    candidates = []
    for deal in deals:
        if deal.transaction_date is None or deal.transaction_date < cutoff:
            continue
        dist = distance_meters(query, deal.point)
        if dist <= radius_m:
            candidates.append((dist, deal))

    candidates.sort(key=lambda pair: pair[0])
    kept = tuple(deal for _, deal in candidates[:limit])
    return ComparableSelection(
        count=len(kept),
        percentile_p60=percentile(d.ppsqm for d in kept),
        deals=kept,
    )
