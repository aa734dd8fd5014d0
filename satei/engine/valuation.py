"""
Valuation pipeline.

Composes the engine pieces into one pure, single-pass computation:
base ppsqm (IDW / medians) → comparables → time correction → blend →
walk/age adjustment → area elasticity → rounding and range.
"""

import logging
import math
from datetime import date
from typing import Optional

from ..data.base import (
    Adjustments,
    Basis,
    Dataset,
    ValuationInput,
    ValuationResult,
)
from . import attributes, blend, comparables, interpolation, market

logger = logging.getLogger(__name__)

FALLBACK_PPSQM = 350_000.0
DEFAULT_WALK_MINUTES = 10
AREA_ELASTICITY = 0.95
ROUNDING_UNIT = 100_000
# Smallest time factor shown after rounding rates to 4 decimals
MIN_REPORTED_FACTOR = 0.0001
IDW_NEIGHBOURS = 5

# (minimum comparable count, range half-width); first match wins
RANGE_LADDER = (
    (6, 0.10),
    (3, 0.15),
)
RANGE_DEFAULT = 0.20

def round_to_unit(value: float, unit: int = ROUNDING_UNIT) -> int:
    """Half-up rounding to a multiple of `unit`; never negative."""
    return max(0, int(math.floor(value / unit + 0.5)) * unit)

def range_pct(comparable_count: int) -> float:
    for min_count, pct in RANGE_LADDER:
        if comparable_count >= min_count:
            return pct
    return RANGE_DEFAULT

def base_ppsqm(inp: ValuationInput, dataset: Dataset) -> float:
    """Interpolated survey price, falling back to vintage medians and a constant floor."""
    point = inp.point
    if point is not None:
        for points in (dataset.later_points, dataset.earlier_points):
            value = interpolation.interpolate(points, point, k=IDW_NEIGHBOURS)
            if value:
                return value
    meta = dataset.meta
    return meta.later_median_ppsqm or meta.earlier_median_ppsqm or FALLBACK_PPSQM

def resolve_now(dataset: Dataset, now: Optional[date] = None) -> date:
    return now or dataset.meta.current_date or date.today()

def compute(inp: ValuationInput, dataset: Dataset, now: Optional[date] = None) -> ValuationResult:
    now = resolve_now(dataset, now)
    point = inp.point

    # 1) Base ppsqm
    base = base_ppsqm(inp, dataset)

    # 2) Comparables (need a location)
    if point is not None:
        comps = comparables.select(dataset.deals, point, now)
    else:
        comps = comparables.ComparableSelection(count=0, percentile_p60=None)

    # 3) Time correction
    tf = market.time_factor(now, dataset.meta)
    ppsqm = base * tf

    # 4) Blend with comparables
    ppsqm = blend.blend(ppsqm, comps.percentile_p60, comps.count)

    # 5) Station walk + building age
    station = attributes.nearest_station(dataset.stations, point)
    if inp.walk_minutes_override is not None:
        walk_minutes = inp.walk_minutes_override
    elif station.minutes is not None:
        walk_minutes = station.minutes
    else:
        walk_minutes = DEFAULT_WALK_MINUTES
    walk_rate = attributes.walk_adjustment(walk_minutes)
    age_rate = attributes.age_adjustment(inp.property_type, inp.built_year, now.year)
    unit_price = ppsqm * (1 + walk_rate) * (1 + age_rate)

    # 6) Area elasticity
    raw = unit_price * math.pow(max(0.0, inp.area_sqm), AREA_ELASTICITY)

    # 7) Rounding & range
    price = round_to_unit(raw)
    pct = range_pct(comps.count)
    low = round_to_unit(price * (1 - pct))
    high = round_to_unit(price * (1 + pct))

    logger.debug(
        "valuation base=%.0f tf=%.4f comps=%d walk=%s price=%d",
        base, tf, comps.count, walk_minutes, price,
    )

    return ValuationResult(
        price=price,
        range_low=low,
        range_high=high,
        rounding_unit=ROUNDING_UNIT,
        adjustments=Adjustments(
            walk_rate=round(walk_rate, 4),
            age_rate=round(age_rate, 4),
            time_factor=max(round(tf, 4), MIN_REPORTED_FACTOR),
        ),
        basis=Basis(
            comparable_count=comps.count,
            nearest_station_name=station.name,
            walk_minutes=walk_minutes,
            blended_baseline_ppsqm=int(math.floor(ppsqm + 0.5)),
        ),
    )

class ValuationEngine:
    """
    Binds one immutable Dataset so callers can inject the engine instead of
    passing the dataset around. Holds no other state.
    """
    def __init__(self, dataset: Dataset):
        self.dataset = dataset

    def compute(self, inp: ValuationInput, now: Optional[date] = None) -> ValuationResult:
        return compute(inp, self.dataset, now)
