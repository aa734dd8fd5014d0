import math
from datetime import date

import pytest

from satei.core.cache import counters
from satei.data.base import Dataset, Deal, GeoPoint, MarketMeta, PricePoint, Station
from satei.engine.geo import EARTH_RADIUS_M

# Meters per degree of latitude on the haversine sphere
M_PER_DEG_LAT = EARTH_RADIUS_M * math.pi / 180


def north_of(point: GeoPoint, meters: float) -> GeoPoint:
    """Point `meters` due north of `point` (exact along a meridian)."""
    return GeoPoint(point.lat + meters / M_PER_DEG_LAT, point.lng)


@pytest.fixture
def origin():
    """Query location used across engine tests (central Hiroshima)."""
    return GeoPoint(34.3963, 132.4596)


@pytest.fixture
def today():
    """Fixed valuation date for deterministic tests."""
    return date(2025, 9, 1)


@pytest.fixture
def make_deal(origin):
    """Factory for a deal `meters` north of the origin."""
    def _make(meters: float, ppsqm: float, sold_on: date | None = date(2025, 6, 1)) -> Deal:
        p = north_of(origin, meters)
        return Deal(lat=p.lat, lng=p.lng, ppsqm=ppsqm, transaction_date=sold_on)
    return _make


@pytest.fixture
def single_point_dataset(origin):
    """One later-vintage point at the origin, nothing else."""
    return Dataset(later_points=(PricePoint(origin.lat, origin.lng, 300000.0),))


@pytest.fixture
def city_dataset(origin, make_deal):
    """A small but complete snapshot: both vintages, stations, deals and medians."""
    def pp(meters, ppsqm):
        p = north_of(origin, meters)
        return PricePoint(p.lat, p.lng, ppsqm)

    station = north_of(origin, 790)
    return Dataset(
        earlier_points=(pp(0, 280000.0), pp(300, 260000.0), pp(900, 230000.0)),
        later_points=(pp(0, 300000.0), pp(300, 275000.0), pp(900, 240000.0)),
        stations=(Station("広島", station.lat, station.lng),),
        deals=tuple(make_deal(50 * (i + 1), 310000.0 + 10000 * i) for i in range(6)),
        meta=MarketMeta(
            earlier_median_ppsqm=248000.0,
            later_median_ppsqm=262000.0,
            current_date=date(2025, 9, 1),
        ),
    )


@pytest.fixture(autouse=True)
def reset_rate_counters():
    """Rate-limit windows must not leak between tests."""
    counters.clear()
    yield
    counters.clear()
