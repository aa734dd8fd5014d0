import math
from dataclasses import dataclass
from typing import Optional, Sequence

from ..data.base import GeoPoint, PropertyType, Station
from .geo import distance_meters

WALK_SPEED_M_PER_MIN = 80.0
WALK_STEP_MINUTES = 5
WALK_RATE_PER_STEP = -0.02
WALK_RATE_FLOOR = -0.20

AGE_RATE_EARLY = -0.005   # per year, first three years
AGE_RATE_LATE = -0.01     # per year afterwards
AGE_EARLY_YEARS = 3
AGE_RATE_FLOOR = -0.40

@dataclass(frozen=True)
class NearestStation:
    name: Optional[str]
    minutes: Optional[int]

def walk_adjustment(minutes: float) -> float:
    """-2% per full 5 minutes of walking, floored at -20%."""
    steps = math.floor(max(0.0, minutes) / WALK_STEP_MINUTES)
    if steps == 0:
        return 0.0
    return max(WALK_RATE_FLOOR, WALK_RATE_PER_STEP * steps)

def age_adjustment(property_type: PropertyType, built_year: Optional[int], now_year: int) -> float:
    """
    Depreciation rate for a building.

    -0.5% per year for the first three years, then -1% per year, capped at
    -40%. Land and unknown build years get 0.
    """
    if property_type == PropertyType.LAND or not built_year:
        return 0.0
    age = max(0, now_year - int(built_year))
    if age == 0:
        return 0.0
    rate = AGE_RATE_EARLY * age if age <= AGE_EARLY_YEARS else AGE_RATE_LATE * age
    return max(rate, AGE_RATE_FLOOR)

def nearest_station(stations: Sequence[Station], point: Optional[GeoPoint]) -> NearestStation:
    if not stations or point is None:
        return NearestStation(name=None, minutes=None)
    best_dist = None
    best = None
    for station in stations:
        d = distance_meters(point, station.point)
        if best_dist is None or d < best_dist:
            best_dist, best = d, station
    return NearestStation(
        name=best.name or None,
        minutes=math.ceil(best_dist / WALK_SPEED_M_PER_MIN),
    )
