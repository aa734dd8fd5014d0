from typing import Optional, Sequence

from ..data.base import GeoPoint, PricePoint
from .geo import distance_meters

# Guards the weight for a query sitting exactly on a survey point
MIN_DISTANCE_M = 1e-6

def interpolate(points: Sequence[PricePoint], query: GeoPoint, k: int = 5) -> Optional[float]:
    """
    Inverse-distance-weighted ppsqm from the k nearest survey points.

    Returns None for an empty point set. sorted() is stable, so points at
    equal distance keep their collection order.
    """
    if not points:
        return None
    nearest = sorted(
        ((distance_meters(query, p.point), p) for p in points),
        key=lambda pair: pair[0],
    )[:k]

    num = 0.0
    den = 0.0
    for d, p in nearest:
        w = 1.0 / max(d, MIN_DISTANCE_M)
        num += w * p.ppsqm
        den += w
    return num / den if den > 0 else None
