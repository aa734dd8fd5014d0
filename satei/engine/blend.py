import math
from typing import Optional, Tuple

# (minimum comparable count, weight on comparables, weight on base); first match wins
WEIGHT_LADDER = (
    (6, 0.70, 0.30),
    (3, 0.50, 0.50),
    (1, 0.30, 0.70),
)

def blend_weights(comparable_count: int) -> Tuple[float, float]:
    """Return (weight_on_comparables, weight_on_base) for a sample size."""
    for min_count, w_comp, w_base in WEIGHT_LADDER:
        if comparable_count >= min_count:
            return w_comp, w_base
    return 0.0, 1.0

def blend(base_price: float, comparable_percentile: Optional[float], comparable_count: int) -> float:
    if comparable_percentile is None or not math.isfinite(comparable_percentile):
        return base_price
    w_comp, w_base = blend_weights(comparable_count)
    return base_price * w_base + comparable_percentile * w_comp
