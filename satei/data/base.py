from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Protocol, Tuple

# ----- Data shapes (thin & explicit, immutable once loaded) -----

@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

@dataclass(frozen=True)
class PricePoint:
    # One land-price survey sample
    lat: float
    lng: float
    ppsqm: float

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)

@dataclass(frozen=True)
class Station:
    name: str
    lat: float
    lng: float

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)

@dataclass(frozen=True)
class Deal:
    # A recent comparable sale; transaction_date is None when the source had none or it was unparsable
    lat: float
    lng: float
    ppsqm: float
    transaction_date: Optional[date] = None

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)

@dataclass(frozen=True)
class MarketMeta:
    earlier_median_ppsqm: Optional[float] = None   # survey vintage 2023-09
    later_median_ppsqm: Optional[float] = None     # survey vintage 2025-03
    current_date: Optional[date] = None

@dataclass(frozen=True)
class Dataset:
    """
    Read-only snapshot shared by every valuation call.
    Built once at start-up by the loader and never mutated.
    """
    earlier_points: Tuple[PricePoint, ...] = ()
    later_points: Tuple[PricePoint, ...] = ()
    stations: Tuple[Station, ...] = ()
    deals: Tuple[Deal, ...] = ()
    meta: MarketMeta = field(default_factory=MarketMeta)

    @classmethod
    def empty(cls) -> "Dataset":
        return cls()

    def summary(self) -> dict:
        return {
            "earlier_points": len(self.earlier_points),
            "later_points": len(self.later_points),
            "stations": len(self.stations),
            "deals": len(self.deals),
        }

# ----- Valuation input / output -----

class PropertyType(str, Enum):
    LAND = "land"
    BUILDING = "building"

@dataclass(frozen=True)
class ValuationInput:
    property_type: PropertyType = PropertyType.BUILDING
    area_sqm: float = 60.0
    built_year: Optional[int] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    walk_minutes_override: Optional[float] = None

    @property
    def point(self) -> Optional[GeoPoint]:
        if self.lat is None or self.lng is None:
            return None
        return GeoPoint(self.lat, self.lng)

@dataclass(frozen=True)
class Adjustments:
    walk_rate: float
    age_rate: float
    time_factor: float

@dataclass(frozen=True)
class Basis:
    comparable_count: int
    nearest_station_name: Optional[str]
    walk_minutes: float
    blended_baseline_ppsqm: int

@dataclass(frozen=True)
class ValuationResult:
    price: int
    range_low: int
    range_high: int
    rounding_unit: int
    adjustments: Adjustments
    basis: Basis

    def to_dict(self) -> dict:
        """Wire shape consumed by the HTTP layer and notification bodies."""
        return {
            "price": self.price,
            "range_low": self.range_low,
            "range_high": self.range_high,
            "rounding": self.rounding_unit,
            "adjustments": {
                "walk_rate": self.adjustments.walk_rate,
                "age_rate": self.adjustments.age_rate,
                "time_factor": self.adjustments.time_factor,
            },
            "basis": {
                "used_data_count": self.basis.comparable_count,
                "nearest_station": self.basis.nearest_station_name,
                "walk_minutes": self.basis.walk_minutes,
                "p60_baseline_ppsqm": self.basis.blended_baseline_ppsqm,
            },
        }

# ----- Protocols (interfaces) -----

class DatasetSource(Protocol):
    async def load(self) -> Dataset: ...
