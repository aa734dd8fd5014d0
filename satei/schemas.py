from typing import Literal
from pydantic import BaseModel, ConfigDict, Field

class EstimateRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    type: Literal["land", "building"] = "building"
    area_sqm: float = Field(default=60, gt=0)
    built_year: int | None = Field(default=None, ge=1800, le=2200)
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    walk_minutes: float | None = Field(default=None, ge=0)
    # Optional copy of the result by mail
    email: str | None = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+$")
    send_to: bool = False

class Adjustments(BaseModel):
    walk_rate: float
    age_rate: float
    time_factor: float

class Basis(BaseModel):
    used_data_count: int
    nearest_station: str | None
    walk_minutes: float
    p60_baseline_ppsqm: int

class EstimateResult(BaseModel):
    price: int
    range_low: int
    range_high: int
    rounding: int
    adjustments: Adjustments
    basis: Basis

class EstimateResponse(BaseModel):
    ok: bool = True
    id: str
    result: EstimateResult

class LeadRequest(BaseModel):
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+$")
    name: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=50)
    note: str | None = Field(default=None, max_length=2000)
    tags: list[str] = Field(default_factory=list)

class LeadResponse(BaseModel):
    ok: bool = True
    id: str
