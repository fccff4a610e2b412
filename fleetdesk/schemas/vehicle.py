from datetime import date
from pydantic import BaseModel, field_validator
from typing import Optional
from fleetdesk.models.truck import FleetStatus
from fleetdesk.models.trailer import TrailerType, TrailerColor


def validate_model_year(v: int | None) -> int | None:
    if v is not None and not (1950 <= v <= 2100):
        raise ValueError("Model year must be between 1950 and 2100")
    return v


def normalize_number(v: str | None) -> str | None:
    if v is None:
        return v
    if not v.strip(): raise ValueError("Number cannot be empty")
    return v.strip().upper()


# ─── Trucks ───────────────────────────────────────────────────────────────────
class TruckCreateRequest(BaseModel):
    truck_number:  str
    type:          str
    model:         int
    expiry_date:   date
    status:        FleetStatus = FleetStatus.ACTIVE
    vg_id:         Optional[str]   = None
    longitude:     Optional[float] = None
    latitude:      Optional[float] = None
    tracking_link: Optional[str]   = None

    @field_validator("truck_number")
    @classmethod
    def check_number(cls, v):
        return normalize_number(v)

    @field_validator("model")
    @classmethod
    def check_year(cls, v):
        return validate_model_year(v)


class TruckUpdateRequest(BaseModel):
    truck_number:  Optional[str]         = None
    type:          Optional[str]         = None
    model:         Optional[int]         = None
    expiry_date:   Optional[date]        = None
    status:        Optional[FleetStatus] = None
    vg_id:         Optional[str]         = None
    longitude:     Optional[float]       = None
    latitude:      Optional[float]       = None
    tracking_link: Optional[str]         = None

    @field_validator("truck_number")
    @classmethod
    def check_number(cls, v):
        return normalize_number(v)

    @field_validator("model")
    @classmethod
    def check_year(cls, v):
        return validate_model_year(v)


# ─── Trailers ─────────────────────────────────────────────────────────────────
class TrailerCreateRequest(BaseModel):
    trailer_number: str
    type:           TrailerType
    model:          int
    expiry_date:    date
    color:          TrailerColor
    status:         FleetStatus = FleetStatus.ACTIVE

    @field_validator("trailer_number")
    @classmethod
    def check_number(cls, v):
        return normalize_number(v)

    @field_validator("model")
    @classmethod
    def check_year(cls, v):
        return validate_model_year(v)


class TrailerUpdateRequest(BaseModel):
    trailer_number: Optional[str]          = None
    type:           Optional[TrailerType]  = None
    model:          Optional[int]          = None
    expiry_date:    Optional[date]         = None
    color:          Optional[TrailerColor] = None
    status:         Optional[FleetStatus]  = None

    @field_validator("trailer_number")
    @classmethod
    def check_number(cls, v):
        return normalize_number(v)

    @field_validator("model")
    @classmethod
    def check_year(cls, v):
        return validate_model_year(v)
