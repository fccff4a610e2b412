from datetime import date
from pydantic import BaseModel, field_validator
from typing import Optional
from fleetdesk.models.driver import DriverStatus
from fleetdesk.schemas.common import blank_to_none


class DriverCreateRequest(BaseModel):
    code:       str
    full_name:  str
    phone:      Optional[str]  = None
    gatepass:   Optional[date] = None
    waqala:     Optional[date] = None
    truck_id:   Optional[str]  = None
    trailer_id: Optional[str]  = None
    company_id: Optional[str]  = None
    status:     DriverStatus   = DriverStatus.ACTIVE

    @field_validator("code", "full_name")
    @classmethod
    def not_empty(cls, v):
        if not v.strip(): raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("phone", "gatepass", "waqala", "truck_id", "trailer_id", "company_id", mode="before")
    @classmethod
    def blank_is_null(cls, v):
        return blank_to_none(v)


class DriverUpdateRequest(BaseModel):
    """Full or partial form state; an explicit null clears the field."""
    code:       Optional[str]          = None
    full_name:  Optional[str]          = None
    phone:      Optional[str]          = None
    gatepass:   Optional[date]         = None
    waqala:     Optional[date]         = None
    truck_id:   Optional[str]          = None
    trailer_id: Optional[str]          = None
    company_id: Optional[str]          = None
    status:     Optional[DriverStatus] = None

    @field_validator("code", "full_name")
    @classmethod
    def not_empty(cls, v):
        if v is None:
            return v
        if not v.strip(): raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("phone", "gatepass", "waqala", "truck_id", "trailer_id", "company_id", mode="before")
    @classmethod
    def blank_is_null(cls, v):
        return blank_to_none(v)
