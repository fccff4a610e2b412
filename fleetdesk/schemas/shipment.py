from datetime import date
from decimal import Decimal
from pydantic import BaseModel, field_validator, model_validator
from typing import Optional
from fleetdesk.models.shipment import ShipmentStatus
from fleetdesk.schemas.common import blank_to_none


class ShipmentCreateRequest(BaseModel):
    doc_no:       str
    loading_date: date
    company_id:   str
    origin:       str
    destination:  str
    driver_id:    Optional[str]     = None
    truck_id:     Optional[str]     = None
    trailer_id:   Optional[str]     = None
    customer_id:  Optional[str]     = None
    amount:       Optional[Decimal] = None
    gross_weight: Optional[Decimal] = None
    net_weight:   Optional[Decimal] = None
    status:       ShipmentStatus    = ShipmentStatus.WAITING

    @field_validator("doc_no", "company_id", "origin", "destination")
    @classmethod
    def not_empty(cls, v):
        if not v.strip(): raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("driver_id", "truck_id", "trailer_id", "customer_id",
                     "amount", "gross_weight", "net_weight", mode="before")
    @classmethod
    def blank_is_null(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def check_weights(self):
        if self.gross_weight is not None and self.net_weight is not None \
                and self.net_weight > self.gross_weight:
            raise ValueError("Net weight cannot exceed gross weight")
        return self


class ShipmentUpdateRequest(BaseModel):
    doc_no:       Optional[str]            = None
    loading_date: Optional[date]           = None
    company_id:   Optional[str]            = None
    origin:       Optional[str]            = None
    destination:  Optional[str]            = None
    driver_id:    Optional[str]            = None
    truck_id:     Optional[str]            = None
    trailer_id:   Optional[str]            = None
    customer_id:  Optional[str]            = None
    amount:       Optional[Decimal]        = None
    gross_weight: Optional[Decimal]        = None
    net_weight:   Optional[Decimal]        = None
    status:       Optional[ShipmentStatus] = None

    @field_validator("doc_no", "company_id", "origin", "destination")
    @classmethod
    def not_empty(cls, v):
        if v is None:
            return v
        if not v.strip(): raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("driver_id", "truck_id", "trailer_id", "customer_id",
                     "amount", "gross_weight", "net_weight", mode="before")
    @classmethod
    def blank_is_null(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def check_weights(self):
        if self.gross_weight is not None and self.net_weight is not None \
                and self.net_weight > self.gross_weight:
            raise ValueError("Net weight cannot exceed gross weight")
        return self
