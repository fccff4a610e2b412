import enum
from pydantic import BaseModel, field_validator
from typing import Optional
from fleetdesk.schemas.common import blank_to_none


class VehicleKind(str, enum.Enum):
    TRUCK   = "truck"
    TRAILER = "trailer"

    @property
    def link_field(self) -> str:
        """Driver column that holds a vehicle of this kind."""
        return f"{self.value}_id"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class ConflictCheckRequest(BaseModel):
    vehicle_kind:      VehicleKind
    vehicle_id:        str           = ""   # "" means the selection was cleared
    exclude_driver_id: Optional[str] = None  # driver being edited; absent when creating

    @field_validator("vehicle_id", mode="before")
    @classmethod
    def none_is_blank(cls, v):
        return "" if v is None else str(v).strip()

    @field_validator("exclude_driver_id", mode="before")
    @classmethod
    def blank_is_null(cls, v):
        return blank_to_none(v)


class ConflictResolveRequest(ConflictCheckRequest):
    confirmed: bool
