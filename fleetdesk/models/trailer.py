import enum
import uuid
from sqlalchemy import Column, Integer, String, Date, Enum, TIMESTAMP
from sqlalchemy.sql import func
from fleetdesk.database import Base
from fleetdesk.models.truck import FleetStatus, enum_values


class TrailerType(str, enum.Enum):
    BOX         = "Box"
    FLATBED     = "Flatbed"
    CURTAINSIDE = "Curtainside"
    TIR_BOX     = "TIR Box"
    TIR_BL      = "TIR BL"
    BALMER      = "Balmer"
    REEFER      = "Reefer"
    REEFER_TIR  = "Reefer TIR"


class TrailerColor(str, enum.Enum):
    RED    = "red"
    BLUE   = "blue"
    WHITE  = "white"
    BLACK  = "black"
    SILVER = "silver"
    ORANGE = "orange"
    YELLOW = "yellow"


class Trailer(Base):
    __tablename__ = "trailers"

    id             = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    trailer_number = Column(String(50), unique=True, nullable=False, index=True)
    type           = Column(Enum(TrailerType, name="trailer_type", values_callable=enum_values),
                            nullable=False)
    model          = Column(Integer, nullable=False)
    expiry_date    = Column(Date, nullable=False)
    status         = Column(Enum(FleetStatus, name="trailer_status", values_callable=enum_values),
                            default=FleetStatus.ACTIVE, nullable=False, index=True)
    color          = Column(Enum(TrailerColor, name="trailer_color", values_callable=enum_values),
                            nullable=False)
    created_at     = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at     = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                            onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Trailer id={self.id} number={self.trailer_number} status={self.status}>"
