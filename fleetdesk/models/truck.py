import enum
import uuid
from sqlalchemy import Column, Integer, String, Float, Date, Enum, TIMESTAMP
from sqlalchemy.sql import func
from fleetdesk.database import Base


class FleetStatus(str, enum.Enum):
    ACTIVE = "active"
    EMPTY  = "empty"


def enum_values(enum_cls) -> list[str]:
    """Persist enum *values* (the strings the dashboard uses), not member names."""
    return [member.value for member in enum_cls]


class Truck(Base):
    __tablename__ = "trucks"

    id            = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    truck_number  = Column(String(50), unique=True, nullable=False, index=True)
    type          = Column(String(100), nullable=False)
    model         = Column(Integer, nullable=False)
    expiry_date   = Column(Date, nullable=False)
    status        = Column(Enum(FleetStatus, name="truck_status", values_callable=enum_values),
                           default=FleetStatus.ACTIVE, nullable=False, index=True)

    # ─── Tracking ──────────────────────────────────────────────────────────────
    vg_id         = Column(String(100), nullable=True)
    longitude     = Column(Float, nullable=True)
    latitude      = Column(Float, nullable=True)
    tracking_link = Column(String(500), nullable=True)

    created_at    = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at    = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                           onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Truck id={self.id} number={self.truck_number} status={self.status}>"
