import enum
import uuid
from sqlalchemy import Column, String, Date, Enum, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fleetdesk.database import Base
from fleetdesk.models.truck import enum_values


class DriverStatus(str, enum.Enum):
    ACTIVE    = "active"
    VACATION  = "vacation"
    CANCELLED = "cancelled"


class Driver(Base):
    __tablename__ = "drivers"

    id         = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code       = Column(String(50), unique=True, nullable=False, index=True)
    full_name  = Column(String(150), nullable=False)
    phone      = Column(String(30), nullable=True)
    gatepass   = Column(Date, nullable=True)    # expiry date
    waqala     = Column(Date, nullable=True)    # expiry date
    # Weak links: at most one driver per vehicle, upheld by the reconciler, not the DB
    truck_id   = Column(String(36), ForeignKey("trucks.id", ondelete="SET NULL"),
                        nullable=True, index=True)
    trailer_id = Column(String(36), ForeignKey("trailers.id", ondelete="SET NULL"),
                        nullable=True, index=True)
    company_id = Column(String(36), ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    status     = Column(Enum(DriverStatus, name="driver_status", values_callable=enum_values),
                        default=DriverStatus.ACTIVE, nullable=False, index=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                        onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    truck   = relationship("Truck")
    trailer = relationship("Trailer")
    company = relationship("Company", back_populates="drivers")

    @property
    def label(self) -> str:
        return f"{self.code} - {self.full_name}"

    def __repr__(self):
        return f"<Driver id={self.id} code={self.code} truck={self.truck_id} trailer={self.trailer_id}>"
