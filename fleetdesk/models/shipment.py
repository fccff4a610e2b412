import enum
import uuid
from sqlalchemy import Column, String, Date, Numeric, Enum, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fleetdesk.database import Base
from fleetdesk.models.truck import enum_values


class ShipmentStatus(str, enum.Enum):
    WAITING   = "waiting"
    SUBMITTED = "submitted"


class Shipment(Base):
    __tablename__ = "shipments"

    id           = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    doc_no       = Column(String(50), unique=True, nullable=False, index=True)
    loading_date = Column(Date, nullable=False)
    driver_id    = Column(String(36), ForeignKey("drivers.id", ondelete="SET NULL"), nullable=True)
    truck_id     = Column(String(36), ForeignKey("trucks.id", ondelete="SET NULL"), nullable=True)
    trailer_id   = Column(String(36), ForeignKey("trailers.id", ondelete="SET NULL"), nullable=True)
    company_id   = Column(String(36), ForeignKey("companies.id"), nullable=False)
    customer_id  = Column(String(36), nullable=True)
    origin       = Column(String(200), nullable=False)
    destination  = Column(String(200), nullable=False)
    amount       = Column(Numeric(12, 2), nullable=True)
    gross_weight = Column(Numeric(12, 3), nullable=True)
    net_weight   = Column(Numeric(12, 3), nullable=True)
    status       = Column(Enum(ShipmentStatus, name="shipment_status", values_callable=enum_values),
                          default=ShipmentStatus.WAITING, nullable=False, index=True)
    created_at   = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at   = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                          onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    driver  = relationship("Driver")
    truck   = relationship("Truck")
    trailer = relationship("Trailer")
    company = relationship("Company", back_populates="shipments")

    def __repr__(self):
        return f"<Shipment id={self.id} doc_no={self.doc_no} status={self.status}>"
