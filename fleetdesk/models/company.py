import uuid
from sqlalchemy import Column, String, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fleetdesk.database import Base


class Company(Base):
    __tablename__ = "companies"

    id         = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code       = Column(String(50), unique=True, nullable=False, index=True)
    short_name = Column(String(100), nullable=False)
    full_name  = Column(String(255), nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(),
                        onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    drivers   = relationship("Driver", back_populates="company")
    shipments = relationship("Shipment", back_populates="company")

    def __repr__(self):
        return f"<Company id={self.id} code={self.code}>"
