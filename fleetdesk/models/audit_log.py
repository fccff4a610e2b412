from sqlalchemy import Column, Integer, String, Text, TIMESTAMP
from sqlalchemy.sql import func
from fleetdesk.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    action      = Column(String(100), nullable=False)       # e.g. CREATE, UPDATE, DELETE, UNLINK
    entity_type = Column(String(100), nullable=False)       # e.g. Driver, Truck, Shipment
    entity_id   = Column(String(36), nullable=True)
    description = Column(Text, nullable=True)
    created_at  = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<AuditLog id={self.id} action={self.action} entity={self.entity_type}:{self.entity_id}>"
