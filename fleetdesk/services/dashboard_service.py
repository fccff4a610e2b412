from datetime import date, timedelta
from sqlalchemy import func
from sqlalchemy.orm import Session

from fleetdesk.config import settings
from fleetdesk.models.audit_log import AuditLog
from fleetdesk.models.company import Company
from fleetdesk.models.driver import Driver, DriverStatus
from fleetdesk.models.shipment import Shipment
from fleetdesk.models.trailer import Trailer
from fleetdesk.models.truck import Truck


class DashboardService:

    def summary(self, db: Session, today: date | None = None) -> dict:
        today = today or date.today()
        horizon = today + timedelta(days=settings.DOCUMENT_EXPIRY_WARNING_DAYS)

        shipments_by_status = {
            status.value: count
            for status, count in db.query(Shipment.status, func.count(Shipment.id)).group_by(Shipment.status)
        }
        expiring_trucks = db.query(Truck).filter(Truck.expiry_date <= horizon).count()
        expiring_trailers = db.query(Trailer).filter(Trailer.expiry_date <= horizon).count()

        return {
            "total_drivers":       db.query(Driver).count(),
            "active_drivers":      db.query(Driver).filter(Driver.status == DriverStatus.ACTIVE).count(),
            "total_trucks":        db.query(Truck).count(),
            "total_trailers":      db.query(Trailer).count(),
            "total_shipments":     sum(shipments_by_status.values()),
            "shipments_by_status": shipments_by_status,
            "total_companies":     db.query(Company).count(),
            "expiring_documents":  expiring_trucks + expiring_trailers,
            "recent_activity":     self.recent_activity(db),
        }

    def recent_activity(self, db: Session, limit: int = 5) -> list[dict]:
        entries = db.query(AuditLog).order_by(AuditLog.id.desc()).limit(limit).all()
        return [{
            "id":          e.id,
            "type":        e.entity_type.lower(),
            "action":      e.action,
            "description": e.description,
            "timestamp":   e.created_at.isoformat() if e.created_at else None,
        } for e in entries]


dashboard_service = DashboardService()
