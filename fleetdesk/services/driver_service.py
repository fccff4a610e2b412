import logging
from sqlalchemy.orm import Session

from fleetdesk.models.company import Company
from fleetdesk.models.driver import Driver
from fleetdesk.models.shipment import Shipment
from fleetdesk.models.trailer import Trailer
from fleetdesk.models.truck import Truck
from fleetdesk.schemas.driver import DriverCreateRequest, DriverUpdateRequest
from fleetdesk.services.assignment_service import assignment_service
from fleetdesk.services.vehicle_selection import DriverDraft
from fleetdesk.utils.audit import log_action
from fleetdesk.utils.documents import document_status
from fleetdesk.utils.exceptions import NotFoundException, DuplicateEntryException

logger = logging.getLogger(__name__)


def _serialize(d: Driver) -> dict:
    return {
        "id":              d.id,
        "code":            d.code,
        "full_name":       d.full_name,
        "phone":           d.phone,
        "gatepass":        d.gatepass.isoformat() if d.gatepass else None,
        "gatepass_status": document_status(d.gatepass).value,
        "waqala":          d.waqala.isoformat() if d.waqala else None,
        "waqala_status":   document_status(d.waqala).value,
        "truck_id":        d.truck_id,
        "truck_number":    d.truck.truck_number if d.truck else None,
        "trailer_id":      d.trailer_id,
        "trailer_number":  d.trailer.trailer_number if d.trailer else None,
        "company_id":      d.company_id,
        "company":         d.company.short_name if d.company else None,
        "status":          d.status.value,
        "created_at":      d.created_at.isoformat() if d.created_at else None,
    }


def _check_references(db: Session, values: dict) -> None:
    if values.get("truck_id") and not db.query(Truck).filter(Truck.id == values["truck_id"]).first():
        raise NotFoundException("Truck")
    if values.get("trailer_id") and not db.query(Trailer).filter(Trailer.id == values["trailer_id"]).first():
        raise NotFoundException("Trailer")
    if values.get("company_id") and not db.query(Company).filter(Company.id == values["company_id"]).first():
        raise NotFoundException("Company")


class DriverService:

    def list_drivers(
        self, db: Session, page: int, limit: int,
        status: str | None, company_id: str | None,
    ) -> tuple[list[dict], int]:
        q = db.query(Driver)
        if status:
            q = q.filter(Driver.status == status)
        if company_id:
            q = q.filter(Driver.company_id == company_id)
        total = q.count()
        items = q.order_by(Driver.created_at.desc(), Driver.id).offset((page - 1) * limit).limit(limit).all()
        return [_serialize(d) for d in items], total

    def get_driver(self, db: Session, driver_id: str) -> dict:
        d = db.query(Driver).filter(Driver.id == driver_id).first()
        if not d: raise NotFoundException("Driver")
        return _serialize(d)

    def create_driver(self, db: Session, data: DriverCreateRequest) -> dict:
        if db.query(Driver).filter(Driver.code == data.code).first():
            raise DuplicateEntryException("Driver code already registered", field="code")

        values = data.model_dump()
        _check_references(db, values)
        assignment_service.ensure_unassigned(db, values, None)

        d = Driver(**values)
        db.add(d)
        db.flush()
        log_action(db, "CREATE", "Driver", d.id, f"New driver {d.full_name} was added")
        db.commit()
        db.refresh(d)
        logger.info(f"Created driver {d.id} ({d.label})")
        return _serialize(d)

    def update_driver(self, db: Session, driver_id: str, data: DriverUpdateRequest) -> dict:
        d = db.query(Driver).filter(Driver.id == driver_id).first()
        if not d: raise NotFoundException("Driver")

        patch = data.model_dump(exclude_unset=True)
        for required in ("code", "full_name", "status"):
            if required in patch and patch[required] is None:
                patch.pop(required)
        if patch.get("code") and patch["code"] != d.code:
            if db.query(Driver).filter(Driver.code == patch["code"], Driver.id != driver_id).first():
                raise DuplicateEntryException("Driver code already used", field="code")

        _check_references(db, patch)
        # Only links that actually change need the exclusivity check
        changed_links = {
            f: v for f, v in patch.items()
            if f in ("truck_id", "trailer_id") and v != getattr(d, f)
        }
        assignment_service.ensure_unassigned(db, changed_links, driver_id)

        for field, value in patch.items():
            setattr(d, field, value)
        log_action(db, "UPDATE", "Driver", d.id, f"Updated driver {d.label}")
        db.commit()
        db.refresh(d)
        return _serialize(d)

    def save_draft(self, db: Session, draft: DriverDraft) -> dict:
        """Persist a driver form draft: the second phase of a vehicle reassignment."""
        payload = draft.to_payload()
        if draft.driver_id is None:
            return self.create_driver(db, DriverCreateRequest(**payload))
        return self.update_driver(db, draft.driver_id, DriverUpdateRequest(**payload))

    def delete_driver(self, db: Session, driver_id: str) -> None:
        d = db.query(Driver).filter(Driver.id == driver_id).first()
        if not d: raise NotFoundException("Driver")
        db.query(Shipment).filter(Shipment.driver_id == driver_id).update({Shipment.driver_id: None})
        log_action(db, "DELETE", "Driver", driver_id, f"Deleted driver {d.label}")
        db.delete(d)
        db.commit()


driver_service = DriverService()
