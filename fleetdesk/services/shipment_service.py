from sqlalchemy.orm import Session

from fleetdesk.models.company import Company
from fleetdesk.models.driver import Driver
from fleetdesk.models.shipment import Shipment
from fleetdesk.models.trailer import Trailer
from fleetdesk.models.truck import Truck
from fleetdesk.schemas.shipment import ShipmentCreateRequest, ShipmentUpdateRequest
from fleetdesk.utils.audit import log_action
from fleetdesk.utils.exceptions import NotFoundException, DuplicateEntryException, InvalidWeightException


def _decimal(v) -> float | None:
    return float(v) if v is not None else None


def _serialize(s: Shipment) -> dict:
    return {
        "id":           s.id,
        "doc_no":       s.doc_no,
        "loading_date": s.loading_date.isoformat(),
        "origin":       s.origin,
        "destination":  s.destination,
        "amount":       _decimal(s.amount),
        "gross_weight": _decimal(s.gross_weight),
        "net_weight":   _decimal(s.net_weight),
        "status":       s.status.value,
        "company":      {"id": s.company.id, "short_name": s.company.short_name} if s.company else None,
        "driver":       {"id": s.driver.id, "code": s.driver.code, "full_name": s.driver.full_name}
                        if s.driver else None,
        "truck":        {"id": s.truck.id, "truck_number": s.truck.truck_number} if s.truck else None,
        "trailer":      {"id": s.trailer.id, "trailer_number": s.trailer.trailer_number}
                        if s.trailer else None,
        "customer_id":  s.customer_id,
    }


_REFERENCES = (
    ("company_id", Company, "Company"),
    ("driver_id",  Driver,  "Driver"),
    ("truck_id",   Truck,   "Truck"),
    ("trailer_id", Trailer, "Trailer"),
)


def _check_references(db: Session, values: dict) -> None:
    for field, model, label in _REFERENCES:
        if values.get(field) and not db.query(model).filter(model.id == values[field]).first():
            raise NotFoundException(label)


class ShipmentService:

    def list_shipments(
        self, db: Session, page: int, limit: int,
        status: str | None, company_id: str | None,
    ) -> tuple[list[dict], int]:
        q = db.query(Shipment)
        if status:
            q = q.filter(Shipment.status == status)
        if company_id:
            q = q.filter(Shipment.company_id == company_id)
        total = q.count()
        items = q.order_by(Shipment.loading_date.desc(), Shipment.doc_no) \
                 .offset((page - 1) * limit).limit(limit).all()
        return [_serialize(s) for s in items], total

    def get_shipment(self, db: Session, shipment_id: str) -> dict:
        s = db.query(Shipment).filter(Shipment.id == shipment_id).first()
        if not s: raise NotFoundException("Shipment")
        return _serialize(s)

    def create_shipment(self, db: Session, data: ShipmentCreateRequest) -> dict:
        if db.query(Shipment).filter(Shipment.doc_no == data.doc_no).first():
            raise DuplicateEntryException("Document number already registered", field="doc_no")
        values = data.model_dump()
        _check_references(db, values)

        s = Shipment(**values)
        db.add(s)
        db.flush()
        log_action(db, "CREATE", "Shipment", s.id, f"Shipment {s.doc_no} was created")
        db.commit()
        db.refresh(s)
        return _serialize(s)

    def update_shipment(self, db: Session, shipment_id: str, data: ShipmentUpdateRequest) -> dict:
        s = db.query(Shipment).filter(Shipment.id == shipment_id).first()
        if not s: raise NotFoundException("Shipment")

        patch = data.model_dump(exclude_unset=True)
        for required in ("doc_no", "loading_date", "company_id", "origin", "destination", "status"):
            if required in patch and patch[required] is None:
                patch.pop(required)
        if patch.get("doc_no") and patch["doc_no"] != s.doc_no:
            if db.query(Shipment).filter(Shipment.doc_no == patch["doc_no"], Shipment.id != shipment_id).first():
                raise DuplicateEntryException("Document number already used", field="doc_no")
        _check_references(db, patch)

        # One weight may arrive on its own; check it against the stored other
        gross = patch.get("gross_weight", s.gross_weight)
        net = patch.get("net_weight", s.net_weight)
        if gross is not None and net is not None and net > gross:
            raise InvalidWeightException()

        for field, value in patch.items():
            setattr(s, field, value)
        log_action(db, "UPDATE", "Shipment", s.id, f"Updated shipment {s.doc_no}")
        db.commit()
        db.refresh(s)
        return _serialize(s)

    def delete_shipment(self, db: Session, shipment_id: str) -> None:
        s = db.query(Shipment).filter(Shipment.id == shipment_id).first()
        if not s: raise NotFoundException("Shipment")
        log_action(db, "DELETE", "Shipment", shipment_id, f"Deleted shipment {s.doc_no}")
        db.delete(s)
        db.commit()


shipment_service = ShipmentService()
