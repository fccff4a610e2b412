import logging
from sqlalchemy.orm import Session

from fleetdesk.models.driver import Driver
from fleetdesk.models.shipment import Shipment
from fleetdesk.models.trailer import Trailer
from fleetdesk.models.truck import Truck, FleetStatus
from fleetdesk.schemas.assignment import VehicleKind
from fleetdesk.utils.audit import log_action
from fleetdesk.utils.documents import document_status
from fleetdesk.utils.exceptions import NotFoundException, DuplicateEntryException

logger = logging.getLogger(__name__)


def _serialize_truck(t: Truck) -> dict:
    return {
        "id":            t.id,
        "truck_number":  t.truck_number,
        "type":          t.type,
        "model":         t.model,
        "expiry_date":   t.expiry_date.isoformat(),
        "expiry_status": document_status(t.expiry_date).value,
        "status":        t.status.value,
        "vg_id":         t.vg_id,
        "longitude":     t.longitude,
        "latitude":      t.latitude,
        "tracking_link": t.tracking_link,
    }


def _serialize_trailer(t: Trailer) -> dict:
    return {
        "id":             t.id,
        "trailer_number": t.trailer_number,
        "type":           t.type.value,
        "model":          t.model,
        "expiry_date":    t.expiry_date.isoformat(),
        "expiry_status":  document_status(t.expiry_date).value,
        "status":         t.status.value,
        "color":          t.color.value,
    }


class FleetVehicleService:
    """CRUD shared by trucks and trailers; they differ only in model and number column."""

    def __init__(self, kind: VehicleKind, model, number_field: str, serialize):
        self.kind = kind
        self.model = model
        self.number_field = number_field
        self.serialize = serialize

    @property
    def name(self) -> str:
        return self.kind.display_name

    def _get(self, db: Session, vehicle_id: str):
        v = db.query(self.model).filter(self.model.id == vehicle_id).first()
        if not v:
            raise NotFoundException(self.name)
        return v

    def _number_taken(self, db: Session, number: str, exclude_id: str | None = None) -> bool:
        q = db.query(self.model).filter(getattr(self.model, self.number_field) == number)
        if exclude_id:
            q = q.filter(self.model.id != exclude_id)
        return q.first() is not None

    def list_vehicles(self, db: Session, page: int, limit: int, status: str | None) -> tuple[list[dict], int]:
        q = db.query(self.model)
        if status:
            q = q.filter(self.model.status == status)
        total = q.count()
        items = q.order_by(self.model.created_at.desc(), self.model.id) \
                 .offset((page - 1) * limit).limit(limit).all()
        return [self.serialize(v) for v in items], total

    def list_assignable(self, db: Session) -> list[dict]:
        """Active vehicles for the driver form pickers, ordered by number."""
        number = getattr(self.model, self.number_field)
        items = db.query(self.model).filter(self.model.status == FleetStatus.ACTIVE).order_by(number).all()
        return [{"id": v.id, self.number_field: getattr(v, self.number_field)} for v in items]

    def get_vehicle(self, db: Session, vehicle_id: str) -> dict:
        return self.serialize(self._get(db, vehicle_id))

    def create_vehicle(self, db: Session, data) -> dict:
        number = getattr(data, self.number_field)
        if self._number_taken(db, number):
            raise DuplicateEntryException(f"{self.name} number already registered", field=self.number_field)

        v = self.model(**data.model_dump())
        db.add(v)
        db.flush()
        log_action(db, "CREATE", self.name, v.id, f"Created {self.kind.value} {number}")
        db.commit()
        db.refresh(v)
        return self.serialize(v)

    def update_vehicle(self, db: Session, vehicle_id: str, data) -> dict:
        v = self._get(db, vehicle_id)
        patch = {f: val for f, val in data.model_dump(exclude_unset=True).items() if val is not None}

        number = patch.get(self.number_field)
        if number and number != getattr(v, self.number_field) and self._number_taken(db, number, vehicle_id):
            raise DuplicateEntryException(f"{self.name} number already used", field=self.number_field)

        for field, value in patch.items():
            setattr(v, field, value)
        log_action(db, "UPDATE", self.name, v.id, f"Updated {self.kind.value} {getattr(v, self.number_field)}")
        db.commit()
        db.refresh(v)
        return self.serialize(v)

    def delete_vehicle(self, db: Session, vehicle_id: str) -> None:
        v = self._get(db, vehicle_id)
        link = self.kind.link_field
        # Vehicles have no back-reference; find holders by scanning drivers
        unlinked = db.query(Driver).filter(getattr(Driver, link) == vehicle_id).update(
            {getattr(Driver, link): None}, synchronize_session="fetch"
        )
        db.query(Shipment).filter(getattr(Shipment, link) == vehicle_id).update(
            {getattr(Shipment, link): None}, synchronize_session="fetch"
        )
        log_action(db, "DELETE", self.name, vehicle_id,
                   f"Deleted {self.kind.value} {getattr(v, self.number_field)}")
        db.delete(v)
        db.commit()
        if unlinked:
            logger.info(f"Deleted {self.kind.value} {vehicle_id}; unlinked from {unlinked} driver(s)")


truck_service = FleetVehicleService(VehicleKind.TRUCK, Truck, "truck_number", _serialize_truck)
trailer_service = FleetVehicleService(VehicleKind.TRAILER, Trailer, "trailer_number", _serialize_trailer)
