"""
Exclusive vehicle assignment.

A truck (or trailer) should be linked to at most one driver. Nothing in the
database enforces that, so every change to a driver's `truck_id` /
`trailer_id` goes through the reconciler below:

1. check_conflict() looks for another driver already holding the vehicle;
2. the operator is shown that holder and asked to confirm;
3. resolve_conflict() unlinks the vehicle from every other holder, one
   update at a time, after which the edited driver's draft may take it.

The clearing updates are not transactional. A failure part-way through
leaves earlier clears in place and is reported as a partial reassignment.
The edited driver's own link is only persisted by the normal driver save,
so abandoning the form after a successful resolve leaves the vehicle with
no driver at all.
"""
import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleetdesk.models.driver import Driver
from fleetdesk.models.trailer import Trailer
from fleetdesk.models.truck import Truck
from fleetdesk.schemas.assignment import VehicleKind, ConflictCheckRequest, ConflictResolveRequest
from fleetdesk.services.driver_store import DriverRecordStore
from fleetdesk.utils.exceptions import (
    AssignmentQueryFailedException,
    NotFoundException,
    PartialReassignmentFailedException,
    VehicleAlreadyAssignedException,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReassignmentResult:
    confirmed: bool
    vehicle_kind: VehicleKind
    vehicle_id: str
    cleared_driver_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def assigned_value(self) -> str | None:
        """What the edited driver's draft field should now hold."""
        return self.vehicle_id if self.confirmed else None


class VehicleAssignmentReconciler:

    def __init__(self, store: DriverRecordStore):
        self.store = store

    def check_conflict(
        self,
        vehicle_kind: VehicleKind,
        vehicle_id: str,
        exclude_driver_id: str | None = None,
    ) -> Driver | None:
        """
        Return the driver (other than `exclude_driver_id`) currently holding
        the vehicle, or None. An empty `vehicle_id` means the selection was
        cleared and never issues a query.
        """
        if not vehicle_id:
            return None

        try:
            holders = self.store.find_where(vehicle_kind.link_field, vehicle_id, id_not=exclude_driver_id)
        except SQLAlchemyError as e:
            logger.error(f"Conflict check failed for {vehicle_kind.value} {vehicle_id}: {e}")
            raise AssignmentQueryFailedException(vehicle_kind.value) from e

        if not holders:
            return None
        if len(holders) > 1:
            logger.warning(
                f"{vehicle_kind.display_name} {vehicle_id} is linked to {len(holders)} drivers: "
                f"{', '.join(d.id for d in holders)}"
            )
        holder = holders[0]
        logger.info(f"{vehicle_kind.display_name} {vehicle_id} already assigned to driver {holder.id} ({holder.label})")
        return holder

    def resolve_conflict(
        self,
        vehicle_kind: VehicleKind,
        vehicle_id: str,
        exclude_driver_id: str | None,
        confirmed: bool,
    ) -> ReassignmentResult:
        if not confirmed or not vehicle_id:
            return ReassignmentResult(confirmed=False, vehicle_kind=vehicle_kind, vehicle_id=vehicle_id)

        field_name = vehicle_kind.link_field
        # Re-query: the holder shown to the operator may be stale by now
        try:
            holders = self.store.find_where(field_name, vehicle_id, id_not=exclude_driver_id)
        except SQLAlchemyError as e:
            logger.error(f"Reassignment lookup failed for {vehicle_kind.value} {vehicle_id}: {e}")
            raise AssignmentQueryFailedException(vehicle_kind.value) from e

        # Each update commits and expires the loaded rows
        targets = [(d.id, d.label) for d in holders]
        cleared: list[str] = []
        for holder_id, holder_label in targets:
            try:
                self.store.update(
                    holder_id,
                    {field_name: None},
                    description=f"{vehicle_kind.display_name} {vehicle_id} unlinked from {holder_label} for reassignment",
                )
            except NotFoundException:
                # Deleted since the re-query: it no longer holds the vehicle
                logger.info(f"Driver {holder_id} is gone, nothing to unlink from {vehicle_kind.value} {vehicle_id}")
                continue
            except SQLAlchemyError as e:
                logger.error(
                    f"Unlinking {vehicle_kind.value} {vehicle_id} from driver {holder_id} failed "
                    f"after clearing {cleared}: {e}"
                )
                raise PartialReassignmentFailedException(vehicle_kind.value, holder_id, cleared) from e
            cleared.append(holder_id)
            logger.info(f"Unlinked {vehicle_kind.value} {vehicle_id} from driver {holder_id}")

        return ReassignmentResult(
            confirmed=True,
            vehicle_kind=vehicle_kind,
            vehicle_id=vehicle_id,
            cleared_driver_ids=tuple(cleared),
        )


def vehicle_label(db: Session, vehicle_kind: VehicleKind, vehicle_id: str) -> str:
    if vehicle_kind is VehicleKind.TRUCK:
        truck = db.query(Truck).filter(Truck.id == vehicle_id).first()
        return truck.truck_number if truck else "Unknown"
    trailer = db.query(Trailer).filter(Trailer.id == vehicle_id).first()
    return trailer.trailer_number if trailer else "Unknown"


def _serialize_holder(d: Driver) -> dict:
    return {
        "id":        d.id,
        "code":      d.code,
        "full_name": d.full_name,
        "label":     d.label,
    }


class AssignmentService:

    def reconciler(self, db: Session) -> VehicleAssignmentReconciler:
        return VehicleAssignmentReconciler(DriverRecordStore(db))

    def check(self, db: Session, data: ConflictCheckRequest) -> dict | None:
        """Confirmation prompt payload, or None when the vehicle is free."""
        holder = self.reconciler(db).check_conflict(data.vehicle_kind, data.vehicle_id, data.exclude_driver_id)
        if holder is None:
            return None
        return {
            "vehicle_kind":   data.vehicle_kind.value,
            "vehicle_id":     data.vehicle_id,
            "vehicle_label":  vehicle_label(db, data.vehicle_kind, data.vehicle_id),
            "current_holder": _serialize_holder(holder),
        }

    def resolve(self, db: Session, data: ConflictResolveRequest) -> dict:
        result = self.reconciler(db).resolve_conflict(
            data.vehicle_kind, data.vehicle_id, data.exclude_driver_id, data.confirmed,
        )
        return {
            "confirmed":          result.confirmed,
            "vehicle_kind":       result.vehicle_kind.value,
            "vehicle_id":         result.vehicle_id,
            "assigned_value":     result.assigned_value,
            "cleared_driver_ids": list(result.cleared_driver_ids),
        }

    def ensure_unassigned(self, db: Session, links: dict[str, str | None], driver_id: str | None) -> None:
        """
        Refuse a driver save that would give a vehicle a second holder.
        `links` maps link field -> value as it is about to be persisted.
        """
        reconciler = self.reconciler(db)
        for kind in VehicleKind:
            vehicle_id = links.get(kind.link_field)
            if not vehicle_id:
                continue
            holder = reconciler.check_conflict(kind, vehicle_id, driver_id)
            if holder is not None:
                raise VehicleAlreadyAssignedException(kind.value, holder.label)


assignment_service = AssignmentService()
