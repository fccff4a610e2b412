"""
Per-field selection state for the truck / trailer pickers of a driver draft.

    Unselected --choose--> SelectedNoConflict            (vehicle was free)
    Unselected --choose--> PendingConfirmation           (held by someone else)
    PendingConfirmation --cancel--> previous state       (field reverts)
    PendingConfirmation --confirm, clears ok--> Selected
    PendingConfirmation --confirm, a clear fails--> PendingConfirmation

Choosing another vehicle while a confirmation is pending drops the pending
one and starts over from the state it had replaced. The draft is local: only
other drivers' rows are written here, never the draft's own.
"""
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Union

from fleetdesk.models.driver import Driver, DriverStatus
from fleetdesk.schemas.assignment import VehicleKind
from fleetdesk.services.assignment_service import VehicleAssignmentReconciler
from fleetdesk.utils.exceptions import AssignmentQueryFailedException, InvalidSelectionStateException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unselected:
    @property
    def value(self) -> str | None:
        return None


@dataclass(frozen=True)
class SelectedNoConflict:
    vehicle_id: str

    @property
    def value(self) -> str | None:
        return self.vehicle_id


@dataclass(frozen=True)
class PendingConfirmation:
    vehicle_id: str
    holder_id: str
    holder_label: str
    previous: "VehicleSelection"

    @property
    def value(self) -> str | None:
        # Not set until confirmed
        return self.previous.value


@dataclass(frozen=True)
class Selected:
    vehicle_id: str

    @property
    def value(self) -> str | None:
        return self.vehicle_id


VehicleSelection = Union[Unselected, SelectedNoConflict, PendingConfirmation, Selected]


def selection_for(vehicle_id: str | None) -> VehicleSelection:
    """Initial state for a field loaded from a saved driver."""
    return Selected(vehicle_id) if vehicle_id else Unselected()


@dataclass
class DriverDraft:
    """Unsaved driver form state. `driver_id` is None while creating."""
    driver_id: str | None = None
    code: str = ""
    full_name: str = ""
    phone: str | None = None
    gatepass: date | None = None
    waqala: date | None = None
    company_id: str | None = None
    status: DriverStatus = DriverStatus.ACTIVE
    truck: VehicleSelection = field(default_factory=Unselected)
    trailer: VehicleSelection = field(default_factory=Unselected)

    @classmethod
    def from_driver(cls, d: Driver) -> "DriverDraft":
        return cls(
            driver_id=d.id,
            code=d.code,
            full_name=d.full_name,
            phone=d.phone,
            gatepass=d.gatepass,
            waqala=d.waqala,
            company_id=d.company_id,
            status=d.status,
            truck=selection_for(d.truck_id),
            trailer=selection_for(d.trailer_id),
        )

    def selection(self, kind: VehicleKind) -> VehicleSelection:
        return self.truck if kind is VehicleKind.TRUCK else self.trailer

    def with_selection(self, kind: VehicleKind, selection: VehicleSelection) -> "DriverDraft":
        return replace(self, **{kind.value: selection})

    @property
    def truck_id(self) -> str | None:
        return self.truck.value

    @property
    def trailer_id(self) -> str | None:
        return self.trailer.value

    def is_pending(self) -> bool:
        return isinstance(self.truck, PendingConfirmation) or isinstance(self.trailer, PendingConfirmation)

    def to_payload(self) -> dict[str, Any]:
        """Full form state as the driver save expects it."""
        return {
            "code":       self.code,
            "full_name":  self.full_name,
            "phone":      self.phone,
            "gatepass":   self.gatepass,
            "waqala":     self.waqala,
            "company_id": self.company_id,
            "status":     self.status,
            "truck_id":   self.truck_id,
            "trailer_id": self.trailer_id,
        }


class VehicleSelectionFlow:
    """Drives a DriverDraft's vehicle fields through the reconciler."""

    def __init__(self, reconciler: VehicleAssignmentReconciler, draft: DriverDraft):
        self.reconciler = reconciler
        self.draft = draft

    def _settled(self, kind: VehicleKind) -> VehicleSelection:
        current = self.draft.selection(kind)
        if isinstance(current, PendingConfirmation):
            return current.previous
        return current

    def choose(self, kind: VehicleKind, vehicle_id: str) -> VehicleSelection:
        # Reselecting cancels any pending confirmation on this field
        base = self._settled(kind)

        if not vehicle_id:
            self.draft = self.draft.with_selection(kind, Unselected())
            return self.draft.selection(kind)

        # The field is only touched once the read has succeeded
        try:
            holder = self.reconciler.check_conflict(kind, vehicle_id, self.draft.driver_id)
        except AssignmentQueryFailedException:
            logger.warning(
                f"{kind.display_name} selection {vehicle_id} aborted, field left at {self.draft.selection(kind)}"
            )
            raise

        if holder is None:
            selection = SelectedNoConflict(vehicle_id)
        else:
            selection = PendingConfirmation(
                vehicle_id=vehicle_id,
                holder_id=holder.id,
                holder_label=holder.label,
                previous=base,
            )
        self.draft = self.draft.with_selection(kind, selection)
        return selection

    def confirm(self, kind: VehicleKind) -> VehicleSelection:
        pending = self.draft.selection(kind)
        if not isinstance(pending, PendingConfirmation):
            raise InvalidSelectionStateException(kind.value)

        # On PartialReassignmentFailedException the field stays pending
        self.reconciler.resolve_conflict(kind, pending.vehicle_id, self.draft.driver_id, confirmed=True)
        selection = Selected(pending.vehicle_id)
        self.draft = self.draft.with_selection(kind, selection)
        return selection

    def cancel(self, kind: VehicleKind) -> VehicleSelection:
        pending = self.draft.selection(kind)
        if isinstance(pending, PendingConfirmation):
            self.reconciler.resolve_conflict(kind, pending.vehicle_id, self.draft.driver_id, confirmed=False)
            self.draft = self.draft.with_selection(kind, pending.previous)
        return self.draft.selection(kind)
