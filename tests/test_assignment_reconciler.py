import pytest
from sqlalchemy.exc import OperationalError

from conftest import reload
from fleetdesk.models import Driver
from fleetdesk.schemas.assignment import VehicleKind
from fleetdesk.services.assignment_service import VehicleAssignmentReconciler
from fleetdesk.services.driver_service import driver_service
from fleetdesk.services.driver_store import DriverRecordStore
from fleetdesk.services.vehicle_selection import (
    DriverDraft,
    PendingConfirmation,
    Selected,
    VehicleSelectionFlow,
)
from fleetdesk.utils.exceptions import (
    AssignmentQueryFailedException,
    PartialReassignmentFailedException,
)


class RecordingStore(DriverRecordStore):
    def __init__(self, db):
        super().__init__(db)
        self.finds = []
        self.updates = []

    def find_where(self, field, value, id_not=None):
        self.finds.append((field, value, id_not))
        return super().find_where(field, value, id_not=id_not)

    def update(self, driver_id, patch, description=None):
        self.updates.append((driver_id, patch))
        return super().update(driver_id, patch, description=description)


class FailingUpdateStore(DriverRecordStore):
    def __init__(self, db, fail_for):
        super().__init__(db)
        self.fail_for = fail_for

    def update(self, driver_id, patch, description=None):
        if driver_id == self.fail_for:
            raise OperationalError("UPDATE drivers", {}, Exception("connection reset"))
        return super().update(driver_id, patch, description=description)


class VanishingHolderStore(DriverRecordStore):
    """Another operator deletes `vanish` right after holders are looked up."""

    def __init__(self, db, other_session, vanish):
        super().__init__(db)
        self.other_session = other_session
        self.vanish = vanish

    def find_where(self, field, value, id_not=None):
        holders = super().find_where(field, value, id_not=id_not)
        self.other_session.query(Driver).filter(Driver.id == self.vanish).delete()
        self.other_session.commit()
        return holders


class BrokenQueryStore(DriverRecordStore):
    def find_where(self, field, value, id_not=None):
        raise OperationalError("SELECT drivers", {}, Exception("server closed the connection"))


def add_driver(db_session, driver_id, code, **links):
    d = Driver(id=driver_id, code=code, full_name=f"Driver {code}", **links)
    db_session.add(d)
    db_session.commit()
    return d


def holders_of(db_session, field, vehicle_id):
    db_session.expire_all()
    return [d.id for d in db_session.query(Driver).filter(getattr(Driver, field) == vehicle_id).all()]


# ─── check_conflict ───────────────────────────────────────────────────────────
def test_own_vehicle_is_not_a_conflict(db_session, fleet):
    reconciler = VehicleAssignmentReconciler(DriverRecordStore(db_session))
    assert reconciler.check_conflict(VehicleKind.TRUCK, "t1", "a1") is None
    assert reconciler.check_conflict(VehicleKind.TRAILER, "r1", "a1") is None


def test_other_holder_is_reported(db_session, fleet):
    add_driver(db_session, "c1d", "D003", truck_id="t2")
    add_driver(db_session, "d1d", "D004", truck_id="t2")
    reconciler = VehicleAssignmentReconciler(DriverRecordStore(db_session))

    holder = reconciler.check_conflict(VehicleKind.TRUCK, "t2", "d1d")
    assert holder is not None
    assert holder.id == "c1d"


def test_new_driver_sees_existing_holder(db_session, fleet):
    reconciler = VehicleAssignmentReconciler(DriverRecordStore(db_session))
    holder = reconciler.check_conflict(VehicleKind.TRUCK, "t1", None)
    assert holder.id == "a1"
    assert holder.label == "D001 - Ahmed Ali"


def test_free_vehicle_has_no_holder(db_session, fleet):
    reconciler = VehicleAssignmentReconciler(DriverRecordStore(db_session))
    assert reconciler.check_conflict(VehicleKind.TRUCK, "t2", "b1") is None


def test_empty_selection_never_queries(db_session, fleet):
    store = RecordingStore(db_session)
    reconciler = VehicleAssignmentReconciler(store)

    assert reconciler.check_conflict(VehicleKind.TRUCK, "", "b1") is None
    assert reconciler.check_conflict(VehicleKind.TRAILER, "", None) is None
    assert store.finds == []


def test_query_failure_is_reported(db_session, fleet):
    reconciler = VehicleAssignmentReconciler(BrokenQueryStore(db_session))
    with pytest.raises(AssignmentQueryFailedException) as exc:
        reconciler.check_conflict(VehicleKind.TRUCK, "t1", "b1")
    assert exc.value.status_code == 503


# ─── resolve_conflict ─────────────────────────────────────────────────────────
def test_confirmed_resolve_clears_the_holder(db_session, fleet):
    reconciler = VehicleAssignmentReconciler(DriverRecordStore(db_session))

    result = reconciler.resolve_conflict(VehicleKind.TRUCK, "t1", "b1", confirmed=True)

    assert result.confirmed is True
    assert result.assigned_value == "t1"
    assert result.cleared_driver_ids == ("a1",)
    assert holders_of(db_session, "truck_id", "t1") == []
    # Trailer link of the same driver is untouched
    assert reload(db_session, Driver, "a1").trailer_id == "r1"


def test_resolve_clears_every_stale_holder(db_session, fleet):
    add_driver(db_session, "z9", "D009", truck_id="t1")
    reconciler = VehicleAssignmentReconciler(DriverRecordStore(db_session))

    result = reconciler.resolve_conflict(VehicleKind.TRUCK, "t1", "b1", confirmed=True)

    assert sorted(result.cleared_driver_ids) == ["a1", "z9"]
    assert holders_of(db_session, "truck_id", "t1") == []


def test_cancelled_resolve_writes_nothing(db_session, fleet):
    store = RecordingStore(db_session)
    reconciler = VehicleAssignmentReconciler(store)

    result = reconciler.resolve_conflict(VehicleKind.TRUCK, "t1", "b1", confirmed=False)

    assert result.confirmed is False
    assert result.assigned_value is None
    assert store.updates == []
    assert store.finds == []
    assert reload(db_session, Driver, "a1").truck_id == "t1"


def test_repeated_resolve_is_harmless(db_session, fleet):
    reconciler = VehicleAssignmentReconciler(DriverRecordStore(db_session))

    reconciler.resolve_conflict(VehicleKind.TRAILER, "r1", "b1", confirmed=True)
    second = reconciler.resolve_conflict(VehicleKind.TRAILER, "r1", "b1", confirmed=True)

    assert second.confirmed is True
    assert second.cleared_driver_ids == ()
    assert reload(db_session, Driver, "a1").trailer_id is None


def test_clearing_an_already_cleared_link_is_idempotent(db_session, fleet):
    store = DriverRecordStore(db_session)
    store.update("a1", {"truck_id": None})
    store.update("a1", {"truck_id": None})
    assert reload(db_session, Driver, "a1").truck_id is None


def test_partial_failure_keeps_earlier_clears(db_session, fleet):
    add_driver(db_session, "z9", "D009", truck_id="t1")
    reconciler = VehicleAssignmentReconciler(FailingUpdateStore(db_session, fail_for="z9"))

    with pytest.raises(PartialReassignmentFailedException) as exc:
        reconciler.resolve_conflict(VehicleKind.TRUCK, "t1", "b1", confirmed=True)

    assert exc.value.failed_driver_id == "z9"
    assert exc.value.cleared_driver_ids == ["a1"]
    # No rollback of the clear that already went through
    assert holders_of(db_session, "truck_id", "t1") == ["z9"]


# ─── End to end: reassign t1 from a1 to b1 ────────────────────────────────────
def test_reassignment_then_save_leaves_single_holder(db_session, fleet):
    reconciler = VehicleAssignmentReconciler(DriverRecordStore(db_session))
    flow = VehicleSelectionFlow(reconciler, DriverDraft.from_driver(fleet["b1"]))

    pending = flow.choose(VehicleKind.TRUCK, "t1")
    assert isinstance(pending, PendingConfirmation)
    assert pending.holder_id == "a1"
    assert flow.draft.truck_id is None

    assert isinstance(flow.confirm(VehicleKind.TRUCK), Selected)
    assert flow.draft.truck_id == "t1"
    assert reload(db_session, Driver, "a1").truck_id is None
    # b1 is not linked until the form is saved
    assert reload(db_session, Driver, "b1").truck_id is None

    saved = driver_service.save_draft(db_session, flow.draft)

    assert saved["truck_id"] == "t1"
    assert holders_of(db_session, "truck_id", "t1") == ["b1"]


def test_holder_deleted_mid_resolve_is_skipped(db_session, SessionLocal, fleet):
    add_driver(db_session, "z9", "D009", truck_id="t1")
    other = SessionLocal()
    try:
        store = VanishingHolderStore(db_session, other, vanish="z9")
        result = VehicleAssignmentReconciler(store).resolve_conflict(
            VehicleKind.TRUCK, "t1", "b1", confirmed=True,
        )
    finally:
        other.close()

    assert result.confirmed is True
    assert result.cleared_driver_ids == ("a1",)
    assert holders_of(db_session, "truck_id", "t1") == []
