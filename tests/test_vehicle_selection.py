import pytest
from sqlalchemy.exc import OperationalError

from conftest import reload
from fleetdesk.models import Driver
from fleetdesk.schemas.assignment import VehicleKind
from fleetdesk.services.assignment_service import VehicleAssignmentReconciler
from fleetdesk.services.driver_store import DriverRecordStore
from fleetdesk.services.vehicle_selection import (
    DriverDraft,
    PendingConfirmation,
    Selected,
    SelectedNoConflict,
    Unselected,
    VehicleSelectionFlow,
)
from fleetdesk.utils.exceptions import (
    AssignmentQueryFailedException,
    InvalidSelectionStateException,
    PartialReassignmentFailedException,
)


class FlakyStore(DriverRecordStore):
    """Fails the next find or update when told to."""

    def __init__(self, db):
        super().__init__(db)
        self.fail_find = False
        self.fail_update = False

    def find_where(self, field, value, id_not=None):
        if self.fail_find:
            raise OperationalError("SELECT drivers", {}, Exception("timeout"))
        return super().find_where(field, value, id_not=id_not)

    def update(self, driver_id, patch, description=None):
        if self.fail_update:
            raise OperationalError("UPDATE drivers", {}, Exception("timeout"))
        return super().update(driver_id, patch, description=description)


@pytest.fixture()
def store(db_session):
    return FlakyStore(db_session)


@pytest.fixture()
def flow(store, fleet):
    return VehicleSelectionFlow(VehicleAssignmentReconciler(store), DriverDraft.from_driver(fleet["b1"]))


def test_loaded_draft_reflects_saved_links(fleet):
    draft = DriverDraft.from_driver(fleet["a1"])
    assert draft.truck == Selected("t1")
    assert draft.trailer == Selected("r1")
    assert DriverDraft.from_driver(fleet["b1"]).truck == Unselected()


def test_free_vehicle_is_selected_without_prompt(flow):
    selection = flow.choose(VehicleKind.TRUCK, "t2")
    assert selection == SelectedNoConflict("t2")
    assert flow.draft.truck_id == "t2"
    assert not flow.draft.is_pending()


def test_held_vehicle_waits_for_confirmation(flow):
    selection = flow.choose(VehicleKind.TRAILER, "r1")

    assert isinstance(selection, PendingConfirmation)
    assert selection.holder_label == "D001 - Ahmed Ali"
    assert flow.draft.trailer_id is None
    assert flow.draft.is_pending()


def test_cancel_reverts_to_previous_selection(flow, db_session):
    flow.choose(VehicleKind.TRUCK, "t2")
    flow.choose(VehicleKind.TRUCK, "t1")

    assert flow.cancel(VehicleKind.TRUCK) == SelectedNoConflict("t2")
    assert flow.draft.truck_id == "t2"
    assert reload(db_session, Driver, "a1").truck_id == "t1"


def test_reselect_drops_pending_confirmation(flow, db_session):
    flow.choose(VehicleKind.TRUCK, "t1")
    selection = flow.choose(VehicleKind.TRUCK, "t2")

    assert selection == SelectedNoConflict("t2")
    assert not flow.draft.is_pending()
    assert reload(db_session, Driver, "a1").truck_id == "t1"


def test_clearing_the_field_unselects(flow):
    flow.choose(VehicleKind.TRUCK, "t2")
    assert flow.choose(VehicleKind.TRUCK, "") == Unselected()
    assert flow.draft.truck_id is None


def test_confirm_selects_and_unlinks_holder(flow, db_session):
    flow.choose(VehicleKind.TRAILER, "r1")

    assert flow.confirm(VehicleKind.TRAILER) == Selected("r1")
    assert flow.draft.trailer_id == "r1"
    a1 = reload(db_session, Driver, "a1")
    assert a1.trailer_id is None
    assert a1.truck_id == "t1"


def test_confirm_without_pending_is_rejected(flow):
    flow.choose(VehicleKind.TRUCK, "t2")
    with pytest.raises(InvalidSelectionStateException):
        flow.confirm(VehicleKind.TRUCK)


def test_failed_confirm_stays_pending(flow, store, db_session):
    flow.choose(VehicleKind.TRUCK, "t1")
    store.fail_update = True

    with pytest.raises(PartialReassignmentFailedException):
        flow.confirm(VehicleKind.TRUCK)

    assert isinstance(flow.draft.truck, PendingConfirmation)
    assert flow.draft.truck_id is None
    assert reload(db_session, Driver, "a1").truck_id == "t1"


def test_failed_check_leaves_field_unchanged(flow, store):
    flow.choose(VehicleKind.TRUCK, "t2")
    store.fail_find = True

    with pytest.raises(AssignmentQueryFailedException):
        flow.choose(VehicleKind.TRUCK, "t1")

    assert flow.draft.truck == SelectedNoConflict("t2")


def test_pending_field_saves_previous_value(flow):
    flow.choose(VehicleKind.TRUCK, "t1")
    payload = flow.draft.to_payload()
    assert payload["truck_id"] is None
    assert payload["code"] == "D002"


def test_failed_check_keeps_pending_confirmation(flow, store):
    pending = flow.choose(VehicleKind.TRUCK, "t1")
    store.fail_find = True

    with pytest.raises(AssignmentQueryFailedException):
        flow.choose(VehicleKind.TRUCK, "t2")

    assert flow.draft.truck == pending
    store.fail_find = False
    assert flow.confirm(VehicleKind.TRUCK) == Selected("t1")
