from sqlalchemy.exc import OperationalError

from conftest import reload
from fleetdesk.models import Driver
from fleetdesk.services.driver_store import DriverRecordStore

API = "/api/v1/drivers"


# ─── Assignment check / resolve ───────────────────────────────────────────────
def test_check_reports_current_holder(client, fleet):
    res = client.post(f"{API}/assignments/check", json={
        "vehicle_kind": "truck", "vehicle_id": "t1", "exclude_driver_id": "b1",
    })
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Truck is currently assigned to D001 - Ahmed Ali"
    assert body["data"]["vehicle_label"] == "TRK-100"
    assert body["data"]["current_holder"]["id"] == "a1"


def test_check_free_vehicle(client, fleet):
    res = client.post(f"{API}/assignments/check", json={"vehicle_kind": "truck", "vehicle_id": "t2"})
    assert res.status_code == 200
    assert res.json()["data"] is None


def test_check_own_vehicle_is_available(client, fleet):
    res = client.post(f"{API}/assignments/check", json={
        "vehicle_kind": "trailer", "vehicle_id": "r1", "exclude_driver_id": "a1",
    })
    assert res.json()["data"] is None


def test_check_cleared_selection(client, fleet):
    res = client.post(f"{API}/assignments/check", json={"vehicle_kind": "trailer", "vehicle_id": None})
    assert res.status_code == 200
    assert res.json()["data"] is None


def test_check_rejects_unknown_kind(client, fleet):
    res = client.post(f"{API}/assignments/check", json={"vehicle_kind": "bus", "vehicle_id": "t1"})
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


def test_check_query_failure(client, fleet, monkeypatch):
    def broken(self, field, value, id_not=None):
        raise OperationalError("SELECT drivers", {}, Exception("timeout"))

    monkeypatch.setattr(DriverRecordStore, "find_where", broken)
    res = client.post(f"{API}/assignments/check", json={"vehicle_kind": "truck", "vehicle_id": "t1"})

    assert res.status_code == 503
    assert res.json()["error"]["code"] == "ASSIGNMENT_QUERY_FAILED"


def test_resolve_cancelled(client, fleet, db_session):
    res = client.post(f"{API}/assignments/resolve", json={
        "vehicle_kind": "truck", "vehicle_id": "t1", "exclude_driver_id": "b1", "confirmed": False,
    })
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Reassignment cancelled"
    assert body["data"]["assigned_value"] is None
    assert reload(db_session, Driver, "a1").truck_id == "t1"


def test_resolve_then_save(client, fleet, db_session):
    res = client.post(f"{API}/assignments/resolve", json={
        "vehicle_kind": "truck", "vehicle_id": "t1", "exclude_driver_id": "b1", "confirmed": True,
    })
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["assigned_value"] == "t1"
    assert data["cleared_driver_ids"] == ["a1"]

    res = client.put(f"{API}/b1", json={"truck_id": data["assigned_value"]})
    assert res.status_code == 200
    assert res.json()["data"]["truck_number"] == "TRK-100"

    db_session.expire_all()
    holders = db_session.query(Driver).filter(Driver.truck_id == "t1").all()
    assert [d.id for d in holders] == ["b1"]


def test_save_refuses_second_holder(client, fleet, db_session):
    res = client.put(f"{API}/b1", json={"truck_id": "t1"})

    assert res.status_code == 409
    error = res.json()["error"]
    assert error["code"] == "VEHICLE_ALREADY_ASSIGNED"
    assert error["field"] == "truck_id"
    assert reload(db_session, Driver, "b1").truck_id is None


def test_create_refuses_held_trailer(client, fleet):
    res = client.post(API, json={"code": "D010", "full_name": "New Driver", "trailer_id": "r1"})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "VEHICLE_ALREADY_ASSIGNED"


def test_resaving_own_vehicle_is_allowed(client, fleet):
    res = client.put(f"{API}/a1", json={"truck_id": "t1", "phone": "+971500000000"})
    assert res.status_code == 200
    assert res.json()["data"]["phone"] == "+971500000000"


# ─── CRUD ─────────────────────────────────────────────────────────────────────
def test_create_driver(client, fleet):
    res = client.post(API, json={
        "code": " D011 ", "full_name": "Omar Saeed", "truck_id": "t2",
        "trailer_id": "", "company_id": "c1", "gatepass": "2020-01-01",
    })
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["code"] == "D011"
    assert data["truck_number"] == "TRK-200"
    assert data["trailer_id"] is None
    assert data["company"] == "Acme"
    assert data["gatepass_status"] == "expired"
    assert data["waqala_status"] == "expired"


def test_create_duplicate_code(client, fleet):
    res = client.post(API, json={"code": "D001", "full_name": "Someone Else"})
    assert res.status_code == 409
    assert res.json()["error"]["field"] == "code"


def test_create_with_unknown_truck(client, fleet):
    res = client.post(API, json={"code": "D012", "full_name": "Nobody", "truck_id": "missing"})
    assert res.status_code == 404
    assert res.json()["message"] == "Truck not found"


def test_list_and_filter(client, fleet):
    client.put(f"{API}/b1", json={"status": "vacation"})

    res = client.get(API)
    assert res.json()["meta"]["total"] == 2

    res = client.get(API, params={"status": "vacation"})
    assert [d["id"] for d in res.json()["data"]] == ["b1"]


def test_null_clears_link(client, fleet, db_session):
    res = client.put(f"{API}/a1", json={"trailer_id": None})
    assert res.status_code == 200
    assert reload(db_session, Driver, "a1").trailer_id is None


def test_get_missing_driver(client, fleet):
    res = client.get(f"{API}/nope")
    assert res.status_code == 404
    assert res.json()["success"] is False


def test_delete_driver(client, fleet, db_session):
    res = client.delete(f"{API}/a1")
    assert res.status_code == 200
    assert db_session.query(Driver).filter(Driver.id == "a1").first() is None
    # t1 is free again
    res = client.post(f"{API}/assignments/check", json={"vehicle_kind": "truck", "vehicle_id": "t1"})
    assert res.json()["data"] is None


def test_update_rejects_blank_name_and_code(client, fleet, db_session):
    res = client.put(f"{API}/b1", json={"code": "", "full_name": "   "})

    assert res.status_code == 422
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    b1 = reload(db_session, Driver, "b1")
    assert b1.code == "D002"
    assert b1.full_name == "Bilal Khan"


def test_update_trims_name(client, fleet):
    res = client.put(f"{API}/b1", json={"full_name": "  Bilal K. Khan "})
    assert res.status_code == 200
    assert res.json()["data"]["full_name"] == "Bilal K. Khan"
