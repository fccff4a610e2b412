from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from fleetdesk.database import get_db
from fleetdesk.models.driver import DriverStatus
from fleetdesk.schemas.assignment import ConflictCheckRequest, ConflictResolveRequest
from fleetdesk.schemas.driver import DriverCreateRequest, DriverUpdateRequest
from fleetdesk.schemas.common import success_response, paginated_response
from fleetdesk.services.assignment_service import assignment_service
from fleetdesk.services.driver_service import driver_service

router = APIRouter(prefix="/drivers")


# ─── Vehicle assignment ───────────────────────────────────────────────────────
@router.post("/assignments/check", summary="Check whether a truck/trailer is held by another driver")
def check_assignment(body: ConflictCheckRequest, db: Session = Depends(get_db)):
    conflict = assignment_service.check(db, body)
    if conflict is None:
        return success_response(f"{body.vehicle_kind.display_name} is available", None)
    return success_response(
        f"{body.vehicle_kind.display_name} is currently assigned to {conflict['current_holder']['label']}",
        conflict,
    )


@router.post("/assignments/resolve", summary="Confirm or cancel a truck/trailer reassignment")
def resolve_assignment(body: ConflictResolveRequest, db: Session = Depends(get_db)):
    data = assignment_service.resolve(db, body)
    if not data["confirmed"]:
        return success_response("Reassignment cancelled", data)
    return success_response(f"{body.vehicle_kind.display_name} reassigned successfully", data)


# ─── Drivers ──────────────────────────────────────────────────────────────────
@router.get("", summary="List drivers")
def list_drivers(
    page:      int                    = Query(1, ge=1),
    limit:     int                    = Query(20, ge=1, le=100),
    status:    Optional[DriverStatus] = Query(None, description="active | vacation | cancelled"),
    companyId: Optional[str]          = Query(None),
    db:        Session                = Depends(get_db),
):
    data, total = driver_service.list_drivers(db, page, limit, status, companyId)
    return paginated_response("Drivers retrieved successfully", data, total, page, limit)


@router.get("/{driver_id}", summary="Get driver by ID")
def get_driver(driver_id: str, db: Session = Depends(get_db)):
    return success_response("Driver retrieved", driver_service.get_driver(db, driver_id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create driver")
def create_driver(body: DriverCreateRequest, db: Session = Depends(get_db)):
    data = driver_service.create_driver(db, body)
    return success_response("Driver created successfully", data)


@router.put("/{driver_id}", summary="Update driver")
def update_driver(driver_id: str, body: DriverUpdateRequest, db: Session = Depends(get_db)):
    data = driver_service.update_driver(db, driver_id, body)
    return success_response("Driver updated successfully", data)


@router.delete("/{driver_id}", summary="Delete driver")
def delete_driver(driver_id: str, db: Session = Depends(get_db)):
    driver_service.delete_driver(db, driver_id)
    return success_response("Driver deleted successfully", None)
