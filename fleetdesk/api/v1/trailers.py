from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from fleetdesk.database import get_db
from fleetdesk.models.truck import FleetStatus
from fleetdesk.schemas.vehicle import TrailerCreateRequest, TrailerUpdateRequest
from fleetdesk.schemas.common import success_response, paginated_response
from fleetdesk.services.vehicle_service import trailer_service

router = APIRouter(prefix="/trailers")


@router.get("", summary="List trailers (paginated)")
def list_trailers(
    page:   int                   = Query(1, ge=1),
    limit:  int                   = Query(20, ge=1, le=100),
    status: Optional[FleetStatus] = Query(None, description="active | empty"),
    db:     Session               = Depends(get_db),
):
    data, total = trailer_service.list_vehicles(db, page, limit, status)
    return paginated_response("Trailers retrieved successfully", data, total, page, limit)


@router.get("/assignable", summary="Active trailers for the driver form")
def list_assignable(db: Session = Depends(get_db)):
    return success_response("Trailers retrieved", trailer_service.list_assignable(db))


@router.get("/{trailer_id}", summary="Get trailer by ID")
def get_trailer(trailer_id: str, db: Session = Depends(get_db)):
    return success_response("Trailer retrieved", trailer_service.get_vehicle(db, trailer_id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create trailer")
def create_trailer(body: TrailerCreateRequest, db: Session = Depends(get_db)):
    return success_response("Trailer created successfully", trailer_service.create_vehicle(db, body))


@router.put("/{trailer_id}", summary="Update trailer")
def update_trailer(trailer_id: str, body: TrailerUpdateRequest, db: Session = Depends(get_db)):
    return success_response("Trailer updated successfully", trailer_service.update_vehicle(db, trailer_id, body))


@router.delete("/{trailer_id}", summary="Delete trailer")
def delete_trailer(trailer_id: str, db: Session = Depends(get_db)):
    trailer_service.delete_vehicle(db, trailer_id)
    return success_response("Trailer deleted successfully", None)
