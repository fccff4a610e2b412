from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from fleetdesk.database import get_db
from fleetdesk.models.truck import FleetStatus
from fleetdesk.schemas.vehicle import TruckCreateRequest, TruckUpdateRequest
from fleetdesk.schemas.common import success_response, paginated_response
from fleetdesk.services.vehicle_service import truck_service

router = APIRouter(prefix="/trucks")


@router.get("", summary="List trucks (paginated)")
def list_trucks(
    page:   int                   = Query(1, ge=1),
    limit:  int                   = Query(20, ge=1, le=100),
    status: Optional[FleetStatus] = Query(None, description="active | empty"),
    db:     Session               = Depends(get_db),
):
    data, total = truck_service.list_vehicles(db, page, limit, status)
    return paginated_response("Trucks retrieved successfully", data, total, page, limit)


@router.get("/assignable", summary="Active trucks for the driver form")
def list_assignable(db: Session = Depends(get_db)):
    return success_response("Trucks retrieved", truck_service.list_assignable(db))


@router.get("/{truck_id}", summary="Get truck by ID")
def get_truck(truck_id: str, db: Session = Depends(get_db)):
    return success_response("Truck retrieved", truck_service.get_vehicle(db, truck_id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create truck")
def create_truck(body: TruckCreateRequest, db: Session = Depends(get_db)):
    return success_response("Truck created successfully", truck_service.create_vehicle(db, body))


@router.put("/{truck_id}", summary="Update truck")
def update_truck(truck_id: str, body: TruckUpdateRequest, db: Session = Depends(get_db)):
    return success_response("Truck updated successfully", truck_service.update_vehicle(db, truck_id, body))


@router.delete("/{truck_id}", summary="Delete truck")
def delete_truck(truck_id: str, db: Session = Depends(get_db)):
    truck_service.delete_vehicle(db, truck_id)
    return success_response("Truck deleted successfully", None)
