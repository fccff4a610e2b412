from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from fleetdesk.database import get_db
from fleetdesk.models.shipment import ShipmentStatus
from fleetdesk.schemas.shipment import ShipmentCreateRequest, ShipmentUpdateRequest
from fleetdesk.schemas.common import success_response, paginated_response
from fleetdesk.services.shipment_service import shipment_service

router = APIRouter(prefix="/shipments")


@router.get("", summary="List shipments (paginated)")
def list_shipments(
    page:      int                      = Query(1, ge=1),
    limit:     int                      = Query(20, ge=1, le=100),
    status:    Optional[ShipmentStatus] = Query(None, description="waiting | submitted"),
    companyId: Optional[str]            = Query(None),
    db:        Session                  = Depends(get_db),
):
    data, total = shipment_service.list_shipments(db, page, limit, status, companyId)
    return paginated_response("Shipments retrieved successfully", data, total, page, limit)


@router.get("/{shipment_id}", summary="Get shipment by ID")
def get_shipment(shipment_id: str, db: Session = Depends(get_db)):
    return success_response("Shipment retrieved", shipment_service.get_shipment(db, shipment_id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create shipment")
def create_shipment(body: ShipmentCreateRequest, db: Session = Depends(get_db)):
    return success_response("Shipment created successfully", shipment_service.create_shipment(db, body))


@router.put("/{shipment_id}", summary="Update shipment")
def update_shipment(shipment_id: str, body: ShipmentUpdateRequest, db: Session = Depends(get_db)):
    data = shipment_service.update_shipment(db, shipment_id, body)
    return success_response("Shipment updated successfully", data)


@router.delete("/{shipment_id}", summary="Delete shipment")
def delete_shipment(shipment_id: str, db: Session = Depends(get_db)):
    shipment_service.delete_shipment(db, shipment_id)
    return success_response("Shipment deleted successfully", None)
