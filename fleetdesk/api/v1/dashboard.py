from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fleetdesk.database import get_db
from fleetdesk.schemas.common import success_response
from fleetdesk.services.dashboard_service import dashboard_service

router = APIRouter(prefix="/dashboard")


@router.get("", summary="Fleet overview: totals, expiring documents, recent activity")
def get_dashboard(db: Session = Depends(get_db)):
    return success_response("Dashboard retrieved", dashboard_service.summary(db))
