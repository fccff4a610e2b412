from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from fleetdesk.database import get_db
from fleetdesk.schemas.company import CompanyCreateRequest, CompanyUpdateRequest
from fleetdesk.schemas.common import success_response, paginated_response
from fleetdesk.services.company_service import company_service

router = APIRouter(prefix="/companies")


@router.get("", summary="List companies")
def list_companies(
    page:  int     = Query(1, ge=1),
    limit: int     = Query(50, ge=1, le=100),
    db:    Session = Depends(get_db),
):
    data, total = company_service.list_companies(db, page, limit)
    return paginated_response("Companies retrieved successfully", data, total, page, limit)


@router.get("/{company_id}", summary="Get company by ID")
def get_company(company_id: str, db: Session = Depends(get_db)):
    return success_response("Company retrieved", company_service.get_company(db, company_id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create company")
def create_company(body: CompanyCreateRequest, db: Session = Depends(get_db)):
    return success_response("Company created successfully", company_service.create_company(db, body))


@router.put("/{company_id}", summary="Update company")
def update_company(company_id: str, body: CompanyUpdateRequest, db: Session = Depends(get_db)):
    return success_response("Company updated successfully", company_service.update_company(db, company_id, body))


@router.delete("/{company_id}", summary="Delete company")
def delete_company(company_id: str, db: Session = Depends(get_db)):
    company_service.delete_company(db, company_id)
    return success_response("Company deleted successfully", None)
