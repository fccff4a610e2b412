from sqlalchemy.orm import Session

from fleetdesk.models.company import Company
from fleetdesk.models.driver import Driver
from fleetdesk.models.shipment import Shipment
from fleetdesk.schemas.company import CompanyCreateRequest, CompanyUpdateRequest
from fleetdesk.utils.audit import log_action
from fleetdesk.utils.exceptions import NotFoundException, DuplicateEntryException, RecordInUseException


def _serialize(c: Company) -> dict:
    return {
        "id":         c.id,
        "code":       c.code,
        "short_name": c.short_name,
        "full_name":  c.full_name,
    }


class CompanyService:

    def list_companies(self, db: Session, page: int, limit: int) -> tuple[list[dict], int]:
        q = db.query(Company)
        total = q.count()
        items = q.order_by(Company.short_name).offset((page - 1) * limit).limit(limit).all()
        return [_serialize(c) for c in items], total

    def get_company(self, db: Session, company_id: str) -> dict:
        c = db.query(Company).filter(Company.id == company_id).first()
        if not c: raise NotFoundException("Company")
        return _serialize(c)

    def create_company(self, db: Session, data: CompanyCreateRequest) -> dict:
        if db.query(Company).filter(Company.code == data.code).first():
            raise DuplicateEntryException("Company code already registered", field="code")
        c = Company(**data.model_dump())
        db.add(c)
        db.flush()
        log_action(db, "CREATE", "Company", c.id, f"Created company {c.short_name}")
        db.commit()
        db.refresh(c)
        return _serialize(c)

    def update_company(self, db: Session, company_id: str, data: CompanyUpdateRequest) -> dict:
        c = db.query(Company).filter(Company.id == company_id).first()
        if not c: raise NotFoundException("Company")

        if data.code and data.code != c.code:
            if db.query(Company).filter(Company.code == data.code, Company.id != company_id).first():
                raise DuplicateEntryException("Company code already used", field="code")

        if data.code:       c.code       = data.code
        if data.short_name: c.short_name = data.short_name
        if data.full_name:  c.full_name  = data.full_name

        log_action(db, "UPDATE", "Company", c.id, f"Updated company {c.short_name}")
        db.commit()
        db.refresh(c)
        return _serialize(c)

    def delete_company(self, db: Session, company_id: str) -> None:
        c = db.query(Company).filter(Company.id == company_id).first()
        if not c: raise NotFoundException("Company")
        if db.query(Shipment).filter(Shipment.company_id == company_id).first():
            raise RecordInUseException("Company has shipments and cannot be deleted")
        db.query(Driver).filter(Driver.company_id == company_id).update(
            {Driver.company_id: None}, synchronize_session="fetch"
        )
        log_action(db, "DELETE", "Company", company_id, f"Deleted company {c.short_name}")
        db.delete(c)
        db.commit()


company_service = CompanyService()
