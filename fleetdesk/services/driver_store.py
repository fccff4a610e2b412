import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleetdesk.models.driver import Driver
from fleetdesk.utils.audit import log_action
from fleetdesk.utils.exceptions import NotFoundException

logger = logging.getLogger(__name__)


class DriverRecordStore:
    """
    Equality-filtered reads and single-row patches on the drivers table.

    Every update() commits on its own: there is no transaction spanning
    several updates, so a caller issuing a sequence of them can end up with
    some applied and some not.
    """

    LINK_FIELDS = ("truck_id", "trailer_id")

    def __init__(self, db: Session):
        self.db = db

    def find_where(self, field: str, value: Any, id_not: str | None = None) -> list[Driver]:
        """Drivers whose `field` equals `value`, oldest first, optionally excluding one id."""
        column = getattr(Driver, field)
        q = self.db.query(Driver).filter(column == value)
        if id_not:
            q = q.filter(Driver.id != id_not)
        return q.order_by(Driver.created_at, Driver.id).all()

    def update(self, driver_id: str, patch: dict[str, Any], description: str | None = None) -> Driver:
        d = self.db.query(Driver).filter(Driver.id == driver_id).first()
        if not d:
            raise NotFoundException("Driver")

        for field, value in patch.items():
            setattr(d, field, value)
        if description:
            log_action(self.db, "UPDATE", "Driver", d.id, description)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(d)
        return d
