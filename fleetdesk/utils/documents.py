from datetime import date
from enum import Enum

from fleetdesk.config import settings


class DocumentStatus(str, Enum):
    ACTIVE   = "active"
    EXPIRING = "expiring"
    EXPIRED  = "expired"


def document_status(expiry: date | None, today: date | None = None) -> DocumentStatus:
    """
    Classify a document (gatepass, waqala, vehicle registration) by its expiry date.
    A missing date counts as expired.
    """
    if expiry is None:
        return DocumentStatus.EXPIRED
    today = today or date.today()
    days_left = (expiry - today).days
    if days_left < 0:
        return DocumentStatus.EXPIRED
    if days_left <= settings.DOCUMENT_EXPIRY_WARNING_DAYS:
        return DocumentStatus.EXPIRING
    return DocumentStatus.ACTIVE
