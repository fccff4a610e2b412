"""
Import all models here so that:
1. Alembic can auto-detect them when generating migrations
2. Relationships between models resolve correctly

Order matters: import parent tables before child tables.
"""

from fleetdesk.models.company import Company
from fleetdesk.models.truck import Truck, FleetStatus
from fleetdesk.models.trailer import Trailer, TrailerType, TrailerColor
from fleetdesk.models.driver import Driver, DriverStatus
from fleetdesk.models.shipment import Shipment, ShipmentStatus
from fleetdesk.models.audit_log import AuditLog

__all__ = [
    "Company",
    "Truck",
    "FleetStatus",
    "Trailer",
    "TrailerType",
    "TrailerColor",
    "Driver",
    "DriverStatus",
    "Shipment",
    "ShipmentStatus",
    "AuditLog",
]
