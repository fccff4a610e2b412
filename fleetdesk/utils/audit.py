from sqlalchemy.orm import Session
from fleetdesk.models.audit_log import AuditLog


def log_action(
    db: Session,
    action: str,
    entity_type: str,
    entity_id: str | None = None,
    description: str | None = None,
) -> None:
    """
    Write an audit log entry.

    Args:
        db:          Active DB session (will NOT commit; caller commits)
        action:      Verb: CREATE, UPDATE, DELETE, REASSIGN, UNLINK, etc.
        entity_type: Model name: "Driver", "Truck", "Shipment", etc.
        entity_id:   Primary key of the affected record
        description: Human-readable description (shown in the activity feed)

    Usage:
        log_action(db, "UNLINK", "Driver", driver.id,
                   f"Truck removed from {driver.code} - {driver.full_name}")
        db.commit()
    """
    entry = AuditLog(
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        description=description,
    )
    db.add(entry)
    # Do NOT commit here; let the caller's transaction commit everything atomically
