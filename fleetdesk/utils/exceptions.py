from fastapi import HTTPException, status


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES: machine-readable constants for frontend switch/case
# ═══════════════════════════════════════════════════════════════════════════════
class ErrorCode:
    VALIDATION_ERROR         = "VALIDATION_ERROR"
    NOT_FOUND                = "NOT_FOUND"
    DUPLICATE_ENTRY          = "DUPLICATE_ENTRY"
    RECORD_IN_USE            = "RECORD_IN_USE"
    VEHICLE_ALREADY_ASSIGNED = "VEHICLE_ALREADY_ASSIGNED"
    ASSIGNMENT_QUERY_FAILED  = "ASSIGNMENT_QUERY_FAILED"
    PARTIAL_REASSIGNMENT     = "PARTIAL_REASSIGNMENT"
    INVALID_SELECTION_STATE  = "INVALID_SELECTION_STATE"
    INVALID_WEIGHT           = "INVALID_WEIGHT"
    INTERNAL_SERVER_ERROR    = "INTERNAL_SERVER_ERROR"


# ═══════════════════════════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════════════════════════
class AppException(HTTPException):
    """
    Base exception for all application-level errors.
    Carries a machine-readable error_code for frontend handling.
    """
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: str,
        details: list | None = None,
        field: str | None = None,
    ):
        super().__init__(status_code=status_code, detail={
            "message": message,
            "error": {
                "code": error_code,
                "details": details,
                "field": field,
            }
        })
        self.message = message
        self.error_code = error_code
        self.details = details


# ═══════════════════════════════════════════════════════════════════════════════
# CONCRETE EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════════

class NotFoundException(AppException):
    def __init__(self, resource: str = "Resource"):
        super().__init__(status.HTTP_404_NOT_FOUND, f"{resource} not found", ErrorCode.NOT_FOUND)


class DuplicateEntryException(AppException):
    def __init__(self, message: str = "Record already exists", field: str | None = None):
        super().__init__(status.HTTP_409_CONFLICT, message, ErrorCode.DUPLICATE_ENTRY, field=field)


class VehicleAlreadyAssignedException(AppException):
    def __init__(self, vehicle_kind: str, holder_label: str):
        super().__init__(
            status.HTTP_409_CONFLICT,
            f"This {vehicle_kind} is currently assigned to {holder_label}. "
            f"Confirm the reassignment before saving.",
            ErrorCode.VEHICLE_ALREADY_ASSIGNED,
            field=f"{vehicle_kind}_id",
        )


class AssignmentQueryFailedException(AppException):
    def __init__(self, vehicle_kind: str):
        super().__init__(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            f"Could not check the current {vehicle_kind} assignment. Please try again.",
            ErrorCode.ASSIGNMENT_QUERY_FAILED,
        )


class PartialReassignmentFailedException(AppException):
    """Raised when a clearing update fails; earlier clears are NOT rolled back."""
    def __init__(self, vehicle_kind: str, failed_driver_id: str, cleared_driver_ids: list[str]):
        super().__init__(
            status.HTTP_502_BAD_GATEWAY,
            f"Error reassigning {vehicle_kind}: could not unlink driver {failed_driver_id}",
            ErrorCode.PARTIAL_REASSIGNMENT,
            details=[{
                "failed_driver_id":   failed_driver_id,
                "cleared_driver_ids": list(cleared_driver_ids),
            }],
        )
        self.failed_driver_id = failed_driver_id
        self.cleared_driver_ids = list(cleared_driver_ids)


class InvalidSelectionStateException(AppException):
    def __init__(self, vehicle_kind: str):
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            f"No {vehicle_kind} reassignment is awaiting confirmation",
            ErrorCode.INVALID_SELECTION_STATE,
            field=f"{vehicle_kind}_id",
        )


class RecordInUseException(AppException):
    def __init__(self, message: str = "Record is still referenced and cannot be deleted"):
        super().__init__(status.HTTP_409_CONFLICT, message, ErrorCode.RECORD_IN_USE)


class InvalidWeightException(AppException):
    def __init__(self):
        super().__init__(
            status.HTTP_400_BAD_REQUEST,
            "Net weight cannot exceed gross weight",
            ErrorCode.INVALID_WEIGHT,
            field="net_weight",
        )
