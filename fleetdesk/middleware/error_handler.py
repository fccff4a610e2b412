import logging
import traceback
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
from fleetdesk.utils.exceptions import AppException, ErrorCode

logger = logging.getLogger(__name__)


def _error_body(message: str, code: str, details: list | None = None, field: str | None = None) -> dict:
    return {
        "success": False,
        "message": message,
        "error": {
            "code": code,
            "details": details,
            "field": field,
        }
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle all AppException subclasses (our custom exceptions)."""
    detail = exc.detail
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {detail.get('message')}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": detail.get("message", "An error occurred"),
            "error": detail.get("error", {"code": ErrorCode.INTERNAL_SERVER_ERROR}),
        }
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle Pydantic validation errors (422).
    Converts FastAPI's default validation error format into our standardized format.
    """
    details = []
    for error in exc.errors():
        # loc is a tuple like ("body", "vehicle_kind")
        loc = error.get("loc", [])
        field = ".".join(str(l) for l in loc if l != "body") if loc else "unknown"
        details.append({
            "field": field,
            "message": error.get("msg", "Invalid value"),
        })

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(
            "Validation error. Please check your input.",
            ErrorCode.VALIDATION_ERROR,
            details=details,
        ),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """
    Handle SQLAlchemy IntegrityError (unique constraint violations, FK violations).
    Prevents raw DB errors from leaking to the client.
    """
    logger.warning(f"IntegrityError on {request.method} {request.url}: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=_error_body("A record with this data already exists.", ErrorCode.DUPLICATE_ENTRY),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Catch-all handler for unexpected exceptions.
    Logs the full traceback, returns a safe 500 response.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url}\n"
        f"{traceback.format_exc()}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "An unexpected error occurred. Please try again later.",
            ErrorCode.INTERNAL_SERVER_ERROR,
        ),
    )
