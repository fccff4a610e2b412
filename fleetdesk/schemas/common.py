from pydantic import BaseModel
from typing import TypeVar, Generic, Any

T = TypeVar("T")


# ─── Pagination Meta ───────────────────────────────────────────────────────────
class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrev: bool


# ─── Standard Success Response ────────────────────────────────────────────────
class SuccessResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None


# ─── Paginated Success Response ───────────────────────────────────────────────
class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: list[T]
    meta: PaginationMeta


# ─── Helper Functions ─────────────────────────────────────────────────────────
def success_response(message: str, data: Any = None) -> dict:
    """Return a standardized success dict (used in route handlers)."""
    return {"success": True, "message": message, "data": data}


def paginated_response(
    message: str,
    data: list,
    total: int,
    page: int,
    limit: int,
) -> dict:
    """Return a standardized paginated dict."""
    total_pages = (total + limit - 1) // limit if limit > 0 else 0
    return {
        "success": True,
        "message": message,
        "data": data,
        "meta": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": total_pages,
            "hasNext": page < total_pages,
            "hasPrev": page > 1,
        }
    }


def blank_to_none(v: Any) -> Any:
    """Form selects submit "" for "nothing chosen"; store that as NULL."""
    if isinstance(v, str) and not v.strip():
        return None
    return v
