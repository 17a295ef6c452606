"""Standardized API response helpers."""

from typing import Any, Dict, Optional


def success_response(
    data: Any = None, message: str = "Success", count: Optional[int] = None
) -> Dict[str, Any]:
    """Return a standardized success response."""
    response = {"success": True, "message": message, "data": data}
    if count is not None:
        response["count"] = count
    return response


def error_response(
    message: str, kind: str = "Error", details: Any = None
) -> Dict[str, Any]:
    """Return a standardized error response."""
    response = {"success": False, "kind": kind, "message": message}
    if details is not None:
        response["details"] = details
    return response


def paginated_response(
    items: list, page: int, limit: int, total: int, message: str = "Success"
) -> Dict[str, Any]:
    """Wrap a page of items together with its pagination block."""
    pages = (total + limit - 1) // limit if limit else 0
    return success_response(
        {
            "items": items,
            "pagination": {
                "current": page,
                "pages": pages,
                "total": total,
                "limit": limit,
            },
        },
        message,
    )
