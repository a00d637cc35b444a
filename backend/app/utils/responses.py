"""Response envelope helpers shared by every endpoint"""
from typing import Any, Dict, List, Optional

from app.utils.pagination import build_pagination


def success_response(message: str, data: Any = None) -> Dict[str, Any]:
    """{success: true, message, data?}"""
    body: Dict[str, Any] = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return body


def paginated_response(
    items: List[Any],
    total: int,
    page: int,
    limit: int,
    message: str = "Data retrieved successfully"
) -> Dict[str, Any]:
    """{success: true, message, data: [...], pagination: {page, limit, total, totalPages}}"""
    return {
        "success": True,
        "message": message,
        "data": items,
        "pagination": build_pagination(total, page, limit),
    }
