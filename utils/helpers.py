"""Helper utility functions."""

import math
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import AfterValidator


def format_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Wrap a payload in the API success envelope."""
    response: Dict[str, Any] = {"success": True}
    if message:
        response["message"] = message
    if data is not None:
        response["data"] = data
    return response


def serialize_document(value: Any) -> Any:
    """Convert ObjectIds in a MongoDB document (recursively) to strings."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: serialize_document(item) for key, item in value.items()}
    if isinstance(value, list):
        return [serialize_document(item) for item in value]
    return value


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse a path/query identifier into an ObjectId, or None if malformed."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a datetime to naive UTC, the form MongoDB hands back."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def build_pagination(page: int, limit: int, total: int) -> Dict[str, Any]:
    """Pagination block returned by list endpoints."""
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "current_page": page,
        "total_pages": total_pages,
        "total": total,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }


# Datetime field stored and compared as naive UTC
UTCDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]
