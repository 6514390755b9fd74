"""
Shared Pydantic types for MongoDB integration.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Optional

from bson import ObjectId
from pydantic import BeforeValidator


def convert_objectid_to_str(v: Any) -> str:
    """Convert MongoDB ObjectId to string before Pydantic validation."""
    if isinstance(v, ObjectId):
        return str(v)
    return v


# Ids are uuid4 strings for documents created here. User profiles synced from
# the identity side may carry ObjectIds; they are exposed as hex strings.
PyObjectId = Annotated[str, BeforeValidator(convert_objectid_to_str)]


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """MongoDB returns naive datetimes (always UTC); attach tzinfo so they compare with aware ones."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
