import uuid
from typing import Optional


def parse_uuid(value) -> Optional[uuid.UUID]:
    """Return the UUID for value, or None when it is not a well-formed id."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None
