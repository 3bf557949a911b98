"""
Core Utilities.

Shared utility functions used across the service.
"""

from datetime import datetime, timezone
from uuid import UUID

from notekeeper.core.exceptions import InvalidIdentifierError


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and
    assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_note_id(value: str) -> str:
    """
    Normalize a note identifier.

    Note ids are UUID strings. The canonical lowercase hyphenated form
    is returned so that lookups match what the database stores.

    Raises:
        InvalidIdentifierError: If the value is not a UUID
    """
    try:
        return str(UUID(str(value)))
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdentifierError(details={"note_id": str(value)})
