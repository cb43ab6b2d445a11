"""Utility helper functions for the grid store."""

import uuid
from datetime import datetime, timezone


def generate_id() -> str:
    """
    Generate a new document id.

    Returns:
        UUID4 hex string
    """
    return uuid.uuid4().hex


def utc_now() -> datetime:
    """
    Get the current time as an aware UTC datetime.

    Returns:
        Current UTC timestamp
    """
    return datetime.now(timezone.utc)


def to_timestamp(value: datetime) -> str:
    """
    Serialize a datetime so that lexical order matches chronological order.

    Args:
        value: Datetime to serialize (naive values are taken as UTC)

    Returns:
        ISO 8601 string with microsecond precision
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")
