"""
Timezone-aware datetime utilities.

Rate timestamps are kept in UTC so TTL arithmetic never crosses a DST change.
"""

from datetime import datetime, timezone

# Sentinel for "never fetched"; any real timestamp compares greater.
MIN_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    """
    Get current UTC datetime.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def format_iso(dt: datetime) -> str:
    """
    Format datetime as ISO 8601 string in UTC.

    The ``MIN_TIMESTAMP`` sentinel is rendered as an empty string.

    Args:
        dt: Timezone-aware datetime

    Returns:
        ISO 8601 string (e.g., "2025-01-15T09:30:00Z")
    """
    if dt == MIN_TIMESTAMP:
        return ""
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
