"""
sectorgen Formatters

Timestamp helpers used in CLI JSON payloads.
"""

from datetime import datetime, timezone


def format_datetime(dt: datetime) -> str:
    """
    Format datetime for display.

    Args:
        dt: datetime object

    Returns:
        ISO format string
    """
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def get_utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def get_utc_timestamp() -> str:
    """
    Get current UTC timestamp string.

    Returns:
        ISO format timestamp like "2026-01-15T12:30:00Z"
    """
    return format_datetime(get_utc_now())


def format_percent(part: int, whole: int) -> float:
    """Percentage of ``whole`` rounded to one decimal, 0.0 for an empty whole."""
    if whole <= 0:
        return 0.0
    return round(100 * part / whole, 1)
