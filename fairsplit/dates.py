"""Date utilities for fairsplit.

Timestamps are stored and compared as naive UTC datetimes.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_timestamp(value: datetime | None) -> str:
    """Format a timestamp for display.

    Args:
        value: Naive UTC datetime, or None.

    Returns:
        "DD/MM/YYYY HH:MM UTC", or "-" when there is no value.
    """
    if value is None:
        return "-"
    return value.strftime("%d/%m/%Y %H:%M UTC")
