"""
UTC datetime utilities.

Documents store timestamps as epoch milliseconds (what the web client
writes with Date.now()); use utc_now_ms() for those fields.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def utc_now_ms() -> int:
    """Return the current time as integer milliseconds since the Unix epoch."""
    return int(utc_now().timestamp() * 1000)
