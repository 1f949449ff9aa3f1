"""Time helpers.

All timestamps handled by the service are timezone-aware UTC so they compare
cleanly with ``TIMESTAMP WITH TIME ZONE`` values returned by asyncpg.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
