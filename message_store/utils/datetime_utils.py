"""
UTC datetime helpers.

Timestamps are written timezone-aware, but SQLite hands them back naive;
``ensure_utc`` restores the UTC tzinfo on the way out of the repository.
"""

from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc


def now_utc() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Return ``dt`` as an aware UTC datetime.

    Naive values are taken to be UTC already; None passes through.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
