"""
Date/time helpers

All engine timestamps are timezone-aware UTC. Naive datetimes coming from
callers or stored files are interpreted as UTC.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


def now_utc() -> datetime:
    """Current datetime in UTC (timezone-aware)"""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC

    Args:
        dt: Datetime to convert (can be naive or aware)

    Returns:
        Timezone-aware datetime in UTC; naive input is assumed to be UTC
    """
    if dt.tzinfo is None:
        logger.debug(f"Interpreting naive datetime {dt.isoformat()} as UTC")
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def optional_to_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """to_utc that passes None through, for optional model fields"""
    return None if dt is None else to_utc(dt)
