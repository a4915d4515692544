from datetime import datetime, timezone
from typing import Optional, Union
import logging

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Return the current time as a UTC-naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_to_utc_naive(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO datetime string or datetime object and return a UTC-naive datetime.

    Returns None if parsing fails or value is None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(value)
        except ValueError:
            logger.debug("Could not parse datetime string: %s", value)
            return None
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def seconds_since(start: datetime, now: Optional[datetime] = None) -> float:
    """Seconds elapsed from `start` to `now` (both treated as UTC)."""
    start_utc = parse_to_utc_naive(start)
    now_utc = parse_to_utc_naive(now) if now is not None else utc_now()
    return (now_utc - start_utc).total_seconds()
