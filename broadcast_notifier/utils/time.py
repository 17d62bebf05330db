"""
Time helpers for broadcast scheduling.

Broadcast start times are tracked as integer UTC epoch seconds. Wall-clock
time is only used to decide how long to sleep between polls.
"""

from datetime import datetime, timezone
from typing import Optional

from ..errors import MalformedDataError


def now_epoch(now: Optional[datetime] = None) -> int:
    """
    Current wall-clock time as UTC epoch seconds.

    Args:
        now: Optional explicit time, mainly for tests

    Returns:
        Integer epoch seconds
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return int(now.timestamp())


def parse_rfc3339(value: str) -> int:
    """
    Parse an RFC 3339 timestamp into UTC epoch seconds.

    Accepts the trailing ``Z`` designator and fractional seconds.

    Raises:
        MalformedDataError: The value is not a valid RFC 3339 timestamp
    """
    if not isinstance(value, str) or not value:
        raise MalformedDataError(
            "Timestamp is empty or not a string",
            raw_data=repr(value),
            expected_format="RFC 3339"
        )

    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise MalformedDataError(
            f"Invalid RFC 3339 timestamp: {value}",
            raw_data=value,
            expected_format="RFC 3339"
        ) from e

    if parsed.tzinfo is None:
        raise MalformedDataError(
            f"Timestamp has no UTC offset: {value}",
            raw_data=value,
            expected_format="RFC 3339"
        )

    return int(parsed.astimezone(timezone.utc).timestamp())


def format_epoch(epoch_seconds: int) -> str:
    """Format epoch seconds as ISO 8601 for logging."""
    try:
        return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).isoformat()
    except (OverflowError, OSError, ValueError):
        return "never"


def is_within_horizon(target_epoch: int, horizon_seconds: int, now: Optional[int] = None) -> bool:
    """
    Whether ``target_epoch`` lies before ``now + horizon_seconds``.

    Past targets count as within the horizon.
    """
    if now is None:
        now = now_epoch()
    return now + horizon_seconds > target_epoch
