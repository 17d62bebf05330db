"""
Parsers for raw broadcast records returned by the broadcast source.

Normalises each item into a ``Broadcast`` with a string id, an epoch
start time and a ``LifecycleStatus``. Bad timestamps fall back to 0 and
unrecognised statuses to UNKNOWN rather than failing the cycle.
"""

from dataclasses import dataclass
from typing import Any, Optional

import structlog

from ..errors import MalformedDataError, MissingDataError
from ..state.models import LifecycleStatus
from ..utils.time import parse_rfc3339

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Broadcast:
    """One broadcast as observed in a fetch."""
    id: str
    start_time: int
    status: LifecycleStatus


def parse_start_time(value: Optional[str]) -> int:
    """Scheduled start as epoch seconds, 0 when absent or unparseable."""
    if not value:
        return 0
    try:
        return parse_rfc3339(value)
    except MalformedDataError as e:
        logger.warning("Unparseable scheduled start time", value=value, error=str(e))
        return 0


def parse_status(value: Optional[str]) -> LifecycleStatus:
    """Lifecycle status from its wire string, UNKNOWN when unrecognised."""
    status = LifecycleStatus.from_wire(value)
    if status == LifecycleStatus.UNKNOWN and value != LifecycleStatus.UNKNOWN.value:
        logger.warning("Unrecognised lifecycle status", value=value)
    return status


def parse_broadcast(item: dict[str, Any]) -> Broadcast:
    """
    Normalise a single liveBroadcast resource.

    Args:
        item: Raw resource with ``id``, ``snippet.scheduledStartTime`` and
            ``status.lifeCycleStatus``

    Returns:
        Normalised Broadcast

    Raises:
        MissingDataError: The item has no id
    """
    if not isinstance(item, dict):
        raise MalformedDataError("Broadcast item is not an object", raw_data=str(item)[:200])

    broadcast_id = item.get("id")
    if not broadcast_id:
        raise MissingDataError("Broadcast item has no id", data_type="broadcast")

    snippet = item.get("snippet") or {}
    status = item.get("status") or {}

    return Broadcast(
        id=str(broadcast_id),
        start_time=parse_start_time(snippet.get("scheduledStartTime")),
        status=parse_status(status.get("lifeCycleStatus")),
    )


def parse_broadcast_list(items: list[Any]) -> list[Broadcast]:
    """Normalise a list of resources, skipping items that cannot be identified."""
    broadcasts = []
    for item in items:
        try:
            broadcasts.append(parse_broadcast(item))
        except (MissingDataError, MalformedDataError) as e:
            logger.warning("Skipping broadcast item", error=str(e))
    return broadcasts
