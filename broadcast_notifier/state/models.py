"""
Data models for broadcast lifecycle tracking.

This module defines the lifecycle status enumeration, the per-broadcast
tracking record, the durable state snapshot and the outcome of a status
transition decision.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

# Maximum signed 64-bit timestamp; means "no upcoming event tracked".
INFINITE_TIME = 2**63 - 1


class LifecycleStatus(str, Enum):
    """Broadcast lifecycle statuses as reported by the broadcast source."""
    UNKNOWN = "lifeCycleStatusUnspecified"
    CREATED = "created"
    READY = "ready"
    TEST_STARTING = "testStarting"
    TESTING = "testing"
    LIVE_STARTING = "liveStarting"
    LIVE = "live"
    COMPLETE = "complete"
    REVOKED = "revoked"

    @classmethod
    def from_wire(cls, value: Optional[str]) -> "LifecycleStatus":
        """Map a wire string to a status, unrecognised values become UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_active(self) -> bool:
        """Whether broadcasts in this status take part in next-event scheduling."""
        return self in ACTIVE_STATUSES


# Statuses that never participate in scheduling.
IGNORED_STATUSES = frozenset({
    LifecycleStatus.UNKNOWN,
    LifecycleStatus.CREATED,
    LifecycleStatus.REVOKED,
})

ACTIVE_STATUSES = frozenset({
    LifecycleStatus.READY,
    LifecycleStatus.TEST_STARTING,
    LifecycleStatus.TESTING,
    LifecycleStatus.LIVE_STARTING,
    LifecycleStatus.LIVE,
})

# Statuses that consume the schedule announcement window.
PRE_LIVE_STATUSES = frozenset({
    LifecycleStatus.READY,
    LifecycleStatus.TEST_STARTING,
    LifecycleStatus.TESTING,
})

LIVE_STATUSES = frozenset({
    LifecycleStatus.LIVE_STARTING,
    LifecycleStatus.LIVE,
})


class NotificationCategory(str, Enum):
    """Kinds of notification posted to the channel."""
    SCHEDULED = "scheduled"
    LIVE = "live"
    COMPLETE = "complete"


@dataclass(frozen=True)
class TransitionDecision:
    """Which notifications a status change fires."""

    post_announce: bool = False
    post_live: bool = False
    post_complete: bool = False

    @property
    def categories(self) -> list[NotificationCategory]:
        """Categories to send, in delivery order."""
        result = []
        if self.post_announce:
            result.append(NotificationCategory.SCHEDULED)
        if self.post_live:
            result.append(NotificationCategory.LIVE)
        if self.post_complete:
            result.append(NotificationCategory.COMPLETE)
        return result

    @property
    def fires(self) -> bool:
        return self.post_announce or self.post_live or self.post_complete


@dataclass
class KnownStream:
    """A single tracked broadcast."""

    id: str
    status: LifecycleStatus = LifecycleStatus.UNKNOWN
    start_time: int = 0                              # Epoch seconds, 0 if unknown

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status.value,
            "startTime": self.start_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KnownStream":
        return cls(
            id=str(data["id"]),
            status=LifecycleStatus.from_wire(data.get("status")),
            start_time=int(data.get("startTime") or 0),
        )


@dataclass
class PersistedState:
    """
    Durable snapshot of everything the notifier tracks.

    ``next_id`` is None exactly when ``next_time`` is ``INFINITE_TIME``.
    """

    streams: dict[str, KnownStream] = field(default_factory=dict)
    next_time: int = INFINITE_TIME
    next_id: Optional[str] = None

    @classmethod
    def fresh(cls) -> "PersistedState":
        """Empty state used when no snapshot can be loaded."""
        return cls()

    @property
    def has_next_event(self) -> bool:
        return self.next_id is not None

    def clear_next_event(self) -> None:
        self.next_id = None
        self.next_time = INFINITE_TIME

    def set_next_event(self, stream_id: str, start_time: int) -> None:
        self.next_id = stream_id
        self.next_time = start_time

    def get_or_create_stream(self, stream_id: str, start_time: int = 0) -> KnownStream:
        """Return the tracked stream, creating it with UNKNOWN status if new."""
        stream = self.streams.get(stream_id)
        if stream is None:
            stream = KnownStream(id=stream_id, start_time=start_time)
            self.streams[stream_id] = stream
        return stream

    def check_invariants(self) -> list[str]:
        """Return descriptions of violated state invariants, empty if consistent."""
        problems = []
        if (self.next_id is None) != (self.next_time == INFINITE_TIME):
            problems.append(
                f"next_id={self.next_id!r} inconsistent with next_time={self.next_time}"
            )
        if self.next_id is not None:
            owner = self.streams.get(self.next_id)
            if owner is None:
                problems.append(f"next_id {self.next_id!r} is not a known stream")
            elif owner.start_time != self.next_time:
                problems.append(
                    f"next_time {self.next_time} differs from start time "
                    f"{owner.start_time} of {self.next_id!r}"
                )
        for key, stream in self.streams.items():
            if key != stream.id:
                problems.append(f"stream key {key!r} differs from its id {stream.id!r}")
        return problems

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "streams": {key: stream.to_dict() for key, stream in self.streams.items()},
            "nextTime": self.next_time,
        }
        if self.next_id is not None:
            data["nextId"] = self.next_id
        return data
