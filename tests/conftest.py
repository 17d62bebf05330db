"""Pytest configuration and shared fixtures."""

import pytest
from typing import Any, Dict, List

from broadcast_notifier.config.defaults import NotificationParams, PollingParams
from broadcast_notifier.data.parsers import Broadcast
from broadcast_notifier.delivery.base import (
    BaseNotificationDelivery,
    NotificationDeliveryError,
)
from broadcast_notifier.delivery.dispatcher import NotificationDispatcher
from broadcast_notifier.engine import PollingLoop
from broadcast_notifier.errors import BroadcastFetchError
from broadcast_notifier.persistence.state_store import StateStore
from broadcast_notifier.source.base import BaseBroadcastSource
from broadcast_notifier.state.models import LifecycleStatus, PersistedState


class FakeBroadcastSource(BaseBroadcastSource):
    """Broadcast source returning scripted snapshots, newest first."""

    def __init__(self):
        super().__init__("fake")
        self.snapshots: List[Any] = []
        self.calls: List[int] = []

    def push(self, *broadcasts: Broadcast) -> None:
        self.snapshots.append(list(broadcasts))

    def fail(self, message: str = "boom") -> None:
        self.snapshots.append(BroadcastFetchError(message, status_code=503))

    def list_owned_broadcasts(self, max_results: int) -> List[Broadcast]:
        self.calls.append(max_results)
        snapshot = self.snapshots.pop(0)
        if isinstance(snapshot, Exception):
            raise snapshot
        return snapshot[:max_results]


class RecordingDelivery(BaseNotificationDelivery):
    """Notification transport that records posted messages."""

    def __init__(self, fail: bool = False):
        super().__init__("recording", config=None)
        self.messages: List[str] = []
        self.fail = fail

    def post_message(self, text: str) -> None:
        if self.fail:
            raise NotificationDeliveryError("channel unavailable")
        self.messages.append(text)


def broadcast(stream_id: str, status: LifecycleStatus, start_time: int = 1000) -> Broadcast:
    return Broadcast(id=stream_id, start_time=start_time, status=status)


@pytest.fixture
def notification_params() -> NotificationParams:
    return NotificationParams(
        webhook_url="https://example.test/webhook",
        spacing_seconds=1.0,
        schedule_template="scheduled {stream_id} at {start_time}",
        live_template="live {stream_id}",
        complete_template="complete {stream_id}",
    )


@pytest.fixture
def recording_delivery() -> RecordingDelivery:
    return RecordingDelivery()


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def dispatcher(recording_delivery, notification_params, sleeps) -> NotificationDispatcher:
    return NotificationDispatcher(recording_delivery, notification_params, sleep=sleeps.append)


@pytest.fixture
def fake_source() -> FakeBroadcastSource:
    return FakeBroadcastSource()


@pytest.fixture
def state_store(tmp_path) -> StateStore:
    return StateStore(tmp_path / "persist" / "data.json")


@pytest.fixture
def polling_loop(fake_source, dispatcher, state_store, sleeps) -> PollingLoop:
    return PollingLoop(
        source=fake_source,
        dispatcher=dispatcher,
        store=state_store,
        params=PollingParams(),
        state=PersistedState.fresh(),
        sleep=sleeps.append,
        clock=lambda: 0,
    )


@pytest.fixture
def sample_broadcast_item() -> Dict[str, Any]:
    """Raw liveBroadcast resource as returned by the YouTube Data API."""
    return {
        "kind": "youtube#liveBroadcast",
        "id": "abc123",
        "snippet": {
            "title": "Weekly stream",
            "scheduledStartTime": "2024-05-01T18:00:00Z",
        },
        "contentDetails": {},
        "status": {
            "lifeCycleStatus": "ready",
            "privacyStatus": "public",
        },
    }
